import json

import pytest

from checkup_recommender.engine import RecommendationEngine
from checkup_recommender.profile import Gender, Profile
from checkup_recommender.reference import (
    ReferenceDataError,
    diseases_from_records,
    load_checkup_catalog,
    load_disease_catalog,
    load_reference_tables,
    section_from_dict,
)


def _write(tmp_path, name, payload):
    path = tmp_path / name
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return path


def _disease(**overrides):
    row = {"id": 1, "name": "高血压", "category": "心脑血管", "minAge": 30, "maxAge": 90, "tags": ["高盐饮食"]}
    row.update(overrides)
    return row


def test_packaged_tables_load(tables):
    assert len(tables.diseases) == 32
    assert len(tables.sections) == 6
    ids = [d.id for d in tables.diseases]
    assert len(ids) == len(set(ids))
    for disease_id in (4, 8, 19, 31):
        assert disease_id in ids


def test_packaged_disease_fields(tables):
    by_id = {d.id: d for d in tables.diseases}
    assert by_id[20].gender is Gender.MALE
    assert by_id[8].gender is None
    assert "吸烟" in by_id[8].tags
    assert by_id[8].causes


def test_load_disease_catalog_from_file(tmp_path):
    path = _write(tmp_path, "diseases.json", [_disease(), _disease(id=2, name="前列腺增生", gender="male")])
    diseases = load_disease_catalog(path)
    assert [d.id for d in diseases] == [1, 2]
    assert diseases[0].gender is None
    assert diseases[1].gender is Gender.MALE
    assert diseases[0].tags == ("高盐饮食",)


def test_load_checkup_catalog_from_file(tmp_path):
    path = _write(tmp_path, "sections.json", [{
        "minAge": 18, "maxAge": 29,
        "mustItems": [{"title": "血常规", "description": "基础检查"}],
        "additionalItems": [],
    }])
    (section,) = load_checkup_catalog(path)
    assert section.must_items[0].title == "血常规"
    assert section.additional_items == ()
    assert section.covers(18) and section.covers(29) and not section.covers(30)


def test_min_age_above_max_age_is_rejected():
    with pytest.raises(ReferenceDataError, match="minAge"):
        diseases_from_records([_disease(minAge=60, maxAge=40)])


def test_duplicate_disease_ids_are_rejected():
    with pytest.raises(ReferenceDataError, match="duplicate"):
        diseases_from_records([_disease(), _disease(name="重复")])


def test_unknown_gender_is_rejected():
    with pytest.raises(ReferenceDataError, match="gender"):
        diseases_from_records([_disease(gender="unknown")])


def test_missing_column_is_rejected(tmp_path):
    row = _disease()
    del row["tags"]
    path = _write(tmp_path, "diseases.json", [row])
    with pytest.raises(ReferenceDataError, match="tags"):
        load_disease_catalog(path)


def test_malformed_json_is_rejected(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("not json at all", encoding="utf-8")
    with pytest.raises(ReferenceDataError):
        load_disease_catalog(path)


def test_section_item_needs_title():
    with pytest.raises(ReferenceDataError, match="title"):
        section_from_dict({"minAge": 1, "maxAge": 5, "mustItems": [{"description": "x"}], "additionalItems": []})


def test_numeric_looking_text_is_kept_verbatim(tmp_path):
    path = _write(tmp_path, "diseases.json", [_disease(name="007", category="1e3")])
    (disease,) = load_disease_catalog(path)
    assert (disease.name, disease.category) == ("007", "1e3")
    assert disease.min_age == 30 and disease.max_age == 90


def test_empty_tables_load_as_empty(tmp_path):
    disease_path = _write(tmp_path, "diseases.json", [])
    section_path = _write(tmp_path, "sections.json", [])
    assert load_disease_catalog(disease_path) == ()
    assert load_checkup_catalog(section_path) == ()

    tables = load_reference_tables(disease_path, section_path)
    result = RecommendationEngine(tables).generate(Profile(age=30))
    assert result.valid
    assert result.is_empty
