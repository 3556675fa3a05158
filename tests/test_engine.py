import math

import pytest

from checkup_recommender.engine import RecommendationEngine, get_engine
from checkup_recommender.config import Settings
from checkup_recommender.planner import ItemSource, Priority
from checkup_recommender.profile import Gender, LifestyleTagKey, Profile


def _titles(items):
    return [i.title for i in items]


@pytest.mark.parametrize("age", [0, -5, math.nan, math.inf])
@pytest.mark.parametrize("gender", list(Gender))
def test_age_gate(engine, age, gender):
    out = engine.generate(Profile(age=age, gender=gender, lifestyle_tags=set(LifestyleTagKey)))
    assert out.risks == ()
    assert out.checkups == ()
    assert not out.valid
    assert out.is_empty


def test_generate_is_deterministic(engine):
    p = Profile(age=55, gender=Gender.MALE, lifestyle_tags={LifestyleTagKey.SMOKING, LifestyleTagKey.HEAVY_TASTE})
    first = engine.generate(p)
    second = engine.generate(Profile(age=55, gender=Gender.MALE,
                                     lifestyle_tags=[LifestyleTagKey.HEAVY_TASTE, LifestyleTagKey.SMOKING]))
    assert first == second
    assert first.to_dict() == second.to_dict()


def test_valid_profile_without_tags_has_checkups_but_no_risks(engine):
    out = engine.generate(Profile(age=40))
    assert out.valid
    assert not out.has_risks
    assert out.checkups
    assert not out.is_empty


def test_male_smoker_at_55(engine):
    out = engine.generate(Profile(age=55, gender=Gender.MALE, lifestyle_tags={LifestyleTagKey.SMOKING}))
    ids = [d.id for d in out.risks]
    assert ids.count(4) == 1 and ids.count(8) == 1
    assert {10, 11}.issubset(ids)

    titles = _titles(out.checkups)
    assert titles[:3] == ["低剂量螺旋 CT（肺部）", "胃镜", "肠镜"]
    assert all(i.priority is Priority.HIGH for i in out.checkups[:3])
    assert titles.count("肺功能检测") == 1
    assert titles.count("PSA 检测 + 前列腺彩超") == 1
    assert titles[-2:] == ["肺功能检测", "PSA 检测 + 前列腺彩超"]
    assert [i.source for i in out.checkups[-2:]] == [ItemSource.RULE, ItemSource.RULE]
    # must items follow the promoted items, medium additional items come last
    baseline = [i for i in out.checkups if i.source is not ItemSource.RULE]
    priorities = [i.priority for i in baseline]
    assert priorities == sorted(priorities, key=lambda p: p is not Priority.HIGH)


def test_female_60_bone_density(engine):
    out = engine.generate(Profile(age=60, gender=Gender.FEMALE))
    bone = [i for i in out.checkups if "骨密度检测" in i.title]
    assert "骨密度检测（绝经后重点项目）" in _titles(bone)
    assert all(i.priority is Priority.HIGH for i in bone)


def test_no_band_for_very_old_age(engine):
    out = engine.generate(Profile(age=101, gender=Gender.MALE, lifestyle_tags={LifestyleTagKey.SEDENTARY}))
    assert out.valid
    assert _titles(out.checkups) == ["颈椎正侧位片"]


def test_to_dict_uses_wire_values(engine):
    data = engine.generate(Profile(age=30, gender=Gender.FEMALE)).to_dict()
    assert data["valid"] is True
    assert {c["priority"] for c in data["checkups"]} <= {"high", "medium"}
    assert {c["source"] for c in data["checkups"]} <= {"age-must", "age-additional", "rule"}
    assert all(r["gender"] in (None, "male", "female") for r in data["risks"])
    assert "minAge" in data["risks"][0]


def test_config_overrides_gender_emphasis(tables):
    engine = RecommendationEngine(tables, {"gender_emphasis": {"male": [32]}})
    ids = [d.id for d in engine.generate(Profile(age=70, gender=Gender.MALE)).risks]
    assert 32 in ids
    assert 4 not in ids


def test_get_engine_reads_packaged_tables():
    engine = get_engine(Settings())
    assert len(engine.tables.diseases) == 32
    assert get_engine(Settings()).tables is engine.tables
