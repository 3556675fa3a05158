import pytest

from checkup_recommender.config import DEFAULT_CHECKUP_CATALOG, DEFAULT_DISEASE_CATALOG
from checkup_recommender.engine import RecommendationEngine
from checkup_recommender.reference import (
    CheckupCatalogSection,
    CheckupItem,
    DiseaseRecord,
    load_reference_tables,
)


@pytest.fixture(scope="session")
def tables():
    """The reference tables shipped with the package."""
    return load_reference_tables(DEFAULT_DISEASE_CATALOG, DEFAULT_CHECKUP_CATALOG)


@pytest.fixture(scope="session")
def engine(tables):
    return RecommendationEngine(tables)


def make_section(min_age, max_age, must=(), additional=()):
    return CheckupCatalogSection(
        min_age=min_age,
        max_age=max_age,
        must_items=tuple(CheckupItem(t, f"{t} 说明") for t in must),
        additional_items=tuple(CheckupItem(t, f"{t} 说明") for t in additional),
    )


def make_disease(id, min_age=18, max_age=90, gender=None, tags=()):
    return DiseaseRecord(
        id=id,
        name=f"disease-{id}",
        category="测试",
        min_age=min_age,
        max_age=max_age,
        gender=gender,
        tags=tuple(tags),
    )
