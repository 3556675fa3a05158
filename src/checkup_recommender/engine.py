"""
Recommendation engine: composes the disease matcher and the checkup planner
against the loaded reference tables.
- generate(profile) is a pure function of the profile and the tables.
- An invalid profile (non-finite or non-positive age) returns empty results
  with valid=False; it never raises.
"""
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple

from .config import Settings, get_settings
from .matcher import GENDER_EMPHASIS, DiseaseMatcher
from .planner import CheckupPlanner, DisplayCheckupItem
from .profile import Gender, Profile
from .reference import DiseaseRecord, ReferenceTables, load_reference_tables

logger = logging.getLogger(__name__)


def disease_to_dict(d: DiseaseRecord) -> Dict[str, Any]:
    return {
        "id": d.id,
        "name": d.name,
        "category": d.category,
        "minAge": d.min_age,
        "maxAge": d.max_age,
        "gender": d.gender.value if d.gender else None,
        "tags": list(d.tags),
        "causes": list(d.causes),
        "symptoms": list(d.symptoms),
        "improvements": list(d.improvements),
    }


@dataclass(frozen=True)
class Recommendation:
    risks: Tuple[DiseaseRecord, ...] = ()
    checkups: Tuple[DisplayCheckupItem, ...] = ()
    valid: bool = True

    @property
    def has_risks(self) -> bool:
        return len(self.risks) > 0

    @property
    def is_empty(self) -> bool:
        return not self.risks and not self.checkups

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "risks": [disease_to_dict(d) for d in self.risks],
            "checkups": [c.to_dict() for c in self.checkups],
        }


EMPTY_RECOMMENDATION = Recommendation(valid=False)


@dataclass
class RecommendationEngine:
    tables: ReferenceTables
    config: Optional[Dict[str, Any]] = None
    matcher: DiseaseMatcher = field(init=False)
    planner: CheckupPlanner = field(init=False)

    def __post_init__(self):
        self.config = self.config or {}
        emphasis = self.config.get("gender_emphasis", GENDER_EMPHASIS)
        self.matcher = DiseaseMatcher(gender_emphasis={Gender(k): tuple(v) for k, v in emphasis.items()})
        self.planner = CheckupPlanner()

    def generate(self, profile: Profile) -> Recommendation:
        if not profile.is_valid():
            logger.debug("Invalid age %r; returning empty recommendation", profile.age)
            return EMPTY_RECOMMENDATION

        risks = self.matcher.match(profile, self.tables.diseases)
        checkups = self.planner.plan(profile, self.tables.sections)
        logger.debug("Profile age=%s gender=%s tags=%d -> %d risks, %d checkup items",
                     profile.age, profile.gender.value, len(profile.lifestyle_tags),
                     len(risks), len(checkups))
        return Recommendation(risks=risks, checkups=checkups, valid=True)


@lru_cache(maxsize=None)
def _cached_tables(disease_path: str, checkup_path: str) -> ReferenceTables:
    return load_reference_tables(disease_path, checkup_path)


def get_engine(settings: Optional[Settings] = None, config: Optional[Dict[str, Any]] = None) -> RecommendationEngine:
    """Build an engine over the configured reference tables (loaded once per path pair)."""
    settings = settings or get_settings()
    tables = _cached_tables(str(settings.disease_catalog_path), str(settings.checkup_catalog_path))
    return RecommendationEngine(tables, config)
