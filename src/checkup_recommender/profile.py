"""
Profile types shared by the matcher and the planner.
- A Profile is built fresh for every evaluation and never mutated.
- Boundary helpers turn raw form/CLI values into typed values without raising
  for a bad age (the engine treats a non-finite or non-positive age as "no input yet").
"""
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, Iterable, Optional


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    UNSPECIFIED = "unspecified"


class LifestyleTagKey(str, Enum):
    SEDENTARY = "sedentary"
    SMOKING = "smoking"
    STRESS = "stress"
    NIGHT_OWL = "nightOwl"
    SKIP_BREAKFAST = "skipBreakfast"
    HEAVY_TASTE = "heavyTaste"


@dataclass(frozen=True)
class Profile:
    age: float
    gender: Gender = Gender.UNSPECIFIED
    lifestyle_tags: FrozenSet[LifestyleTagKey] = field(default_factory=frozenset)

    def __post_init__(self):
        # accept any iterable of tags, store a frozenset
        object.__setattr__(self, "lifestyle_tags", frozenset(self.lifestyle_tags))

    def is_valid(self) -> bool:
        return is_valid_age(self.age)

    @property
    def has_gender(self) -> bool:
        return self.gender is not Gender.UNSPECIFIED


def is_valid_age(age: Any) -> bool:
    """True when age is a finite number greater than zero."""
    if isinstance(age, bool) or not isinstance(age, (int, float)):
        return False
    return math.isfinite(age) and age > 0


def parse_age(x: Any) -> float:
    """Convert raw input to float; return NaN for empty/invalid."""
    try:
        if x is None:
            return math.nan
        if isinstance(x, (int, float)) and not isinstance(x, bool):
            return float(x)
        s = str(x).strip()
        if s == "":
            return math.nan
        return float(s)
    except (TypeError, ValueError):
        return math.nan


_GENDER_ALIASES = {
    "male": Gender.MALE,
    "m": Gender.MALE,
    "男": Gender.MALE,
    "female": Gender.FEMALE,
    "f": Gender.FEMALE,
    "女": Gender.FEMALE,
}


def parse_gender(x: Optional[Any]) -> Gender:
    """Map UI/CLI gender values to Gender; anything unknown is unspecified."""
    if isinstance(x, Gender):
        return x
    if x is None:
        return Gender.UNSPECIFIED
    return _GENDER_ALIASES.get(str(x).strip().lower(), Gender.UNSPECIFIED)


def parse_tags(raw: Optional[Iterable[Any]]) -> FrozenSet[LifestyleTagKey]:
    """Map tag keys (e.g. "nightOwl") to LifestyleTagKey; unknown keys raise ValueError."""
    if not raw:
        return frozenset()
    tags = set()
    for value in raw:
        if isinstance(value, LifestyleTagKey):
            tags.add(value)
            continue
        try:
            tags.add(LifestyleTagKey(str(value).strip()))
        except ValueError:
            raise ValueError(f"unknown lifestyle tag: {value!r}") from None
    return frozenset(tags)


def build_profile(age: Any, gender: Any = None, tags: Optional[Iterable[Any]] = None) -> Profile:
    """Build a Profile from raw boundary values (form fields, CLI options)."""
    return Profile(age=parse_age(age), gender=parse_gender(gender), lifestyle_tags=parse_tags(tags))
