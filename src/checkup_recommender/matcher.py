"""
Disease matcher: selects candidate disease risks for a profile.

A disease qualifies when the age lies in its range and either one of its tags
is implied by an active lifestyle tag or its gender affinity equals the
profile gender. A small emphasis table then force-includes a few gender
specific risks.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from .lifestyle import disease_tags_for
from .profile import Gender, LifestyleTagKey, Profile
from .reference import DiseaseRecord

# Disease ids always surfaced for a gender when in age range.
GENDER_EMPHASIS: Dict[Gender, Tuple[int, ...]] = {
    Gender.MALE: (4, 8),      # 高尿酸血症/痛风, 冠心病
    Gender.FEMALE: (19, 31),  # 骨质疏松症, 缺铁性贫血
}


def matches_lifestyle(disease: DiseaseRecord, tag_keys: Iterable[LifestyleTagKey]) -> bool:
    """True when any disease tag is implied by one of the lifestyle keys."""
    wanted = disease_tags_for(tag_keys)
    if not wanted:
        return False
    return any(tag in wanted for tag in disease.tags)


@dataclass
class DiseaseMatcher:
    gender_emphasis: Mapping[Gender, Sequence[int]] = field(default_factory=lambda: dict(GENDER_EMPHASIS))

    def match(self, profile: Profile, catalog: Sequence[DiseaseRecord]) -> Tuple[DiseaseRecord, ...]:
        if not profile.is_valid():
            return ()

        in_range = [d for d in catalog if d.covers(profile.age)]

        lifestyle_based = [d for d in in_range if matches_lifestyle(d, profile.lifestyle_tags)]

        # gender-specific diseases need no tag overlap
        gender_based: List[DiseaseRecord] = []
        if profile.has_gender:
            gender_based = [d for d in in_range if d.gender is not None and d.gender == profile.gender]

        combined: Dict[int, DiseaseRecord] = {}
        for d in lifestyle_based + gender_based:
            combined.setdefault(d.id, d)

        for disease_id in self.gender_emphasis.get(profile.gender, ()):
            found = next((d for d in in_range if d.id == disease_id), None)
            if found is not None:
                combined.setdefault(disease_id, found)

        return tuple(combined.values())


def match(profile: Profile, catalog: Sequence[DiseaseRecord]) -> Tuple[DiseaseRecord, ...]:
    return DiseaseMatcher().match(profile, catalog)
