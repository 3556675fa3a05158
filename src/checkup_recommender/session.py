"""
View state for a single user session, kept outside the engine.

The form holds raw text for the age, an optional gender, the tags picked so
far (in click order), a "generated" flag and the id of the one open risk card.
Results are only produced after the user asks for them.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from .engine import EMPTY_RECOMMENDATION, Recommendation, RecommendationEngine
from .profile import Gender, LifestyleTagKey, Profile, is_valid_age, parse_age

VALIDATION_MESSAGE = "请先输入一个合理的年龄再生成体检清单。"
NO_RISK_MESSAGE = "暂未匹配到明显的高风险疾病。这通常是个好信号，但仍建议保持规律体检和健康生活方式。"


@dataclass
class CheckupSession:
    engine: RecommendationEngine
    age_text: str = ""
    gender: Gender = Gender.UNSPECIFIED
    selected_tags: List[LifestyleTagKey] = field(default_factory=list)
    generated: bool = False
    open_disease_id: Optional[int] = None

    def set_age(self, text: str):
        self.age_text = text

    def set_gender(self, gender: Gender):
        self.gender = gender

    def toggle_tag(self, key: LifestyleTagKey):
        if key in self.selected_tags:
            self.selected_tags = [k for k in self.selected_tags if k != key]
        else:
            self.selected_tags = self.selected_tags + [key]

    def request_generation(self):
        self.generated = True

    def toggle_disease(self, disease_id: int):
        self.open_disease_id = None if self.open_disease_id == disease_id else disease_id

    @property
    def age(self) -> float:
        return parse_age(self.age_text)

    @property
    def show_validation_error(self) -> bool:
        return self.generated and not is_valid_age(self.age)

    def profile(self) -> Profile:
        return Profile(age=self.age, gender=self.gender, lifestyle_tags=frozenset(self.selected_tags))

    def result(self) -> Recommendation:
        if not self.generated:
            return EMPTY_RECOMMENDATION
        return self.engine.generate(self.profile())
