"""
Checkup planner: builds the ordered checkup list for a profile.

Pipeline (order matters, each stage is a plain function):
  1. select_band          - age section whose inclusive range holds the age
  2. build_baseline       - must items (high) then additional items (medium)
  3. promote_by_age       - age > 50: endoscopy / low-dose CT items go high and to the top
  4. add_lifestyle_rules  - one extra item per lifestyle rule that fires
  5. add_gender_rules     - at most one gender/age-band item, plus bone-density promotion
No sorting happens after stage 3.
"""
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from .profile import Gender, LifestyleTagKey, Profile
from .reference import CheckupCatalogSection

logger = logging.getLogger(__name__)


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"


class ItemSource(str, Enum):
    AGE_MUST = "age-must"
    AGE_ADDITIONAL = "age-additional"
    RULE = "rule"


@dataclass(frozen=True)
class DisplayCheckupItem:
    key: str
    title: str
    description: Optional[str]
    priority: Priority
    source: ItemSource

    def to_dict(self):
        return {
            "key": self.key,
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "source": self.source.value,
        }


@dataclass(frozen=True)
class SupplementRule:
    id: str
    title: str
    description: str
    condition: Callable[[Profile], bool]  # function(profile) -> bool
    promote_keyword: str = ""             # items containing this go high after insertion

    def applies(self, profile: Profile) -> bool:
        return bool(self.condition(profile))


# ---------- fixed rule tables ----------
AGE_PROMOTION_THRESHOLD = 50
IMPORTANT_KEYWORDS: Tuple[str, ...] = ("胃镜", "肠镜", "低剂量螺旋 CT", "低剂量螺旋CT")
BONE_DENSITY_KEYWORD = "骨密度检测"


def _has_tag(key: LifestyleTagKey) -> Callable[[Profile], bool]:
    return lambda p: key in p.lifestyle_tags


def _gender_band(gender: Gender, min_age: int, max_age: int) -> Callable[[Profile], bool]:
    return lambda p: p.gender == gender and min_age <= p.age <= max_age


# evaluated in this order; every rule that applies adds an item
LIFESTYLE_CHECKUP_RULES: Tuple[SupplementRule, ...] = (
    SupplementRule(
        id="R_SMOKING_LUNG",
        title="肺功能检测",
        description="针对长期吸烟或被动吸烟人群，评估肺通气与换气功能，辅助判断慢性阻塞性肺疾病等风险。",
        condition=_has_tag(LifestyleTagKey.SMOKING),
    ),
    SupplementRule(
        id="R_SEDENTARY_SPINE",
        title="颈椎正侧位片",
        description="久坐、低头族人群可考虑拍摄颈椎正侧位片，评估颈椎曲度改变及退变情况。",
        condition=_has_tag(LifestyleTagKey.SEDENTARY),
    ),
    SupplementRule(
        id="R_HEAVY_TASTE_SODIUM",
        title="24 小时尿钠检测",
        description="用于评估每日盐摄入量，与高血压及心血管风险密切相关，适合重口味或高盐饮食人群。",
        condition=_has_tag(LifestyleTagKey.HEAVY_TASTE),
    ),
)

# first applicable row wins; female 50 falls in the 36-50 row
GENDER_AGE_RULES: Tuple[SupplementRule, ...] = (
    SupplementRule(
        id="R_FEMALE_18_35",
        title="乳腺彩超 + 子宫及附件彩超",
        description="育龄期女性建议定期进行乳腺彩超和子宫及附件彩超，筛查乳腺纤维瘤、卵巢囊肿等常见良性病变。",
        condition=_gender_band(Gender.FEMALE, 18, 35),
    ),
    SupplementRule(
        id="R_FEMALE_36_50",
        title="TCT + HPV 联合筛查 + 乳腺影像",
        description="36–50 岁女性建议定期行 TCT + HPV 宫颈癌筛查；40 岁起结合乳腺钼靶或彩超筛查乳腺病变。",
        condition=_gender_band(Gender.FEMALE, 36, 50),
    ),
    SupplementRule(
        id="R_FEMALE_50_80",
        title="骨密度检测（绝经后重点项目）",
        description="女性绝经后雌激素水平下降，骨量流失加速，建议将骨密度检测作为重点随访项目。",
        condition=_gender_band(Gender.FEMALE, 50, 80),
        promote_keyword=BONE_DENSITY_KEYWORD,
    ),
    SupplementRule(
        id="R_MALE_18_40",
        title="泌尿系统彩超 + 精索静脉曲张筛查",
        description="18–40 岁男性可通过泌尿系统彩超与精索静脉曲张筛查，及早发现影响生育和泌尿健康的常见问题。",
        condition=_gender_band(Gender.MALE, 18, 40),
    ),
    SupplementRule(
        id="R_MALE_41_60",
        title="PSA 检测 + 前列腺彩超",
        description="41–60 岁男性建议定期检测 PSA 并行前列腺彩超，以筛查前列腺增生及恶性病变的早期信号。",
        condition=_gender_band(Gender.MALE, 41, 60),
    ),
    SupplementRule(
        id="R_MALE_61_80",
        title="颈动脉斑块超声 + 心脏负荷测试",
        description="高龄男性建议进行颈动脉斑块超声及心脏负荷测试，以评估心脑血管事件的综合风险。",
        condition=_gender_band(Gender.MALE, 61, 80),
    ),
)


# ---------- pipeline stages ----------
def select_band(age: float, sections: Sequence[CheckupCatalogSection]) -> Optional[CheckupCatalogSection]:
    return next((s for s in sections if s.covers(age)), None)


def build_baseline(section: Optional[CheckupCatalogSection]) -> List[DisplayCheckupItem]:
    if section is None:
        return []
    items = [
        DisplayCheckupItem(
            key=f"must-{idx}-{item.title}",
            title=item.title,
            description=item.description or None,
            priority=Priority.HIGH,
            source=ItemSource.AGE_MUST,
        )
        for idx, item in enumerate(section.must_items)
    ]
    items.extend(
        DisplayCheckupItem(
            key=f"add-{idx}-{item.title}",
            title=item.title,
            description=item.description or None,
            priority=Priority.MEDIUM,
            source=ItemSource.AGE_ADDITIONAL,
        )
        for idx, item in enumerate(section.additional_items)
    )
    return items


def is_important(item: DisplayCheckupItem, keywords: Sequence[str] = IMPORTANT_KEYWORDS) -> bool:
    return any(k in item.title for k in keywords)


def promote_matching(items: List[DisplayCheckupItem], keyword_test: Callable[[DisplayCheckupItem], bool]) -> List[DisplayCheckupItem]:
    """Return items with every item passing keyword_test set to high priority."""
    return [replace(i, priority=Priority.HIGH) if keyword_test(i) else i for i in items]


def promote_by_age(items: List[DisplayCheckupItem], age: float) -> List[DisplayCheckupItem]:
    if age <= AGE_PROMOTION_THRESHOLD:
        return items
    promoted = promote_matching(items, is_important)
    # sorted() is stable: ties keep catalog order
    return sorted(promoted, key=lambda i: (not is_important(i), i.priority is not Priority.HIGH))


def add_rule_item(items: List[DisplayCheckupItem], rule: SupplementRule) -> bool:
    """Append a rule item unless an existing title already contains it. Returns True if added."""
    if any(rule.title in i.title for i in items):
        return False
    items.append(DisplayCheckupItem(
        key=f"rule-{rule.title}",
        title=rule.title,
        description=rule.description,
        priority=Priority.MEDIUM,
        source=ItemSource.RULE,
    ))
    return True


def add_lifestyle_rules(items: List[DisplayCheckupItem], profile: Profile,
                        rules: Sequence[SupplementRule] = LIFESTYLE_CHECKUP_RULES) -> List[DisplayCheckupItem]:
    items = list(items)
    for rule in rules:
        if rule.applies(profile):
            add_rule_item(items, rule)
    return items


def add_gender_rules(items: List[DisplayCheckupItem], profile: Profile,
                     rules: Sequence[SupplementRule] = GENDER_AGE_RULES) -> List[DisplayCheckupItem]:
    items = list(items)
    rule = next((r for r in rules if r.applies(profile)), None)
    if rule is None:
        return items
    add_rule_item(items, rule)
    if rule.promote_keyword:
        # runs even when the item was deduplicated against an existing one
        items = promote_matching(items, lambda i: rule.promote_keyword in i.title)
    return items


@dataclass
class CheckupPlanner:
    lifestyle_rules: Sequence[SupplementRule] = LIFESTYLE_CHECKUP_RULES
    gender_rules: Sequence[SupplementRule] = GENDER_AGE_RULES

    def plan(self, profile: Profile, sections: Sequence[CheckupCatalogSection]) -> Tuple[DisplayCheckupItem, ...]:
        if not profile.is_valid():
            return ()

        section = select_band(profile.age, sections)
        if section is None:
            logger.debug("No age section covers age %s; baseline is empty", profile.age)

        items = build_baseline(section)
        items = promote_by_age(items, profile.age)
        items = add_lifestyle_rules(items, profile, self.lifestyle_rules)
        items = add_gender_rules(items, profile, self.gender_rules)
        return tuple(items)


def plan(profile: Profile, sections: Sequence[CheckupCatalogSection]) -> Tuple[DisplayCheckupItem, ...]:
    return CheckupPlanner().plan(profile, sections)
