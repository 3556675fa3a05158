"""
Lifestyle tag catalog: the fixed set of self-reported habits and the disease
tag strings each habit implies in the disease catalog.
"""
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Tuple

from .profile import LifestyleTagKey


@dataclass(frozen=True)
class LifestyleTag:
    key: LifestyleTagKey
    label: str
    description: str
    disease_tags: Tuple[str, ...]


LIFESTYLE_TAGS: Tuple[LifestyleTag, ...] = (
    LifestyleTag(
        key=LifestyleTagKey.SEDENTARY,
        label="久坐",
        description="长时间坐着、缺乏活动",
        disease_tags=("久坐",),
    ),
    LifestyleTag(
        key=LifestyleTagKey.SMOKING,
        label="抽烟 / 吸烟",
        description="主动或被动吸烟",
        disease_tags=("吸烟", "二手烟"),
    ),
    LifestyleTag(
        key=LifestyleTagKey.STRESS,
        label="压力大",
        description="长期高压、情绪紧张",
        disease_tags=("压力大", "工作压力大", "学业压力", "精神压力大"),
    ),
    LifestyleTag(
        key=LifestyleTagKey.NIGHT_OWL,
        label="常熬夜",
        description="入睡很晚或睡眠严重不足",
        disease_tags=("熬夜", "睡前玩手机", "作息不规律"),
    ),
    LifestyleTag(
        key=LifestyleTagKey.SKIP_BREAKFAST,
        label="不吃早餐",
        description="早晨经常不进食",
        disease_tags=("不吃早餐",),
    ),
    LifestyleTag(
        key=LifestyleTagKey.HEAVY_TASTE,
        label="重口味 / 咸",
        description="偏好高盐、高油、高糖饮食",
        disease_tags=("高盐饮食", "高脂饮食", "高糖饮食", "辛辣饮食"),
    ),
)

TAGS_BY_KEY: Dict[LifestyleTagKey, LifestyleTag] = {t.key: t for t in LIFESTYLE_TAGS}


def get_tag(key: LifestyleTagKey) -> LifestyleTag:
    return TAGS_BY_KEY[key]


def disease_tags_for(keys: Iterable[LifestyleTagKey]) -> FrozenSet[str]:
    """Union of disease tag strings implied by the given lifestyle keys."""
    values: List[str] = []
    for key in keys:
        tag = TAGS_BY_KEY.get(key)
        if tag:
            values.extend(tag.disease_tags)
    return frozenset(values)
