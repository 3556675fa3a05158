"""
Helpers for rendering results: category grouping, badge labels and a
DataFrame view of the checkup list.
"""
from typing import Optional, Sequence, Tuple

import pandas as pd

from .planner import DisplayCheckupItem, Priority, select_band
from .profile import Gender
from .reference import CheckupCatalogSection

# checked in order; first hit wins
CATEGORY_GROUPS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("metabolic", ("代谢", "内分泌")),
    ("cardiovascular", ("心脑血管",)),
    ("digestive", ("消化",)),
    ("skeletal", ("骨骼", "关节")),
    ("respiratory", ("呼吸", "五官")),
    ("neuro", ("神经", "精神")),
    ("urinary", ("泌尿", "皮肤")),
)

GROUP_ICONS = {
    "metabolic": "🩸",
    "cardiovascular": "❤️",
    "digestive": "🩺",
    "skeletal": "🦴",
    "respiratory": "🌬️",
    "neuro": "🧠",
    "urinary": "⚠️",
    "general": "🛡️",
}

PRIORITY_LABELS = {
    Priority.HIGH: "必查 / 高优先级",
    Priority.MEDIUM: "建议 / 关注项",
}

SOURCE_LABELS = {
    "age-must": "年龄段必查",
    "age-additional": "年龄段加查",
    "rule": "个性化补充",
}


def category_group(category: str) -> str:
    for group, needles in CATEGORY_GROUPS:
        if any(n in category for n in needles):
            return group
    return "general"


def category_icon(category: str) -> str:
    return GROUP_ICONS[category_group(category)]


def priority_label(priority: Priority) -> str:
    return PRIORITY_LABELS[priority]


def gender_badge(gender: Optional[Gender]) -> str:
    if gender == Gender.MALE:
        return "♂ 男性相关"
    if gender == Gender.FEMALE:
        return "♀ 女性相关"
    return "◎ 通用风险"


def checkups_frame(items: Sequence[DisplayCheckupItem]) -> pd.DataFrame:
    """One row per checkup item, in plan order."""
    return pd.DataFrame(
        [
            {
                "项目": i.title,
                "优先级": priority_label(i.priority),
                "来源": SOURCE_LABELS[i.source.value],
                "说明": i.description or "",
            }
            for i in items
        ],
        columns=["项目", "优先级", "来源", "说明"],
    )


def band_caption(age: float, sections: Sequence[CheckupCatalogSection]) -> str:
    """Label and range of the age band that drives the baseline, or "" if none."""
    section = select_band(age, sections)
    if section is None:
        return ""
    span = f"{section.min_age}-{section.max_age} 岁"
    return f"{section.label} · {span}" if section.label else span
