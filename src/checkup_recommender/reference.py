"""
Reference tables consumed by the engine: the disease catalog and the
age-banded checkup catalog.

Both are read-only for the process lifetime. The JSON files use the
collaborator's camelCase keys (minAge, maxAge, mustItems, additionalItems);
they are read with pandas and converted into frozen dataclasses here, so the
matcher and planner never see raw rows.
"""
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import pandas as pd

from .profile import Gender

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

REQUIRED_DISEASE_COLUMNS = ("id", "name", "category", "minAge", "maxAge", "tags")
REQUIRED_SECTION_COLUMNS = ("minAge", "maxAge", "mustItems", "additionalItems")


class ReferenceDataError(ValueError):
    """Raised when a reference table is malformed."""


@dataclass(frozen=True)
class DiseaseRecord:
    id: int
    name: str
    category: str
    min_age: int
    max_age: int
    gender: Optional[Gender] = None
    tags: Tuple[str, ...] = ()
    causes: Tuple[str, ...] = ()
    symptoms: Tuple[str, ...] = ()
    improvements: Tuple[str, ...] = ()

    def covers(self, age: float) -> bool:
        return self.min_age <= age <= self.max_age


@dataclass(frozen=True)
class CheckupItem:
    title: str
    description: str = ""


@dataclass(frozen=True)
class CheckupCatalogSection:
    min_age: int
    max_age: int
    must_items: Tuple[CheckupItem, ...] = ()
    additional_items: Tuple[CheckupItem, ...] = ()
    label: str = ""

    def covers(self, age: float) -> bool:
        return self.min_age <= age <= self.max_age


@dataclass(frozen=True)
class ReferenceTables:
    diseases: Tuple[DiseaseRecord, ...]
    sections: Tuple[CheckupCatalogSection, ...]


# ---------- row conversion helpers ----------
def _is_missing(x: Any) -> bool:
    return x is None or (isinstance(x, float) and math.isnan(x))


def _text(x: Any) -> str:
    return "" if _is_missing(x) else str(x)


def _text_tuple(x: Any) -> Tuple[str, ...]:
    if _is_missing(x):
        return ()
    if isinstance(x, str):
        return (x,)
    return tuple(str(v) for v in x)


def _int(x: Any, field_name: str, where: str) -> int:
    try:
        if _is_missing(x):
            raise TypeError
        value = float(x)
        if not value.is_integer():
            raise ValueError
        return int(value)
    except (TypeError, ValueError):
        raise ReferenceDataError(f"{where}: {field_name} must be an integer, got {x!r}") from None


def _gender(x: Any, where: str) -> Optional[Gender]:
    if _is_missing(x) or x == "":
        return None
    if x in (Gender.MALE.value, Gender.FEMALE.value):
        return Gender(x)
    raise ReferenceDataError(f"{where}: gender must be 'male', 'female' or empty, got {x!r}")


def _check_columns(columns: Iterable[str], required: Tuple[str, ...], table: str):
    present = set(columns)
    missing = [c for c in required if c not in present]
    if missing:
        raise ReferenceDataError(f"{table} is missing required column(s): {', '.join(missing)}")


def _check_range(min_age: int, max_age: int, where: str):
    if min_age > max_age:
        raise ReferenceDataError(f"{where}: minAge {min_age} is greater than maxAge {max_age}")


def _checkup_items(raw: Any, where: str) -> Tuple[CheckupItem, ...]:
    if _is_missing(raw):
        return ()
    items = []
    for i, entry in enumerate(raw):
        if not isinstance(entry, dict) or not entry.get("title"):
            raise ReferenceDataError(f"{where}: item {i} needs a non-empty title")
        items.append(CheckupItem(title=str(entry["title"]), description=_text(entry.get("description"))))
    return tuple(items)


# ---------- record builders ----------
def disease_from_dict(row: Dict[str, Any]) -> DiseaseRecord:
    where = f"disease {row.get('id', '?')!r}"
    record = DiseaseRecord(
        id=_int(row.get("id"), "id", where),
        name=_text(row.get("name")),
        category=_text(row.get("category")),
        min_age=_int(row.get("minAge"), "minAge", where),
        max_age=_int(row.get("maxAge"), "maxAge", where),
        gender=_gender(row.get("gender"), where),
        tags=_text_tuple(row.get("tags")),
        causes=_text_tuple(row.get("causes")),
        symptoms=_text_tuple(row.get("symptoms")),
        improvements=_text_tuple(row.get("improvements")),
    )
    _check_range(record.min_age, record.max_age, where)
    return record


def section_from_dict(row: Dict[str, Any]) -> CheckupCatalogSection:
    where = f"age section {row.get('minAge', '?')}-{row.get('maxAge', '?')}"
    min_age = _int(row.get("minAge"), "minAge", where)
    max_age = _int(row.get("maxAge"), "maxAge", where)
    _check_range(min_age, max_age, where)
    return CheckupCatalogSection(
        min_age=min_age,
        max_age=max_age,
        must_items=_checkup_items(row.get("mustItems"), where),
        additional_items=_checkup_items(row.get("additionalItems"), where),
        label=_text(row.get("label")),
    )


def diseases_from_records(rows: Iterable[Dict[str, Any]]) -> Tuple[DiseaseRecord, ...]:
    records: List[DiseaseRecord] = []
    seen = set()
    for row in rows:
        record = disease_from_dict(row)
        if record.id in seen:
            raise ReferenceDataError(f"duplicate disease id {record.id}")
        seen.add(record.id)
        records.append(record)
    return tuple(records)


def sections_from_records(rows: Iterable[Dict[str, Any]]) -> Tuple[CheckupCatalogSection, ...]:
    sections = tuple(section_from_dict(row) for row in rows)
    ordered = sorted(sections, key=lambda s: s.min_age)
    for prev, cur in zip(ordered, ordered[1:]):
        if cur.min_age <= prev.max_age:
            # first match wins at lookup time; overlapping bands are tolerated
            logger.warning("age sections %s-%s and %s-%s overlap",
                           prev.min_age, prev.max_age, cur.min_age, cur.max_age)
    return sections


# ---------- file loaders ----------
def _read_table(path: PathLike, required: Tuple[str, ...], table: str) -> List[Dict[str, Any]]:
    try:
        # dtype=False keeps numeric-looking text such as "007" verbatim
        df = pd.read_json(path, orient="records", dtype=False, convert_dates=False, encoding="utf-8")
    except ValueError as exc:
        raise ReferenceDataError(f"{table} at {path} is not a JSON list of records: {exc}") from exc
    if df.empty and len(df.columns) == 0:
        logger.warning("%s at %s is empty", table, path)
        return []
    _check_columns(df.columns, required, table)
    return df.to_dict(orient="records")


def load_disease_catalog(path: PathLike) -> Tuple[DiseaseRecord, ...]:
    return diseases_from_records(_read_table(path, REQUIRED_DISEASE_COLUMNS, "disease catalog"))


def load_checkup_catalog(path: PathLike) -> Tuple[CheckupCatalogSection, ...]:
    return sections_from_records(_read_table(path, REQUIRED_SECTION_COLUMNS, "age checkup catalog"))


def load_reference_tables(disease_path: PathLike, checkup_path: PathLike) -> ReferenceTables:
    tables = ReferenceTables(
        diseases=load_disease_catalog(disease_path),
        sections=load_checkup_catalog(checkup_path),
    )
    logger.info("Loaded %d disease records and %d age sections",
                len(tables.diseases), len(tables.sections))
    return tables
