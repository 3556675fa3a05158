"""
Centralized configuration for the checkup recommender.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path

DATA_DIR = Path(__file__).resolve().parent / "data"
DEFAULT_DISEASE_CATALOG = DATA_DIR / "diseases.json"
DEFAULT_CHECKUP_CATALOG = DATA_DIR / "age_checkups.json"


def _env_path(name: str, default: Path) -> Path:
    value = os.getenv(name, "").strip()
    return Path(value) if value else default


@dataclass(frozen=True)
class Settings:
    """Settings read from the environment; every field has a packaged default."""

    disease_catalog_path: Path = field(
        default_factory=lambda: _env_path("CHECKUP_DISEASE_CATALOG", DEFAULT_DISEASE_CATALOG)
    )
    checkup_catalog_path: Path = field(
        default_factory=lambda: _env_path("CHECKUP_AGE_CATALOG", DEFAULT_CHECKUP_CATALOG)
    )
    log_level: str = field(default_factory=lambda: os.getenv("CHECKUP_LOG_LEVEL", "INFO").upper())


def get_settings() -> Settings:
    return Settings()
