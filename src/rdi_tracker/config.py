"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from rdi_tracker.domain.rdi import Sex

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    data_dir: Path = Path("data")
    unit_conversions_file: str = "unit-conversions.json"
    rdi_csv_file: str = "rdi.csv"
    default_age: int = 30
    default_sex: Sex = Sex.FEMALE
    default_timezone: str = "Asia/Taipei"
    over_limit_percent: float = 120.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def unit_conversions_path(self) -> Path:
        """Path of the unit conversion table."""
        return self.data_dir / self.unit_conversions_file

    @property
    def rdi_csv_path(self) -> Path:
        """Path of the static RDI table."""
        return self.data_dir / self.rdi_csv_file


def parse_sex(raw: str | None, fallback: Sex) -> Sex:
    """Parse a sex override, case-insensitively."""
    if raw is None:
        return fallback
    cleaned = raw.strip().upper()
    if cleaned == Sex.MALE:
        return Sex.MALE
    if cleaned == Sex.FEMALE:
        return Sex.FEMALE
    return fallback


def parse_age(raw: str | int | None, fallback: int) -> int:
    """Parse an age override, accepting positive integers only."""
    if raw is None:
        return fallback
    if isinstance(raw, int):
        return raw if raw > 0 else fallback
    cleaned = raw.strip()
    if not cleaned.isdigit():
        return fallback
    value = int(cleaned)
    return value if value > 0 else fallback
