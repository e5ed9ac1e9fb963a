"""Domain models for recommended daily intake."""

from dataclasses import dataclass
from enum import StrEnum


class Sex(StrEnum):
    """Sex used to select recommendation values."""

    MALE = "MALE"
    FEMALE = "FEMALE"


@dataclass(frozen=True)
class RdiStandardRecord:
    """Row of the dynamic standards table."""

    nutrient: str
    unit: str
    male_value: float | None
    female_value: float | None
    source: str | None = None
    region: str | None = None


@dataclass(frozen=True)
class RdiRecord:
    """Resolved recommendation for one nutrient."""

    nutrient_key: str
    unit: str
    daily: float | None
    weekly: float | None
    source: str | None
    region: str | None


@dataclass(frozen=True)
class UserContext:
    """User attributes that parametrize lookups."""

    user_id: int | None
    age: int
    sex: Sex
    timezone: str
