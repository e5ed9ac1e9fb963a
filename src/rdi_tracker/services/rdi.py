"""Recommended daily intake resolution."""

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from pydantic import BaseModel, ValidationError, field_validator

from rdi_tracker.domain.nutrients import NUTRIENT_META
from rdi_tracker.domain.rdi import RdiRecord, RdiStandardRecord, Sex
from rdi_tracker.services.cache import AsyncLazy

DAYS_PER_WEEK = 7

_KEY_BY_RDI_NAME = {meta.rdi_key: key for key, meta in NUTRIENT_META.items()}

_logger = logging.getLogger(__name__)


class RdiStandardRepository(Protocol):
    """Persistence interface for the dynamic standards table."""

    async def list_standards(self) -> list[RdiStandardRecord]:
        """Return all standard rows."""


class RdiCsvRow(BaseModel):
    """Row of the static reference table."""

    nutrient: str
    unit: str
    adult_male: float | None = None
    adult_female: float | None = None
    source: str | None = None

    @field_validator("adult_male", "adult_female", mode="before")
    @classmethod
    def _parse_amount(cls, value: object) -> float | None:
        if value is None:
            return None
        try:
            number = float(str(value).strip())
        except ValueError:
            return None
        return number if math.isfinite(number) else None

    @field_validator("source", mode="before")
    @classmethod
    def _blank_source(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


@dataclass(frozen=True)
class RdiFallbackTable:
    """Static recommendations split by sex."""

    males: dict[str, RdiRecord]
    females: dict[str, RdiRecord]

    def for_sex(self, sex: Sex) -> dict[str, RdiRecord]:
        """Return the recommendations for a sex."""
        return self.males if sex == Sex.MALE else self.females


@dataclass
class RdiResolver:
    """Resolves recommendations from the standards table or the static fallback."""

    repository: RdiStandardRepository
    fallback: AsyncLazy[RdiFallbackTable]

    async def resolve(self, age: int, sex: Sex) -> dict[str, RdiRecord]:
        """Return per-nutrient daily and weekly recommendations.

        Age is accepted for future age-tiered tables; current tables only
        distinguish sex.
        """
        try:
            standards = await self.repository.list_standards()
        except Exception:
            _logger.warning(
                "RDI standards lookup failed, using static table", exc_info=True
            )
            standards = []
        if standards:
            return build_from_standards(standards, sex)
        table = await self.fallback.get()
        return table.for_sex(sex)


def empty_records(region: str | None) -> dict[str, RdiRecord]:
    """Return a full map with unknown daily and weekly values."""
    return {
        key: RdiRecord(
            nutrient_key=key,
            unit=meta.unit,
            daily=None,
            weekly=None,
            source=None,
            region=region,
        )
        for key, meta in NUTRIENT_META.items()
    }


def build_from_standards(
    standards: Iterable[RdiStandardRecord], sex: Sex
) -> dict[str, RdiRecord]:
    """Build recommendations from dynamic standard rows."""
    result = empty_records("DB")
    for row in standards:
        key = _KEY_BY_RDI_NAME.get(row.nutrient)
        if key is None:
            continue
        daily = row.male_value if sex == Sex.MALE else row.female_value
        result[key] = RdiRecord(
            nutrient_key=key,
            unit=row.unit,
            daily=daily,
            weekly=_weekly(daily),
            source=row.source or "RdiStandard",
            region="DB",
        )
    return result


def build_fallback_table(rows: Iterable[dict[str, object]]) -> RdiFallbackTable:
    """Build the static fallback table from CSV rows, skipping invalid rows."""
    parsed: list[RdiCsvRow] = []
    for row in rows:
        try:
            parsed.append(RdiCsvRow.model_validate(row))
        except ValidationError:
            _logger.debug("Skipping malformed RDI row: %s", row)
    return RdiFallbackTable(
        males=_records_for_sex(parsed, Sex.MALE),
        females=_records_for_sex(parsed, Sex.FEMALE),
    )


def empty_fallback_table() -> RdiFallbackTable:
    """Return a fallback table where every value is unknown."""
    return RdiFallbackTable(males=empty_records("CSV"), females=empty_records("CSV"))


def _records_for_sex(rows: list[RdiCsvRow], sex: Sex) -> dict[str, RdiRecord]:
    result = empty_records("CSV")
    for row in rows:
        key = _KEY_BY_RDI_NAME.get(row.nutrient.strip())
        if key is None:
            continue
        daily = row.adult_male if sex == Sex.MALE else row.adult_female
        result[key] = RdiRecord(
            nutrient_key=key,
            unit=row.unit,
            daily=daily,
            weekly=_weekly(daily),
            source=row.source or "CSV",
            region="CSV",
        )
    return result


def _weekly(daily: float | None) -> float | None:
    return None if daily is None else daily * DAYS_PER_WEEK
