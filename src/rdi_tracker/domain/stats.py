"""Domain models for intake statistics."""

from dataclasses import dataclass
from typing import Literal

from rdi_tracker.domain.nutrients import NutrientTotals
from rdi_tracker.domain.rdi import RdiRecord, Sex

Timeframe = Literal["daily", "weekly"]


@dataclass(frozen=True)
class SummaryEntry:
    """Intake figure compared against its recommendation."""

    unit: str
    value: float | None
    display: str
    percent: float | None
    percent_display: str
    is_over_limit: bool
    source: str | None
    region: str | None


@dataclass(frozen=True)
class IntakeReport:
    """Totals and recommendation comparison for a date range."""

    start_date: str
    end_date: str
    timezone: str
    sex: Sex
    age: int
    timeframe: Timeframe
    totals: NutrientTotals
    rdi: dict[str, RdiRecord]
    summary: dict[str, SummaryEntry]
