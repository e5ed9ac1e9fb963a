"""Day range resolution in a user's timezone."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol
from zoneinfo import ZoneInfo


@dataclass(frozen=True)
class DayRange:
    """UTC instants bounding a range of local days, end exclusive."""

    start: datetime
    end: datetime
    start_date: str
    end_date: str


class DayRangeResolver(Protocol):
    """Resolves local calendar days into UTC instants."""

    def day_range(self, iso_date: str | None, timezone_name: str) -> DayRange:
        """Return the range covering one local day."""

    def seven_day_range(self, end_iso_date: str | None, timezone_name: str) -> DayRange:
        """Return the range covering seven local days ending on the given day."""


@dataclass
class ZoneInfoDayRangeResolver(DayRangeResolver):
    """Day ranges computed with the IANA timezone database."""

    def day_range(self, iso_date: str | None, timezone_name: str) -> DayRange:
        """Return local midnight to the next local midnight."""
        tz = ZoneInfo(timezone_name)
        day = _resolve_day(iso_date, tz)
        start = datetime.combine(day, time.min, tzinfo=tz)
        end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
        return DayRange(
            start=start.astimezone(UTC),
            end=end.astimezone(UTC),
            start_date=day.isoformat(),
            end_date=day.isoformat(),
        )

    def seven_day_range(self, end_iso_date: str | None, timezone_name: str) -> DayRange:
        """Return the six days before the end day through the end day."""
        tz = ZoneInfo(timezone_name)
        end_day = _resolve_day(end_iso_date, tz)
        start_day = end_day - timedelta(days=6)
        start = datetime.combine(start_day, time.min, tzinfo=tz)
        end = datetime.combine(end_day + timedelta(days=1), time.min, tzinfo=tz)
        return DayRange(
            start=start.astimezone(UTC),
            end=end.astimezone(UTC),
            start_date=start_day.isoformat(),
            end_date=end_day.isoformat(),
        )


def _resolve_day(iso_date: str | None, tz: ZoneInfo) -> date:
    if iso_date:
        return date.fromisoformat(iso_date)
    return datetime.now(tz=tz).date()
