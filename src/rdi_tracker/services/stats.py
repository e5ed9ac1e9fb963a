"""Statistics service comparing intake with recommendations."""

from dataclasses import dataclass

from rdi_tracker.config import parse_age, parse_sex
from rdi_tracker.domain.nutrients import NUTRIENT_META, NutrientTotals, format_value
from rdi_tracker.domain.rdi import RdiRecord, Sex
from rdi_tracker.domain.stats import IntakeReport, SummaryEntry, Timeframe
from rdi_tracker.services.day_ranges import DayRange, DayRangeResolver
from rdi_tracker.services.intake import IntakeAggregator
from rdi_tracker.services.rdi import RdiResolver
from rdi_tracker.services.users import UserContextService

OVER_LIMIT_PERCENT = 120.0


@dataclass
class StatsService:
    """Service for daily and weekly intake reports in the user's timezone."""

    users: UserContextService
    aggregator: IntakeAggregator
    rdi_resolver: RdiResolver
    day_ranges: DayRangeResolver
    over_limit_percent: float = OVER_LIMIT_PERCENT

    async def get_daily(
        self,
        iso_date: str | None = None,
        sex: Sex | str | None = None,
        age: int | str | None = None,
        user_id: int | None = None,
    ) -> IntakeReport:
        """Return one local day's totals against daily recommendations.

        Sex and age overrides may be raw strings; unparsable values fall back
        to the user's stored context.
        """
        context = await self.users.resolve(user_id)
        day_range = self.day_ranges.day_range(iso_date, context.timezone)
        return await self._build_report(
            "daily",
            day_range,
            context.user_id,
            context.timezone,
            parse_sex(sex, context.sex),
            parse_age(age, context.age),
        )

    async def get_weekly(
        self,
        end_iso_date: str | None = None,
        sex: Sex | str | None = None,
        age: int | str | None = None,
        user_id: int | None = None,
    ) -> IntakeReport:
        """Return seven local days' totals against weekly recommendations."""
        context = await self.users.resolve(user_id)
        day_range = self.day_ranges.seven_day_range(end_iso_date, context.timezone)
        return await self._build_report(
            "weekly",
            day_range,
            context.user_id,
            context.timezone,
            parse_sex(sex, context.sex),
            parse_age(age, context.age),
        )

    async def _build_report(  # noqa: PLR0913
        self,
        timeframe: Timeframe,
        day_range: DayRange,
        user_id: int | None,
        timezone_name: str,
        sex: Sex,
        age: int,
    ) -> IntakeReport:
        totals = await self.aggregator.aggregate(
            user_id, day_range.start, day_range.end
        )
        rdi = await self.rdi_resolver.resolve(age, sex)
        return IntakeReport(
            start_date=day_range.start_date,
            end_date=day_range.end_date,
            timezone=timezone_name,
            sex=sex,
            age=age,
            timeframe=timeframe,
            totals=totals,
            rdi=rdi,
            summary=build_nutrient_summary(
                totals, rdi, timeframe, self.over_limit_percent
            ),
        )


def build_nutrient_summary(
    totals: NutrientTotals,
    rdi: dict[str, RdiRecord],
    timeframe: Timeframe,
    over_limit_percent: float = OVER_LIMIT_PERCENT,
) -> dict[str, SummaryEntry]:
    """Compare totals with recommendations for every nutrient."""
    entries: dict[str, SummaryEntry] = {}
    for key, meta in NUTRIENT_META.items():
        value = totals.get(key)
        record = rdi.get(key)
        target = None
        if record is not None:
            target = record.daily if timeframe == "daily" else record.weekly
        percent = None
        if value is not None and target:
            percent = value / target * 100
        entries[key] = SummaryEntry(
            unit=meta.unit,
            value=value,
            display=format_value(value),
            percent=percent,
            percent_display=format_value(percent, 1),
            is_over_limit=percent is not None and percent > over_limit_percent,
            source=record.source if record else None,
            region=record.region if record else None,
        )
    return entries
