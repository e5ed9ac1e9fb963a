"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import partial

from supabase import acreate_client

from rdi_tracker.adapters.reference_files import (
    load_rdi_fallback,
    load_unit_conversions,
)
from rdi_tracker.adapters.supabase_catalog_repository import SupabaseCatalogRepository
from rdi_tracker.adapters.supabase_intake_repository import SupabaseIntakeRepository
from rdi_tracker.adapters.supabase_rdi_repository import SupabaseRdiStandardRepository
from rdi_tracker.adapters.supabase_recipe_totals_repository import (
    SupabaseRecipeTotalsRepository,
)
from rdi_tracker.adapters.supabase_user_repository import SupabaseUserRepository
from rdi_tracker.app_logging import configure_logging
from rdi_tracker.config import Settings
from rdi_tracker.services.cache import AsyncLazy
from rdi_tracker.services.catalog import CatalogService
from rdi_tracker.services.conversion_table import UnitConversionTable
from rdi_tracker.services.day_ranges import ZoneInfoDayRangeResolver
from rdi_tracker.services.intake import IntakeAggregator
from rdi_tracker.services.rdi import RdiFallbackTable, RdiResolver
from rdi_tracker.services.recipe_totals import RecipeTotalsService
from rdi_tracker.services.stats import StatsService
from rdi_tracker.services.users import UserContextService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    conversion_tables: AsyncLazy[UnitConversionTable]
    rdi_fallback: AsyncLazy[RdiFallbackTable]
    user_context_service: UserContextService
    catalog_service: CatalogService
    recipe_totals_service: RecipeTotalsService
    intake_aggregator: IntakeAggregator
    rdi_resolver: RdiResolver
    stats_service: StatsService
    close_resources: Callable[[], Awaitable[None]]


async def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    configure_logging()
    resolved_settings = settings or Settings()
    supabase_client = await acreate_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    catalog_repository = SupabaseCatalogRepository(supabase_client)
    totals_repository = SupabaseRecipeTotalsRepository(supabase_client)
    intake_repository = SupabaseIntakeRepository(supabase_client)
    rdi_repository = SupabaseRdiStandardRepository(supabase_client)
    user_repository = SupabaseUserRepository(supabase_client)

    conversion_tables = AsyncLazy(
        partial(load_unit_conversions, resolved_settings.unit_conversions_path)
    )
    rdi_fallback = AsyncLazy(partial(load_rdi_fallback, resolved_settings.rdi_csv_path))

    recipe_totals_service = RecipeTotalsService(
        recipes=catalog_repository,
        repository=totals_repository,
        conversion_tables=conversion_tables,
    )
    catalog_service = CatalogService(
        repository=catalog_repository,
        recipe_totals=recipe_totals_service,
    )
    intake_aggregator = IntakeAggregator(
        repository=intake_repository,
        recipe_totals=recipe_totals_service,
    )
    rdi_resolver = RdiResolver(repository=rdi_repository, fallback=rdi_fallback)
    user_context_service = UserContextService(
        repository=user_repository,
        default_age=resolved_settings.default_age,
        default_sex=resolved_settings.default_sex,
        default_timezone=resolved_settings.default_timezone,
    )
    stats_service = StatsService(
        users=user_context_service,
        aggregator=intake_aggregator,
        rdi_resolver=rdi_resolver,
        day_ranges=ZoneInfoDayRangeResolver(),
        over_limit_percent=resolved_settings.over_limit_percent,
    )

    async def close_resources() -> None:
        await supabase_client.postgrest.aclose()

    return AppContainer(
        settings=resolved_settings,
        conversion_tables=conversion_tables,
        rdi_fallback=rdi_fallback,
        user_context_service=user_context_service,
        catalog_service=catalog_service,
        recipe_totals_service=recipe_totals_service,
        intake_aggregator=intake_aggregator,
        rdi_resolver=rdi_resolver,
        stats_service=stats_service,
        close_resources=close_resources,
    )
