"""Aggregation of logged intake into nutrient totals."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from rdi_tracker.domain.catalog import RecipeTotalsPayload
from rdi_tracker.domain.intake import (
    CustomNutritionSource,
    IngredientSource,
    IntakeItem,
    IntakeLog,
    RecipeSource,
)
from rdi_tracker.domain.nutrients import NutrientTotals
from rdi_tracker.domain.totals import add, scale, unknown, zero
from rdi_tracker.services.contributions import IngredientContributionCalculator
from rdi_tracker.services.recipe_totals import RecipeTotalsService
from rdi_tracker.services.unit_normalizer import normalize_unit
from rdi_tracker.services.units import QuantityConverter, is_serving_unit

_logger = logging.getLogger(__name__)


class IntakeRepository(Protocol):
    """Persistence interface for intake logs."""

    async def list_logs(
        self, user_id: int | None, start: datetime, end: datetime
    ) -> list[IntakeLog]:
        """Return logs with start <= logged_at < end, oldest first, items resolved."""


@dataclass
class _AggregationRun:
    """Per-call state: converter and memoized recipe totals."""

    recipe_totals: RecipeTotalsService
    calculator: IngredientContributionCalculator
    recipes: dict[int, RecipeTotalsPayload]

    @property
    def converter(self) -> QuantityConverter:
        return self.calculator.converter

    async def item_totals(self, item: IntakeItem) -> NutrientTotals:
        source = item.source
        if isinstance(source, CustomNutritionSource):
            return custom_totals(
                source, item.amount_value, item.amount_unit, self.converter
            )
        if isinstance(source, RecipeSource):
            return await self._recipe_item_totals(source, item)
        if isinstance(source, IngredientSource):
            return self.calculator.calculate(
                source.ingredient, item.amount_value, item.amount_unit
            )
        _logger.debug("Intake item %s has no resolvable source", item.id)
        return unknown()

    async def _recipe_item_totals(
        self, source: RecipeSource, item: IntakeItem
    ) -> NutrientTotals:
        payload = self.recipes.get(source.recipe_id)
        if payload is None:
            payload = await self.recipe_totals.ensure_totals(
                source.recipe_id, recipe=source.recipe
            )
            self.recipes[source.recipe_id] = payload
        multiplier = item.amount_value if item.amount_value is not None else 1
        if payload.per_serving is not None and is_serving_unit(item.amount_unit):
            return scale(payload.per_serving, multiplier)
        return scale(payload.totals, multiplier)


@dataclass
class IntakeAggregator:
    """Sums nutrient contributions of intake logs in a time window."""

    repository: IntakeRepository
    recipe_totals: RecipeTotalsService

    async def aggregate(
        self, user_id: int | None, start: datetime, end: datetime
    ) -> NutrientTotals:
        """Return totals for logs in [start, end), or zero() when there are none."""
        logs = await self.repository.list_logs(user_id, start, end)
        run = _AggregationRun(
            recipe_totals=self.recipe_totals,
            calculator=await self.recipe_totals.calculator(),
            recipes={},
        )
        totals = zero()
        for log in logs:
            log_totals = zero()
            for item in log.items:
                log_totals = add(log_totals, await run.item_totals(item))
            totals = add(totals, log_totals)
        _logger.info(
            "Intake aggregated: user_id=%s logs=%s start=%s end=%s",
            user_id,
            len(logs),
            start.isoformat(),
            end.isoformat(),
        )
        return totals


def custom_totals(
    source: CustomNutritionSource,
    amount_value: float | None,
    amount_unit: str | None,
    converter: QuantityConverter,
) -> NutrientTotals:
    """Scale custom nutrition from its base amount to the logged amount.

    Matching units use a direct ratio even when they cannot be converted to
    grams; otherwise both amounts must convert to non-zero grams.
    """
    base_value = source.base_amount_value
    logged_value = amount_value if amount_value is not None else base_value
    logged_unit = amount_unit if amount_unit is not None else source.base_amount_unit

    normalized_base = normalize_unit(source.base_amount_unit)
    normalized_logged = normalize_unit(logged_unit)
    if (
        normalized_base
        and normalized_base == normalized_logged
        and base_value
        and logged_value
    ):
        return scale(source.nutrients, logged_value / base_value)

    base_grams = converter.to_grams(base_value, source.base_amount_unit)
    logged_grams = converter.to_grams(logged_value, logged_unit)
    if not base_grams or not logged_grams:
        return unknown()
    return scale(source.nutrients, logged_grams / base_grams)
