"""Recipe nutrient totals with a persisted cache."""

import json
import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from rdi_tracker.domain.catalog import Recipe, RecipeTotalsPayload
from rdi_tracker.domain.nutrients import NUTRIENT_KEYS, NutrientTotals
from rdi_tracker.domain.totals import add, divide, zero
from rdi_tracker.services.cache import AsyncLazy
from rdi_tracker.services.contributions import IngredientContributionCalculator
from rdi_tracker.services.conversion_table import UnitConversionTable
from rdi_tracker.services.units import QuantityConverter

_logger = logging.getLogger(__name__)


class RecipeNotFoundError(LookupError):
    """Raised when totals are requested for a recipe that does not exist."""

    def __init__(self, recipe: int | str) -> None:
        super().__init__(f"Recipe {recipe} not found")
        self.recipe = recipe


class RecipeReader(Protocol):
    """Read access to recipes with ingredients and nutrition facts."""

    async def get_recipe(self, recipe_id: int) -> Recipe | None:
        """Return a recipe with its lines, ingredients and facts."""


class RecipeTotalsRepository(Protocol):
    """Persistence interface for the recipe totals cache."""

    async def get_totals(self, recipe_id: int) -> object | None:
        """Return the raw cached payload for a recipe, if any."""

    async def upsert_totals(self, recipe_id: int, payload: dict[str, object]) -> None:
        """Create or overwrite the cached payload for a recipe."""

    async def delete_totals(self, recipe_id: int) -> None:
        """Delete the cached payload; absent rows are ignored."""


@dataclass
class RecipeTotalsService:
    """Computes recipe totals and keeps the cache in sync on demand."""

    recipes: RecipeReader
    repository: RecipeTotalsRepository
    conversion_tables: AsyncLazy[UnitConversionTable]

    async def calculator(self) -> IngredientContributionCalculator:
        """Return a contribution calculator over the loaded conversion table."""
        table = await self.conversion_tables.get()
        return IngredientContributionCalculator(QuantityConverter(table))

    async def get_cached(self, recipe_id: int) -> RecipeTotalsPayload | None:
        """Return cached totals without computing them."""
        raw = await self.repository.get_totals(recipe_id)
        if raw is None:
            return None
        return parse_recipe_totals_payload(raw)

    async def ensure_totals(
        self,
        recipe_id: int,
        force: bool = False,
        recipe: Recipe | None = None,
    ) -> RecipeTotalsPayload:
        """Return cached totals, computing and persisting them when needed."""
        if not force:
            cached = await self.get_cached(recipe_id)
            if cached is not None:
                return cached

        record = recipe
        if record is None:
            record = await self.recipes.get_recipe(recipe_id)
        if record is None:
            raise RecipeNotFoundError(recipe_id)

        computed = calculate_recipe_totals(record, await self.calculator())
        await self.repository.upsert_totals(recipe_id, computed.to_json())
        _logger.info("Recipe totals computed: recipe_id=%s force=%s", recipe_id, force)
        return computed

    async def invalidate(self, recipe_id: int) -> None:
        """Drop cached totals after the recipe's composition changed."""
        await self.repository.delete_totals(recipe_id)

    async def refresh_all(
        self, recipe_ids: Iterable[int]
    ) -> dict[int, RecipeTotalsPayload]:
        """Recompute and persist totals for each recipe."""
        return {
            recipe_id: await self.ensure_totals(recipe_id, force=True)
            for recipe_id in recipe_ids
        }


def calculate_recipe_totals(
    recipe: Recipe, calculator: IngredientContributionCalculator
) -> RecipeTotalsPayload:
    """Sum ingredient contributions and derive per-serving figures."""
    totals = zero()
    for line in recipe.ingredients:
        contribution = calculator.calculate(line.ingredient, line.quantity, line.unit)
        totals = add(totals, contribution)

    servings = _finite_number(recipe.servings)
    per_serving = divide(totals, servings) if servings and servings > 0 else None
    return RecipeTotalsPayload(
        totals=totals, per_serving=per_serving, servings=servings
    )


def parse_recipe_totals_payload(value: object) -> RecipeTotalsPayload | None:
    """Parse a cached payload, returning None for any shape mismatch."""
    if isinstance(value, str | bytes):
        try:
            value = json.loads(value)
        except ValueError:
            return None
    if not isinstance(value, dict):
        return None

    totals = _parse_totals(value.get("totals"))
    if totals is None:
        return None

    raw_per_serving = value.get("perServing")
    per_serving = None
    if raw_per_serving is not None:
        per_serving = _parse_totals(raw_per_serving)
        if per_serving is None:
            return None

    raw_servings = value.get("servings")
    servings = _finite_number(raw_servings)
    if raw_servings is not None and servings is None:
        return None
    return RecipeTotalsPayload(
        totals=totals, per_serving=per_serving, servings=servings
    )


def _parse_totals(value: object) -> NutrientTotals | None:
    if not isinstance(value, dict):
        return None
    parsed: dict[str, float | None] = {}
    for key in NUTRIENT_KEYS:
        if key not in value:
            return None
        candidate = value[key]
        if candidate is None:
            parsed[key] = None
            continue
        number = _finite_number(candidate)
        if number is None:
            return None
        parsed[key] = number
    return NutrientTotals(**parsed)


def _finite_number(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    if not math.isfinite(value):
        return None
    return float(value)
