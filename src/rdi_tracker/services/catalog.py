"""Services for ingredient and recipe lookups."""

from dataclasses import dataclass
from typing import Protocol

from rdi_tracker.domain.catalog import (
    Ingredient,
    NutritionFact,
    Recipe,
    RecipeTotalsPayload,
)
from rdi_tracker.domain.nutrients import NutrientTotals
from rdi_tracker.services.recipe_totals import (
    RecipeNotFoundError,
    RecipeReader,
    RecipeTotalsService,
)


class IngredientNotFoundError(LookupError):
    """Raised when an ingredient name does not exist."""


class CatalogRepository(RecipeReader, Protocol):
    """Read access to ingredients, nutrition facts and recipes."""

    async def get_ingredient(self, ingredient_id: int) -> Ingredient | None:
        """Return an ingredient with its facts, newest first."""

    async def get_ingredient_by_name(self, name: str) -> Ingredient | None:
        """Return an ingredient by its unique name."""

    async def list_ingredients(self, query: str | None, limit: int) -> list[Ingredient]:
        """Return ingredients whose name contains the query."""

    async def list_nutrition_facts(self, ingredient_id: int) -> list[NutritionFact]:
        """Return an ingredient's facts ordered newest first."""

    async def get_recipe_by_name(self, name: str) -> Recipe | None:
        """Return a recipe with its lines by its unique name."""


@dataclass
class CatalogService:
    """Application service for catalog lookups with nutrient figures."""

    repository: CatalogRepository
    recipe_totals: RecipeTotalsService

    async def ingredient_totals(
        self, name: str, quantity: float | None, unit: str | None = None
    ) -> NutrientTotals:
        """Return nutrients for an amount of a named ingredient."""
        ingredient = await self.repository.get_ingredient_by_name(name)
        if ingredient is None:
            raise IngredientNotFoundError(f"Ingredient {name!r} not found")
        calculator = await self.recipe_totals.calculator()
        return calculator.calculate(ingredient, quantity, unit)

    async def search_ingredients(
        self, query: str | None, limit: int = 10
    ) -> list[Ingredient]:
        """Search ingredients by name, sorted alphabetically."""
        results = await self.repository.list_ingredients(query, limit)
        return sorted(results, key=lambda item: item.name.lower())[:limit]

    async def recipe_totals_by_name(self, name: str) -> RecipeTotalsPayload:
        """Return totals for a named recipe, computing them if needed."""
        recipe = await self.repository.get_recipe_by_name(name)
        if recipe is None:
            raise RecipeNotFoundError(name)
        return await self.recipe_totals.ensure_totals(recipe.id, recipe=recipe)
