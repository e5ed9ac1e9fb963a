"""Supabase repository for ingredients, nutrition facts and recipes."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import AsyncClient

from rdi_tracker.domain.catalog import Ingredient, NutritionFact, Recipe, RecipeLine
from rdi_tracker.domain.nutrients import NutrientTotals
from rdi_tracker.services.catalog import CatalogRepository

INGREDIENT_SELECT = "id, name, category, default_unit, nutrition_facts(*)"
RECIPE_SELECT = (
    "id, name, servings, recipe_ingredients(id, position, quantity, unit, "
    f"ingredients({INGREDIENT_SELECT}))"
)


@dataclass
class SupabaseCatalogRepository(CatalogRepository):
    """Supabase-backed catalog of ingredients and recipes."""

    client: AsyncClient

    async def get_ingredient(self, ingredient_id: int) -> Ingredient | None:
        """Return an ingredient with its facts, newest first."""
        response = (
            await self.client.table("ingredients")
            .select(INGREDIENT_SELECT)
            .eq("id", ingredient_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_ingredient(response.data[0])

    async def get_ingredient_by_name(self, name: str) -> Ingredient | None:
        """Return an ingredient by its unique name."""
        response = (
            await self.client.table("ingredients")
            .select(INGREDIENT_SELECT)
            .eq("name", name)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_ingredient(response.data[0])

    async def list_ingredients(self, query: str | None, limit: int) -> list[Ingredient]:
        """Return ingredients whose name contains the query."""
        request = self.client.table("ingredients").select(INGREDIENT_SELECT)
        if query:
            request = request.ilike("name", f"%{query}%")
        response = await request.order("name").limit(limit).execute()
        return [parse_ingredient(row) for row in response.data or []]

    async def list_nutrition_facts(self, ingredient_id: int) -> list[NutritionFact]:
        """Return an ingredient's facts ordered newest first."""
        response = (
            await self.client.table("nutrition_facts")
            .select("*")
            .eq("ingredient_id", ingredient_id)
            .order("created_at", desc=True)
            .execute()
        )
        return _newest_first([parse_fact(row) for row in response.data or []])

    async def get_recipe(self, recipe_id: int) -> Recipe | None:
        """Return a recipe with its lines, ingredients and facts."""
        response = (
            await self.client.table("recipes")
            .select(RECIPE_SELECT)
            .eq("id", recipe_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_recipe(response.data[0])

    async def get_recipe_by_name(self, name: str) -> Recipe | None:
        """Return a recipe with its lines by its unique name."""
        response = (
            await self.client.table("recipes")
            .select(RECIPE_SELECT)
            .eq("name", name)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_recipe(response.data[0])


def parse_fact(row: dict[str, object]) -> NutritionFact:
    """Parse a nutrition fact row."""
    return NutritionFact(
        id=int(row["id"]),
        ingredient_id=int(row["ingredient_id"]),
        per_amount_value=optional_float(row.get("per_amount_value")),
        per_amount_unit=row.get("per_amount_unit"),
        nutrients=NutrientTotals.from_mapping(row),
        created_at=parse_timestamp(row.get("created_at")),
    )


def parse_ingredient(row: dict[str, object]) -> Ingredient:
    """Parse an ingredient row with embedded nutrition facts."""
    facts = [parse_fact(fact) for fact in embedded_rows(row.get("nutrition_facts"))]
    return Ingredient(
        id=int(row["id"]),
        name=str(row.get("name", "")),
        category=row.get("category"),
        default_unit=row.get("default_unit"),
        nutrition=_newest_first(facts),
    )


def parse_recipe(row: dict[str, object]) -> Recipe:
    """Parse a recipe row with embedded ingredient lines."""
    line_rows = sorted(
        embedded_rows(row.get("recipe_ingredients")),
        key=lambda line: (line.get("position") or 0, line.get("id") or 0),
    )
    lines = []
    for line in line_rows:
        ingredient_row = embedded_row(line.get("ingredients"))
        lines.append(
            RecipeLine(
                id=int(line["id"]),
                ingredient=parse_ingredient(ingredient_row) if ingredient_row else None,
                quantity=optional_float(line.get("quantity")),
                unit=line.get("unit"),
            )
        )
    return Recipe(
        id=int(row["id"]),
        name=str(row.get("name", "")),
        servings=optional_float(row.get("servings")),
        ingredients=lines,
    )


def _newest_first(facts: list[NutritionFact]) -> list[NutritionFact]:
    oldest = datetime.min.replace(tzinfo=UTC)
    return sorted(
        facts,
        key=lambda fact: (fact.created_at or oldest, fact.id),
        reverse=True,
    )


def embedded_rows(value: object) -> list[dict[str, object]]:
    """Return embedded rows whether PostgREST sent a list or a single object."""
    if isinstance(value, list):
        return [item for item in value if isinstance(item, dict)]
    if isinstance(value, dict):
        return [value]
    return []


def embedded_row(value: object) -> dict[str, object] | None:
    """Return the first embedded row, if any."""
    items = embedded_rows(value)
    return items[0] if items else None


def optional_float(value: object) -> float | None:
    """Coerce a numeric column value, treating anything else as unset."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO timestamp column as an aware datetime."""
    if not isinstance(value, str) or not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed
