"""Supabase repository for intake logs."""

import logging
from dataclasses import dataclass
from datetime import datetime

from supabase import AsyncClient

from rdi_tracker.adapters.supabase_catalog_repository import (
    INGREDIENT_SELECT,
    RECIPE_SELECT,
    embedded_row,
    embedded_rows,
    optional_float,
    parse_ingredient,
    parse_recipe,
    parse_timestamp,
)
from rdi_tracker.domain.intake import (
    CustomNutritionSource,
    IngredientSource,
    IntakeItem,
    IntakeLog,
    IntakeSource,
    RecipeSource,
)
from rdi_tracker.domain.nutrients import NutrientTotals
from rdi_tracker.services.intake import IntakeRepository

INTAKE_SELECT = (
    "id, user_id, logged_at, intake_items(id, amount_value, amount_unit, "
    "recipe_id, ingredient_id, custom_nutrition(*), "
    f"ingredients({INGREDIENT_SELECT}), recipes({RECIPE_SELECT}))"
)

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseIntakeRepository(IntakeRepository):
    """Supabase implementation for intake logs."""

    client: AsyncClient

    async def list_logs(
        self, user_id: int | None, start: datetime, end: datetime
    ) -> list[IntakeLog]:
        """Return logs with start <= logged_at < end, oldest first."""
        request = (
            self.client.table("intake_logs")
            .select(INTAKE_SELECT)
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
        )
        if user_id is not None:
            request = request.eq("user_id", user_id)
        response = await request.order("logged_at").execute()
        logs = [_parse_log(row) for row in response.data or []]
        return sorted(logs, key=lambda log: log.logged_at)


def _parse_log(row: dict[str, object]) -> IntakeLog:
    items = sorted(
        (_parse_item(item) for item in embedded_rows(row.get("intake_items"))),
        key=lambda item: item.id,
    )
    logged_at = parse_timestamp(row.get("logged_at"))
    if logged_at is None:
        raise RuntimeError(f"Intake log {row.get('id')} has no timestamp")
    user_id = row.get("user_id")
    return IntakeLog(
        id=int(row["id"]),
        user_id=int(user_id) if user_id is not None else None,
        logged_at=logged_at,
        items=items,
    )


def _parse_item(row: dict[str, object]) -> IntakeItem:
    return IntakeItem(
        id=int(row["id"]),
        source=_parse_source(row),
        amount_value=optional_float(row.get("amount_value")),
        amount_unit=row.get("amount_unit"),
    )


def _parse_source(row: dict[str, object]) -> IntakeSource | None:
    """Pick the item's source; custom nutrition wins over recipe and ingredient."""
    custom = embedded_row(row.get("custom_nutrition"))
    if custom is not None:
        base_value = optional_float(custom.get("base_amount_value"))
        base_unit = custom.get("base_amount_unit")
        if base_value is not None and isinstance(base_unit, str):
            return CustomNutritionSource(
                base_amount_value=base_value,
                base_amount_unit=base_unit,
                nutrients=NutrientTotals.from_mapping(custom),
            )
        _logger.debug("Ignoring custom nutrition without base amount: %s", row["id"])

    recipe_row = embedded_row(row.get("recipes"))
    recipe_id = row.get("recipe_id")
    if recipe_row is not None:
        return RecipeSource(
            recipe_id=int(recipe_row["id"]), recipe=parse_recipe(recipe_row)
        )
    if recipe_id is not None:
        return RecipeSource(recipe_id=int(recipe_id))

    ingredient_row = embedded_row(row.get("ingredients"))
    if ingredient_row is not None:
        return IngredientSource(ingredient=parse_ingredient(ingredient_row))
    return None
