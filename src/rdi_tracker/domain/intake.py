"""Domain models for intake logging."""

from dataclasses import dataclass, field
from datetime import datetime

from rdi_tracker.domain.catalog import Ingredient, Recipe
from rdi_tracker.domain.nutrients import NutrientTotals


@dataclass(frozen=True)
class CustomNutritionSource:
    """Self-contained nutrient data measured for its own base amount."""

    base_amount_value: float
    base_amount_unit: str
    nutrients: NutrientTotals


@dataclass(frozen=True)
class RecipeSource:
    """Intake of a recipe; the recipe body may be prefetched."""

    recipe_id: int
    recipe: Recipe | None = None


@dataclass(frozen=True)
class IngredientSource:
    """Intake of a raw ingredient."""

    ingredient: Ingredient


IntakeSource = CustomNutritionSource | RecipeSource | IngredientSource


@dataclass(frozen=True)
class IntakeItem:
    """Logged amount of exactly one intake source."""

    id: int
    source: IntakeSource | None
    amount_value: float | None = None
    amount_unit: str | None = None


@dataclass(frozen=True)
class IntakeLog:
    """Timestamped intake event."""

    id: int
    user_id: int | None
    logged_at: datetime
    items: list[IntakeItem] = field(default_factory=list)
