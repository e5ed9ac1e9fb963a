"""Domain models for ingredients and recipes."""

from dataclasses import dataclass, field
from datetime import datetime

from rdi_tracker.domain.nutrients import NutrientTotals


@dataclass(frozen=True)
class NutritionFact:
    """Nutrient values measured for a stated reference amount."""

    id: int
    ingredient_id: int
    per_amount_value: float | None
    per_amount_unit: str | None
    nutrients: NutrientTotals
    created_at: datetime | None = None


@dataclass(frozen=True)
class Ingredient:
    """Ingredient with its nutrition facts, newest first."""

    id: int
    name: str
    category: str | None = None
    default_unit: str | None = None
    nutrition: list[NutritionFact] = field(default_factory=list)

    @property
    def primary_nutrition(self) -> NutritionFact | None:
        """Return the authoritative (most recent) nutrition fact."""
        return self.nutrition[0] if self.nutrition else None


@dataclass(frozen=True)
class RecipeLine:
    """Single ingredient line of a recipe."""

    id: int
    ingredient: Ingredient | None
    quantity: float | None = None
    unit: str | None = None


@dataclass(frozen=True)
class Recipe:
    """Recipe with ordered ingredient lines."""

    id: int
    name: str
    servings: float | None = None
    ingredients: list[RecipeLine] = field(default_factory=list)


@dataclass(frozen=True)
class RecipeTotalsPayload:
    """Computed recipe totals as stored in the totals cache."""

    totals: NutrientTotals
    per_serving: NutrientTotals | None
    servings: float | None

    def to_json(self) -> dict[str, object]:
        """Serialize into the persisted cache payload shape."""
        return {
            "totals": self.totals.as_dict(),
            "perServing": self.per_serving.as_dict() if self.per_serving else None,
            "servings": self.servings,
        }
