"""Nutrient domain models."""

import math
from dataclasses import dataclass, fields


@dataclass(frozen=True)
class NutrientMeta:
    """Display metadata for a tracked nutrient."""

    label: str
    unit: str
    rdi_key: str


NUTRIENT_META: dict[str, NutrientMeta] = {
    "calories_kcal": NutrientMeta("Calories", "kcal", "calories"),
    "protein_g": NutrientMeta("Protein", "g", "protein"),
    "fat_g": NutrientMeta("Fat", "g", "fat"),
    "carbs_g": NutrientMeta("Carbohydrates", "g", "carbohydrate"),
    "fiber_g": NutrientMeta("Fiber", "g", "fiber"),
    "vitamin_c_mg": NutrientMeta("Vitamin C", "mg", "vitamin_c"),
    "vitamin_a_ug": NutrientMeta("Vitamin A", "mcg", "vitamin_a"),
    "iron_mg": NutrientMeta("Iron", "mg", "iron"),
    "calcium_mg": NutrientMeta("Calcium", "mg", "calcium"),
    "potassium_mg": NutrientMeta("Potassium", "mg", "potassium"),
    "sodium_mg": NutrientMeta("Sodium", "mg", "sodium"),
}

NUTRIENT_KEYS: tuple[str, ...] = tuple(NUTRIENT_META)


@dataclass(frozen=True)
class NutrientTotals:
    """Nutrient amounts where None means unknown, never zero."""

    calories_kcal: float | None
    protein_g: float | None
    fat_g: float | None
    carbs_g: float | None
    fiber_g: float | None
    vitamin_c_mg: float | None
    vitamin_a_ug: float | None
    iron_mg: float | None
    calcium_mg: float | None
    potassium_mg: float | None
    sodium_mg: float | None

    def get(self, key: str) -> float | None:
        """Return the value for a nutrient key."""
        return getattr(self, key)

    def as_dict(self) -> dict[str, float | None]:
        """Return the vector as a plain mapping in key order."""
        return {field.name: getattr(self, field.name) for field in fields(self)}

    @classmethod
    def from_mapping(cls, values: dict[str, object]) -> "NutrientTotals":
        """Build a vector from a mapping, treating absent or non-numeric as unknown."""
        return cls(**{key: _coerce_amount(values.get(key)) for key in NUTRIENT_KEYS})


def format_value(value: float | None, fraction_digits: int = 2) -> str:
    """Format a nutrient figure, rendering unknown values as NA."""
    if value is None or math.isnan(value):
        return "NA"
    text = f"{round(value, fraction_digits):.{fraction_digits}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _coerce_amount(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    return None
