"""Nutrient contribution of a consumed ingredient amount."""

from dataclasses import dataclass

from rdi_tracker.domain.catalog import Ingredient
from rdi_tracker.domain.nutrients import NutrientTotals
from rdi_tracker.domain.totals import scale, unknown
from rdi_tracker.services.unit_normalizer import normalize_unit
from rdi_tracker.services.units import QuantityConverter


@dataclass
class IngredientContributionCalculator:
    """Scales an ingredient's reference nutrition to a consumed amount."""

    converter: QuantityConverter

    def calculate(
        self,
        ingredient: Ingredient | None,
        quantity: float | None,
        unit: str | None,
    ) -> NutrientTotals:
        """Return nutrients for `quantity` `unit` of the ingredient.

        The unit falls back to the ingredient's default unit. Any amount that
        cannot be expressed in the reference unit yields an unknown vector.
        """
        if ingredient is None:
            return unknown()
        nutrition = ingredient.primary_nutrition
        if nutrition is None:
            return unknown()

        base_unit = normalize_unit(nutrition.per_amount_unit) or "g"
        base_amount = self.converter.convert(
            nutrition.per_amount_value,
            nutrition.per_amount_unit,
            base_unit,
            ingredient.name,
        )
        used_amount = self.converter.convert(
            quantity,
            unit if unit is not None else ingredient.default_unit,
            base_unit,
            ingredient.name,
        )
        if not base_amount or used_amount is None:
            return unknown()
        return scale(nutrition.nutrients, used_amount / base_amount)
