"""Quantity conversion between mass, volume and count units."""

import math
from collections.abc import Callable
from dataclasses import dataclass, field

from rdi_tracker.services.conversion_table import UnitConversionTable
from rdi_tracker.services.unit_normalizer import normalize_unit

MASS_UNIT_TO_GRAMS: dict[str, float] = {
    "g": 1,
    "gram": 1,
    "grams": 1,
    "piece": 1,
    "pieces": 1,
    "顆": 1,
    "kg": 1000,
    "kilogram": 1000,
    "kilograms": 1000,
    "mg": 0.001,
    "milligram": 0.001,
    "milligrams": 0.001,
    "μg": 0.000001,
    "ug": 0.000001,
    "oz": 28.3495,
    "ounce": 28.3495,
    "ounces": 28.3495,
    "lb": 453.592,
    "lbs": 453.592,
    "pound": 453.592,
    "pounds": 453.592,
}

VOLUME_UNIT_TO_ML: dict[str, float] = {
    "ml": 1,
    "milliliter": 1,
    "milliliters": 1,
    "cc": 1,
    "cm3": 1,
    "l": 1000,
    "liter": 1000,
    "liters": 1000,
    "cup": 240,
    "cups": 240,
    "杯": 240,
    "tbsp": 15,
    "tablespoon": 15,
    "tablespoons": 15,
    "tsp": 5,
    "teaspoon": 5,
    "teaspoons": 5,
}

COUNT_UNITS = frozenset(
    {"serving", "servings", "portion", "portions", "份", "piece", "pieces", "顆"}
)
SERVING_UNITS = frozenset({"serving", "servings", "份"})

MASS_UNITS = frozenset(MASS_UNIT_TO_GRAMS)
VOLUME_UNITS = frozenset(VOLUME_UNIT_TO_ML)


@dataclass(frozen=True)
class ConversionRequest:
    """Normalized conversion request handed to each strategy."""

    value: float
    from_unit: str
    to_unit: str
    ingredient_name: str | None
    table: UnitConversionTable


ConversionStrategy = Callable[[ConversionRequest], float | None]


def grams_to_unit(grams: float, unit: str) -> float | None:
    """Express grams in a mass unit, or None for non-mass units."""
    if unit in {"g", "gram", "grams"}:
        return grams
    if unit in {"kg", "kilogram", "kilograms"}:
        return grams / 1000
    if unit in {"mg", "milligram", "milligrams"}:
        return grams * 1000
    if unit in {"μg", "ug"}:
        return grams * 1_000_000
    if unit in {"oz", "ounce", "ounces"}:
        return grams / 28.3495
    if unit in {"lb", "lbs", "pound", "pounds"}:
        return grams / 453.592
    return None


def ml_to_unit(ml: float, unit: str) -> float | None:
    """Express milliliters in a volume unit, or None for non-volume units."""
    if unit in {"ml", "milliliter", "milliliters", "cc", "cm3"}:
        return ml
    if unit in {"l", "liter", "liters"}:
        return ml / 1000
    if unit in {"cup", "cups", "杯"}:
        return ml / 240
    if unit in {"tbsp", "tablespoon", "tablespoons"}:
        return ml / 15
    if unit in {"tsp", "teaspoon", "teaspoons"}:
        return ml / 5
    return None


def is_serving_unit(unit: str | None) -> bool:
    """Return whether a logged unit means "servings of a recipe"."""
    normalized = normalize_unit(unit)
    if normalized is None:
        return False
    return normalized in SERVING_UNITS or "serv" in normalized


def same_unit(request: ConversionRequest) -> float | None:
    if request.from_unit == request.to_unit:
        return request.value
    return None


def count_to_count(request: ConversionRequest) -> float | None:
    if request.from_unit in COUNT_UNITS and request.to_unit in COUNT_UNITS:
        return request.value
    return None


def via_grams(request: ConversionRequest) -> float | None:
    if request.to_unit not in MASS_UNITS:
        return None
    grams = request.table.convert(
        request.value, request.from_unit, "g", request.ingredient_name
    )
    if grams is None:
        factor = MASS_UNIT_TO_GRAMS.get(request.from_unit)
        if factor is None:
            return None
        grams = request.value * factor
    converted = grams_to_unit(grams, request.to_unit)
    return grams if converted is None else converted


def via_milliliters(request: ConversionRequest) -> float | None:
    if request.to_unit not in VOLUME_UNITS:
        return None
    ml = request.table.convert(
        request.value, request.from_unit, "ml", request.ingredient_name
    )
    if ml is None:
        factor = VOLUME_UNIT_TO_ML.get(request.from_unit)
        if factor is None:
            return None
        ml = request.value * factor
    converted = ml_to_unit(ml, request.to_unit)
    return ml if converted is None else converted


def direct_lookup(request: ConversionRequest) -> float | None:
    """Look up a pair outside mass and volume, which resolve through grams or ml."""
    if request.to_unit in MASS_UNITS or request.to_unit in VOLUME_UNITS:
        return None
    return request.table.convert(
        request.value, request.from_unit, request.to_unit, request.ingredient_name
    )


DEFAULT_STRATEGIES: tuple[ConversionStrategy, ...] = (
    same_unit,
    count_to_count,
    via_grams,
    via_milliliters,
    direct_lookup,
)


@dataclass
class QuantityConverter:
    """Converts amounts between units, consulting the conversion table first."""

    table: UnitConversionTable = field(default_factory=UnitConversionTable.empty)
    strategies: tuple[ConversionStrategy, ...] = DEFAULT_STRATEGIES

    def convert(
        self,
        value: float | None,
        from_unit: str | None,
        to_unit: str | None = "g",
        ingredient_name: str | None = None,
    ) -> float | None:
        """Convert a value into `to_unit`, returning None when unresolvable.

        A missing source unit is read as the target unit; a missing target
        defaults to grams.
        """
        if value is None or not math.isfinite(value):
            return None
        target = normalize_unit(to_unit if to_unit is not None else "g")
        source = normalize_unit(from_unit if from_unit is not None else target)
        if target is None or source is None:
            return None

        request = ConversionRequest(
            value=value,
            from_unit=source,
            to_unit=target,
            ingredient_name=ingredient_name,
            table=self.table,
        )
        for strategy in self.strategies:
            result = strategy(request)
            if result is not None:
                return result
        return None

    def to_grams(
        self, value: float | None, unit: str | None, ingredient_name: str | None = None
    ) -> float | None:
        """Convert a value into grams."""
        return self.convert(value, unit, "g", ingredient_name)
