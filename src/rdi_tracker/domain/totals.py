"""Arithmetic over nutrient vectors with unknown propagation."""

from rdi_tracker.domain.nutrients import NUTRIENT_KEYS, NutrientTotals


def zero() -> NutrientTotals:
    """Return a vector with every nutrient set to zero."""
    return NutrientTotals(**{key: 0.0 for key in NUTRIENT_KEYS})


def unknown() -> NutrientTotals:
    """Return a vector with every nutrient unknown."""
    return NutrientTotals(**{key: None for key in NUTRIENT_KEYS})


def add(left: NutrientTotals, right: NutrientTotals) -> NutrientTotals:
    """Sum two vectors; a key unknown on either side stays unknown."""
    values: dict[str, float | None] = {}
    for key in NUTRIENT_KEYS:
        a = left.get(key)
        b = right.get(key)
        values[key] = None if a is None or b is None else a + b
    return NutrientTotals(**values)


def scale(totals: NutrientTotals, factor: float) -> NutrientTotals:
    """Multiply every known nutrient by a factor."""
    return NutrientTotals(
        **{
            key: None if totals.get(key) is None else totals.get(key) * factor
            for key in NUTRIENT_KEYS
        }
    )


def divide(totals: NutrientTotals, divisor: float) -> NutrientTotals:
    """Divide every known nutrient; a zero divisor makes the whole vector unknown."""
    if divisor == 0:
        return unknown()
    return NutrientTotals(
        **{
            key: None if totals.get(key) is None else totals.get(key) / divisor
            for key in NUTRIENT_KEYS
        }
    )
