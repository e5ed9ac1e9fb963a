"""Unit string normalization."""

UNIT_NORMALIZATION_OVERRIDES: dict[str, str] = {
    "公克": "g",
    "克": "g",
    "公斤": "kg",
    "毫克": "mg",
    "微克": "μg",
    "µg": "μg",
    "μg": "μg",
    "公升": "l",
    "毫升": "ml",
    "立方公分": "ml",
}


def normalize_unit(unit: str | None) -> str | None:
    """Return the canonical spelling of a unit, or None for empty input."""
    if not unit:
        return None
    trimmed = unit.strip().lower()
    if not trimmed:
        return None
    return UNIT_NORMALIZATION_OVERRIDES.get(trimmed, trimmed)
