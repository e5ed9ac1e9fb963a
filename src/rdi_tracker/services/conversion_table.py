"""Ingredient- and unit-qualified conversion factors."""

import logging
import re
from dataclasses import dataclass, field

from pydantic import BaseModel, ValidationError

from rdi_tracker.services.unit_normalizer import normalize_unit

_SEPARATORS = re.compile(r"[\s\-]+")
_DISALLOWED = re.compile(r"[^a-z0-9_\u4e00-\u9fff]+")

_logger = logging.getLogger(__name__)


class ConversionEntryModel(BaseModel):
    """Object form of a conversion table entry."""

    to: str
    factor: float


@dataclass(frozen=True)
class ConversionEntry:
    """Multiplicative factor into a target unit."""

    to: str
    factor: float


@dataclass(frozen=True)
class UnitConversionTable:
    """Lookup table keyed by normalized `ingredient_unit_target` style keys."""

    entries: dict[str, ConversionEntry] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "UnitConversionTable":
        """Return a table without entries."""
        return cls({})

    @classmethod
    def from_mapping(cls, raw: dict[str, object]) -> "UnitConversionTable":
        """Build a table from the raw JSON mapping, skipping malformed entries."""
        entries: dict[str, ConversionEntry] = {}
        for key, value in raw.items():
            normalized_key = normalize_key_part(key)
            if not normalized_key:
                continue
            if isinstance(value, bool):
                continue
            if isinstance(value, int | float):
                target = normalized_key.split("_")[-1]
                if not target:
                    continue
                entries[normalized_key] = ConversionEntry(
                    to=target, factor=float(value)
                )
                continue
            try:
                model = ConversionEntryModel.model_validate(value)
            except ValidationError:
                _logger.debug("Skipping malformed conversion entry: %s", key)
                continue
            entries[normalized_key] = ConversionEntry(
                to=normalize_unit(model.to) or normalize_key_part(model.to),
                factor=model.factor,
            )
        return cls(entries)

    def resolve(
        self,
        unit: str,
        target_unit: str | None = None,
        ingredient_name: str | None = None,
    ) -> ConversionEntry | None:
        """Return the first matching entry whose target agrees with the request."""
        target = normalize_key_part(target_unit) if target_unit else None
        for key in build_lookup_keys(unit, target_unit, ingredient_name):
            entry = self.entries.get(key)
            if entry is None:
                continue
            if target and normalize_key_part(entry.to) != target:
                continue
            return entry
        return None

    def convert(
        self,
        value: float,
        unit: str,
        target_unit: str | None = None,
        ingredient_name: str | None = None,
    ) -> float | None:
        """Apply a matching factor, or return None when no entry applies."""
        entry = self.resolve(unit, target_unit, ingredient_name)
        if entry is None:
            return None
        return value * entry.factor


def normalize_key_part(value: str) -> str:
    """Normalize a key fragment to lowercase snake case."""
    lowered = value.strip().lower()
    return _DISALLOWED.sub("", _SEPARATORS.sub("_", lowered))


def build_lookup_keys(
    unit: str, target_unit: str | None = None, ingredient_name: str | None = None
) -> list[str]:
    """Return candidate keys from most to least specific."""
    unit_part = normalize_key_part(unit)
    target = normalize_key_part(target_unit) if target_unit else None
    ingredient = normalize_key_part(ingredient_name) if ingredient_name else None

    keys: list[str] = []
    if ingredient:
        if target:
            keys.append(f"{ingredient}_{unit_part}_{target}")
        keys.append(f"{ingredient}_{unit_part}")
    if target:
        keys.append(f"{unit_part}_{target}")
    keys.append(unit_part)
    return keys
