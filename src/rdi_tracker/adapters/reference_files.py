"""File-backed reference tables."""

import asyncio
import csv
import io
import json
import logging
from pathlib import Path

from rdi_tracker.services.conversion_table import UnitConversionTable
from rdi_tracker.services.rdi import (
    RdiFallbackTable,
    build_fallback_table,
    empty_fallback_table,
)

_logger = logging.getLogger(__name__)


async def load_unit_conversions(path: Path) -> UnitConversionTable:
    """Load the unit conversion table, degrading to an empty table on failure."""
    try:
        raw = await asyncio.to_thread(path.read_text, encoding="utf-8")
        parsed = json.loads(raw)
    except (OSError, ValueError):
        _logger.warning("Failed to load unit conversions from %s", path, exc_info=True)
        return UnitConversionTable.empty()
    if not isinstance(parsed, dict):
        _logger.warning("Unit conversions in %s are not a JSON object", path)
        return UnitConversionTable.empty()
    table = UnitConversionTable.from_mapping(parsed)
    _logger.info("Unit conversions loaded: entries=%s", len(table.entries))
    return table


async def load_rdi_fallback(path: Path) -> RdiFallbackTable:
    """Load the static RDI table, degrading to unknown values on failure."""
    try:
        raw = await asyncio.to_thread(path.read_text, encoding="utf-8")
        reader = csv.DictReader(io.StringIO(raw), skipinitialspace=True)
        rows = [_strip_row(row) for row in reader if _has_values(row)]
    except (OSError, ValueError, csv.Error):
        _logger.warning("Failed to load RDI table from %s", path, exc_info=True)
        return empty_fallback_table()
    table = build_fallback_table(rows)
    _logger.info("RDI fallback table loaded: rows=%s", len(rows))
    return table


def _strip_row(row: dict[str | None, object]) -> dict[str, object]:
    return {
        (key or "").strip(): value.strip() if isinstance(value, str) else value
        for key, value in row.items()
    }


def _has_values(row: dict[str | None, object]) -> bool:
    return any(isinstance(value, str) and value.strip() for value in row.values())
