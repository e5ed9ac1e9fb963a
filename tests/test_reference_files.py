"""Tests for file-backed reference tables."""

import asyncio
import json
from pathlib import Path

from rdi_tracker.adapters.reference_files import (
    load_rdi_fallback,
    load_unit_conversions,
)
from rdi_tracker.domain.rdi import Sex
from rdi_tracker.services.cache import AsyncLazy
from rdi_tracker.services.conversion_table import ConversionEntry
from rdi_tracker.services.rdi import RdiResolver, empty_fallback_table
from tests.conftest import DATA_DIR, InMemoryRdiStandardRepository


def test_bundled_unit_conversions_load() -> None:
    table = asyncio.run(load_unit_conversions(DATA_DIR / "unit-conversions.json"))

    assert table.resolve("顆", "g", "apple") == ConversionEntry(to="g", factor=150.0)
    assert table.resolve("顆", "g", "蘋果") == ConversionEntry(to="g", factor=150.0)
    assert table.resolve("顆", "g", "egg") == ConversionEntry(to="g", factor=50.0)


def test_missing_unit_conversions_are_empty(tmp_path: Path) -> None:
    table = asyncio.run(load_unit_conversions(tmp_path / "missing.json"))

    assert table.entries == {}


def test_invalid_unit_conversions_are_empty(tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    listed = tmp_path / "listed.json"
    listed.write_text(json.dumps([1, 2, 3]), encoding="utf-8")

    assert asyncio.run(load_unit_conversions(broken)).entries == {}
    assert asyncio.run(load_unit_conversions(listed)).entries == {}


def test_rdi_csv_tolerates_padding_and_blank_rows(tmp_path: Path) -> None:
    path = tmp_path / "rdi.csv"
    path.write_text(
        "nutrient, unit, adult_male, adult_female, source\n"
        " calories , kcal, 2500 , 2000 , Local table\n"
        "\n"
        "protein, g, , 55,\n",
        encoding="utf-8",
    )

    table = asyncio.run(load_rdi_fallback(path))

    males = table.for_sex(Sex.MALE)
    females = table.for_sex(Sex.FEMALE)
    assert males["calories_kcal"].daily == 2500
    assert males["calories_kcal"].source == "Local table"
    assert females["calories_kcal"].weekly == 14000
    assert males["protein_g"].daily is None
    assert females["protein_g"].daily == 55
    assert females["protein_g"].source == "CSV"
    assert males["iron_mg"].daily is None


def test_rdi_csv_with_invalid_encoding_is_empty(tmp_path: Path) -> None:
    path = tmp_path / "rdi.csv"
    path.write_bytes(
        b"nutrient,unit,adult_male,adult_female,source\n"
        b"calories,kcal,2400,1900,\xff\xfe\n"
    )
    resolver = RdiResolver(
        repository=InMemoryRdiStandardRepository(),
        fallback=AsyncLazy(lambda: load_rdi_fallback(path)),
    )

    assert asyncio.run(load_rdi_fallback(path)) == empty_fallback_table()
    rdi = asyncio.run(resolver.resolve(30, Sex.FEMALE))
    assert rdi["calories_kcal"].daily is None
    assert all(record.weekly is None for record in rdi.values())
