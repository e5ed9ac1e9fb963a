"""Tests for configuration helpers."""

import pytest

from rdi_tracker.config import Settings, parse_age, parse_sex
from rdi_tracker.domain.rdi import Sex
from tests.conftest import DATA_DIR


def test_settings_reference_paths(settings: Settings) -> None:
    assert settings.unit_conversions_path == DATA_DIR / "unit-conversions.json"
    assert settings.rdi_csv_path == DATA_DIR / "rdi.csv"
    assert settings.default_sex == Sex.FEMALE
    assert settings.over_limit_percent == 120.0


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUPABASE_URL", "https://env.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_KEY", "key")
    monkeypatch.setenv("DEFAULT_SEX", "MALE")
    monkeypatch.setenv("DEFAULT_AGE", "52")

    settings = Settings()

    assert settings.supabase_url == "https://env.supabase.co"
    assert settings.default_sex == Sex.MALE
    assert settings.default_age == 52


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("male", Sex.MALE),
        (" FEMALE ", Sex.FEMALE),
        ("other", Sex.MALE),
        (None, Sex.MALE),
    ],
)
def test_parse_sex(raw: str | None, expected: Sex) -> None:
    assert parse_sex(raw, Sex.MALE) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("42", 42), (" 7 ", 7), (18, 18), ("0", 30), (-3, 30), ("abc", 30), (None, 30)],
)
def test_parse_age(raw: str | int | None, expected: int) -> None:
    assert parse_age(raw, 30) == expected
