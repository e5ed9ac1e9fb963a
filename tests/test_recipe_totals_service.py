"""Tests for recipe totals computation and caching."""

import asyncio
import json

import pytest

from rdi_tracker.domain.catalog import RecipeTotalsPayload
from rdi_tracker.domain.totals import unknown
from rdi_tracker.services.recipe_totals import (
    RecipeNotFoundError,
    RecipeTotalsService,
    parse_recipe_totals_payload,
)
from tests.conftest import (
    InMemoryCatalogRepository,
    InMemoryRecipeTotalsRepository,
    make_ingredient,
    make_recipe,
    nutrients,
)


def _add_soup(
    catalog: InMemoryCatalogRepository, servings: float | None = 4
) -> None:
    broth = make_ingredient(1, "broth", calories_kcal=150, sodium_mg=400)
    noodles = make_ingredient(2, "noodles", calories_kcal=100, protein_g=5)
    catalog.add_recipe(
        make_recipe(1, [(broth, 200, "g"), (noodles, 500, "g")], servings=servings)
    )


def test_ensure_totals_computes_and_persists(
    recipe_totals_service: RecipeTotalsService,
    catalog_repository: InMemoryCatalogRepository,
    totals_repository: InMemoryRecipeTotalsRepository,
) -> None:
    _add_soup(catalog_repository)

    payload = asyncio.run(recipe_totals_service.ensure_totals(1))

    assert payload.totals.calories_kcal == 800
    assert payload.totals.sodium_mg == 800
    assert payload.totals.protein_g == 25
    assert payload.per_serving is not None
    assert payload.per_serving.calories_kcal == 200
    assert payload.servings == 4
    assert totals_repository.rows[1] == payload.to_json()


@pytest.mark.parametrize("servings", [0, None, -2])
def test_per_serving_requires_positive_servings(
    recipe_totals_service: RecipeTotalsService,
    catalog_repository: InMemoryCatalogRepository,
    servings: float | None,
) -> None:
    _add_soup(catalog_repository, servings=servings)

    payload = asyncio.run(recipe_totals_service.ensure_totals(1))

    assert payload.totals.calories_kcal == 800
    assert payload.per_serving is None


def test_cached_payload_is_returned_without_reading_recipe(
    recipe_totals_service: RecipeTotalsService,
    catalog_repository: InMemoryCatalogRepository,
    totals_repository: InMemoryRecipeTotalsRepository,
) -> None:
    _add_soup(catalog_repository)
    cached = RecipeTotalsPayload(
        totals=nutrients(calories_kcal=42), per_serving=None, servings=None
    )
    totals_repository.rows[1] = cached.to_json()

    payload = asyncio.run(recipe_totals_service.ensure_totals(1))

    assert payload == cached
    assert catalog_repository.recipe_reads == 0
    assert totals_repository.upserts == []


def test_corrupt_cache_is_recomputed(
    recipe_totals_service: RecipeTotalsService,
    catalog_repository: InMemoryCatalogRepository,
    totals_repository: InMemoryRecipeTotalsRepository,
) -> None:
    _add_soup(catalog_repository)
    totals_repository.rows[1] = {"totals": {"calories_kcal": "lots"}}

    payload = asyncio.run(recipe_totals_service.ensure_totals(1))

    assert payload.totals.calories_kcal == 800
    assert totals_repository.upserts == [1]
    assert totals_repository.rows[1] == payload.to_json()


def test_force_recomputes_over_valid_cache(
    recipe_totals_service: RecipeTotalsService,
    catalog_repository: InMemoryCatalogRepository,
    totals_repository: InMemoryRecipeTotalsRepository,
) -> None:
    _add_soup(catalog_repository)
    stale = RecipeTotalsPayload(totals=nutrients(), per_serving=None, servings=None)
    totals_repository.rows[1] = stale.to_json()

    payload = asyncio.run(recipe_totals_service.ensure_totals(1, force=True))

    assert payload.totals.calories_kcal == 800
    assert catalog_repository.recipe_reads == 1


def test_invalidate_drops_cache_entry(
    recipe_totals_service: RecipeTotalsService,
    catalog_repository: InMemoryCatalogRepository,
    totals_repository: InMemoryRecipeTotalsRepository,
) -> None:
    _add_soup(catalog_repository)

    async def scenario() -> RecipeTotalsPayload | None:
        await recipe_totals_service.ensure_totals(1)
        await recipe_totals_service.invalidate(1)
        await recipe_totals_service.invalidate(99)
        return await recipe_totals_service.get_cached(1)

    assert asyncio.run(scenario()) is None
    assert 1 not in totals_repository.rows


def test_missing_recipe_raises(recipe_totals_service: RecipeTotalsService) -> None:
    with pytest.raises(RecipeNotFoundError):
        asyncio.run(recipe_totals_service.ensure_totals(404))


def test_line_without_ingredient_makes_totals_unknown(
    recipe_totals_service: RecipeTotalsService,
    catalog_repository: InMemoryCatalogRepository,
) -> None:
    rice = make_ingredient(1, "rice", calories_kcal=130)
    catalog_repository.add_recipe(make_recipe(2, [(rice, 100, "g"), (None, 1, "g")]))

    payload = asyncio.run(recipe_totals_service.ensure_totals(2))

    assert payload.totals == unknown()


def test_line_without_unit_uses_ingredient_default(
    recipe_totals_service: RecipeTotalsService,
    catalog_repository: InMemoryCatalogRepository,
) -> None:
    egg = make_ingredient(
        4,
        "egg",
        per_amount_value=1,
        per_amount_unit="顆",
        default_unit="顆",
        calories_kcal=70,
    )
    catalog_repository.add_recipe(make_recipe(4, [(egg, 3, None)]))

    payload = asyncio.run(recipe_totals_service.ensure_totals(4))

    assert payload.totals.calories_kcal == 210


def test_prefetched_recipe_skips_lookup(
    recipe_totals_service: RecipeTotalsService,
    catalog_repository: InMemoryCatalogRepository,
) -> None:
    rice = make_ingredient(1, "rice", calories_kcal=130)
    recipe = make_recipe(3, [(rice, 100, "g")], servings=2)

    payload = asyncio.run(recipe_totals_service.ensure_totals(3, recipe=recipe))

    assert payload.per_serving is not None
    assert payload.per_serving.calories_kcal == 65
    assert catalog_repository.recipe_reads == 0


def test_refresh_all_recomputes_each_recipe(
    recipe_totals_service: RecipeTotalsService,
    catalog_repository: InMemoryCatalogRepository,
    totals_repository: InMemoryRecipeTotalsRepository,
) -> None:
    _add_soup(catalog_repository)
    rice = make_ingredient(3, "rice", calories_kcal=130)
    catalog_repository.add_recipe(make_recipe(2, [(rice, 100, "g")]))

    refreshed = asyncio.run(recipe_totals_service.refresh_all([1, 2]))

    assert set(refreshed) == {1, 2}
    assert refreshed[2].totals.calories_kcal == 130
    assert totals_repository.upserts == [1, 2]


def test_parse_payload_accepts_json_text() -> None:
    payload = RecipeTotalsPayload(
        totals=nutrients(calories_kcal=800, fiber_g=None),
        per_serving=nutrients(calories_kcal=200, fiber_g=None),
        servings=4,
    )

    parsed = parse_recipe_totals_payload(json.dumps(payload.to_json()))

    assert parsed == payload


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "not json",
        [],
        {"totals": None},
        {"totals": {"calories_kcal": 1}},
        {"totals": {**nutrients().as_dict(), "fat_g": True}},
        {"totals": nutrients().as_dict(), "perServing": {"calories_kcal": 1}},
        {"totals": nutrients().as_dict(), "servings": "4"},
    ],
)
def test_parse_payload_rejects_bad_shapes(raw: object) -> None:
    assert parse_recipe_totals_payload(raw) is None
