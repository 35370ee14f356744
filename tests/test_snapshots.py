"""Tests for nutrient snapshots."""

import pytest

from food_catalog.domain.food_logging import (
    GRAMS,
    MILLILITERS,
    SERVING,
    FoodLoggingNutrients,
    HouseholdUnit,
    Unit,
)
from food_catalog.services.snapshots import calculate_snapshot

_PER_100 = FoodLoggingNutrients(energy_kcal=200.0, protein=10.0, sodium=None)


def test_snapshot_scales_known_fields_only() -> None:
    snapshot = calculate_snapshot(_PER_100, 50.0, GRAMS)

    assert snapshot.energy_kcal == pytest.approx(100.0)
    assert snapshot.protein == pytest.approx(5.0)
    assert snapshot.sodium is None
    assert snapshot.fat is None


def test_snapshot_for_servings_and_household_units() -> None:
    by_serving = calculate_snapshot(_PER_100, 2.0, SERVING, grams_per_serving=30.0)
    by_household = calculate_snapshot(
        _PER_100,
        1.0,
        Unit.household("bar"),
        household_units=[HouseholdUnit(label="Bar", grams=45.0)],
    )

    assert by_serving.energy_kcal == pytest.approx(120.0)
    assert by_household.protein == pytest.approx(4.5)


def test_unresolvable_amount_yields_unknown_nutrients() -> None:
    snapshot = calculate_snapshot(_PER_100, 250.0, MILLILITERS)

    assert snapshot == FoodLoggingNutrients()
    assert snapshot.is_empty


def test_snapshot_of_empty_nutrients_stays_empty() -> None:
    snapshot = calculate_snapshot(FoodLoggingNutrients(), 100.0, GRAMS)

    assert snapshot.is_empty
