"""Tests for food logging domain types."""

import pytest

from food_catalog.domain.food_logging import (
    GRAMS,
    MILLILITERS,
    SERVING,
    FoodLoggingNutrients,
    FoodRef,
    HouseholdUnit,
    Unit,
    UnitKind,
    decode_household_units,
    decode_nutrients,
    encode_household_units,
    encode_nutrients,
    sum_nutrients,
)
from food_catalog.domain.foods import FoodSource, NormalizedNutrient, NutrientBasis


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("g", GRAMS),
        ("Grams", GRAMS),
        ("ml", MILLILITERS),
        ("milliliters", MILLILITERS),
        ("serving", SERVING),
        ("scoop", SERVING),
        ("household:1 cup", Unit.household("1 cup")),
    ],
)
def test_unit_from_raw(raw: str, expected: Unit) -> None:
    assert Unit.from_raw(raw) == expected


def test_unit_raw_encoding() -> None:
    cup = Unit.household("1 cup")

    assert cup.kind is UnitKind.HOUSEHOLD
    assert cup.to_raw() == "household:1 cup"
    assert cup.display_name == "1 cup"
    assert GRAMS.to_raw() == "g"
    assert SERVING.display_name == "serving"
    assert Unit.from_raw(MILLILITERS.to_raw()) == MILLILITERS


def test_household_unit_requires_positive_mass() -> None:
    with pytest.raises(ValueError):
        HouseholdUnit(label="empty", grams=0.0)


def test_household_units_encoding() -> None:
    units = [HouseholdUnit(label="1 cup", grams=240.0)]

    data = encode_household_units(units)

    assert decode_household_units(data) == units
    assert decode_household_units(data.decode()) == units


def test_nutrients_encoding_omits_unknown_fields() -> None:
    nutrients = FoodLoggingNutrients(energy_kcal=120.0, sodium=0.0)

    data = encode_nutrients(nutrients)

    assert b"protein" not in data
    assert decode_nutrients(data) == nutrients


def test_from_nutrients_prefers_ids_then_name_and_unit() -> None:
    def nutrient(
        nid: int | None, name: str, unit: str, amount: float
    ) -> NormalizedNutrient:
        return NormalizedNutrient(
            id=nid,
            name=name,
            unit=unit,
            amount=amount,
            basis=NutrientBasis.PER_100_BASE,
            source=FoodSource.OFF,
        )

    nutrients = FoodLoggingNutrients.from_nutrients(
        [
            nutrient(1008, "Energy", "kJ", 2000.0),
            nutrient(1008, "Energy", "kcal", 480.0),
            nutrient(None, "Sodium, Na", "mg", 300.0),
            nutrient(None, "Cholesterol", "g", 0.1),
        ]
    )

    assert nutrients.energy_kcal == 480.0
    assert nutrients.sodium == 300.0
    assert nutrients.cholesterol is None
    assert nutrients.protein is None


def test_sum_nutrients_keeps_unknown_only_when_nobody_knows() -> None:
    total = sum_nutrients(
        [
            FoodLoggingNutrients(energy_kcal=100.0, fiber=None),
            FoodLoggingNutrients(energy_kcal=50.0, protein=3.0),
        ]
    )

    assert total.energy_kcal == 150.0
    assert total.protein == 3.0
    assert total.fiber is None
    assert sum_nutrients([]).is_empty


def test_food_ref_blob_properties() -> None:
    food_ref = FoodRef(gid="fdc:1", source=FoodSource.FDC, name="Oats")
    before = food_ref.updated_at

    food_ref.household_units = [HouseholdUnit(label="1 cup", grams=81.0)]
    food_ref.nutrients = FoodLoggingNutrients(energy_kcal=379.0)

    assert food_ref.household_units == [HouseholdUnit(label="1 cup", grams=81.0)]
    assert food_ref.nutrients == FoodLoggingNutrients(energy_kcal=379.0)
    assert food_ref.updated_at >= before

    food_ref.nutrients = None
    assert food_ref.nutrients_data is None
    assert food_ref.nutrients is None
