"""Tests for unit name and serving text parsing."""

import pytest

from food_catalog.domain.foods import (
    BaseUnit,
    EstimateQuality,
    FoodSource,
    NormalizedPortion,
)
from food_catalog.services.measures import (
    density_from_portions,
    detect_base_unit,
    detect_base_unit_from_text,
    mass_in_grams,
    parse_serving_grams,
    parse_serving_ml,
    volume_in_ml,
)


def test_mass_in_grams_handles_fdc_codes() -> None:
    assert mass_in_grams(30.0, "GRM") == 30.0
    assert mass_in_grams(1.0, "onz") == pytest.approx(28.3495)
    assert mass_in_grams(250.0, "ml") is None


def test_volume_in_ml_includes_household_measures() -> None:
    assert volume_in_ml(2.0, "tbsp") == 30.0
    assert volume_in_ml(1.0, "fl  oz") == pytest.approx(29.5735)
    assert volume_in_ml(1.0, "MLT") == 1.0
    assert volume_in_ml(1.0, "slice") is None


@pytest.mark.parametrize(
    ("unit", "category", "expected"),
    [
        ("ml", None, BaseUnit.MILLILITERS),
        ("g", "Soda", BaseUnit.MILLILITERS),
        ("g", "Cereal", BaseUnit.GRAMS),
        (None, None, BaseUnit.GRAMS),
    ],
)
def test_detect_base_unit(
    unit: str | None, category: str | None, expected: BaseUnit
) -> None:
    assert detect_base_unit(unit, category) is expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("330 ml", BaseUnit.MILLILITERS),
        ("1 l", BaseUnit.MILLILITERS),
        ("8 fl oz", BaseUnit.MILLILITERS),
        ("1 slice (30 g)", BaseUnit.GRAMS),
        ("1 roll", BaseUnit.GRAMS),
    ],
)
def test_detect_base_unit_from_text_matches_whole_words(
    text: str, expected: BaseUnit
) -> None:
    assert detect_base_unit_from_text(text, None) is expected


def test_parse_serving_text() -> None:
    assert parse_serving_grams("2 tbsp (32 g)") == 32.0
    assert parse_serving_grams("12,5g") == 12.5
    assert parse_serving_grams("1 piece") is None
    assert parse_serving_grams(None) is None
    assert parse_serving_ml("1 can (330 ml)") == 330.0
    assert parse_serving_ml("0 ml") is None


def test_density_from_first_complete_portion() -> None:
    def portion(mass_g: float | None, vol_ml: float | None) -> NormalizedPortion:
        return NormalizedPortion(
            label="p",
            mass_g=mass_g,
            vol_ml=vol_ml,
            source=FoodSource.FDC,
            estimate_quality=EstimateQuality.EXACT,
        )

    portions = [portion(100.0, None), portion(248.0, 240.0), portion(10.0, 5.0)]

    assert density_from_portions(portions) == pytest.approx(248.0 / 240.0)
    assert density_from_portions([portion(None, 240.0)]) is None
