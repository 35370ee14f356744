"""Tests for the Open Food Facts normalizer."""

import pytest

from food_catalog.domain.foods import (
    BaseUnit,
    Envelope,
    EstimateQuality,
    FoodKind,
    FoodSource,
    NormalizedFood,
    NutrientBasis,
)
from food_catalog.services.off_normalizer import normalize_off
from tests.conftest import peanut_butter_off_product


def _amounts(food: NormalizedFood) -> dict[int | None, float | None]:
    return {nutrient.id: nutrient.amount for nutrient in food.nutrients}


def _normalize_product(product: dict[str, object]) -> NormalizedFood:
    raw = {"status": 1, "code": product.get("code"), "product": product}
    return normalize_off(Envelope(source=FoodSource.OFF, raw=raw))


def test_normalize_read_response() -> None:
    food = _normalize_product(peanut_butter_off_product())

    assert food.gid == "off:051500255162"
    assert food.source is FoodSource.OFF
    assert food.kind is FoodKind.BRANDED
    assert food.name == "Peanut butter creamy"
    assert food.brand == "Jif"
    assert food.barcodes == ["051500255162"]
    assert food.base_unit is BaseUnit.GRAMS
    assert food.image_url == "https://images.example.org/051500255162/front.jpg"
    assert food.completeness.image
    assert food.serving is not None
    assert food.serving.amount == 32.0
    assert food.serving.grams == 32.0
    assert food.serving.estimate_quality is EstimateQuality.INFERRED
    assert [(p.label, p.mass_g) for p in food.portions] == [
        ("100 g", 100.0),
        ("1 serving", 32.0),
    ]


def test_nutrient_units_are_converted() -> None:
    food = _normalize_product(peanut_butter_off_product())

    amounts = _amounts(food)
    assert amounts[1008] == 590.0
    assert amounts[1003] == 21.0
    assert amounts[1079] == 6.0
    assert amounts[1093] == pytest.approx(393.0)
    assert 1005 not in amounts
    assert all(n.basis is NutrientBasis.PER_100_BASE for n in food.nutrients)


def test_kilojoules_fall_back_to_kcal() -> None:
    food = _normalize_product(
        {"code": "1", "nutriments": {"energy-kj_100g": 1000.0}}
    )

    assert _amounts(food)[1008] == pytest.approx(239.0)


def test_serving_values_are_rescaled_when_serving_mass_known() -> None:
    food = _normalize_product(
        {
            "code": "2",
            "serving_size": "40 g",
            "nutriments": {"proteins_serving": 10.0, "sodium_serving": 0.2},
        }
    )

    amounts = _amounts(food)
    assert amounts[1003] == pytest.approx(25.0)
    assert amounts[1093] == pytest.approx(500.0)
    assert all(n.basis is NutrientBasis.PER_100_BASE for n in food.nutrients)


def test_serving_values_stay_per_serving_without_serving_size() -> None:
    food = _normalize_product(
        {"code": "3", "nutriments": {"proteins_serving": 10.0}}
    )

    protein = food.nutrients[0]
    assert protein.amount == 10.0
    assert protein.basis is NutrientBasis.PER_SERVING
    assert food.serving is None


def test_liquid_serving_uses_milliliter_base() -> None:
    food = _normalize_product(
        {
            "code": "4",
            "product_name": "Orange juice",
            "serving_size": "250 ml",
            "nutriments": {"sugars_serving": 25.0},
        }
    )

    assert food.base_unit is BaseUnit.MILLILITERS
    assert _amounts(food)[2000] == pytest.approx(10.0)
    serving_portion = food.portions[1]
    assert serving_portion.mass_g is None
    assert serving_portion.vol_ml == 250.0
    assert serving_portion.estimate_quality is EstimateQuality.GUESSED


def test_bare_product_is_accepted() -> None:
    product = peanut_butter_off_product()
    product["image_url"] = None
    product["image_small_url"] = "https://images.example.org/small.jpg"

    food = normalize_off(Envelope(source=FoodSource.OFF, raw=product))

    assert food.gid == "off:051500255162"
    assert food.image_url == "https://images.example.org/small.jpg"


@pytest.mark.parametrize(
    "raw",
    [
        {"status": 0, "code": "0000"},
        {"status": 1, "product": None},
        {"status": 1, "product": {"serving_quantity": ["bad"]}},
        ["not", "a", "product"],
    ],
)
def test_missing_or_malformed_product_returns_empty_record(raw: object) -> None:
    food = normalize_off(Envelope(source=FoodSource.OFF, raw=raw, gid="off:0000"))

    assert food.gid == "off:0000"
    assert food.source is FoodSource.OFF
    assert food.name == "Unknown Food"
    assert food.field_sources.nutrients is FoodSource.OFF
