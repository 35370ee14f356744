"""Tests for the FDC normalizer."""

import pytest

from food_catalog.domain.foods import (
    BaseUnit,
    Envelope,
    EstimateQuality,
    FoodKind,
    FoodSource,
    NormalizedFood,
    NormalizedNutrient,
    NutrientBasis,
)
from food_catalog.services.fdc_normalizer import normalize_fdc
from tests.conftest import fdc_nutrient, peanut_butter_fdc_payload


def _by_id(food: NormalizedFood, nutrient_id: int) -> NormalizedNutrient:
    return next(n for n in food.nutrients if n.id == nutrient_id)


def test_normalize_branded_food() -> None:
    envelope = Envelope(
        source=FoodSource.FDC, raw=peanut_butter_fdc_payload(), fetched_at="now"
    )

    food = normalize_fdc(envelope)

    assert food.gid == "fdc:2257046"
    assert food.source is FoodSource.FDC
    assert food.kind is FoodKind.BRANDED
    assert food.name == "Creamy Peanut Butter"
    assert food.brand == "JIF"
    assert food.barcode == "051500255162"
    assert food.barcodes == ["051500255162"]
    assert food.base_unit is BaseUnit.GRAMS
    assert food.fetched_at == "now"
    assert food.serving is not None
    assert food.serving.grams == 32.0
    assert food.serving.household == "2 tbsp"
    assert food.serving.estimate_quality is EstimateQuality.EXACT
    assert [p.label for p in food.portions] == ["2 tbsp", "100 g"]
    assert food.completeness.core
    assert food.completeness.ingredients
    assert not food.completeness.image


def test_label_nutrients_only_fill_absent_ids_scaled_to_per_100() -> None:
    food = normalize_fdc(
        Envelope(source=FoodSource.FDC, raw=peanut_butter_fdc_payload())
    )

    energy = [n for n in food.nutrients if n.id == 1008]
    sugars = _by_id(food, 2000)

    assert len(energy) == 1
    assert energy[0].amount == 600.0
    assert sugars.amount == pytest.approx(10.0)
    assert sugars.basis is NutrientBasis.PER_100_BASE
    assert all(n.basis is NutrientBasis.PER_100_BASE for n in food.nutrients)


def test_label_nutrients_stay_per_serving_without_serving_size() -> None:
    payload = {
        "fdcId": 1,
        "description": "Mystery bar",
        "labelNutrients": {"protein": {"value": 9.0}},
    }

    food = normalize_fdc(Envelope(source=FoodSource.FDC, raw=payload))

    protein = _by_id(food, 1003)
    assert protein.amount == 9.0
    assert protein.basis is NutrientBasis.PER_SERVING
    assert food.per_100_base == []


def test_volume_serving_sets_milliliter_base() -> None:
    payload = {
        "fdcId": 2340760,
        "dataType": "Branded",
        "description": "Whole Milk",
        "servingSize": 240.0,
        "servingSizeUnit": "ml",
        "labelNutrients": {"calories": {"value": 150.0}},
    }

    food = normalize_fdc(Envelope(source=FoodSource.FDC, raw=payload))

    assert food.base_unit is BaseUnit.MILLILITERS
    assert food.serving is not None
    assert food.serving.grams is None
    assert food.serving.estimate_quality is EstimateQuality.INFERRED
    assert _by_id(food, 1008).amount == pytest.approx(62.5)
    assert food.portions[0].vol_ml == 240.0
    assert food.portions[0].mass_g is None


def test_nitrogen_only_food_gets_derived_protein() -> None:
    payload = {
        "fdcId": 5,
        "description": "Lentils",
        "foodNutrients": [fdc_nutrient(1002, "Nitrogen", "g", 2.0)],
    }

    food = normalize_fdc(Envelope(source=FoodSource.FDC, raw=payload))

    protein = _by_id(food, 1003)
    assert protein.amount == pytest.approx(12.5)
    assert protein.basis is NutrientBasis.PER_100_BASE


def test_food_portions_and_density() -> None:
    payload = {
        "fdcId": 171688,
        "dataType": "SR Legacy",
        "description": "Apples, raw, with skin",
        "foodPortions": [
            {
                "amount": 1.0,
                "gramWeight": 109.0,
                "modifier": "sliced",
                "measureUnit": {"name": "cup"},
            },
            {"amount": 1.0, "measureUnit": {"name": "slice"}},
            {"amount": 2.0, "measureUnit": {"name": "oz"}},
        ],
    }

    food = normalize_fdc(Envelope(source=FoodSource.FDC, raw=payload))

    assert food.kind is FoodKind.GENERIC
    labels = [p.label for p in food.portions]
    assert labels == ["100 g", "1 cup sliced", "2 oz"]
    assert food.portions[1].estimate_quality is EstimateQuality.EXACT
    assert food.portions[2].mass_g == pytest.approx(56.699)
    assert food.portions[2].estimate_quality is EstimateQuality.INFERRED
    assert food.density_g_per_ml == pytest.approx(109.0 / 240.0)


def test_envelope_identity_wins() -> None:
    envelope = Envelope(
        source=FoodSource.FDC,
        raw=peanut_butter_fdc_payload(),
        gid="fdc:custom",
        barcode="000111",
    )

    food = normalize_fdc(envelope)

    assert food.gid == "fdc:custom"
    assert food.barcode == "000111"


@pytest.mark.parametrize("raw", [{"description": "no id"}, "not a food", None])
def test_malformed_payload_returns_empty_record(raw: object) -> None:
    food = normalize_fdc(Envelope(source=FoodSource.FDC, raw=raw, gid="fdc:9"))

    assert food.gid == "fdc:9"
    assert food.source is FoodSource.FDC
    assert food.name == "Unknown Food"
    assert food.nutrients == []
    assert food.portions == []


def test_nutrients_without_amount_stay_unknown() -> None:
    payload = {
        "fdcId": 6,
        "description": "Spinach",
        "foodNutrients": [
            {"nutrient": {"id": 1087, "name": "Calcium, Ca", "unitName": "mg"}},
            fdc_nutrient(1008, "Energy", "kcal", 23.0),
        ],
    }

    food = normalize_fdc(Envelope(source=FoodSource.FDC, raw=payload))

    assert _by_id(food, 1087).amount is None
    assert food.completeness.micros


def test_derived_protein_replaces_unknown_protein_entry() -> None:
    payload = {
        "fdcId": 7,
        "description": "Chickpeas",
        "foodNutrients": [
            {"nutrient": {"id": 1003, "name": "Protein", "unitName": "g"}},
            fdc_nutrient(1002, "Nitrogen", "g", 2.0),
        ],
    }

    food = normalize_fdc(Envelope(source=FoodSource.FDC, raw=payload))

    proteins = [n for n in food.nutrients if n.id == 1003]
    assert len(proteins) == 1
    assert proteins[0].amount == pytest.approx(12.5)


def test_food_with_only_unknown_amounts_has_no_nutrients_flag() -> None:
    payload = {
        "fdcId": 8,
        "description": "Mystery",
        "foodNutrients": [{"nutrient": {"id": 1087, "name": "Calcium, Ca"}}],
    }

    food = normalize_fdc(Envelope(source=FoodSource.FDC, raw=payload))

    assert len(food.nutrients) == 1
    assert not food.completeness.micros
