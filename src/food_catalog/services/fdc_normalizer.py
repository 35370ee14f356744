"""Normalize FoodData Central payloads into canonical foods."""

import logging

from pydantic import ValidationError

from food_catalog.domain.fdc_models import FdcFood, FdcFoodPortion, FdcLabelNutrients
from food_catalog.domain.foods import (
    BaseUnit,
    CompletenessFlags,
    Envelope,
    EstimateQuality,
    FieldSources,
    FoodKind,
    FoodSource,
    NormalizedFood,
    NormalizedNutrient,
    NormalizedPortion,
    NormalizedServing,
    NutrientBasis,
    fdc_gid,
)
from food_catalog.services.measures import (
    density_from_portions,
    detect_base_unit,
    mass_in_grams,
    volume_in_ml,
)
from food_catalog.services.nutrient_parser import parse_macros

_logger = logging.getLogger(__name__)

# Label attribute, nutrient id, nutrient name, unit.
_LABEL_NUTRIENTS = (
    ("calories", 1008, "Energy", "kcal"),
    ("protein", 1003, "Protein", "g"),
    ("fat", 1004, "Total lipid (fat)", "g"),
    ("saturated_fat", 1258, "Fatty acids, total saturated", "g"),
    ("trans_fat", 1257, "Fatty acids, total trans", "g"),
    ("cholesterol", 1253, "Cholesterol", "mg"),
    ("sodium", 1093, "Sodium, Na", "mg"),
    ("carbohydrates", 1005, "Carbohydrate, by difference", "g"),
    ("fiber", 1079, "Fiber, total dietary", "g"),
    ("sugars", 2000, "Sugars, total including NLEA", "g"),
    ("added_sugars", 1235, "Sugars, added", "g"),
    ("calcium", 1087, "Calcium, Ca", "mg"),
    ("iron", 1089, "Iron, Fe", "mg"),
    ("potassium", 1092, "Potassium, K", "mg"),
)

_DERIVED_MACROS = (
    ("calories", 1008, "Energy", "kcal"),
    ("protein_g", 1003, "Protein", "g"),
    ("fat_g", 1004, "Total lipid (fat)", "g"),
    ("carbs_g", 1005, "Carbohydrate, by difference", "g"),
)

_HUNDRED_GRAMS_LABEL = "100 g"
_SERVING_LABEL = "1 serving"


def normalize_fdc(envelope: Envelope) -> NormalizedFood:
    """Convert an FDC food detail payload into a :class:`NormalizedFood`.

    Malformed payloads never raise: they are logged and produce an empty record
    that keeps the envelope's gid and source.
    """
    try:
        food = FdcFood.model_validate(envelope.raw)
    except ValidationError as exc:
        gid = envelope.gid or "unknown"
        _logger.warning("Failed to decode FDC payload gid=%s: %s", gid, exc)
        return NormalizedFood.empty(gid, envelope.source)

    serving = _extract_serving(food)
    portions = _extract_portions(food)
    base_unit = detect_base_unit(food.serving_size_unit, food.branded_food_category)
    nutrients = _extract_nutrients(food, base_unit)
    ingredients_text = food.ingredients or None
    barcodes = [food.gtin_upc] if food.gtin_upc else []
    category_ids = [food.branded_food_category] if food.branded_food_category else []

    return NormalizedFood(
        gid=envelope.gid or fdc_gid(food.fdc_id),
        source=FoodSource.FDC,
        kind=FoodKind.BRANDED if food.data_type == "Branded" else FoodKind.GENERIC,
        name=food.description or "Unknown Food",
        base_unit=base_unit,
        barcode=envelope.barcode or food.gtin_upc,
        fetched_at=envelope.fetched_at,
        brand=food.brand_name or food.brand_owner,
        barcodes=barcodes,
        image_url=None,
        category_ids=category_ids,
        nutrients=nutrients,
        density_g_per_ml=density_from_portions(portions),
        serving=serving,
        portions=portions,
        ingredients_text=ingredients_text,
        completeness=CompletenessFlags.from_presence(
            has_nutrients=any(n.amount is not None for n in nutrients),
            has_serving=serving is not None,
            has_portions=bool(portions),
            has_ingredients=ingredients_text is not None,
            has_image=False,
        ),
        field_sources=FieldSources.uniform(FoodSource.FDC),
    )


def _extract_serving(food: FdcFood) -> NormalizedServing | None:
    if food.serving_size is None or not food.serving_size_unit:
        return None
    grams = mass_in_grams(food.serving_size, food.serving_size_unit)
    return NormalizedServing(
        amount=food.serving_size,
        unit=food.serving_size_unit,
        household=food.household_serving_full_text,
        grams=grams,
        source=FoodSource.FDC,
        estimate_quality=(
            EstimateQuality.EXACT if grams is not None else EstimateQuality.INFERRED
        ),
    )


def _extract_portions(food: FdcFood) -> list[NormalizedPortion]:
    portions: list[NormalizedPortion] = []
    if food.serving_size is not None and food.serving_size_unit:
        grams = mass_in_grams(food.serving_size, food.serving_size_unit)
        portions.append(
            NormalizedPortion(
                label=food.household_serving_full_text or _SERVING_LABEL,
                mass_g=grams,
                vol_ml=volume_in_ml(food.serving_size, food.serving_size_unit),
                source=FoodSource.FDC,
                estimate_quality=(
                    EstimateQuality.EXACT
                    if grams is not None
                    else EstimateQuality.INFERRED
                ),
            )
        )
    portions.append(
        NormalizedPortion(
            label=_HUNDRED_GRAMS_LABEL,
            mass_g=100.0,
            vol_ml=None,
            source=FoodSource.FDC,
            estimate_quality=EstimateQuality.EXACT,
        )
    )
    for measure in food.food_portions:
        portion = _portion_from_measure(measure)
        if portion is not None:
            portions.append(portion)
    return portions


def _portion_from_measure(measure: FdcFoodPortion) -> NormalizedPortion | None:
    unit_name = measure.measure_unit.name if measure.measure_unit else None
    mass_g = measure.gram_weight
    vol_ml = None
    if measure.amount is not None and unit_name:
        if mass_g is None:
            mass_g = mass_in_grams(measure.amount, unit_name)
        vol_ml = volume_in_ml(measure.amount, unit_name)
    if mass_g is None and vol_ml is None:
        return None
    return NormalizedPortion(
        label=measure.label,
        mass_g=mass_g,
        vol_ml=vol_ml,
        source=FoodSource.FDC,
        estimate_quality=(
            EstimateQuality.EXACT
            if measure.gram_weight is not None
            else EstimateQuality.INFERRED
        ),
    )


def _extract_nutrients(food: FdcFood, base_unit: BaseUnit) -> list[NormalizedNutrient]:
    nutrients: list[NormalizedNutrient] = []
    for entry in food.food_nutrients:
        amount = entry.resolved_amount
        nutrient_id = entry.resolved_id
        if nutrient_id is None and not entry.resolved_name:
            continue
        nutrients.append(
            NormalizedNutrient(
                id=nutrient_id,
                name=entry.resolved_name or "Unknown",
                unit=entry.resolved_unit or "g",
                amount=amount,
                basis=NutrientBasis.PER_100_BASE,
                source=FoodSource.FDC,
            )
        )

    present_ids = {
        nutrient.id
        for nutrient in nutrients
        if nutrient.id is not None and nutrient.amount is not None
    }
    # Nitrogen-only protein or Atwater-only energy recovered as per-100 values.
    macros = parse_macros(food.food_nutrients)
    for attribute, nutrient_id, name, unit in _DERIVED_MACROS:
        value = getattr(macros, attribute)
        if nutrient_id in present_ids or value == 0:
            continue
        _fill_unknown(
            nutrients,
            NormalizedNutrient(
                id=nutrient_id,
                name=name,
                unit=unit,
                amount=value,
                basis=NutrientBasis.PER_100_BASE,
                source=FoodSource.FDC,
            ),
        )
        present_ids.add(nutrient_id)

    if food.label_nutrients is not None:
        serving_base = _serving_in_base_unit(food, base_unit)
        for nutrient in _label_nutrients(food.label_nutrients, serving_base):
            if nutrient.id not in present_ids:
                _fill_unknown(nutrients, nutrient)
                present_ids.add(nutrient.id)
    return nutrients


def _fill_unknown(
    nutrients: list[NormalizedNutrient], nutrient: NormalizedNutrient
) -> None:
    """Append ``nutrient``, dropping unknown entries it supersedes."""
    nutrients[:] = [
        existing
        for existing in nutrients
        if existing.id != nutrient.id or existing.amount is not None
    ]
    nutrients.append(nutrient)


def _serving_in_base_unit(food: FdcFood, base_unit: BaseUnit) -> float | None:
    """Serving size expressed in the food's base unit, when derivable."""
    if food.serving_size is None or not food.serving_size_unit:
        return None
    if base_unit is BaseUnit.MILLILITERS:
        return volume_in_ml(food.serving_size, food.serving_size_unit)
    return mass_in_grams(food.serving_size, food.serving_size_unit)


def _label_nutrients(
    label_nutrients: FdcLabelNutrients, serving_base: float | None
) -> list[NormalizedNutrient]:
    """Label values are per serving; rescale them when the serving is known."""
    nutrients = []
    for attribute, nutrient_id, name, unit in _LABEL_NUTRIENTS:
        label_value = getattr(label_nutrients, attribute)
        if label_value is None or label_value.value is None:
            continue
        if serving_base is not None and serving_base > 0:
            amount = label_value.value * 100.0 / serving_base
            basis = NutrientBasis.PER_100_BASE
        else:
            amount = label_value.value
            basis = NutrientBasis.PER_SERVING
        nutrients.append(
            NormalizedNutrient(
                id=nutrient_id,
                name=name,
                unit=unit,
                amount=amount,
                basis=basis,
                source=FoodSource.FDC,
            )
        )
    return nutrients
