"""Macronutrient extraction from FDC nutrient lists."""

from food_catalog.domain.fdc_models import FdcFoodNutrient, FdcLabelNutrients
from food_catalog.domain.nutrition import MacroProfile

_NUTRIENT_IDS = {
    "calories": 1008,
    "calories_atwater_general": 2047,
    "calories_atwater_specific": 2048,
    "nitrogen": 1002,
    "protein": 1003,
    "fat": 1004,
    "carbs": 1005,
}

NITROGEN_TO_PROTEIN = 6.25


def parse_macros(
    food_nutrients: list[FdcFoodNutrient],
    label_nutrients: FdcLabelNutrients | None = None,
) -> MacroProfile:
    """Extract calories, protein, fat, carbs from FDC nutrients.

    Nitrogen and direct protein entries both overwrite protein, so whichever
    appears last in ``food_nutrients`` wins. Label values only fill fields that
    are still zero afterwards.
    """
    values: dict[str, float] = {
        "calories": 0.0,
        "protein": 0.0,
        "fat": 0.0,
        "carbs": 0.0,
    }
    for nutrient in food_nutrients:
        nutrient_id = nutrient.resolved_id
        amount = nutrient.resolved_amount
        if nutrient_id is None or amount is None:
            continue
        if nutrient_id == _NUTRIENT_IDS["calories"]:
            values["calories"] = amount
        if nutrient_id in {
            _NUTRIENT_IDS["calories_atwater_general"],
            _NUTRIENT_IDS["calories_atwater_specific"],
        } and values["calories"] == 0:
            values["calories"] = amount
        if nutrient_id == _NUTRIENT_IDS["nitrogen"]:
            values["protein"] = amount * NITROGEN_TO_PROTEIN
        if nutrient_id == _NUTRIENT_IDS["protein"]:
            values["protein"] = amount
        if nutrient_id == _NUTRIENT_IDS["fat"]:
            values["fat"] = amount
        if nutrient_id == _NUTRIENT_IDS["carbs"]:
            values["carbs"] = amount

    if label_nutrients is not None:
        _apply_label_fallback(values, label_nutrients)

    return MacroProfile(
        calories=values["calories"],
        protein_g=values["protein"],
        fat_g=values["fat"],
        carbs_g=values["carbs"],
    )


def _apply_label_fallback(
    values: dict[str, float], label_nutrients: FdcLabelNutrients
) -> None:
    label_values = {
        "calories": label_nutrients.calories,
        "protein": label_nutrients.protein,
        "fat": label_nutrients.fat,
        "carbs": label_nutrients.carbohydrates,
    }
    for key, label_value in label_values.items():
        if values[key] != 0 or label_value is None or label_value.value is None:
            continue
        values[key] = label_value.value
