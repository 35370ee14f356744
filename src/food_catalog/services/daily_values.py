"""Percent daily value calculations for label-style nutrient display."""

from food_catalog.domain.food_logging import FoodLoggingNutrients

# FDA reference daily values for adults; sugars have none.
DAILY_VALUES: dict[str, float] = {
    "energy_kcal": 2000.0,
    "protein": 50.0,
    "fat": 78.0,
    "saturated_fat": 20.0,
    "carbs": 275.0,
    "fiber": 28.0,
    "sodium": 2300.0,
    "cholesterol": 300.0,
}


def percent_dv(nutrient: str, amount: float | None) -> float | None:
    """Percent of the daily value, or ``None`` when either side is unknown."""
    daily_value = DAILY_VALUES.get(nutrient)
    if daily_value is None or amount is None:
        return None
    return amount / daily_value * 100.0


def percent_dvs(nutrients: FoodLoggingNutrients) -> dict[str, float | None]:
    return {
        name: percent_dv(name, amount) for name, amount in nutrients.as_dict().items()
    }
