"""Nutrient snapshots for logged quantities."""

from collections.abc import Sequence

from food_catalog.domain.food_logging import FoodLoggingNutrients, HouseholdUnit, Unit
from food_catalog.services.portions import resolve_to_grams


def calculate_snapshot(  # noqa: PLR0913
    per_100_nutrients: FoodLoggingNutrients,
    quantity: float,
    unit: Unit,
    grams_per_serving: float | None = None,
    density_g_per_ml: float | None = None,
    household_units: Sequence[HouseholdUnit] | None = None,
) -> FoodLoggingNutrients:
    """Scale per-100 nutrients to the logged amount.

    An amount that cannot be resolved to grams yields a snapshot with every
    nutrient unknown rather than zero.
    """
    grams = resolve_to_grams(
        quantity,
        unit,
        grams_per_serving=grams_per_serving,
        density_g_per_ml=density_g_per_ml,
        household_units=household_units,
    )
    if grams is None:
        return FoodLoggingNutrients()
    return per_100_nutrients.scaled(grams / 100.0)
