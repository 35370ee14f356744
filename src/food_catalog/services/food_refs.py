"""Food reference entities built from normalized foods."""

from dataclasses import dataclass
from typing import Protocol

from food_catalog.domain.food_logging import (
    FoodLoggingNutrients,
    FoodRef,
    HouseholdUnit,
)
from food_catalog.domain.foods import BaseUnit, NormalizedFood, NormalizedPortion


class FoodRefRepository(Protocol):
    """Persistence interface for food references."""

    def get_food_ref(self, gid: str) -> FoodRef | None:
        """Return a food reference by gid, if present."""

    def save_food_ref(self, food_ref: FoodRef) -> FoodRef:
        """Insert or replace a food reference and return it."""


def build_food_ref(food: NormalizedFood) -> FoodRef:
    """Capture what logging needs from a normalized food."""
    serving = food.serving
    grams_per_serving = None
    if serving is not None and food.base_unit is BaseUnit.GRAMS:
        grams_per_serving = serving.grams
    food_ref = FoodRef(
        gid=food.gid,
        source=food.source,
        name=food.name,
        brand=food.brand,
        serving_size=serving.amount if serving else None,
        serving_size_unit=serving.unit if serving else None,
        grams_per_serving=grams_per_serving,
        density_g_per_ml=food.density_g_per_ml,
    )
    food_ref.household_units = household_units_from_portions(food.portions)
    food_ref.nutrients = FoodLoggingNutrients.from_nutrients(food.per_100_base)
    return food_ref


def household_units_from_portions(
    portions: list[NormalizedPortion],
) -> list[HouseholdUnit]:
    """Portions with a known positive mass, first label wins."""
    units: list[HouseholdUnit] = []
    seen: set[str] = set()
    for portion in portions:
        if portion.mass_g is None or portion.mass_g <= 0:
            continue
        if portion.normalized_label in seen:
            continue
        seen.add(portion.normalized_label)
        units.append(HouseholdUnit(label=portion.label, grams=portion.mass_g))
    return units


@dataclass
class FoodRefService:
    """Create and fetch food references."""

    repository: FoodRefRepository

    def save_food(self, food: NormalizedFood) -> FoodRef:
        """Build a reference for ``food`` and persist it."""
        return self.repository.save_food_ref(build_food_ref(food))

    def get_food_ref(self, gid: str) -> FoodRef | None:
        return self.repository.get_food_ref(gid)
