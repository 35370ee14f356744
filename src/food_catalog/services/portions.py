"""Resolve logged quantities to grams."""

from collections.abc import Sequence
from enum import Enum

from food_catalog.domain.food_logging import HouseholdUnit, Unit, UnitKind
from food_catalog.domain.foods import normalize_label

GRAMS_PER_KILOGRAM = 1000.0
GRAMS_PER_OUNCE = 28.3495
GRAMS_PER_POUND = 453.592
MILLILITERS_PER_LITER = 1000.0
MILLILITERS_PER_FLUID_OUNCE = 29.5735

# Densities outside this range (g/ml) are treated as data errors.
MIN_DENSITY_G_PER_ML = 0.2
MAX_DENSITY_G_PER_ML = 2.0


class MassUnit(str, Enum):
    GRAMS = "g"
    KILOGRAMS = "kg"
    OUNCES = "oz"
    POUNDS = "lb"


class VolumeUnit(str, Enum):
    MILLILITERS = "ml"
    LITERS = "l"
    FLUID_OUNCES = "fl oz"


_GRAMS_PER_MASS_UNIT = {
    MassUnit.GRAMS: 1.0,
    MassUnit.KILOGRAMS: GRAMS_PER_KILOGRAM,
    MassUnit.OUNCES: GRAMS_PER_OUNCE,
    MassUnit.POUNDS: GRAMS_PER_POUND,
}

_MILLILITERS_PER_VOLUME_UNIT = {
    VolumeUnit.MILLILITERS: 1.0,
    VolumeUnit.LITERS: MILLILITERS_PER_LITER,
    VolumeUnit.FLUID_OUNCES: MILLILITERS_PER_FLUID_OUNCE,
}


def convert_mass(amount: float, from_unit: MassUnit, to_unit: MassUnit) -> float:
    """Convert a mass between units, going through grams."""
    grams = amount * _GRAMS_PER_MASS_UNIT[from_unit]
    return grams / _GRAMS_PER_MASS_UNIT[to_unit]


def convert_volume(
    amount: float, from_unit: VolumeUnit, to_unit: VolumeUnit
) -> float:
    """Convert a volume between units, going through milliliters."""
    milliliters = amount * _MILLILITERS_PER_VOLUME_UNIT[from_unit]
    return milliliters / _MILLILITERS_PER_VOLUME_UNIT[to_unit]


def is_plausible_density(density_g_per_ml: float | None) -> bool:
    if density_g_per_ml is None:
        return False
    return MIN_DENSITY_G_PER_ML <= density_g_per_ml <= MAX_DENSITY_G_PER_ML


def resolve_to_grams(
    quantity: float,
    unit: Unit,
    grams_per_serving: float | None = None,
    density_g_per_ml: float | None = None,
    household_units: Sequence[HouseholdUnit] | None = None,
) -> float | None:
    """Resolve a quantity in ``unit`` to grams.

    Returns ``None`` when the quantity is not positive or the food lacks the
    data needed for the unit: no serving weight, no plausible density, or no
    household unit with a matching label.
    """
    if quantity <= 0:
        return None
    if unit.kind is UnitKind.GRAMS:
        return quantity
    if unit.kind is UnitKind.SERVING:
        if grams_per_serving is None or grams_per_serving <= 0:
            return None
        return quantity * grams_per_serving
    if unit.kind is UnitKind.MILLILITERS:
        if not is_plausible_density(density_g_per_ml):
            return None
        return quantity * density_g_per_ml
    wanted = normalize_label(unit.label or "")
    for household_unit in household_units or []:
        if household_unit.normalized_label == wanted:
            return quantity * household_unit.grams
    return None


def can_resolve(
    unit: Unit,
    grams_per_serving: float | None = None,
    density_g_per_ml: float | None = None,
    household_units: Sequence[HouseholdUnit] | None = None,
) -> bool:
    """Return whether one ``unit`` of the food resolves to grams."""
    return (
        resolve_to_grams(
            1.0,
            unit,
            grams_per_serving=grams_per_serving,
            density_g_per_ml=density_g_per_ml,
            household_units=household_units,
        )
        is not None
    )
