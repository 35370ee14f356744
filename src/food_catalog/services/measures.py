"""Parsing helpers for catalog unit names and serving text."""

import re
from collections.abc import Iterable

from food_catalog.domain.foods import BaseUnit, NormalizedPortion
from food_catalog.services.portions import (
    MassUnit,
    VolumeUnit,
    convert_mass,
    convert_volume,
)

_MASS_UNIT_NAMES = {
    "g": MassUnit.GRAMS,
    "gm": MassUnit.GRAMS,
    "grm": MassUnit.GRAMS,
    "gram": MassUnit.GRAMS,
    "grams": MassUnit.GRAMS,
    "kg": MassUnit.KILOGRAMS,
    "kilogram": MassUnit.KILOGRAMS,
    "kilograms": MassUnit.KILOGRAMS,
    "oz": MassUnit.OUNCES,
    "onz": MassUnit.OUNCES,
    "ounce": MassUnit.OUNCES,
    "ounces": MassUnit.OUNCES,
    "lb": MassUnit.POUNDS,
    "pound": MassUnit.POUNDS,
    "pounds": MassUnit.POUNDS,
}

_VOLUME_UNIT_NAMES = {
    "ml": VolumeUnit.MILLILITERS,
    "mlt": VolumeUnit.MILLILITERS,
    "milliliter": VolumeUnit.MILLILITERS,
    "milliliters": VolumeUnit.MILLILITERS,
    "l": VolumeUnit.LITERS,
    "liter": VolumeUnit.LITERS,
    "liters": VolumeUnit.LITERS,
    "fl oz": VolumeUnit.FLUID_OUNCES,
    "fluid ounce": VolumeUnit.FLUID_OUNCES,
    "fluid ounces": VolumeUnit.FLUID_OUNCES,
}

# US household measures in milliliters.
_HOUSEHOLD_VOLUMES_ML = {
    "cup": 240.0,
    "cups": 240.0,
    "tbsp": 15.0,
    "tablespoon": 15.0,
    "tablespoons": 15.0,
    "tsp": 5.0,
    "teaspoon": 5.0,
    "teaspoons": 5.0,
}

_BEVERAGE_MARKERS = ("beverage", "drink", "juice", "soda")

_VOLUME_TEXT_PATTERN = re.compile(
    r"\b(?:ml|mlt|milliliters?|l|liters?|fl\.?\s*oz|fluid\s+ounces?)\b",
    re.IGNORECASE,
)
_SERVING_GRAMS_PATTERN = re.compile(
    r"(\d+(?:[.,]\d+)?)\s*(?:g|gr|grams?)\b", re.IGNORECASE
)
_SERVING_ML_PATTERN = re.compile(
    r"(\d+(?:[.,]\d+)?)\s*(?:ml|milliliters?)\b", re.IGNORECASE
)


def _key(unit_name: str) -> str:
    return " ".join(unit_name.strip().lower().split())


def mass_in_grams(amount: float, unit_name: str) -> float | None:
    """Return ``amount`` of a mass unit in grams; volumes are not converted."""
    mass_unit = _MASS_UNIT_NAMES.get(_key(unit_name))
    if mass_unit is None:
        return None
    return convert_mass(amount, mass_unit, MassUnit.GRAMS)


def volume_in_ml(amount: float, unit_name: str) -> float | None:
    key = _key(unit_name)
    volume_unit = _VOLUME_UNIT_NAMES.get(key)
    if volume_unit is not None:
        return convert_volume(amount, volume_unit, VolumeUnit.MILLILITERS)
    household = _HOUSEHOLD_VOLUMES_ML.get(key)
    if household is not None:
        return amount * household
    return None


def is_beverage_category(category: str | None) -> bool:
    if not category:
        return False
    lowered = category.lower()
    return any(marker in lowered for marker in _BEVERAGE_MARKERS)


def detect_base_unit(serving_unit: str | None, category: str | None) -> BaseUnit:
    """Pick ml for volume serving units or beverage categories, else grams."""
    if serving_unit and _key(serving_unit) in _VOLUME_UNIT_NAMES:
        return BaseUnit.MILLILITERS
    if is_beverage_category(category):
        return BaseUnit.MILLILITERS
    return BaseUnit.GRAMS


def detect_base_unit_from_text(
    serving_text: str | None, category: str | None
) -> BaseUnit:
    """Like :func:`detect_base_unit` for free-text servings such as ``250 ml``."""
    if serving_text and _VOLUME_TEXT_PATTERN.search(serving_text):
        return BaseUnit.MILLILITERS
    if is_beverage_category(category):
        return BaseUnit.MILLILITERS
    return BaseUnit.GRAMS


def parse_serving_grams(text: str | None) -> float | None:
    """Extract grams from serving text like ``2 tbsp (32 g)`` or ``30 g``."""
    return _parse_number(_SERVING_GRAMS_PATTERN, text)


def parse_serving_ml(text: str | None) -> float | None:
    return _parse_number(_SERVING_ML_PATTERN, text)


def _parse_number(pattern: re.Pattern[str], text: str | None) -> float | None:
    if not text:
        return None
    match = pattern.search(text)
    if match is None:
        return None
    value = float(match.group(1).replace(",", "."))
    return value if value > 0 else None


def density_from_portions(portions: Iterable[NormalizedPortion]) -> float | None:
    """Density of the first portion that knows both its mass and volume."""
    for portion in portions:
        if portion.mass_g is not None and portion.vol_ml:
            return portion.mass_g / portion.vol_ml
    return None
