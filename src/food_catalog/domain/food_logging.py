"""Domain models for logging food portions."""

from collections.abc import Iterable
from dataclasses import dataclass, field, fields
from datetime import UTC, datetime
from enum import Enum
from uuid import UUID

from pydantic import TypeAdapter

from food_catalog.domain.foods import FoodSource, NormalizedNutrient, normalize_label


class UnitKind(str, Enum):
    """Kinds of units a logged quantity can be expressed in."""

    GRAMS = "g"
    MILLILITERS = "ml"
    SERVING = "serving"
    HOUSEHOLD = "household"


_HOUSEHOLD_PREFIX = "household:"


@dataclass(frozen=True)
class Unit:
    """Unit of a logged quantity; household units carry their label."""

    kind: UnitKind
    label: str | None = None

    @classmethod
    def household(cls, label: str) -> "Unit":
        return cls(kind=UnitKind.HOUSEHOLD, label=label)

    @property
    def display_name(self) -> str:
        if self.kind is UnitKind.HOUSEHOLD:
            return self.label or ""
        return self.kind.value

    def to_raw(self) -> str:
        """Encode the unit as a storable string."""
        if self.kind is UnitKind.HOUSEHOLD:
            return f"{_HOUSEHOLD_PREFIX}{self.label or ''}"
        return self.kind.value

    @classmethod
    def from_raw(cls, raw: str) -> "Unit":
        """Decode a stored unit string; unknown values fall back to servings."""
        if raw.startswith(_HOUSEHOLD_PREFIX):
            return cls.household(raw[len(_HOUSEHOLD_PREFIX) :])
        lowered = raw.strip().lower()
        if lowered in {"g", "grams"}:
            return GRAMS
        if lowered in {"ml", "milliliters"}:
            return MILLILITERS
        return SERVING


GRAMS = Unit(UnitKind.GRAMS)
MILLILITERS = Unit(UnitKind.MILLILITERS)
SERVING = Unit(UnitKind.SERVING)


class Meal(str, Enum):
    """Meal a food entry belongs to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class HouseholdUnit:
    """Named container unit with its mass in grams, e.g. ``1 can``."""

    label: str
    grams: float

    def __post_init__(self) -> None:
        if self.grams <= 0:
            raise ValueError(f"Household unit {self.label!r} must weigh more than 0 g")

    @property
    def normalized_label(self) -> str:
        return normalize_label(self.label)


# Nutrient ids first, then a name fragment and unit used when the id is absent.
_NUTRIENT_LOOKUP: dict[str, tuple[frozenset[int], str, str]] = {
    "energy_kcal": (frozenset({1008}), "energy", "kcal"),
    "protein": (frozenset({1003}), "protein", "g"),
    "fat": (frozenset({1004}), "total lipid (fat)", "g"),
    "saturated_fat": (frozenset({1258}), "fatty acids, total saturated", "g"),
    "carbs": (frozenset({1005}), "carbohydrate, by difference", "g"),
    "fiber": (frozenset({1079}), "fiber, total dietary", "g"),
    "sugars": (frozenset({2000}), "sugars, total", "g"),
    "added_sugars": (frozenset({1235}), "sugars, added", "g"),
    "sodium": (frozenset({1093}), "sodium, na", "mg"),
    "cholesterol": (frozenset({1253}), "cholesterol", "mg"),
}


@dataclass(frozen=True)
class FoodLoggingNutrients:
    """Sparse nutrient vector for a logged amount; ``None`` is missing, not zero."""

    energy_kcal: float | None = None
    protein: float | None = None
    fat: float | None = None
    saturated_fat: float | None = None
    carbs: float | None = None
    fiber: float | None = None
    sugars: float | None = None
    added_sugars: float | None = None
    sodium: float | None = None
    cholesterol: float | None = None

    def scaled(self, factor: float) -> "FoodLoggingNutrients":
        """Multiply every known field by ``factor``; unknown fields stay unknown."""
        values = {
            item.name: _scale(getattr(self, item.name), factor)
            for item in fields(self)
        }
        return FoodLoggingNutrients(**values)

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, item.name) is None for item in fields(self))

    def as_dict(self) -> dict[str, float | None]:
        return {item.name: getattr(self, item.name) for item in fields(self)}

    @classmethod
    def from_nutrients(
        cls, nutrients: Iterable[NormalizedNutrient]
    ) -> "FoodLoggingNutrients":
        """Pick the logging nutrients out of a normalized nutrient list."""
        candidates = list(nutrients)
        values = {
            name: _find_amount(candidates, ids, fragment, unit)
            for name, (ids, fragment, unit) in _NUTRIENT_LOOKUP.items()
        }
        return cls(**values)


def _scale(value: float | None, factor: float) -> float | None:
    if value is None:
        return None
    return value * factor


def _find_amount(
    nutrients: list[NormalizedNutrient],
    ids: frozenset[int],
    name_fragment: str,
    unit: str,
) -> float | None:
    for nutrient in nutrients:
        if nutrient.id in ids and nutrient.unit.lower() == unit:
            return nutrient.amount
    for nutrient in nutrients:
        if name_fragment in nutrient.name.lower() and nutrient.unit.lower() == unit:
            return nutrient.amount
    return None


def sum_nutrients(items: Iterable[FoodLoggingNutrients]) -> FoodLoggingNutrients:
    """Add nutrient vectors; a field stays ``None`` only if no item knows it."""
    totals: dict[str, float | None] = {
        item.name: None for item in fields(FoodLoggingNutrients)
    }
    for nutrients in items:
        for name, value in nutrients.as_dict().items():
            if value is None:
                continue
            current = totals[name]
            totals[name] = value if current is None else current + value
    return FoodLoggingNutrients(**totals)


_HOUSEHOLD_UNITS_ADAPTER = TypeAdapter(list[HouseholdUnit])
_NUTRIENTS_ADAPTER = TypeAdapter(FoodLoggingNutrients)


def encode_household_units(units: list[HouseholdUnit]) -> bytes:
    return _HOUSEHOLD_UNITS_ADAPTER.dump_json(units)


def decode_household_units(data: bytes | str) -> list[HouseholdUnit]:
    return _HOUSEHOLD_UNITS_ADAPTER.validate_json(data)


def encode_nutrients(nutrients: FoodLoggingNutrients) -> bytes:
    """Serialize nutrients, omitting unknown fields."""
    return _NUTRIENTS_ADAPTER.dump_json(nutrients, exclude_none=True)


def decode_nutrients(data: bytes | str) -> FoodLoggingNutrients:
    return _NUTRIENTS_ADAPTER.validate_json(data)


@dataclass
class FoodRef:
    """Reference entity for a catalog food, stored once and reused for logging."""

    gid: str
    source: FoodSource
    name: str
    brand: str | None = None
    serving_size: float | None = None
    serving_size_unit: str | None = None
    grams_per_serving: float | None = None
    density_g_per_ml: float | None = None
    household_units_data: bytes | None = None
    nutrients_data: bytes | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    @property
    def household_units(self) -> list[HouseholdUnit] | None:
        if self.household_units_data is None:
            return None
        return decode_household_units(self.household_units_data)

    @household_units.setter
    def household_units(self, units: list[HouseholdUnit] | None) -> None:
        self.household_units_data = (
            encode_household_units(units) if units is not None else None
        )
        self.updated_at = datetime.now(tz=UTC)

    @property
    def nutrients(self) -> FoodLoggingNutrients | None:
        """Per-100 nutrients of the referenced food."""
        if self.nutrients_data is None:
            return None
        return decode_nutrients(self.nutrients_data)

    @nutrients.setter
    def nutrients(self, nutrients: FoodLoggingNutrients | None) -> None:
        self.nutrients_data = (
            encode_nutrients(nutrients) if nutrients is not None else None
        )
        self.updated_at = datetime.now(tz=UTC)


@dataclass(frozen=True)
class LoggedFoodEntry:
    """Logged portion of a food with its nutrient snapshot."""

    id: UUID
    food_gid: str
    name: str
    brand: str | None
    quantity: float
    unit: Unit
    meal: Meal
    logged_at: datetime
    grams: float | None
    nutrients: FoodLoggingNutrients
