"""Request models for the catalog API."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from food_catalog.domain.food_logging import (
    FoodLoggingNutrients,
    HouseholdUnit,
    Meal,
    Unit,
)

_UNIT_NAMES = frozenset({"g", "grams", "ml", "milliliters", "serving"})
_HOUSEHOLD_PREFIX = "household:"


def _check_unit(raw: str) -> str:
    """Reject unit strings that would otherwise decode as a serving."""
    if raw.startswith(_HOUSEHOLD_PREFIX):
        if not raw[len(_HOUSEHOLD_PREFIX) :].strip():
            raise ValueError("Household unit needs a label")
        return raw
    if raw.strip().lower() not in _UNIT_NAMES:
        raise ValueError(f"Unsupported unit: {raw!r}")
    return raw


class HouseholdUnitPayload(BaseModel):
    label: str
    grams: float = Field(gt=0)

    def to_domain(self) -> HouseholdUnit:
        return HouseholdUnit(label=self.label, grams=self.grams)


class NutrientsPayload(BaseModel):
    """Per-100 nutrient values; omitted fields are unknown."""

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

    def to_domain(self) -> FoodLoggingNutrients:
        return FoodLoggingNutrients(**self.model_dump())


class PortionRequest(BaseModel):
    """Quantity in a unit string such as ``g``, ``serving`` or ``household:cup``."""

    quantity: float
    unit: str = "g"
    grams_per_serving: float | None = None
    density_g_per_ml: float | None = None
    household_units: list[HouseholdUnitPayload] = Field(default_factory=list)

    @field_validator("unit")
    @classmethod
    def _unit_is_supported(cls, value: str) -> str:
        return _check_unit(value)

    @property
    def parsed_unit(self) -> Unit:
        return Unit.from_raw(self.unit)

    def domain_household_units(self) -> list[HouseholdUnit]:
        return [unit.to_domain() for unit in self.household_units]


class SnapshotRequest(PortionRequest):
    per_100: NutrientsPayload


class FoodRefRequest(BaseModel):
    """Reference a food by FDC id or by barcode."""

    fdc_id: int | None = None
    barcode: str | None = None

    @model_validator(mode="after")
    def _exactly_one_key(self) -> "FoodRefRequest":
        if (self.fdc_id is None) == (self.barcode is None):
            raise ValueError("Provide exactly one of fdc_id or barcode")
        return self


class LogEntryRequest(BaseModel):
    gid: str
    quantity: float = Field(gt=0)
    unit: str = "g"
    meal: Meal
    logged_at: datetime | None = None

    @field_validator("unit")
    @classmethod
    def _unit_is_supported(cls, value: str) -> str:
        return _check_unit(value)


class LogEntryUpdateRequest(BaseModel):
    quantity: float = Field(gt=0)
    unit: str | None = None

    @field_validator("unit")
    @classmethod
    def _unit_is_supported(cls, value: str | None) -> str | None:
        return None if value is None else _check_unit(value)
