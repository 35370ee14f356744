"""Food logging service."""

from dataclasses import dataclass, replace
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol
from uuid import UUID, uuid4

from food_catalog.domain.food_logging import (
    FoodLoggingNutrients,
    FoodRef,
    LoggedFoodEntry,
    Meal,
    Unit,
    sum_nutrients,
)
from food_catalog.services.food_refs import FoodRefRepository
from food_catalog.services.portions import resolve_to_grams
from food_catalog.services.snapshots import calculate_snapshot


class FoodLogRepository(Protocol):
    """Persistence interface for logged food entries."""

    def save_entry(self, entry: LoggedFoodEntry) -> LoggedFoodEntry:
        """Insert or replace a log entry and return it."""

    def get_entry(self, entry_id: UUID) -> LoggedFoodEntry | None:
        """Return a log entry by id."""

    def list_entries(self, start: datetime, end: datetime) -> list[LoggedFoodEntry]:
        """Return entries logged in ``[start, end)``."""


@dataclass
class FoodLogService:
    """Log portions of referenced foods with their nutrient snapshot."""

    food_refs: FoodRefRepository
    repository: FoodLogRepository

    def log_food(  # noqa: PLR0913
        self,
        gid: str,
        quantity: float,
        unit: Unit,
        meal: Meal,
        logged_at: datetime | None = None,
    ) -> LoggedFoodEntry | None:
        """Log ``quantity`` of a food; ``None`` if the food is not referenced."""
        if quantity <= 0:
            raise ValueError("Quantity must be positive")
        food_ref = self.food_refs.get_food_ref(gid)
        if food_ref is None:
            return None
        grams, nutrients = _snapshot(food_ref, quantity, unit)
        entry = LoggedFoodEntry(
            id=uuid4(),
            food_gid=food_ref.gid,
            name=food_ref.name,
            brand=food_ref.brand,
            quantity=quantity,
            unit=unit,
            meal=meal,
            logged_at=logged_at or datetime.now(tz=UTC),
            grams=grams,
            nutrients=nutrients,
        )
        return self.repository.save_entry(entry)

    def update_quantity(
        self, entry_id: UUID, quantity: float, unit: Unit | None = None
    ) -> LoggedFoodEntry | None:
        """Change an entry's amount and recompute its snapshot."""
        if quantity <= 0:
            raise ValueError("Quantity must be positive")
        entry = self.repository.get_entry(entry_id)
        if entry is None:
            return None
        food_ref = self.food_refs.get_food_ref(entry.food_gid)
        if food_ref is None:
            return None
        new_unit = unit or entry.unit
        grams, nutrients = _snapshot(food_ref, quantity, new_unit)
        updated = replace(
            entry, quantity=quantity, unit=new_unit, grams=grams, nutrients=nutrients
        )
        return self.repository.save_entry(updated)

    def daily_totals(self, day: date) -> FoodLoggingNutrients:
        """Sum the snapshots of every entry logged on ``day`` (UTC)."""
        start = datetime.combine(day, time.min, tzinfo=UTC)
        entries = self.repository.list_entries(start, start + timedelta(days=1))
        return sum_nutrients(entry.nutrients for entry in entries)


def _snapshot(
    food_ref: FoodRef, quantity: float, unit: Unit
) -> tuple[float | None, FoodLoggingNutrients]:
    household_units = food_ref.household_units
    grams = resolve_to_grams(
        quantity,
        unit,
        grams_per_serving=food_ref.grams_per_serving,
        density_g_per_ml=food_ref.density_g_per_ml,
        household_units=household_units,
    )
    nutrients = calculate_snapshot(
        food_ref.nutrients or FoodLoggingNutrients(),
        quantity,
        unit,
        grams_per_serving=food_ref.grams_per_serving,
        density_g_per_ml=food_ref.density_g_per_ml,
        household_units=household_units,
    )
    return grams, nutrients
