"""Process-local repositories used when no Supabase project is configured."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from food_catalog.domain.food_logging import FoodRef, LoggedFoodEntry
from food_catalog.services.food_log import FoodLogRepository
from food_catalog.services.food_refs import FoodRefRepository


@dataclass
class InMemoryFoodRefRepository(FoodRefRepository):
    food_refs: dict[str, FoodRef] = field(default_factory=dict)

    def get_food_ref(self, gid: str) -> FoodRef | None:
        return self.food_refs.get(gid)

    def save_food_ref(self, food_ref: FoodRef) -> FoodRef:
        existing = self.food_refs.get(food_ref.gid)
        if existing is not None:
            food_ref.created_at = existing.created_at
        self.food_refs[food_ref.gid] = food_ref
        return food_ref


@dataclass
class InMemoryFoodLogRepository(FoodLogRepository):
    entries: dict[UUID, LoggedFoodEntry] = field(default_factory=dict)

    def save_entry(self, entry: LoggedFoodEntry) -> LoggedFoodEntry:
        self.entries[entry.id] = entry
        return entry

    def get_entry(self, entry_id: UUID) -> LoggedFoodEntry | None:
        return self.entries.get(entry_id)

    def list_entries(self, start: datetime, end: datetime) -> list[LoggedFoodEntry]:
        matching = [
            entry for entry in self.entries.values() if start <= entry.logged_at < end
        ]
        return sorted(matching, key=lambda entry: entry.logged_at)
