"""Supabase repository for logged food entries."""

import json
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from food_catalog.domain.food_logging import (
    LoggedFoodEntry,
    Meal,
    Unit,
    decode_nutrients,
    encode_nutrients,
)
from food_catalog.services.food_log import FoodLogRepository

_COLUMNS = (
    "id, food_gid, name, brand, quantity, unit, meal, logged_at, grams, nutrients"
)


@dataclass
class SupabaseFoodLogRepository(FoodLogRepository):
    """Supabase implementation for food log entries."""

    client: Client

    def save_entry(self, entry: LoggedFoodEntry) -> LoggedFoodEntry:
        """Upsert an entry keyed by id."""
        response = (
            self.client.table("food_log_entries")
            .upsert(
                {
                    "id": str(entry.id),
                    "food_gid": entry.food_gid,
                    "name": entry.name,
                    "brand": entry.brand,
                    "quantity": entry.quantity,
                    "unit": entry.unit.to_raw(),
                    "meal": entry.meal.value,
                    "logged_at": entry.logged_at.isoformat(),
                    "grams": entry.grams,
                    "nutrients": encode_nutrients(entry.nutrients).decode(),
                },
                on_conflict="id",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save food log entry")
        return _parse_entry(response.data[0])

    def get_entry(self, entry_id: UUID) -> LoggedFoodEntry | None:
        """Return an entry by id."""
        response = (
            self.client.table("food_log_entries")
            .select(_COLUMNS)
            .eq("id", str(entry_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def list_entries(self, start: datetime, end: datetime) -> list[LoggedFoodEntry]:
        """Return entries logged in a time range, oldest first."""
        response = (
            self.client.table("food_log_entries")
            .select(_COLUMNS)
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
            .order("logged_at", desc=False)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]


def _parse_entry(row: dict[str, object]) -> LoggedFoodEntry:
    grams = row.get("grams")
    nutrients = row.get("nutrients") or "{}"
    if not isinstance(nutrients, str):
        nutrients = json.dumps(nutrients)
    return LoggedFoodEntry(
        id=UUID(str(row["id"])),
        food_gid=str(row["food_gid"]),
        name=str(row["name"]),
        brand=row.get("brand"),
        quantity=float(row["quantity"]),
        unit=Unit.from_raw(str(row["unit"])),
        meal=Meal(row["meal"]),
        logged_at=datetime.fromisoformat(str(row["logged_at"])),
        grams=float(grams) if grams is not None else None,
        nutrients=decode_nutrients(nutrients),
    )
