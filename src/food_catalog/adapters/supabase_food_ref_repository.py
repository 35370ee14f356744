"""Supabase repository for food references."""

import json
from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from food_catalog.domain.food_logging import FoodRef
from food_catalog.domain.foods import FoodSource
from food_catalog.services.food_refs import FoodRefRepository

_COLUMNS = (
    "gid, source, name, brand, serving_size, serving_size_unit, grams_per_serving, "
    "density_g_per_ml, household_units, nutrients, created_at, updated_at"
)


@dataclass
class SupabaseFoodRefRepository(FoodRefRepository):
    """Supabase-backed repository for food references."""

    client: Client

    def get_food_ref(self, gid: str) -> FoodRef | None:
        """Return a food reference by gid, if present."""
        response = (
            self.client.table("food_refs")
            .select(_COLUMNS)
            .eq("gid", gid)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_food_ref(response.data[0])

    def save_food_ref(self, food_ref: FoodRef) -> FoodRef:
        """Upsert a food reference keyed by gid."""
        response = (
            self.client.table("food_refs")
            .upsert(
                {
                    "gid": food_ref.gid,
                    "source": food_ref.source.value,
                    "name": food_ref.name,
                    "brand": food_ref.brand,
                    "serving_size": food_ref.serving_size,
                    "serving_size_unit": food_ref.serving_size_unit,
                    "grams_per_serving": food_ref.grams_per_serving,
                    "density_g_per_ml": food_ref.density_g_per_ml,
                    "household_units": _text(food_ref.household_units_data),
                    "nutrients": _text(food_ref.nutrients_data),
                    "created_at": food_ref.created_at.isoformat(),
                    "updated_at": food_ref.updated_at.isoformat(),
                },
                on_conflict="gid",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save food reference")
        return _parse_food_ref(response.data[0])


def _text(data: bytes | None) -> str | None:
    return data.decode() if data is not None else None


def _blob(value: object) -> bytes | None:
    """Column value as JSON bytes; jsonb columns arrive already decoded."""
    if value is None:
        return None
    if isinstance(value, str):
        return value.encode()
    return json.dumps(value).encode()


def _optional_float(value: object) -> float | None:
    return float(value) if value is not None else None


def _parse_food_ref(row: dict[str, object]) -> FoodRef:
    return FoodRef(
        gid=str(row["gid"]),
        source=FoodSource(row["source"]),
        name=str(row["name"]),
        brand=row.get("brand"),
        serving_size=_optional_float(row.get("serving_size")),
        serving_size_unit=row.get("serving_size_unit"),
        grams_per_serving=_optional_float(row.get("grams_per_serving")),
        density_g_per_ml=_optional_float(row.get("density_g_per_ml")),
        household_units_data=_blob(row.get("household_units")),
        nutrients_data=_blob(row.get("nutrients")),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        updated_at=datetime.fromisoformat(str(row["updated_at"])),
    )
