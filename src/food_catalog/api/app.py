"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import date
from uuid import UUID

import httpx
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from food_catalog.api.models import (
    FoodRefRequest,
    LogEntryRequest,
    LogEntryUpdateRequest,
    PortionRequest,
    SnapshotRequest,
)
from food_catalog.app_logging import configure_logging
from food_catalog.containers import AppContainer
from food_catalog.domain.food_logging import FoodRef, LoggedFoodEntry, Unit
from food_catalog.domain.foods import NormalizedFood
from food_catalog.domain.nutrition import FoodSummary
from food_catalog.services.daily_values import percent_dvs
from food_catalog.services.portions import resolve_to_grams
from food_catalog.services.snapshots import calculate_snapshot


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(httpx.HTTPError)
    async def upstream_error(_request: Request, exc: httpx.HTTPError) -> JSONResponse:
        logger.error("Upstream catalog request failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": "Upstream catalog unavailable"},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/foods/search")
    async def search_foods(
        query: str, request: Request, page: int = 1, page_size: int = 25
    ) -> dict[str, list[FoodSummary]]:
        """Search FDC foods."""
        state_container: AppContainer = request.app.state.container
        foods = await state_container.catalog_service.search(
            query, page=page, page_size=page_size
        )
        return {"foods": foods}

    @app.get("/foods/{fdc_id}")
    async def get_food(fdc_id: int, request: Request) -> NormalizedFood:
        """Return the normalized FDC record of a food."""
        state_container: AppContainer = request.app.state.container
        food = await state_container.catalog_service.get_food(fdc_id)
        if food is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return food

    @app.get("/barcodes/{barcode}")
    async def lookup_barcode(barcode: str, request: Request) -> NormalizedFood:
        """Return the merged FDC and OFF record for a barcode."""
        state_container: AppContainer = request.app.state.container
        food = await state_container.catalog_service.lookup_barcode(barcode)
        if food is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return food

    @app.post("/food-refs")
    async def create_food_ref(
        payload: FoodRefRequest, request: Request
    ) -> dict[str, object]:
        """Store a reference to a catalog food for later logging."""
        state_container: AppContainer = request.app.state.container
        catalog = state_container.catalog_service
        if payload.fdc_id is not None:
            food = await catalog.get_food(payload.fdc_id)
        else:
            food = await catalog.lookup_barcode(payload.barcode or "")
        if food is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        food_ref = state_container.food_ref_service.save_food(food)
        return _food_ref_response(food_ref)

    @app.get("/food-refs/{gid}")
    async def get_food_ref(gid: str, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        food_ref = state_container.food_ref_service.get_food_ref(gid)
        if food_ref is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return _food_ref_response(food_ref)

    @app.post("/portions/resolve")
    async def resolve_portion(payload: PortionRequest) -> dict[str, float | None]:
        """Resolve a quantity to grams; ``null`` when it cannot be resolved."""
        grams = resolve_to_grams(
            payload.quantity,
            payload.parsed_unit,
            grams_per_serving=payload.grams_per_serving,
            density_g_per_ml=payload.density_g_per_ml,
            household_units=payload.domain_household_units(),
        )
        return {"grams": grams}

    @app.post("/snapshots")
    async def snapshot(payload: SnapshotRequest) -> dict[str, object]:
        """Scale per-100 nutrients to a logged quantity."""
        nutrients = calculate_snapshot(
            payload.per_100.to_domain(),
            payload.quantity,
            payload.parsed_unit,
            grams_per_serving=payload.grams_per_serving,
            density_g_per_ml=payload.density_g_per_ml,
            household_units=payload.domain_household_units(),
        )
        return {"nutrients": nutrients.as_dict(), "percent_dv": percent_dvs(nutrients)}

    @app.post("/log-entries", status_code=status.HTTP_201_CREATED)
    async def create_log_entry(
        payload: LogEntryRequest, request: Request
    ) -> dict[str, object]:
        """Log a portion of a referenced food."""
        state_container: AppContainer = request.app.state.container
        entry = state_container.food_log_service.log_food(
            payload.gid,
            payload.quantity,
            Unit.from_raw(payload.unit),
            payload.meal,
            logged_at=payload.logged_at,
        )
        if entry is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Unknown food reference"
            )
        return _entry_response(entry)

    @app.patch("/log-entries/{entry_id}")
    async def update_log_entry(
        entry_id: UUID, payload: LogEntryUpdateRequest, request: Request
    ) -> dict[str, object]:
        """Change the amount of a log entry."""
        state_container: AppContainer = request.app.state.container
        entry = state_container.food_log_service.update_quantity(
            entry_id,
            payload.quantity,
            Unit.from_raw(payload.unit) if payload.unit else None,
        )
        if entry is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return _entry_response(entry)

    @app.get("/daily-totals")
    async def daily_totals(day: date, request: Request) -> dict[str, object]:
        """Return nutrient totals for a UTC day."""
        state_container: AppContainer = request.app.state.container
        totals = state_container.food_log_service.daily_totals(day)
        return {
            "day": day.isoformat(),
            "nutrients": totals.as_dict(),
            "percent_dv": percent_dvs(totals),
        }

    return app


def _food_ref_response(food_ref: FoodRef) -> dict[str, object]:
    household_units = food_ref.household_units or []
    nutrients = food_ref.nutrients
    return {
        "gid": food_ref.gid,
        "source": food_ref.source.value,
        "name": food_ref.name,
        "brand": food_ref.brand,
        "serving_size": food_ref.serving_size,
        "serving_size_unit": food_ref.serving_size_unit,
        "grams_per_serving": food_ref.grams_per_serving,
        "density_g_per_ml": food_ref.density_g_per_ml,
        "household_units": [asdict(unit) for unit in household_units],
        "nutrients": nutrients.as_dict() if nutrients else None,
    }


def _entry_response(entry: LoggedFoodEntry) -> dict[str, object]:
    return {
        "id": str(entry.id),
        "food_gid": entry.food_gid,
        "name": entry.name,
        "brand": entry.brand,
        "quantity": entry.quantity,
        "unit": entry.unit.to_raw(),
        "meal": entry.meal.value,
        "logged_at": entry.logged_at.isoformat(),
        "grams": entry.grams,
        "nutrients": entry.nutrients.as_dict(),
    }
