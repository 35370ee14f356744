"""Catalog service combining FDC and OFF lookups."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from food_catalog.adapters.fdc_client import FdcClient
from food_catalog.adapters.off_client import OffClient
from food_catalog.domain.fdc_models import FdcSearchFood
from food_catalog.domain.foods import (
    Envelope,
    FoodSource,
    NormalizedFood,
    fdc_gid,
    off_gid,
)
from food_catalog.domain.nutrition import FoodSummary
from food_catalog.domain.off_models import OffReadResponse
from food_catalog.services.generations import RequestGeneration
from food_catalog.services.merge import merge_foods
from food_catalog.services.normalization import normalize
from food_catalog.services.nutrient_parser import parse_macros

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@dataclass
class FoodCatalogService:
    """Search, detail and barcode lookups across both catalogs."""

    fdc_client: FdcClient
    off_client: OffClient
    generation: RequestGeneration = field(default_factory=RequestGeneration)
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(
        self, query: str, page: int = 1, page_size: int = 25
    ) -> list[FoodSummary]:
        """Search FDC foods and summarize each hit."""
        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(
                query, page_size=page_size, page_number=page
            ),
            action="search",
        )
        summaries = []
        for raw in payload.get("foods", []) or []:
            try:
                food = FdcSearchFood.model_validate(raw)
            except ValidationError as exc:
                _logger.warning("Skipping malformed FDC search hit: %s", exc)
                continue
            summaries.append(
                FoodSummary(
                    fdc_id=food.fdc_id,
                    description=food.description,
                    brand_owner=food.brand_owner,
                    brand_name=food.brand_name,
                    data_type=food.data_type,
                    gtin_upc=food.gtin_upc,
                    macros=parse_macros(food.food_nutrients),
                )
            )
        return summaries

    async def search_latest(
        self, query: str, page: int = 1, page_size: int = 25
    ) -> list[FoodSummary] | None:
        """Search, returning ``None`` if a newer search started meanwhile."""
        token = self.generation.begin()
        results = await self.search(query, page=page, page_size=page_size)
        if not self.generation.is_current(token):
            _logger.info("Discarding superseded search results: query=%s", query)
            return None
        return results

    async def get_food(self, fdc_id: int) -> NormalizedFood | None:
        """Return the normalized FDC food, or ``None`` if FDC does not know it."""
        try:
            payload = await self._call_with_retry(
                lambda: self.fdc_client.get_food(fdc_id),
                action=f"get_food:{fdc_id}",
            )
        except httpx.HTTPStatusError as exc:
            if _is_not_found(exc):
                return None
            raise
        envelope = Envelope(
            source=FoodSource.FDC,
            raw=payload,
            gid=fdc_gid(fdc_id),
            fetched_at=_fetched_at(),
        )
        return normalize(envelope)

    async def get_off_product(self, barcode: str) -> NormalizedFood | None:
        """Return the normalized OFF product, or ``None`` if OFF does not know it."""
        payload = await self._call_with_retry(
            lambda: self.off_client.get_product(barcode),
            action=f"get_product:{barcode}",
        )
        try:
            response = OffReadResponse.model_validate(payload)
        except ValidationError as exc:
            _logger.warning("Malformed OFF response for barcode=%s: %s", barcode, exc)
            return None
        if not response.found:
            return None
        envelope = Envelope(
            source=FoodSource.OFF,
            raw=payload,
            gid=off_gid(barcode),
            barcode=barcode,
            fetched_at=_fetched_at(),
        )
        return normalize(envelope)

    async def lookup_barcode(self, barcode: str) -> NormalizedFood | None:
        """Look a barcode up in both catalogs, preferring FDC for shared fields.

        A catalog that fails counts as not knowing the barcode; the error is
        raised only when both fail.
        """
        fdc_error: httpx.HTTPError | None = None
        try:
            fdc_food = await self._find_fdc_by_barcode(barcode)
        except httpx.HTTPError as exc:
            _logger.warning("FDC barcode lookup failed for %s: %s", barcode, exc)
            fdc_error = exc
            fdc_food = None
        try:
            off_food = await self.get_off_product(barcode)
        except httpx.HTTPError as exc:
            if fdc_error is not None:
                raise
            _logger.warning("OFF barcode lookup failed for %s: %s", barcode, exc)
            off_food = None
        return merge_foods(fdc_food, off_food)

    async def _find_fdc_by_barcode(self, barcode: str) -> NormalizedFood | None:
        hits = await self.search(barcode, page=1, page_size=10)
        wanted = barcode.lstrip("0")
        for hit in hits:
            if hit.gtin_upc and hit.gtin_upc.lstrip("0") == wanted:
                return await self.get_food(hit.fdc_id)
        return None

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry on transport errors."""
        attempt = 0
        while True:
            try:
                return await func()
            except httpx.HTTPError as exc:
                if _is_not_found(exc):
                    raise
                attempt += 1
                status_code = _status_code_from_exception(exc)
                _logger.warning(
                    "Catalog %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    status_code,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _is_not_found(exc: httpx.HTTPError) -> bool:
    return (
        isinstance(exc, httpx.HTTPStatusError)
        and exc.response.status_code == httpx.codes.NOT_FOUND
    )


def _fetched_at() -> str:
    return datetime.now(tz=UTC).isoformat()
