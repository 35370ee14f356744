"""FDC client decorator that answers repeated lookups from a result cache."""

import logging
from dataclasses import dataclass

from food_catalog.adapters.fdc_client import FdcClient
from food_catalog.services.cache import ResultCache
from food_catalog.services.generations import RequestGeneration

_logger = logging.getLogger(__name__)


@dataclass
class CachedFdcClient(FdcClient):
    """Wrap another FDC client with search and detail caching.

    When a request generation is given, search results fetched while a newer
    request started are returned but not cached.
    """

    inner: FdcClient
    cache: ResultCache
    generation: RequestGeneration | None = None

    async def search_foods(
        self, query: str, page_size: int = 25, page_number: int = 1
    ) -> dict[str, object]:
        cached = self.cache.cached_search_results(
            query, page=page_number, page_size=page_size
        )
        if isinstance(cached, list):
            return {"foods": cached}

        token = self.generation.current if self.generation else None
        payload = await self.inner.search_foods(
            query, page_size=page_size, page_number=page_number
        )
        foods = payload.get("foods", [])
        if not isinstance(foods, list):
            return payload
        if self.generation is not None and not self.generation.is_current(token):
            _logger.debug("Skipping cache write for superseded search: %s", query)
            return payload
        self.cache.store_search_results(
            query, foods, page=page_number, page_size=page_size
        )
        return payload

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        cached = self.cache.cached_food_details(fdc_id)
        if isinstance(cached, dict):
            return cached
        payload = await self.inner.get_food(fdc_id)
        self.cache.store_food_details(fdc_id, payload)
        return payload

    async def close(self) -> None:
        await self.inner.close()
