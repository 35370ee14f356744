"""USDA FoodData Central API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class FdcClient(Protocol):
    """Interface for FoodData Central API interactions."""

    async def search_foods(
        self, query: str, page_size: int = 25, page_number: int = 1
    ) -> dict[str, object]:
        """Search foods by query and return one page of raw results."""

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        """Fetch a food detail payload by FDC id."""

    async def close(self) -> None:
        """Release any underlying resources."""


@dataclass
class HttpxFdcClient(FdcClient):
    """HTTPX-backed FDC client authenticating with an ``api_key`` parameter."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15.0

    @classmethod
    def create(
        cls, api_key: str, base_url: str, timeout_seconds: float = 15.0
    ) -> "HttpxFdcClient":
        """Create an FDC client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def search_foods(
        self, query: str, page_size: int = 25, page_number: int = 1
    ) -> dict[str, object]:
        body = {"query": query, "pageSize": page_size, "pageNumber": page_number}
        return await self._request_json("POST", "/foods/search", json=body)

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        # The full format carries portions and label nutrients.
        return await self._request_json(
            "GET", f"/food/{fdc_id}", params={"format": "full"}
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _request_json(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        json: dict[str, object] | None = None,
    ) -> dict[str, object]:
        response = await self.http_client.request(
            method,
            f"{self.base_url}{path}",
            params={"api_key": self.api_key, **(params or {})},
            json=json,
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()
