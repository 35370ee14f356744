"""Open Food Facts read API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

_USER_AGENT = "food-catalog/0.1"


class OffClient(Protocol):
    """Interface for Open Food Facts product lookups."""

    async def get_product(self, barcode: str) -> dict[str, object]:
        """Fetch a product by barcode and return the raw read response."""

    async def close(self) -> None:
        """Release any underlying resources."""


@dataclass
class HttpxOffClient(OffClient):
    """HTTPX-backed OFF client."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15.0

    @classmethod
    def create(cls, base_url: str, timeout_seconds: float = 15.0) -> "HttpxOffClient":
        """Create an OFF client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(headers={"User-Agent": _USER_AGENT}),
            timeout_seconds=timeout_seconds,
        )

    async def get_product(self, barcode: str) -> dict[str, object]:
        """Fetch a product; unknown barcodes come back with ``status`` 0."""
        url = f"{self.base_url}/product/{barcode}"
        response = await self.http_client.get(url, timeout=self.timeout_seconds)
        if response.status_code == httpx.codes.NOT_FOUND:
            return {"status": 0, "code": barcode}
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
