"""Open Food Facts product API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class ProductSource(Protocol):
    """Interface for resolving barcodes to raw product payloads."""

    async def fetch_product(self, barcode: str) -> dict[str, object] | None:
        """Return the raw product payload, or None when unknown."""


@dataclass
class HttpxOpenFoodFactsClient(ProductSource):
    """HTTPX-backed Open Food Facts client."""

    base_url: str
    user_agent: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str, user_agent: str) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            user_agent=user_agent,
            http_client=httpx.AsyncClient(),
        )

    async def fetch_product(self, barcode: str) -> dict[str, object] | None:
        """Fetch a product by barcode."""
        url = f"{self.base_url}/api/v2/product/{barcode}.json"
        response = await self.http_client.get(
            url,
            headers={"User-Agent": self.user_agent},
            timeout=15,
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict) or payload.get("status") != 1:
            return None
        product = payload.get("product")
        if not isinstance(product, dict):
            return None
        return product

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
