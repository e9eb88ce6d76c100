"""Open Food Facts API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

_PRODUCT_FIELDS = "code,product_name,nutriments,allergens_tags"


class OpenFoodFactsClient(Protocol):
    """Interface for Open Food Facts product lookups."""

    async def search_products(self, term: str, page_size: int = 1) -> dict[str, object]:
        """Search products by free text and return raw API data."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """HTTPX-backed Open Food Facts client."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 15

    @classmethod
    def create(cls, base_url: str, timeout: float = 15) -> "HttpxOpenFoodFactsClient":
        """Create an Open Food Facts client with a managed httpx session."""
        return cls(base_url=base_url, http_client=httpx.AsyncClient(), timeout=timeout)

    async def search_products(self, term: str, page_size: int = 1) -> dict[str, object]:
        """Search products matching an ingredient name."""
        url = f"{self.base_url}/cgi/search.pl"
        response = await self.http_client.get(
            url,
            params={
                "search_terms": term,
                "search_simple": 1,
                "json": 1,
                "page_size": page_size,
                "fields": _PRODUCT_FIELDS,
            },
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
