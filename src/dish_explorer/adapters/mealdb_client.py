"""TheMealDB API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class MealDbClient(Protocol):
    """Interface for remote dish catalog interactions."""

    async def lookup_meal(self, meal_id: str) -> dict[str, object]:
        """Fetch a meal by id and return raw API data."""


@dataclass
class HttpxMealDbClient(MealDbClient):
    """HTTPX-backed TheMealDB client."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 15

    @classmethod
    def create(cls, base_url: str, timeout: float = 15) -> "HttpxMealDbClient":
        """Create a TheMealDB client with a managed httpx session."""
        return cls(base_url=base_url, http_client=httpx.AsyncClient(), timeout=timeout)

    async def lookup_meal(self, meal_id: str) -> dict[str, object]:
        """Fetch full meal details by id."""
        url = f"{self.base_url}/lookup.php"
        response = await self.http_client.get(
            url,
            params={"i": meal_id},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
