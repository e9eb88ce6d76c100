"""Remote catalog fetcher backed by TheMealDB and Open Food Facts."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

import httpx

from dish_explorer.adapters.mealdb_client import MealDbClient
from dish_explorer.adapters.openfoodfacts_client import OpenFoodFactsClient
from dish_explorer.domain.dishes import MAX_INGREDIENT_SLOTS, IngredientSlot, RemoteDish
from dish_explorer.domain.errors import (
    NetworkError,
    NotFoundError,
    UnknownIngredientError,
)
from dish_explorer.domain.nutrition import NutritionFacts
from dish_explorer.services.cache import Product, ProductCache, product_key

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

_NUTRIMENT_KEYS = {
    "calories": "energy-kcal_100g",
    "protein": "proteins_100g",
    "fat": "fat_100g",
    "sugars": "sugars_100g",
    "sodium": "sodium_100g",
}

_logger = logging.getLogger(__name__)


class RemoteFetcher(Protocol):
    """Remote source of dish details and per-ingredient facts."""

    async def fetch_dish_details(self, dish_id: str) -> RemoteDish:
        """Return a remote dish or raise NotFoundError/NetworkError."""

    async def fetch_nutrition(self, ingredient_name: str) -> NutritionFacts:
        """Return nutrition facts or raise NetworkError/UnknownIngredientError."""

    async def fetch_allergens(self, ingredient_name: str) -> set[str]:
        """Return allergen tags or raise NetworkError/UnknownIngredientError."""


@dataclass
class CatalogRemoteFetcher(RemoteFetcher):
    """Fetcher with a short retry and a per-ingredient product cache."""

    mealdb_client: MealDbClient
    openfoodfacts_client: OpenFoodFactsClient
    cache: ProductCache
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3
    _pending: dict[str, "asyncio.Task[Product]"] = field(
        default_factory=dict, init=False, repr=False
    )

    async def fetch_dish_details(self, dish_id: str) -> RemoteDish:
        payload = await self._call_with_retry(
            lambda: self.mealdb_client.lookup_meal(dish_id),
            action=f"lookup_meal:{dish_id}",
        )
        meals = payload.get("meals")
        if not isinstance(meals, list) or not meals:
            raise NotFoundError(dish_id)
        if not isinstance(meals[0], dict):
            raise NetworkError(f"Unexpected meal payload for {dish_id}")
        return parse_remote_dish(meals[0])

    async def fetch_nutrition(self, ingredient_name: str) -> NutritionFacts:
        product = await self._product_for(ingredient_name)
        return _extract_nutrition(product.get("nutriments") or {})

    async def fetch_allergens(self, ingredient_name: str) -> set[str]:
        product = await self._product_for(ingredient_name)
        tags = product.get("allergens_tags") or []
        return {str(tag) for tag in tags if tag}

    async def _product_for(self, ingredient_name: str) -> Product:
        """Return the best matching product, sharing one lookup per name."""
        cached = self.cache.get(ingredient_name)
        if cached is not None:
            if not cached:
                raise UnknownIngredientError(ingredient_name)
            return cached

        cache_key = product_key(ingredient_name)
        task = self._pending.get(cache_key)
        if task is None:
            task = asyncio.ensure_future(self._search_product(ingredient_name))
            self._pending[cache_key] = task
            task.add_done_callback(lambda _: self._pending.pop(cache_key, None))
        product = await asyncio.shield(task)
        if not product:
            raise UnknownIngredientError(ingredient_name)
        return product

    async def _search_product(self, ingredient_name: str) -> Product:
        payload = await self._call_with_retry(
            lambda: self.openfoodfacts_client.search_products(ingredient_name),
            action=f"search_products:{ingredient_name}",
        )
        products = payload.get("products")
        product: Product = {}
        if isinstance(products, list) and products and isinstance(products[0], dict):
            product = products[0]
        self.cache.put(ingredient_name, product)
        return product

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function, retrying transport and decode failures briefly."""
        attempt = 0
        while True:
            try:
                payload = await func()
                if not isinstance(payload, dict):
                    raise ValueError(
                        f"Expected a JSON object, got {type(payload).__name__}"
                    )
                return payload
            except (httpx.HTTPError, ValueError) as exc:
                attempt += 1
                status_code = _status_code_from_exception(exc)
                _logger.warning(
                    "Remote %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    status_code,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise NetworkError(f"Remote {action} failed: {exc}") from exc
                await asyncio.sleep(self.retry_delay_seconds)


def parse_remote_dish(meal: dict[str, object]) -> RemoteDish:
    """Map a TheMealDB meal payload onto a RemoteDish with fixed slots."""
    slots: list[IngredientSlot | None] = []
    for index in range(1, MAX_INGREDIENT_SLOTS + 1):
        name = _clean(meal.get(f"strIngredient{index}"))
        if not name:
            slots.append(None)
            continue
        measure = _clean(meal.get(f"strMeasure{index}"))
        slots.append(IngredientSlot(name=name, measure=measure))
    return RemoteDish(
        id=str(meal.get("idMeal", "")),
        name=_clean(meal.get("strMeal")),
        thumbnail_url=_clean(meal.get("strMealThumb")),
        instructions=str(meal.get("strInstructions") or ""),
        category=_clean(meal.get("strCategory")) or None,
        area=_clean(meal.get("strArea")) or None,
        ingredient_slots=tuple(slots),
    )


def _clean(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _extract_nutrition(nutriments: dict[str, object]) -> NutritionFacts:
    """Extract per-100g nutrition values, defaulting missing ones to zero."""
    values: dict[str, float] = {}
    for field_name, key in _NUTRIMENT_KEYS.items():
        amount = nutriments.get(key)
        try:
            values[field_name] = float(amount) if amount is not None else 0.0
        except (TypeError, ValueError):
            values[field_name] = 0.0
    return NutritionFacts(**values)
