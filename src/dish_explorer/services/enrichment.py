"""Per-ingredient nutrition and allergen enrichment for remote dishes."""

import asyncio
import logging
from dataclasses import dataclass

from dish_explorer.domain.dishes import IngredientSlot, RemoteDish
from dish_explorer.domain.errors import DishExplorerError
from dish_explorer.domain.nutrition import ZERO_NUTRITION, IngredientInfo
from dish_explorer.services.remote import RemoteFetcher

_logger = logging.getLogger(__name__)


def extract_ingredients(dish: RemoteDish) -> list[IngredientSlot]:
    """Return populated slots in slot order, keeping repeated names."""
    return [
        slot
        for slot in dish.ingredient_slots
        if slot is not None and slot.name.strip()
    ]


@dataclass
class IngredientEnricher:
    """Attach nutrition and allergens to every ingredient of a remote dish.

    All lookups run concurrently and the result is only returned once every
    ingredient has settled. A failed lookup degrades that single ingredient
    to zero nutrition and no allergens instead of failing the dish.
    """

    fetcher: RemoteFetcher

    async def enrich(self, dish: RemoteDish) -> list[IngredientInfo]:
        slots = extract_ingredients(dish)
        results = await asyncio.gather(*(self._enrich_one(slot) for slot in slots))
        degraded = sum(1 for _, ok in results if not ok)
        if degraded:
            _logger.info(
                "Enriched dish %s with %s/%s degraded ingredients",
                dish.id,
                degraded,
                len(results),
            )
        return [info for info, _ in results]

    async def _enrich_one(self, slot: IngredientSlot) -> tuple[IngredientInfo, bool]:
        name = slot.name.strip()
        measure = slot.measure.strip()
        nutrition, allergens = await asyncio.gather(
            self.fetcher.fetch_nutrition(name),
            self.fetcher.fetch_allergens(name),
            return_exceptions=True,
        )
        for outcome in (nutrition, allergens):
            if isinstance(outcome, BaseException) and not isinstance(
                outcome, Exception
            ):
                raise outcome
        failure = next(
            (item for item in (nutrition, allergens) if isinstance(item, Exception)),
            None,
        )
        if failure is not None:
            if isinstance(failure, DishExplorerError):
                _logger.warning("Ingredient lookup failed for %s: %s", name, failure)
            else:
                _logger.warning(
                    "Unexpected ingredient lookup error for %s",
                    name,
                    exc_info=failure,
                )
            return _degraded(name, measure), False
        return (
            IngredientInfo(
                name=name,
                measure=measure,
                nutrition=nutrition,
                allergens=frozenset(allergens),
            ),
            True,
        )


def _degraded(name: str, measure: str) -> IngredientInfo:
    return IngredientInfo(name=name, measure=measure, nutrition=ZERO_NUTRITION)
