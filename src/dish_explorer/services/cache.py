"""Expiring product cache used by the remote fetcher."""

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

Product = dict[str, object]


def product_key(ingredient_name: str) -> str:
    """Normalize an ingredient name so "Milk" and " milk" share one entry."""
    return ingredient_name.strip().lower()


class ProductCache(Protocol):
    """Open Food Facts products keyed by ingredient name."""

    def get(self, ingredient_name: str) -> Product | None:
        """Return the cached product, ``{}`` for a remembered miss, or None."""

    def put(self, ingredient_name: str, product: Product) -> None:
        """Remember the product found for an ingredient (``{}`` when none)."""


@dataclass
class InMemoryProductCache(ProductCache):
    """Process-local product cache with a single TTL for every entry."""

    ttl_seconds: float = 3600
    clock: Callable[[], float] = time.monotonic
    _entries: dict[str, tuple[float, Product]] = field(
        default_factory=dict, init=False, repr=False
    )

    def get(self, ingredient_name: str) -> Product | None:
        key = product_key(ingredient_name)
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, product = entry
        if self.clock() >= expires_at:
            del self._entries[key]
            return None
        return product

    def put(self, ingredient_name: str, product: Product) -> None:
        if self.ttl_seconds <= 0:
            return
        self._entries[product_key(ingredient_name)] = (
            self.clock() + self.ttl_seconds,
            product,
        )

    def __len__(self) -> int:
        return len(self._entries)
