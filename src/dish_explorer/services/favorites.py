"""Favorites store."""

import logging
import threading
from dataclasses import dataclass, field

from dish_explorer.domain.dishes import DishSummary
from dish_explorer.services.records import (
    read_records,
    summary_from_record,
    summary_to_record,
    write_records,
)
from dish_explorer.services.storage import FAVORITES_KEY, KeyValueStore

_logger = logging.getLogger(__name__)


@dataclass
class FavoritesStore:
    """Persisted set of favorite dishes owning a single storage key."""

    storage: KeyValueStore
    key: str = FAVORITES_KEY
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    def is_favorite(self, dish_id: str) -> bool:
        """Return True when the dish id is in the favorites list."""
        records = read_records(self.storage, self.key)
        return any(str(record["idMeal"]) == dish_id for record in records)

    def toggle_favorite(self, dish: DishSummary) -> bool:
        """Add or remove a dish and return the new favorite state."""
        with self._lock:
            records = read_records(self.storage, self.key)
            remaining = [
                record for record in records if str(record["idMeal"]) != dish.id
            ]
            if len(remaining) != len(records):
                write_records(self.storage, self.key, remaining)
                _logger.info("Removed favorite: dish_id=%s", dish.id)
                return False
            records.append(summary_to_record(dish))
            write_records(self.storage, self.key, records)
            _logger.info("Added favorite: dish_id=%s", dish.id)
            return True

    def list_favorites(self) -> list[DishSummary]:
        """Return favorites in insertion order."""
        records = read_records(self.storage, self.key)
        return [summary_from_record(record) for record in records]
