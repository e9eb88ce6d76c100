"""Recently viewed dishes store."""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from dish_explorer.domain.dishes import DishSummary
from dish_explorer.domain.saved import MAX_HISTORY, HistoryEntry
from dish_explorer.services.records import (
    history_from_record,
    history_to_record,
    read_records,
    write_records,
)
from dish_explorer.services.storage import HISTORY_KEY, KeyValueStore


def _now_millis() -> int:
    return int(time.time() * 1000)


@dataclass
class HistoryStore:
    """Bounded most-recent-first log of viewed dishes."""

    storage: KeyValueStore
    key: str = HISTORY_KEY
    max_entries: int = MAX_HISTORY
    clock: Callable[[], int] = _now_millis
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    def record_view(self, dish: DishSummary) -> None:
        """Move the dish to the front of the history with a fresh timestamp."""
        entry = HistoryEntry(dish=dish, viewed_at=self.clock())
        with self._lock:
            records = read_records(self.storage, self.key)
            records = [history_to_record(entry)] + [
                record for record in records if str(record["idMeal"]) != dish.id
            ]
            write_records(self.storage, self.key, records[: self.max_entries])

    def list_history(self) -> list[HistoryEntry]:
        """Return history entries, newest first."""
        records = read_records(self.storage, self.key)
        return [history_from_record(record) for record in records]

    def clear_history(self) -> None:
        """Remove every history entry."""
        with self._lock:
            write_records(self.storage, self.key, [])
