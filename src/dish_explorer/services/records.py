"""Serialization of favorites and history lists.

Lists are stored as JSON arrays of flat records using the catalog's field
names (``idMeal``, ``strMeal``, ``strMealThumb``, plus ``viewedAt`` for
history), so entries written by either source share one shape.
"""

import json
import logging

from dish_explorer.domain.dishes import DishSummary
from dish_explorer.domain.errors import StorageError
from dish_explorer.domain.saved import HistoryEntry
from dish_explorer.services.storage import KeyValueStore

_logger = logging.getLogger(__name__)


def summary_to_record(summary: DishSummary) -> dict[str, object]:
    return {
        "idMeal": summary.id,
        "strMeal": summary.name,
        "strMealThumb": summary.thumbnail_ref,
    }


def summary_from_record(record: dict[str, object]) -> DishSummary:
    return DishSummary(
        id=str(record["idMeal"]),
        name=str(record.get("strMeal") or ""),
        thumbnail_ref=str(record.get("strMealThumb") or ""),
    )


def history_to_record(entry: HistoryEntry) -> dict[str, object]:
    record = summary_to_record(entry.dish)
    record["viewedAt"] = entry.viewed_at
    return record


def history_from_record(record: dict[str, object]) -> HistoryEntry:
    viewed_at = record.get("viewedAt")
    return HistoryEntry(
        dish=summary_from_record(record),
        viewed_at=int(viewed_at) if isinstance(viewed_at, int | float) else 0,
    )


def read_records(storage: KeyValueStore, key: str) -> list[dict[str, object]]:
    """Read a stored list, treating any failure as an empty collection."""
    try:
        raw = storage.get(key)
    except StorageError:
        _logger.warning(
            "Storage read failed for %s, using empty list", key, exc_info=True
        )
        return []
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except ValueError:
        _logger.warning("Discarding malformed %s payload", key)
        return []
    if not isinstance(data, list):
        _logger.warning("Discarding non-list %s payload", key)
        return []
    return [item for item in data if isinstance(item, dict) and "idMeal" in item]


def write_records(
    storage: KeyValueStore, key: str, records: list[dict[str, object]]
) -> None:
    """Serialize and store a list; backend failures surface as StorageError."""
    payload = json.dumps(records)
    try:
        storage.set(key, payload)
    except StorageError:
        raise
    except Exception as exc:
        raise StorageError(f"Failed to write {key}") from exc
