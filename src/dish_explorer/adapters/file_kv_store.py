"""JSON file key/value store for single-user installs."""

import json
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

from dish_explorer.domain.errors import StorageError
from dish_explorer.services.storage import KeyValueStore

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileKeyValueStore(KeyValueStore):
    """Stores every key in one JSON object on disk."""

    path: Path
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    def get(self, key: str) -> str | None:
        with self._lock:
            value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        # The file holds every key, so the whole rewrite runs under one lock.
        with self._lock:
            try:
                data = self._load()
            except StorageError:
                _logger.warning(
                    "Replacing unreadable storage file %s", self.path, exc_info=True
                )
                data = {}
            data[key] = value
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                tmp_path.write_text(json.dumps(data), encoding="utf-8")
                tmp_path.replace(self.path)
            except OSError as exc:
                raise StorageError(f"Failed to write {key} to {self.path}") from exc

    def _load(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StorageError(f"Failed to read {self.path}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"Unexpected storage format in {self.path}")
        return data
