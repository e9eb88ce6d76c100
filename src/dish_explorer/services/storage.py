"""Key/value persistence backend interface."""

from dataclasses import dataclass, field
from typing import Protocol

FAVORITES_KEY = "FAVORITES"
HISTORY_KEY = "HISTORY"


class KeyValueStore(Protocol):
    """Durable string storage addressed by key."""

    def get(self, key: str) -> str | None:
        """Return the stored string for a key, if present."""

    def set(self, key: str, value: str) -> None:
        """Store a string under a key, replacing any previous value."""


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed store; contents are lost when the process exits."""

    values: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value
