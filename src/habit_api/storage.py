from __future__ import annotations

from abc import ABC, abstractmethod
from threading import RLock
from typing import Dict, Optional

from .settings import Settings, get_settings

# Fixed keys under which the two persisted entities live
HABITS_KEY = "habits"
STREAK_KEY = "streakData"


# PUBLIC_INTERFACE
class KeyValueStore(ABC):
    """Abstract contract for the durable string key-value collaborator."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None if the key is absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""


class InMemoryKeyValueStore(KeyValueStore):
    """
    Thread-safe in-memory key-value store suitable for testing and default runtime.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._lock = RLock()
        self._items: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value


# PUBLIC_INTERFACE
def get_key_value_store(settings: Optional[Settings] = None) -> KeyValueStore:
    """
    Factory to return the configured key-value store based on settings.
    - memory: InMemoryKeyValueStore
    - sqlite: SQLiteKeyValueStore stored at settings.sqlite_db_path
    """
    settings = settings or get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteKeyValueStore

        return SQLiteKeyValueStore(settings.sqlite_db_path)
    return InMemoryKeyValueStore()
