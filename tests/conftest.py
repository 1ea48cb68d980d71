import os
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

# Ensure we default to memory backend for tests to avoid filesystem dependencies
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from habit_api.main import app  # noqa: E402
from habit_api.storage import InMemoryKeyValueStore  # noqa: E402
from habit_api.store import HabitStore, get_habit_store  # noqa: E402


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, days: int = 0, hours: int = 0, minutes: int = 0) -> None:
        self.now = self.now + timedelta(days=days, hours=hours, minutes=minutes)


class RecordingKeyValueStore(InMemoryKeyValueStore):
    """In-memory store that remembers every write."""

    def __init__(self, initial=None) -> None:
        super().__init__(initial)
        self.writes = []

    def set(self, key: str, value: str) -> None:
        self.writes.append(key)
        super().set(key, value)


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 3, 10, 9, 0, 0))


@pytest.fixture
def kv():
    return RecordingKeyValueStore()


@pytest.fixture
def store(kv, clock):
    return HabitStore(kv, clock=clock)


@pytest.fixture
def client(store):
    app.dependency_overrides[get_habit_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
