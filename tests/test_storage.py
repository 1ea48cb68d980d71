import json
import logging
from datetime import datetime, timedelta, timezone

from habit_api.db import SQLiteKeyValueStore
from habit_api.serialization import (
    decode_habits,
    decode_streak,
    encode_habits,
    encode_streak,
    parse_timestamp,
)
from habit_api.settings import Settings
from habit_api.storage import HABITS_KEY, STREAK_KEY, InMemoryKeyValueStore, get_key_value_store
from habit_api.store import HabitStore


def make_settings(**overrides):
    values = dict(
        persistence_backend="memory",
        sqlite_db_path="./data/habits.db",
        cors_allow_origins=["*"],
        notification_duration_seconds=3.0,
        log_level="INFO",
        log_file=None,
    )
    values.update(overrides)
    return Settings(**values)


class TestKeyValueStores:
    def test_in_memory_missing_key(self):
        kv = InMemoryKeyValueStore()
        assert kv.get(HABITS_KEY) is None

    def test_in_memory_set_and_overwrite(self):
        kv = InMemoryKeyValueStore()
        kv.set("k", "one")
        kv.set("k", "two")
        assert kv.get("k") == "two"

    def test_sqlite_persists_across_instances(self, tmp_path):
        path = str(tmp_path / "nested" / "habits.db")
        kv = SQLiteKeyValueStore(path)
        assert kv.get(STREAK_KEY) is None
        kv.set(STREAK_KEY, "first")
        kv.set(STREAK_KEY, "second")

        again = SQLiteKeyValueStore(path)
        assert again.get(STREAK_KEY) == "second"

    def test_habit_store_over_sqlite(self, tmp_path, clock):
        path = str(tmp_path / "habits.db")
        store = HabitStore(SQLiteKeyValueStore(path), clock=clock)
        store.add("Read")
        store.add("Walk")
        store.toggle(0)

        reloaded = HabitStore(SQLiteKeyValueStore(path), clock=clock)
        assert reloaded.habits() == store.habits()
        assert reloaded.streak()["current_streak"] == 1

    def test_factory_selects_backend(self, tmp_path):
        assert isinstance(get_key_value_store(make_settings()), InMemoryKeyValueStore)
        sqlite_settings = make_settings(persistence_backend="sqlite", sqlite_db_path=str(tmp_path / "kv.db"))
        assert isinstance(get_key_value_store(sqlite_settings), SQLiteKeyValueStore)


class TestSerialization:
    def test_round_trip(self):
        created = datetime(2025, 3, 10, 9, 0, 0, 123456)
        habits = [
            {"text": "Read", "completed": True, "created_at": created, "last_updated": created + timedelta(hours=2)},
            {"text": "Walk", "completed": False, "created_at": created, "last_updated": None},
        ]
        streak = {"current_streak": 3, "last_update": created + timedelta(hours=2)}

        assert decode_habits(encode_habits(habits)) == habits
        assert decode_streak(encode_streak(streak)) == streak

    def test_stored_layout(self):
        created = datetime(2025, 3, 10, 9, 0, 0)
        stored = json.loads(
            encode_habits([{"text": "Read", "completed": False, "created_at": created, "last_updated": None}])
        )
        assert stored == [{"text": "Read", "completed": False, "createdAt": "2025-03-10T09:00:00"}]
        assert json.loads(encode_streak({"current_streak": 0, "last_update": None})) == {
            "currentStreak": 0,
            "lastUpdate": None,
        }

    def test_missing_values_yield_defaults(self):
        assert decode_habits(None) == []
        assert decode_streak(None) == {"current_streak": 0, "last_update": None}

    def test_corrupt_values_yield_defaults(self):
        assert decode_habits("{not json") == []
        assert decode_habits('{"text": "Read"}') == []
        assert decode_streak("[1, 2]") == {"current_streak": 0, "last_update": None}
        assert decode_streak('{"currentStreak": -2, "lastUpdate": null}')["current_streak"] == 0
        assert decode_streak('{"currentStreak": true}')["current_streak"] == 0

    def test_corrupt_values_log_a_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="habit_api.serialization"):
            assert decode_habits("{not json") == []
        assert "not valid JSON" in caplog.text

        caplog.clear()
        with caplog.at_level(logging.WARNING, logger="habit_api.serialization"):
            decode_streak("[1, 2]")
        assert "not an object" in caplog.text

    def test_entries_without_text_are_skipped(self):
        raw = json.dumps(
            [
                {"text": "Read", "completed": True, "createdAt": "2025-03-10T09:00:00"},
                {"text": "   ", "completed": False, "createdAt": "2025-03-10T09:00:00"},
                {"completed": False, "createdAt": "2025-03-10T09:00:00"},
                "Stretch",
            ]
        )
        habits = decode_habits(raw)
        assert [h["text"] for h in habits] == ["Read"]
        assert habits[0]["last_updated"] is None

    def test_unreadable_created_at_keeps_habit(self, caplog):
        loaded_at = datetime(2025, 3, 12, 8, 0, 0)
        raw = json.dumps([{"text": "Walk", "completed": True, "createdAt": "yesterday"}])
        with caplog.at_level(logging.WARNING, logger="habit_api.serialization"):
            habits = decode_habits(raw, loaded_at=loaded_at)
        assert habits == [{"text": "Walk", "completed": True, "created_at": loaded_at, "last_updated": None}]
        assert "unreadable createdAt" in caplog.text

    def test_loaded_text_is_trimmed(self):
        raw = json.dumps([{"text": "  Read ", "completed": False, "createdAt": "2025-03-10T09:00:00"}])
        assert decode_habits(raw)[0]["text"] == "Read"

    def test_reads_browser_written_data(self):
        raw = json.dumps(
            [{"text": "Drink water", "completed": True, "createdAt": "2025-03-10T08:30:00.000Z",
              "lastUpdated": "2025-03-10T09:45:12.500Z"}]
        )
        habits = decode_habits(raw)
        assert len(habits) == 1
        expected = datetime(2025, 3, 10, 8, 30, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
        assert habits[0]["created_at"] == expected
        assert habits[0]["created_at"].tzinfo is None
        assert habits[0]["completed"] is True

    def test_parse_timestamp(self):
        assert parse_timestamp("2025-03-10T09:00:00") == datetime(2025, 3, 10, 9, 0, 0)
        assert parse_timestamp("2025-03-10") == datetime(2025, 3, 10)
        assert parse_timestamp("garbage") is None
        assert parse_timestamp(None) is None
        assert parse_timestamp(12345) is None
