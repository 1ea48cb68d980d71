"""
JSON encoding of the persisted habit list and streak state.

The stored layout mirrors the one written by the browser widget
(camelCase keys, ISO-8601 timestamps) so either side can read the other's data.
Decoding never raises: anything unreadable falls back to the default value.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from .models import HabitEntity, StreakEntity, default_streak

logger = logging.getLogger(__name__)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


# PUBLIC_INTERFACE
def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a stored ISO-8601 timestamp into a naive local datetime.

    - A trailing 'Z' (UTC designator used by browsers) is accepted.
    - Aware values are converted to local time and made naive.
    - None, non-strings and unparseable strings yield None.
    """
    if not isinstance(value, str):
        return None
    s = value.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(s)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _habit_to_record(habit: HabitEntity) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "text": habit["text"],
        "completed": habit["completed"],
        "createdAt": format_timestamp(habit["created_at"]),
    }
    if habit["last_updated"] is not None:
        record["lastUpdated"] = format_timestamp(habit["last_updated"])
    return record


def _record_to_habit(record: Any, loaded_at: datetime) -> Optional[HabitEntity]:
    if not isinstance(record, dict):
        return None
    text = record.get("text")
    if not isinstance(text, str) or not text.strip():
        return None
    created_at = parse_timestamp(record.get("createdAt"))
    if created_at is None:
        logger.warning("Stored habit %r has an unreadable createdAt; using load time", text.strip())
        created_at = loaded_at
    return {
        "text": text.strip(),
        "completed": record.get("completed") is True,
        "created_at": created_at,
        "last_updated": parse_timestamp(record.get("lastUpdated")),
    }


# PUBLIC_INTERFACE
def encode_habits(habits: List[HabitEntity]) -> str:
    """Serialize the ordered habit list to its stored JSON text."""
    return json.dumps([_habit_to_record(h) for h in habits], ensure_ascii=False)


# PUBLIC_INTERFACE
def decode_habits(raw: Optional[str], loaded_at: Optional[datetime] = None) -> List[HabitEntity]:
    """
    Deserialize the stored habit list.

    A missing value, invalid JSON or a non-list payload yields an empty list.
    Entries without a usable text are dropped; names are trimmed. An entry
    whose creation timestamp cannot be parsed is kept with created_at set to
    loaded_at (default: now).
    """
    loaded_at = loaded_at or datetime.now()
    if raw is None:
        return []
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("Stored habits are not valid JSON; starting with an empty list")
        return []
    if not isinstance(data, list):
        logger.warning("Stored habits are not a list; starting with an empty list")
        return []

    habits: List[HabitEntity] = []
    for record in data:
        habit = _record_to_habit(record, loaded_at)
        if habit is None:
            logger.warning("Skipping unreadable stored habit: %r", record)
            continue
        habits.append(habit)
    return habits


# PUBLIC_INTERFACE
def encode_streak(streak: StreakEntity) -> str:
    """Serialize the streak state to its stored JSON text."""
    return json.dumps(
        {
            "currentStreak": streak["current_streak"],
            "lastUpdate": format_timestamp(streak["last_update"]),
        }
    )


# PUBLIC_INTERFACE
def decode_streak(raw: Optional[str]) -> StreakEntity:
    """
    Deserialize the stored streak state.

    A missing or unreadable value yields the default (0, no last update). An
    unparseable lastUpdate is treated as absent.
    """
    if raw is None:
        return default_streak()
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("Stored streak data is not valid JSON; resetting streak")
        return default_streak()
    if not isinstance(data, dict):
        logger.warning("Stored streak data is not an object; resetting streak")
        return default_streak()

    count = data.get("currentStreak")
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        count = 0
    return {"current_streak": count, "last_update": parse_timestamp(data.get("lastUpdate"))}
