from __future__ import annotations

from datetime import datetime
from typing import Optional, TypedDict


# PUBLIC_INTERFACE
class HabitEntity(TypedDict):
    """
    A single trackable habit as held by the habit store.

    Fields:
    - text: Trimmed, non-empty name; unique within the store ignoring case
    - completed: Boolean completion flag
    - created_at: Local timestamp of creation
    - last_updated: Local timestamp of the last toggle, None until toggled
    """

    text: str
    completed: bool
    created_at: datetime
    last_updated: Optional[datetime]


# PUBLIC_INTERFACE
class StreakEntity(TypedDict):
    """
    The running daily streak. There is exactly one per store.

    Fields:
    - current_streak: Number of consecutive days with at least one completion
    - last_update: Moment the streak was last recomputed, None before the first completion
    """

    current_streak: int
    last_update: Optional[datetime]


def default_streak() -> StreakEntity:
    return {"current_streak": 0, "last_update": None}
