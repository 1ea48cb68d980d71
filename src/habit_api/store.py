from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from threading import RLock
from typing import List, Optional

from .models import HabitEntity, StreakEntity
from .notifications import Notice
from .serialization import decode_habits, encode_habits
from .storage import HABITS_KEY, KeyValueStore, get_key_value_store
from .streak import Clock, StreakTracker

logger = logging.getLogger(__name__)

DANGER = "danger"
WARNING = "warning"
SUCCESS = "success"


# PUBLIC_INTERFACE
def progress_band(percentage: int) -> str:
    """Return the display colour band for a completion percentage."""
    if percentage < 30:
        return DANGER
    if percentage < 70:
        return WARNING
    return SUCCESS


@dataclass(frozen=True)
class Progress:
    """
    Aggregate completion of the habit list.
    """
    completed: int
    total: int
    percentage: int

    @property
    def band(self) -> str:
        return progress_band(self.percentage)


# PUBLIC_INTERFACE
class HabitStore:
    """
    Owns the ordered habit list and the streak tracker, persisting both through
    a key-value store.

    State is loaded (or defaulted) on construction. Every mutation writes the
    full habit list immediately, so no flush is needed on shutdown. Invalid user
    input never raises; operations return a Notice describing the outcome.
    Positional indexes refer to the current order of habits().
    """

    def __init__(self, kv: KeyValueStore, clock: Clock = datetime.now) -> None:
        self._lock = RLock()
        self._kv = kv
        self._clock = clock
        self._habits: List[HabitEntity] = decode_habits(kv.get(HABITS_KEY), loaded_at=clock())
        self._streak = StreakTracker(kv, clock)

    def _save(self) -> None:
        self._kv.set(HABITS_KEY, encode_habits(self._habits))

    def _check_index(self, index: int) -> None:
        # Negative indexes would silently address from the end
        if not 0 <= index < len(self._habits):
            raise IndexError(f"habit index {index} out of range")

    def habits(self) -> List[HabitEntity]:
        with self._lock:
            return [h.copy() for h in self._habits]

    def streak(self) -> StreakEntity:
        with self._lock:
            return self._streak.snapshot()

    def add(self, text: str) -> Notice:
        name = (text or "").strip()
        if not name:
            return Notice.EMPTY
        with self._lock:
            if any(h["text"].lower() == name.lower() for h in self._habits):
                return Notice.DUPLICATE
            self._habits.append(
                {"text": name, "completed": False, "created_at": self._clock(), "last_updated": None}
            )
            self._save()
        logger.info("Added habit %r", name)
        return Notice.ADDED

    def toggle(self, index: int) -> HabitEntity:
        """
        Flip the completion flag of the habit at index and return its new state.

        Marking a habit completed recomputes the streak.

        Raises:
            IndexError if index does not address an existing habit.
        """
        with self._lock:
            self._check_index(index)
            habit = self._habits[index]
            habit["completed"] = not habit["completed"]
            habit["last_updated"] = self._clock()
            if habit["completed"]:
                self._streak.record_completion()
            self._save()
            return habit.copy()

    def delete(self, index: int) -> Notice:
        """
        Remove the habit at index.

        Raises:
            IndexError if index does not address an existing habit.
        """
        with self._lock:
            self._check_index(index)
            removed = self._habits.pop(index)
            self._save()
        logger.info("Deleted habit %r", removed["text"])
        return Notice.DELETED

    def reset_all(self) -> Notice:
        with self._lock:
            for habit in self._habits:
                habit["completed"] = False
            self._save()
        logger.info("Reset all habits")
        return Notice.RESET

    def clear_completed(self) -> Notice:
        with self._lock:
            remaining = [h for h in self._habits if not h["completed"]]
            if len(remaining) == len(self._habits):
                return Notice.NOTHING_TO_CLEAR
            cleared = len(self._habits) - len(remaining)
            self._habits = remaining
            self._save()
        logger.info("Cleared %d completed habit(s)", cleared)
        return Notice.CLEARED

    def progress(self) -> Progress:
        with self._lock:
            total = len(self._habits)
            completed = sum(1 for h in self._habits if h["completed"])
        if total == 0:
            return Progress(completed=0, total=0, percentage=0)
        # Halves round up
        percentage = int(math.floor(100 * completed / total + 0.5))
        return Progress(completed=completed, total=total, percentage=percentage)

    def insights(self) -> Notice:
        return Notice.INSIGHTS_UNAVAILABLE


_default_store: Optional[HabitStore] = None
_default_store_lock = RLock()


# PUBLIC_INTERFACE
def get_habit_store() -> HabitStore:
    """
    Return the process-wide habit store backed by the configured key-value store.
    Created lazily on first use.
    """
    global _default_store
    with _default_store_lock:
        if _default_store is None:
            _default_store = HabitStore(get_key_value_store())
        return _default_store
