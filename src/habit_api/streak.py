from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable

from .models import StreakEntity
from .serialization import decode_streak, encode_streak
from .storage import STREAK_KEY, KeyValueStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


# PUBLIC_INTERFACE
class StreakTracker:
    """
    Daily streak counter persisted as a singleton under the 'streakData' key.

    The streak is only recomputed when a habit is freshly marked completed:
    - already recomputed today: nothing changes
    - first completion ever, or last recomputation was yesterday: streak + 1
    - otherwise (a gap of two days or more): streak restarts at 1
    """

    def __init__(self, kv: KeyValueStore, clock: Clock = datetime.now) -> None:
        self._kv = kv
        self._clock = clock
        self._state: StreakEntity = decode_streak(kv.get(STREAK_KEY))

    @property
    def current_streak(self) -> int:
        return self._state["current_streak"]

    def snapshot(self) -> StreakEntity:
        return self._state.copy()

    def record_completion(self) -> int:
        """Recompute the streak for a completion happening now and return its value."""
        now = self._clock()
        today = now.date()
        last_update = self._state["last_update"]
        last = last_update.date() if last_update is not None else None

        if last == today:
            return self._state["current_streak"]

        if last is None or last == today - timedelta(days=1):
            self._state["current_streak"] += 1
        else:
            logger.info("Streak broken (last completion on %s); restarting", last.isoformat())
            self._state["current_streak"] = 1

        self._state["last_update"] = now
        self._kv.set(STREAK_KEY, encode_streak(self._state))
        logger.info("Streak is now %d day(s)", self._state["current_streak"])
        return self._state["current_streak"]
