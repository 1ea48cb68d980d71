"""
FastAPI Habit Tracker Backend package.

The framework-free core lives in habit_api.store (HabitStore) and
habit_api.streak (StreakTracker); habit_api.main exposes the HTTP app.
"""

from .store import HabitStore, Progress, progress_band  # noqa: F401
from .streak import StreakTracker  # noqa: F401
