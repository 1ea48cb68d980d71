from __future__ import annotations

from enum import Enum


class Notice(str, Enum):
    """Transient user-facing notifications raised by habit store operations."""

    DUPLICATE = "duplicate"
    EMPTY = "empty"
    ADDED = "added"
    DELETED = "deleted"
    RESET = "reset"
    NOTHING_TO_CLEAR = "nothing_to_clear"
    CLEARED = "cleared"
    INSIGHTS_UNAVAILABLE = "insights_unavailable"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    Notice.DUPLICATE: "Habit already exists!",
    Notice.EMPTY: "Please enter a habit name",
    Notice.ADDED: "Habit added successfully!",
    Notice.DELETED: "Habit deleted",
    Notice.RESET: "All habits reset",
    Notice.NOTHING_TO_CLEAR: "No completed habits to clear",
    Notice.CLEARED: "Completed habits cleared",
    Notice.INSIGHTS_UNAVAILABLE: "Insights feature coming soon!",
}
