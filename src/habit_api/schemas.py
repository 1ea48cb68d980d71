from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import HabitEntity, StreakEntity
from .notifications import Notice
from .store import Progress

Band = Literal["danger", "warning", "success"]


# PUBLIC_INTERFACE
class HabitCreate(BaseModel):
    """
    Schema for adding a new habit.

    The text is not length-validated here: blank or duplicate names are
    answered with a notification instead of a validation error.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"text": "Drink water"}})

    text: str = Field(..., description="Name of the habit; surrounding whitespace is trimmed")


# PUBLIC_INTERFACE
class HabitOut(BaseModel):
    """
    Schema returned by the API for a habit.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "index": 0,
                "text": "Drink water",
                "completed": True,
                "created_at": "2025-01-25T10:15:30.123456",
                "last_updated": "2025-01-26T09:00:00.000001",
            }
        }
    )

    index: int = Field(..., description="Position of the habit in the current list")
    text: str = Field(..., description="Name of the habit")
    completed: bool = Field(..., description="Completion status flag")
    created_at: datetime = Field(..., description="Creation timestamp")
    last_updated: Optional[datetime] = Field(default=None, description="Timestamp of the last toggle")

    @classmethod
    def from_entity(cls, index: int, habit: HabitEntity) -> "HabitOut":
        return cls(index=index, **habit)


# PUBLIC_INTERFACE
class ProgressOut(BaseModel):
    """
    Aggregate completion with its display colour band.
    """

    completed: int = Field(..., description="Number of completed habits")
    total: int = Field(..., description="Number of habits")
    percentage: int = Field(..., description="Completed share as a rounded integer percentage")
    band: Band = Field(..., description="danger below 30%, warning below 70%, success otherwise")

    @classmethod
    def from_progress(cls, progress: Progress) -> "ProgressOut":
        return cls(
            completed=progress.completed,
            total=progress.total,
            percentage=progress.percentage,
            band=progress.band,  # type: ignore[arg-type]
        )


# PUBLIC_INTERFACE
class StreakOut(BaseModel):
    """
    Current daily streak.
    """

    current_streak: int = Field(..., description="Consecutive days with at least one completion")
    last_update: Optional[datetime] = Field(default=None, description="When the streak was last recomputed")

    @classmethod
    def from_entity(cls, streak: StreakEntity) -> "StreakOut":
        return cls(**streak)


# PUBLIC_INTERFACE
class NotificationOut(BaseModel):
    """
    Transient message for the client to show and hide after dismiss_after_seconds.
    """

    code: Notice = Field(..., description="Stable notification code")
    message: str = Field(..., description="Human readable text")
    dismiss_after_seconds: float = Field(..., description="How long the client should display the message")

    @classmethod
    def from_notice(cls, notice: Notice, dismiss_after_seconds: float) -> "NotificationOut":
        return cls(code=notice, message=notice.message, dismiss_after_seconds=dismiss_after_seconds)


# PUBLIC_INTERFACE
class HabitBoard(BaseModel):
    """
    Full view returned after every operation: habit list, progress, streak and
    an optional notification.
    """

    notification: Optional[NotificationOut] = Field(default=None, description="Notification raised by the operation")
    habits: List[HabitOut] = Field(..., description="Habits in display order")
    progress: ProgressOut
    streak: StreakOut
