from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status

from ..notifications import Notice
from ..schemas import HabitBoard, HabitCreate, HabitOut, NotificationOut, ProgressOut, StreakOut
from ..settings import Settings, get_settings
from ..store import HabitStore, get_habit_store

router = APIRouter(
    prefix="/api/v1",
    tags=["habits"],
)

_HABIT_NOT_FOUND = "Habit not found"


def _get_store(store: HabitStore = Depends(get_habit_store)) -> HabitStore:
    """
    Dependency wrapper for the habit store to keep signatures clean.
    """
    return store


def _board(store: HabitStore, settings: Settings, notice: Optional[Notice] = None) -> HabitBoard:
    notification = (
        NotificationOut.from_notice(notice, settings.notification_duration_seconds) if notice else None
    )
    return HabitBoard(
        notification=notification,
        habits=[HabitOut.from_entity(i, h) for i, h in enumerate(store.habits())],
        progress=ProgressOut.from_progress(store.progress()),
        streak=StreakOut.from_entity(store.streak()),
    )


# PUBLIC_INTERFACE
@router.get(
    "/habits/",
    response_model=HabitBoard,
    summary="List Habits",
    description="Return all habits in display order together with progress and the current streak.",
)
def list_habits(
    store: HabitStore = Depends(_get_store),
    settings: Settings = Depends(get_settings),
) -> HabitBoard:
    """
    Current habit board.
    """
    return _board(store, settings)


# PUBLIC_INTERFACE
@router.post(
    "/habits/",
    response_model=HabitBoard,
    status_code=status.HTTP_201_CREATED,
    summary="Add Habit",
    description=(
        "Add a habit. Blank names and names that already exist (ignoring case) are not added; "
        "the response then carries an 'empty' or 'duplicate' notification with status 200."
    ),
    responses={
        201: {"description": "Habit added"},
        200: {"description": "Habit rejected, see notification"},
    },
)
def add_habit(
    payload: HabitCreate,
    response: Response,
    store: HabitStore = Depends(_get_store),
    settings: Settings = Depends(get_settings),
) -> HabitBoard:
    """
    Add a new habit.
    """
    notice = store.add(payload.text)
    if notice is not Notice.ADDED:
        response.status_code = status.HTTP_200_OK
    return _board(store, settings, notice)


# PUBLIC_INTERFACE
@router.post(
    "/habits/reset",
    response_model=HabitBoard,
    summary="Reset Habits",
    description="Mark every habit as not completed.",
)
def reset_habits(
    store: HabitStore = Depends(_get_store),
    settings: Settings = Depends(get_settings),
) -> HabitBoard:
    """
    Reset all completions.
    """
    return _board(store, settings, store.reset_all())


# PUBLIC_INTERFACE
@router.post(
    "/habits/clear-completed",
    response_model=HabitBoard,
    summary="Clear Completed Habits",
    description="Remove every completed habit. Answers with a 'nothing_to_clear' notification if none are completed.",
)
def clear_completed(
    store: HabitStore = Depends(_get_store),
    settings: Settings = Depends(get_settings),
) -> HabitBoard:
    """
    Remove completed habits.
    """
    return _board(store, settings, store.clear_completed())


# PUBLIC_INTERFACE
@router.get(
    "/habits/progress",
    response_model=ProgressOut,
    summary="Get Progress",
    description="Completed count, total count, rounded percentage and colour band.",
)
def get_progress(store: HabitStore = Depends(_get_store)) -> ProgressOut:
    """
    Aggregate completion.
    """
    return ProgressOut.from_progress(store.progress())


# PUBLIC_INTERFACE
@router.post(
    "/habits/{index}/toggle",
    response_model=HabitBoard,
    summary="Toggle Habit",
    description="Flip the completion flag of the habit at the given position. Completing a habit updates the streak.",
    responses={
        200: {"description": "Habit toggled"},
        404: {"description": "Habit not found"},
    },
)
def toggle_habit(
    index: int = Path(..., ge=0, description="Position of the habit in the current list"),
    store: HabitStore = Depends(_get_store),
    settings: Settings = Depends(get_settings),
) -> HabitBoard:
    """
    Toggle a habit's completion.
    """
    try:
        store.toggle(index)
    except IndexError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_HABIT_NOT_FOUND)
    return _board(store, settings)


# PUBLIC_INTERFACE
@router.delete(
    "/habits/{index}",
    response_model=HabitBoard,
    summary="Delete Habit",
    description="Delete the habit at the given position.",
    responses={
        200: {"description": "Habit deleted"},
        404: {"description": "Habit not found"},
    },
)
def delete_habit(
    index: int = Path(..., ge=0, description="Position of the habit in the current list"),
    store: HabitStore = Depends(_get_store),
    settings: Settings = Depends(get_settings),
) -> HabitBoard:
    """
    Delete a habit. 404 if the position is out of range.
    """
    try:
        notice = store.delete(index)
    except IndexError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_HABIT_NOT_FOUND)
    return _board(store, settings, notice)


# PUBLIC_INTERFACE
@router.get(
    "/streak",
    response_model=StreakOut,
    summary="Get Streak",
    description="Current daily streak and when it was last recomputed.",
)
def get_streak(store: HabitStore = Depends(_get_store)) -> StreakOut:
    """
    Current streak.
    """
    return StreakOut.from_entity(store.streak())


# PUBLIC_INTERFACE
@router.get(
    "/insights",
    response_model=NotificationOut,
    summary="Insights",
    description="Placeholder; always answers with an 'insights_unavailable' notification.",
)
def get_insights(
    store: HabitStore = Depends(_get_store),
    settings: Settings = Depends(get_settings),
) -> NotificationOut:
    """
    Insights are not available yet.
    """
    return NotificationOut.from_notice(store.insights(), settings.notification_duration_seconds)
