"""
Habits router.

POST   /habits                  — create a habit
GET    /habits                  — list habits with derived streak fields
GET    /habits/{id}             — one habit
PATCH  /habits/{id}             — partial update
DELETE /habits/{id}             — delete habit and its completion history
POST   /habits/{id}/toggle      — flip today's completion
GET    /habits/{id}/calendar    — last N days from the completion ledger
"""
from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from foundations.core.deps import get_current_user_id, get_now
from foundations.db.base import get_db
from foundations.schemas.common import error_responses
from foundations.schemas.habit import (
    CalendarCellResponse,
    CalendarResponse,
    HabitCreate,
    HabitResponse,
    HabitToggleResponse,
    HabitUpdate,
)
from foundations.services import habits as habit_service
from foundations.services.habits import HabitView, decode_reasons

router = APIRouter(prefix="/habits", tags=["habits"])

_NOT_FOUND = error_responses({
    403: "Habit belongs to another user.",
    404: "Habit not found.",
})


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _ev(v) -> str:
    """Extract bare string value from a str-enum or plain str."""
    return v.value if hasattr(v, "value") else str(v)


def _view_to_response(view: HabitView) -> HabitResponse:
    h = view.habit
    s = view.state
    return HabitResponse(
        id=h.id,
        title=h.title,
        description=h.description,
        category=_ev(h.category),
        frequency=h.frequency,
        time_of_day=_ev(h.time_of_day),
        reasons=decode_reasons(h.reasons),
        streak=s.current,
        longest_streak=s.longest,
        completed_today=s.completed_today,
        at_risk=s.at_risk,
        milestone=s.milestone,
        mastered=s.mastered,
        created_at=h.created_at.isoformat() if h.created_at else "",
    )


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=HabitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a habit",
    responses=error_responses({422: "Validation error (empty title, not 3 reasons, etc.)"}),
)
def create_habit(
    payload: HabitCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
):
    habit = habit_service.create_habit(
        db,
        user_id=user_id,
        title=payload.title,
        description=payload.description,
        category=payload.category,
        frequency=payload.frequency,
        time_of_day=payload.time_of_day,
        reasons=payload.reasons,
    )
    return _view_to_response(habit_service.get_habit(db, user_id, habit.id, now))


@router.get(
    "",
    response_model=list[HabitResponse],
    summary="List the current user's habits",
)
def list_habits(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
):
    """Streak fields are recomputed from the completion history on every read."""
    return [_view_to_response(v) for v in habit_service.list_habits(db, user_id, now)]


@router.get("/{habit_id}", response_model=HabitResponse, summary="Get one habit", responses=_NOT_FOUND)
def get_habit(
    habit_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
):
    return _view_to_response(habit_service.get_habit(db, user_id, habit_id, now))


@router.patch("/{habit_id}", response_model=HabitResponse, summary="Update a habit", responses=_NOT_FOUND)
def update_habit(
    habit_id: int,
    payload: HabitUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
):
    changes = payload.model_dump(exclude_unset=True)
    return _view_to_response(habit_service.update_habit(db, user_id, habit_id, changes, now))


@router.delete(
    "/{habit_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a habit and its history",
    responses=_NOT_FOUND,
)
def delete_habit(
    habit_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    habit_service.delete_habit(db, user_id, habit_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# POST /habits/{id}/toggle
# ---------------------------------------------------------------------------

@router.post(
    "/{habit_id}/toggle",
    response_model=HabitToggleResponse,
    summary="Flip today's completion",
    responses=_NOT_FOUND,
)
def toggle_habit(
    habit_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
):
    """
    Mark today's completion on if it was off (or absent), off if it was on.

    The streak is recomputed from the full history after the write, so
    toggling off lowers it to whatever the remaining days support.
    """
    result = habit_service.toggle_habit(db, user_id, habit_id, now)
    return HabitToggleResponse(
        day=str(result.record.day),
        completed=result.record.completed,
        habit=_view_to_response(result.view),
    )


# ---------------------------------------------------------------------------
# GET /habits/{id}/calendar
# ---------------------------------------------------------------------------

@router.get(
    "/{habit_id}/calendar",
    response_model=CalendarResponse,
    summary="Completion heatmap for the last N days",
    responses=_NOT_FOUND,
)
def habit_calendar(
    habit_id: int,
    days: int = Query(default=30, ge=1, le=366, description="Number of days ending today."),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
):
    cells = habit_service.habit_calendar(db, user_id, habit_id, now, span=days)
    return CalendarResponse(
        habit_id=habit_id,
        days=[CalendarCellResponse(day=str(c.day), completed=c.completed) for c in cells],
    )
