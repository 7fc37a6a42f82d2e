"""
Habit service: CRUD plus the daily toggle.

Public API
----------
create_habit(db, user_id, ...)                     -> Habit
list_habits(db, user_id, now)                      -> list[HabitView]
get_habit(db, user_id, habit_id, now)              -> HabitView
update_habit(db, user_id, habit_id, changes, now)  -> HabitView
delete_habit(db, user_id, habit_id)                -> None
toggle_habit(db, user_id, habit_id, now)           -> ToggleResult
habit_calendar(db, user_id, habit_id, now, span)   -> list[CalendarCell]

`streak` / `longest_streak` on the Habit row are caches. Every read and
write recomputes them from the completion ledger and stores the result
back when they diverge.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from sqlalchemy.orm import Session

from foundations.core.config import settings
from foundations.core.errors import EntityValidationError
from foundations.models.completion import CompletionRecord, EntityKind
from foundations.models.habit import Habit, HabitCategory, TimeOfDay
from foundations.services import ledger
from foundations.services.access import get_owned
from foundations.services.day_key import resolve_day_key
from foundations.services.streaks import CalendarCell, StreakState, calendar, compute_streak_state

logger = logging.getLogger(__name__)

KIND = EntityKind.HABIT
_UPDATABLE = {"title", "description", "category", "frequency", "time_of_day", "reasons"}
_NOT_NULL = {"category", "frequency", "time_of_day"}


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class HabitView:
    habit: Habit
    state: StreakState


@dataclass
class ToggleResult:
    view: HabitView
    record: CompletionRecord


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _clean_title(title: Optional[str]) -> str:
    stripped = (title or "").strip()
    if not stripped:
        raise EntityValidationError("title", "title must not be empty")
    return stripped


def _encode_reasons(reasons: Optional[list[str]]) -> Optional[str]:
    return json.dumps(reasons) if reasons is not None else None


def decode_reasons(raw: Optional[str]) -> list[str]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except (ValueError, TypeError):
        return []
    return value if isinstance(value, list) else []


def _reconcile(db: Session, habit: Habit, today: date) -> HabitView:
    days = ledger.completed_days(db, KIND, habit.id)
    state = compute_streak_state(days, today, mastery_days=settings.MASTERY_THRESHOLD_DAYS)
    if habit.streak != state.current or habit.longest_streak != state.longest:
        logger.debug(
            "habit %s cache %s/%s -> %s/%s",
            habit.id, habit.streak, habit.longest_streak, state.current, state.longest,
        )
        habit.streak = state.current
        habit.longest_streak = state.longest
    return HabitView(habit=habit, state=state)


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def create_habit(
    db: Session,
    user_id: int,
    title: str,
    description: Optional[str] = None,
    category: str = HabitCategory.mind,
    frequency: str = "daily",
    time_of_day: str = TimeOfDay.anytime,
    reasons: Optional[list[str]] = None,
) -> Habit:
    habit = Habit(
        user_id=user_id,
        title=_clean_title(title),
        description=description,
        category=category,
        frequency=frequency,
        time_of_day=time_of_day,
        reasons=_encode_reasons(reasons),
        streak=0,
        longest_streak=0,
    )
    db.add(habit)
    db.commit()
    db.refresh(habit)
    logger.info("habit %s created for user %s", habit.id, user_id)
    return habit


def list_habits(db: Session, user_id: int, now: datetime) -> list[HabitView]:
    today = resolve_day_key(now)
    habits = (
        db.query(Habit)
        .filter(Habit.user_id == user_id)
        .order_by(Habit.created_at.asc(), Habit.id.asc())
        .all()
    )
    views = [_reconcile(db, h, today) for h in habits]
    if db.dirty:
        db.commit()
    return views


def get_habit(db: Session, user_id: int, habit_id: int, now: datetime) -> HabitView:
    habit = get_owned(db, Habit, KIND, habit_id, user_id)
    view = _reconcile(db, habit, resolve_day_key(now))
    if db.dirty:
        db.commit()
    return view


def update_habit(
    db: Session,
    user_id: int,
    habit_id: int,
    changes: dict[str, Any],
    now: datetime,
) -> HabitView:
    habit = get_owned(db, Habit, KIND, habit_id, user_id)
    for key, value in changes.items():
        if key not in _UPDATABLE:
            continue
        if key in _NOT_NULL and value is None:
            raise EntityValidationError(key, f"{key} cannot be null")
        if key == "title":
            value = _clean_title(value)
        elif key == "reasons":
            value = _encode_reasons(value)
        setattr(habit, key, value)
    view = _reconcile(db, habit, resolve_day_key(now))
    db.commit()
    db.refresh(habit)
    return view


def delete_habit(db: Session, user_id: int, habit_id: int) -> None:
    """Delete the habit and its completion history."""
    habit = get_owned(db, Habit, KIND, habit_id, user_id)
    removed = ledger.delete_history(db, KIND, habit.id)
    db.delete(habit)
    db.commit()
    logger.info("habit %s deleted (%d completion records)", habit_id, removed)


def toggle_habit(db: Session, user_id: int, habit_id: int, now: datetime) -> ToggleResult:
    """Flip today's completion and return the recomputed streak state."""
    habit = get_owned(db, Habit, KIND, habit_id, user_id)
    today = resolve_day_key(now)
    record = ledger.toggle_completion(db, KIND, habit.id, today)
    view = _reconcile(db, habit, today)
    db.commit()
    db.refresh(habit)
    logger.info(
        "habit %s toggled %s on %s (streak=%d)",
        habit.id, "on" if record.completed else "off", today, view.state.current,
    )
    return ToggleResult(view=view, record=record)


def habit_calendar(
    db: Session,
    user_id: int,
    habit_id: int,
    now: datetime,
    span: int = 30,
) -> list[CalendarCell]:
    habit = get_owned(db, Habit, KIND, habit_id, user_id)
    days = ledger.completed_days(db, KIND, habit.id)
    return calendar(days, resolve_day_key(now), span)
