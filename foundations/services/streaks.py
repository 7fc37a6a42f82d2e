"""
Streak Calculator — derives streak state from a set of completed days.

Policy
------
Today is *pending*: if today is completed the backward walk starts at today,
otherwise it starts at yesterday. A missing today therefore never breaks the
streak before the day has elapsed; any earlier missing day does.

`floor` (optional): days on or before it are never counted. Rules pass the
day of their last violation so breaking a rule resets the current streak
while the completion history stays intact.

Pure functions only: no ORM, no clock. Callers supply `today`.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

MILESTONES = (7, 21, 30, 67, 100)
MASTERY_DAYS = 67


@dataclass
class StreakState:
    current: int
    longest: int
    completed_today: bool
    at_risk: bool              # a live streak that today has not extended yet
    milestone: Optional[int]   # current streak when it sits exactly on a milestone
    mastered: bool


@dataclass
class CalendarCell:
    day: date
    completed: bool


def _walk_back(days: set[date], start: date, floor: Optional[date]) -> int:
    streak = 0
    cursor = start
    while cursor in days and (floor is None or cursor > floor):
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def current_streak(
    days: Iterable[date],
    today: date,
    floor: Optional[date] = None,
) -> int:
    """Consecutive completed days ending today (or yesterday if today is pending)."""
    day_set = set(days)
    start = today if today in day_set else today - timedelta(days=1)
    return _walk_back(day_set, start, floor)


def longest_streak(days: Iterable[date]) -> int:
    """Longest run of consecutive completed days anywhere in the history."""
    best = 0
    run = 0
    previous: Optional[date] = None
    for d in sorted(set(days)):
        if previous is not None and d - previous == timedelta(days=1):
            run += 1
        else:
            run = 1
        best = max(best, run)
        previous = d
    return best


def check_milestone(streak_days: int) -> Optional[int]:
    """Return the milestone value if streak_days is exactly one, else None."""
    return streak_days if streak_days in MILESTONES else None


def compute_streak_state(
    days: Iterable[date],
    today: date,
    floor: Optional[date] = None,
    mastery_days: int = MASTERY_DAYS,
) -> StreakState:
    # Future-dated records never count.
    day_set = {d for d in days if d <= today}
    current = current_streak(day_set, today, floor)
    longest = max(longest_streak(day_set), current)
    completed_today = today in day_set and (floor is None or today > floor)
    return StreakState(
        current=current,
        longest=longest,
        completed_today=completed_today,
        at_risk=current > 0 and not completed_today,
        milestone=check_milestone(current),
        mastered=current >= mastery_days,
    )


def calendar(days: Iterable[date], today: date, span: int = 30) -> list[CalendarCell]:
    """The last `span` days ending today, oldest first, with real completion flags."""
    day_set = set(days)
    start = today - timedelta(days=span - 1)
    return [
        CalendarCell(day=start + timedelta(days=i), completed=(start + timedelta(days=i)) in day_set)
        for i in range(span)
    ]
