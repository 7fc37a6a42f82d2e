"""
Challenge Progress Tracker — fixed-duration, day-numbered commitments.

Day numbers (1..duration) are positions inside the challenge, not calendar
dates. Day N becomes checkable once the challenge has reached it:

    current_elapsed_day = clamp((today - start_date).days + 1, 1, duration)

Public API
----------
create_challenge(db, user_id, title, duration, start_date, now, description) -> Challenge
list_challenges(db, user_id, now)                                         -> list[ChallengeView]
get_challenge(db, user_id, challenge_id, now)                             -> ChallengeView
delete_challenge(db, user_id, challenge_id)                               -> None
check_off_day(db, user_id, challenge_id, day_number, completed, now)      -> ChallengeView
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from foundations.core.errors import EntityValidationError, InvalidDayError
from foundations.models.challenge import Challenge, ChallengeDayLog
from foundations.services.access import get_owned
from foundations.services.day_key import resolve_day_key

logger = logging.getLogger(__name__)

KIND = "challenge"
MAX_DURATION = 365
COMMON_DURATIONS = (40, 70, 100)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass
class ChallengeView:
    challenge: Challenge
    current_day: int
    completed_days: list[int]
    progress_percentage: int
    days_remaining: int
    is_finished: bool


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

def current_elapsed_day(start_date: date, today: date, duration: int) -> int:
    """1-based day number the challenge is on, clamped to [1, duration]."""
    elapsed = (today - start_date).days + 1
    return max(1, min(elapsed, duration))


def progress_percentage(completed_count: int, duration: int) -> int:
    """Whole percent of days completed, halves rounded up."""
    if duration <= 0:
        return 0
    pct = Decimal(completed_count) * 100 / Decimal(duration)
    return int(pct.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


# ---------------------------------------------------------------------------
# Internal
# ---------------------------------------------------------------------------

def _completed_day_numbers(db: Session, challenge_id: int) -> list[int]:
    rows = db.execute(
        select(ChallengeDayLog.day_number)
        .where(
            ChallengeDayLog.challenge_id == challenge_id,
            ChallengeDayLog.completed == True,  # noqa: E712
        )
        .order_by(ChallengeDayLog.day_number.asc())
    ).scalars()
    return list(rows)


def _view(db: Session, challenge: Challenge, today: date) -> ChallengeView:
    done = _completed_day_numbers(db, challenge.id)
    current = current_elapsed_day(challenge.start_date, today, challenge.duration)
    last_day = (today - challenge.start_date).days + 1
    return ChallengeView(
        challenge=challenge,
        current_day=current,
        completed_days=done,
        progress_percentage=progress_percentage(len(done), challenge.duration),
        days_remaining=max(challenge.duration - max(last_day, 0), 0),
        is_finished=last_day > challenge.duration,
    )


def _upsert_day(db: Session, challenge_id: int, day_number: int, completed: bool) -> None:
    insert = _UPSERT_DIALECTS.get(db.get_bind().dialect.name)
    if insert is not None:
        stmt = insert(ChallengeDayLog).values(
            challenge_id=challenge_id, day_number=day_number, completed=completed,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["challenge_id", "day_number"],
            set_={"completed": completed, "updated_at": func.now()},
        )
        db.execute(stmt)
        return

    try:
        with db.begin_nested():
            db.add(ChallengeDayLog(
                challenge_id=challenge_id, day_number=day_number, completed=completed,
            ))
    except IntegrityError:
        log = db.execute(
            select(ChallengeDayLog).where(
                ChallengeDayLog.challenge_id == challenge_id,
                ChallengeDayLog.day_number == day_number,
            )
        ).scalar_one()
        log.completed = completed


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def create_challenge(
    db: Session,
    user_id: int,
    title: str,
    duration: int,
    now: datetime,
    start_date: Optional[date] = None,
    description: Optional[str] = None,
) -> Challenge:
    stripped = (title or "").strip()
    if not stripped:
        raise EntityValidationError("title", "title must not be empty")
    if not 1 <= duration <= MAX_DURATION:
        raise EntityValidationError("duration", f"duration must be between 1 and {MAX_DURATION}")

    challenge = Challenge(
        user_id=user_id,
        title=stripped,
        description=description,
        duration=duration,
        start_date=start_date or resolve_day_key(now),
    )
    db.add(challenge)
    db.commit()
    db.refresh(challenge)
    logger.info(
        "challenge %s created for user %s (%d days from %s)",
        challenge.id, user_id, duration, challenge.start_date,
    )
    return challenge


def list_challenges(db: Session, user_id: int, now: datetime) -> list[ChallengeView]:
    today = resolve_day_key(now)
    challenges = (
        db.query(Challenge)
        .filter(Challenge.user_id == user_id)
        .order_by(Challenge.start_date.desc(), Challenge.id.desc())
        .all()
    )
    return [_view(db, c, today) for c in challenges]


def get_challenge(db: Session, user_id: int, challenge_id: int, now: datetime) -> ChallengeView:
    challenge = get_owned(db, Challenge, KIND, challenge_id, user_id)
    return _view(db, challenge, resolve_day_key(now))


def delete_challenge(db: Session, user_id: int, challenge_id: int) -> None:
    """Delete every day log first, then the challenge itself."""
    challenge = get_owned(db, Challenge, KIND, challenge_id, user_id)
    db.execute(delete(ChallengeDayLog).where(ChallengeDayLog.challenge_id == challenge.id))
    db.delete(challenge)
    db.commit()
    logger.info("challenge %s deleted", challenge_id)


def check_off_day(
    db: Session,
    user_id: int,
    challenge_id: int,
    day_number: int,
    completed: bool,
    now: datetime,
) -> ChallengeView:
    """
    Set completion for one day number.
    Raises InvalidDayError for day numbers outside 1..duration or beyond the
    current elapsed day; nothing is written in that case.
    """
    challenge = get_owned(db, Challenge, KIND, challenge_id, user_id)
    today = resolve_day_key(now)
    current = current_elapsed_day(challenge.start_date, today, challenge.duration)
    started = today >= challenge.start_date
    if not started or day_number < 1 or day_number > challenge.duration or day_number > current:
        logger.info(
            "challenge %s: rejected day %d (current day %d)", challenge.id, day_number, current,
        )
        raise InvalidDayError(
            day_number=day_number,
            max_day=current,
            duration=challenge.duration,
            starts_on=None if started else challenge.start_date,
        )

    _upsert_day(db, challenge.id, day_number, completed)
    db.commit()
    logger.info("challenge %s day %d -> %s", challenge.id, day_number, completed)
    return _view(db, challenge, today)
