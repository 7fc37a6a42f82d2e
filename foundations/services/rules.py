"""
Rule service: daily adherence ("kept today") plus rate-limited violations.

Public API
----------
create_rule(db, user_id, text, category, description) -> Rule
list_rules(db, user_id, now)                           -> list[RuleView]
get_rule(db, user_id, rule_id, now)                    -> RuleView
delete_rule(db, user_id, rule_id)                      -> None
toggle_rule(db, user_id, rule_id, now)                 -> RuleView   (raises RuleBrokenTodayError)
record_violation(db, user_id, rule_id, now)            -> RuleView   (raises CooldownActiveError)

Streak semantics
----------------
Kept days live in the completion ledger (entity_kind="rule"). The current
streak never counts days on or before the day of the last violation, so a
recorded violation resets it to 0 while older history still feeds
longest_streak.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from foundations.core.config import settings
from foundations.core.errors import CooldownActiveError, EntityValidationError, RuleBrokenTodayError
from foundations.models.completion import EntityKind
from foundations.models.rule import Rule
from foundations.services import ledger
from foundations.services.access import get_owned
from foundations.services.cooldown import check_cooldown, remaining_hours
from foundations.services.day_key import as_utc, resolve_day_key
from foundations.services.streaks import StreakState, compute_streak_state

logger = logging.getLogger(__name__)

KIND = EntityKind.RULE


@dataclass
class RuleView:
    rule: Rule
    state: StreakState
    violated_today: bool
    cooldown_hours: Optional[int]   # hours until another violation may be recorded


def _cooldown_window() -> timedelta:
    return timedelta(hours=settings.VIOLATION_COOLDOWN_HOURS)


def _violation_day(rule: Rule) -> Optional[date]:
    if rule.last_violation_time is None:
        return None
    return resolve_day_key(rule.last_violation_time)


def _reconcile(db: Session, rule: Rule, now: datetime) -> RuleView:
    today = resolve_day_key(now)
    floor = _violation_day(rule)
    days = ledger.completed_days(db, KIND, rule.id)
    state = compute_streak_state(
        days, today, floor=floor, mastery_days=settings.MASTERY_THRESHOLD_DAYS,
    )
    if rule.streak != state.current or rule.longest_streak != state.longest:
        rule.streak = state.current
        rule.longest_streak = state.longest

    remaining = check_cooldown(rule.last_violation_time, now, _cooldown_window())
    return RuleView(
        rule=rule,
        state=state,
        violated_today=floor == today,
        cooldown_hours=remaining_hours(remaining) if remaining is not None else None,
    )


def create_rule(
    db: Session,
    user_id: int,
    text: str,
    category: str = "Personal",
    description: Optional[str] = None,
) -> Rule:
    stripped = (text or "").strip()
    if not stripped:
        raise EntityValidationError("text", "text must not be empty")
    rule = Rule(
        user_id=user_id,
        text=stripped,
        category=category or "Personal",
        description=description,
        streak=0,
        longest_streak=0,
        failures=0,
    )
    db.add(rule)
    db.commit()
    db.refresh(rule)
    logger.info("rule %s created for user %s", rule.id, user_id)
    return rule


def list_rules(db: Session, user_id: int, now: datetime) -> list[RuleView]:
    rules = (
        db.query(Rule)
        .filter(Rule.user_id == user_id)
        .order_by(Rule.created_at.asc(), Rule.id.asc())
        .all()
    )
    views = [_reconcile(db, r, now) for r in rules]
    if db.dirty:
        db.commit()
    return views


def get_rule(db: Session, user_id: int, rule_id: int, now: datetime) -> RuleView:
    rule = get_owned(db, Rule, KIND, rule_id, user_id)
    view = _reconcile(db, rule, now)
    if db.dirty:
        db.commit()
    return view


def delete_rule(db: Session, user_id: int, rule_id: int) -> None:
    rule = get_owned(db, Rule, KIND, rule_id, user_id)
    ledger.delete_history(db, KIND, rule.id)
    db.delete(rule)
    db.commit()
    logger.info("rule %s deleted", rule_id)


def toggle_rule(db: Session, user_id: int, rule_id: int, now: datetime) -> RuleView:
    """
    Flip whether the rule was kept today.
    Raises RuleBrokenTodayError when a violation was recorded today.
    """
    rule = get_owned(db, Rule, KIND, rule_id, user_id)
    today = resolve_day_key(now)
    if _violation_day(rule) == today:
        logger.info("rule %s toggle rejected, broken on %s", rule.id, today)
        raise RuleBrokenTodayError(rule.id, today)
    record = ledger.toggle_completion(db, KIND, rule.id, today)
    if record.completed:
        rule.last_completion_time = now
    view = _reconcile(db, rule, now)
    db.commit()
    db.refresh(rule)
    logger.info("rule %s kept=%s on %s (streak=%d)", rule.id, record.completed, today, view.state.current)
    return view


def record_violation(db: Session, user_id: int, rule_id: int, now: datetime) -> RuleView:
    """
    Record a rule break at `now`.

    Rejected with CooldownActiveError (rule untouched) if the previous
    violation is younger than the cooldown window. Otherwise stores the
    timestamp, bumps `failures`, records today as not kept (unless it is
    already in the history) and resets the current streak to 0.
    """
    rule = get_owned(db, Rule, KIND, rule_id, user_id)
    window = _cooldown_window()
    remaining = check_cooldown(rule.last_violation_time, now, window)
    if remaining is not None:
        hours = remaining_hours(remaining)
        logger.info("rule %s violation rejected, cooldown %dh left", rule.id, hours)
        raise CooldownActiveError(
            remaining_hours=hours,
            retry_at=as_utc(now) + remaining,
            window_hours=settings.VIOLATION_COOLDOWN_HOURS,
        )

    today = resolve_day_key(now)
    rule.last_violation_time = as_utc(now)
    rule.failures = (rule.failures or 0) + 1
    # A day already marked kept stays in the history so longest_streak holds;
    # the violation floor alone ends the current run.
    if ledger.get_completion(db, KIND, rule.id, today) is None:
        ledger.set_completion(db, KIND, rule.id, today, False)
    view = _reconcile(db, rule, now)
    db.commit()
    db.refresh(rule)
    logger.info("rule %s violated on %s (failures=%d)", rule.id, today, rule.failures)
    return view
