"""
Metrics router — dashboard aggregates over the current user's entities.

GET /metrics/habits       — completion rate, average streak, consistency (overall + per category)
GET /metrics/rules        — the same for rules, plus total failures
GET /metrics/discipline   — rules adherence and challenge progress in one panel
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from foundations.core.config import settings
from foundations.core.deps import get_current_user_id, get_now
from foundations.db.base import get_db
from foundations.schemas.metrics import (
    AggregateResponse,
    DisciplineResponse,
    HabitMetricsResponse,
    RuleMetricsResponse,
)
from foundations.services import aggregates
from foundations.services.aggregates import AggregateMetrics
from foundations.services.challenges import list_challenges
from foundations.services.habits import list_habits
from foundations.services.rules import list_rules

router = APIRouter(prefix="/metrics", tags=["metrics"])

_THRESHOLD_QUERY = Query(
    default=None,
    ge=1,
    le=365,
    description="Streak length that counts as consistent. Defaults to CONSISTENCY_THRESHOLD_DAYS.",
)


def _aggregate_to_response(m: AggregateMetrics) -> AggregateResponse:
    return AggregateResponse(
        total=m.total,
        completed_today=m.completed_today,
        completion_rate=float(m.completion_rate),
        average_streak=float(m.average_streak),
        consistency_score=float(m.consistency_score),
        longest_streak=m.longest_streak,
        mastered=m.mastered,
    )


# ---------------------------------------------------------------------------
# GET /metrics/habits
# ---------------------------------------------------------------------------

@router.get(
    "/habits",
    response_model=HabitMetricsResponse,
    summary="Habit dashboard aggregates",
)
def habit_metrics(
    threshold: Optional[int] = _THRESHOLD_QUERY,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
):
    """
    Aggregates over every habit of the current user.

    - **completion_rate**: completed today / total (0.0–1.0)
    - **average_streak**: mean current streak, 2 decimals
    - **consistency_score**: % of habits with streak ≥ `threshold`

    With no habits every number is 0.
    """
    threshold = threshold or settings.CONSISTENCY_THRESHOLD_DAYS
    result = aggregates.habit_metrics(
        list_habits(db, user_id, now),
        threshold=threshold,
        mastery=settings.MASTERY_THRESHOLD_DAYS,
    )
    return HabitMetricsResponse(
        threshold_days=threshold,
        overall=_aggregate_to_response(result.overall),
        by_category={k: _aggregate_to_response(v) for k, v in result.by_category.items()},
    )


# ---------------------------------------------------------------------------
# GET /metrics/rules
# ---------------------------------------------------------------------------

@router.get(
    "/rules",
    response_model=RuleMetricsResponse,
    summary="Rule dashboard aggregates",
)
def rule_metrics(
    threshold: Optional[int] = _THRESHOLD_QUERY,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
):
    threshold = threshold or settings.CONSISTENCY_THRESHOLD_DAYS
    result = aggregates.rule_metrics(
        list_rules(db, user_id, now),
        threshold=threshold,
        mastery=settings.MASTERY_THRESHOLD_DAYS,
    )
    return RuleMetricsResponse(
        threshold_days=threshold,
        overall=_aggregate_to_response(result.overall),
        total_failures=result.total_failures,
    )


# ---------------------------------------------------------------------------
# GET /metrics/discipline
# ---------------------------------------------------------------------------

@router.get(
    "/discipline",
    response_model=DisciplineResponse,
    summary="Rules and challenges summary",
)
def discipline(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
):
    result = aggregates.discipline_metrics(
        list_rules(db, user_id, now),
        list_challenges(db, user_id, now),
    )
    return DisciplineResponse(
        active_rules=result.active_rules,
        kept_today=result.kept_today,
        total_failures=result.total_failures,
        active_challenges=result.active_challenges,
        average_challenge_progress=result.average_challenge_progress,
    )
