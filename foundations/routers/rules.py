"""
Rules router.

POST   /rules               — create a rule
GET    /rules               — list rules with derived streak / cooldown fields
GET    /rules/{id}          — one rule
DELETE /rules/{id}          — delete rule and its history
POST   /rules/{id}/toggle   — flip "kept today"
POST   /rules/{id}/break    — record a violation (24h cooldown)
"""
from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from foundations.core.deps import get_current_user_id, get_now
from foundations.db.base import get_db
from foundations.schemas.common import error_responses
from foundations.schemas.rule import RuleCreate, RuleResponse
from foundations.services import rules as rule_service
from foundations.services.rules import RuleView

router = APIRouter(prefix="/rules", tags=["rules"])

_NOT_FOUND = error_responses({
    403: "Rule belongs to another user.",
    404: "Rule not found.",
})


def _view_to_response(view: RuleView) -> RuleResponse:
    r = view.rule
    s = view.state
    return RuleResponse(
        id=r.id,
        text=r.text,
        category=r.category,
        description=r.description,
        streak=s.current,
        longest_streak=s.longest,
        failures=r.failures or 0,
        completed_today=s.completed_today,
        violated_today=view.violated_today,
        at_risk=s.at_risk,
        last_violation_time=r.last_violation_time.isoformat() if r.last_violation_time else None,
        cooldown_hours=view.cooldown_hours,
        created_at=r.created_at.isoformat() if r.created_at else "",
    )


@router.post(
    "",
    response_model=RuleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a rule",
    responses=error_responses({422: "Validation error (empty text, etc.)"}),
)
def create_rule(
    payload: RuleCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
):
    rule = rule_service.create_rule(
        db,
        user_id=user_id,
        text=payload.text,
        category=payload.category,
        description=payload.description,
    )
    return _view_to_response(rule_service.get_rule(db, user_id, rule.id, now))


@router.get("", response_model=list[RuleResponse], summary="List the current user's rules")
def list_rules(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
):
    return [_view_to_response(v) for v in rule_service.list_rules(db, user_id, now)]


@router.get("/{rule_id}", response_model=RuleResponse, summary="Get one rule", responses=_NOT_FOUND)
def get_rule(
    rule_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
):
    return _view_to_response(rule_service.get_rule(db, user_id, rule_id, now))


@router.delete(
    "/{rule_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a rule and its history",
    responses=_NOT_FOUND,
)
def delete_rule(
    rule_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    rule_service.delete_rule(db, user_id, rule_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{rule_id}/toggle",
    response_model=RuleResponse,
    summary="Flip whether the rule was kept today",
    responses={
        **_NOT_FOUND,
        **error_responses({409: "The rule was broken today; it can be kept again tomorrow."}),
    },
)
def toggle_rule(
    rule_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
):
    return _view_to_response(rule_service.toggle_rule(db, user_id, rule_id, now))


@router.post(
    "/{rule_id}/break",
    response_model=RuleResponse,
    summary="Record a rule violation",
    responses={
        **_NOT_FOUND,
        **error_responses({429: "A violation was already recorded within the last 24 hours."}),
    },
)
def break_rule(
    rule_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
):
    """
    Record a break of the rule: streak back to 0, `failures` + 1, today
    marked as not kept.

    Only one violation per rolling 24 hours is accepted. Inside that window
    the call fails with **429** `COOLDOWN_ACTIVE`; `details.remaining_hours`
    carries the wait, rounded up, and `message` is meant to be shown as is.
    """
    return _view_to_response(rule_service.record_violation(db, user_id, rule_id, now))
