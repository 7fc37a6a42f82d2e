"""
Challenges router.

POST   /challenges                 — create a fixed-duration challenge
GET    /challenges                 — list challenges with progress
GET    /challenges/{id}            — one challenge
DELETE /challenges/{id}            — delete challenge and its day logs
PATCH  /challenges/{id}/day/{n}    — check off (or un-check) day n
"""
from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.orm import Session

from foundations.core.deps import get_current_user_id, get_now
from foundations.db.base import get_db
from foundations.schemas.common import error_responses
from foundations.schemas.challenge import ChallengeCreate, ChallengeResponse, DayCheckRequest
from foundations.services import challenges as challenge_service
from foundations.services.challenges import ChallengeView

router = APIRouter(prefix="/challenges", tags=["challenges"])

_NOT_FOUND = error_responses({
    403: "Challenge belongs to another user.",
    404: "Challenge not found.",
})


def _view_to_response(view: ChallengeView) -> ChallengeResponse:
    c = view.challenge
    return ChallengeResponse(
        id=c.id,
        title=c.title,
        description=c.description,
        duration=c.duration,
        start_date=str(c.start_date),
        current_day=view.current_day,
        completed_days=view.completed_days,
        progress_percentage=view.progress_percentage,
        days_remaining=view.days_remaining,
        is_finished=view.is_finished,
        created_at=c.created_at.isoformat() if c.created_at else "",
    )


@router.post(
    "",
    response_model=ChallengeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a challenge",
    responses=error_responses({422: "Validation error (empty title, duration out of range)"}),
)
def create_challenge(
    payload: ChallengeCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
):
    challenge = challenge_service.create_challenge(
        db,
        user_id=user_id,
        title=payload.title,
        duration=payload.duration,
        now=now,
        start_date=payload.start_date,
        description=payload.description,
    )
    return _view_to_response(challenge_service.get_challenge(db, user_id, challenge.id, now))


@router.get("", response_model=list[ChallengeResponse], summary="List the current user's challenges")
def list_challenges(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
):
    return [_view_to_response(v) for v in challenge_service.list_challenges(db, user_id, now)]


@router.get(
    "/{challenge_id}",
    response_model=ChallengeResponse,
    summary="Get one challenge",
    responses=_NOT_FOUND,
)
def get_challenge(
    challenge_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
):
    return _view_to_response(challenge_service.get_challenge(db, user_id, challenge_id, now))


@router.delete(
    "/{challenge_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a challenge and its day logs",
    responses=_NOT_FOUND,
)
def delete_challenge(
    challenge_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    challenge_service.delete_challenge(db, user_id, challenge_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch(
    "/{challenge_id}/day/{day_number}",
    response_model=ChallengeResponse,
    summary="Check off a challenge day",
    responses={
        **_NOT_FOUND,
        **error_responses({422: "INVALID_DAY: the day is in the future or outside 1..duration."}),
    },
)
def check_off_day(
    payload: DayCheckRequest,
    challenge_id: int,
    day_number: int = Path(description="Day number within the challenge (1-based)."),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
):
    """
    Set `completed` for day `n` of the challenge.

    Only days up to the current day are accepted:
    `current_day = (today - start_date) + 1`, clamped to `[1, duration]`.
    """
    view = challenge_service.check_off_day(
        db,
        user_id=user_id,
        challenge_id=challenge_id,
        day_number=day_number,
        completed=payload.completed,
        now=now,
    )
    return _view_to_response(view)
