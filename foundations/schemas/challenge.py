"""
Challenge request / response schemas.

POST  /challenges                → ChallengeCreate → ChallengeResponse
PATCH /challenges/{id}/day/{n}   → DayCheckRequest → ChallengeResponse
"""
from datetime import date
from typing import Annotated, Optional

from pydantic import BaseModel, Field, field_validator

from foundations.services.challenges import COMMON_DURATIONS, MAX_DURATION


class ChallengeCreate(BaseModel):
    title: Annotated[str, Field(min_length=1, max_length=256, examples=["75 Hard"])]
    description: Optional[str] = Field(default=None, max_length=2_000)
    duration: int = Field(ge=1, le=MAX_DURATION, examples=list(COMMON_DURATIONS))
    start_date: Optional[date] = Field(
        default=None,
        description="Day 1 of the challenge. Defaults to today; cannot be changed later.",
        examples=["2026-02-20"],
    )

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: str) -> str:
        stripped = v.strip() if isinstance(v, str) else v
        if not stripped:
            raise ValueError("title must not be empty after stripping whitespace")
        return stripped


class DayCheckRequest(BaseModel):
    completed: bool = True


class ChallengeResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    duration: int
    start_date: str
    current_day: int = Field(description="Latest day number that can be checked off.")
    completed_days: list[int]
    progress_percentage: int
    days_remaining: int
    is_finished: bool
    created_at: str
