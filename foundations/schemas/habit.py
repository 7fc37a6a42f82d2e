"""
Habit request / response schemas.

POST  /habits               → HabitCreate  → HabitResponse
PATCH /habits/{id}          → HabitUpdate  → HabitResponse
POST  /habits/{id}/toggle   →              → HabitToggleResponse
GET   /habits/{id}/calendar →              → CalendarResponse
"""
from __future__ import annotations

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from foundations.models.habit import HabitCategory, TimeOfDay

REASONS_REQUIRED = 3


def _check_reasons(v: Optional[list[str]]) -> Optional[list[str]]:
    if v is None:
        return v
    cleaned = [r.strip() for r in v]
    if any(not r for r in cleaned):
        raise ValueError("reasons must not be empty")
    if len(cleaned) != REASONS_REQUIRED:
        raise ValueError(f"please provide exactly {REASONS_REQUIRED} reasons")
    return cleaned


class HabitCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: Annotated[str, Field(
        min_length=1,
        max_length=256,
        examples=["Meditate 10 minutes"],
    )]
    description: Optional[str] = Field(default=None, max_length=2_000)
    category: HabitCategory = HabitCategory.mind
    frequency: str = Field(default="daily", max_length=32)
    time_of_day: TimeOfDay = TimeOfDay.anytime
    reasons: list[str] = Field(
        description=f"Exactly {REASONS_REQUIRED} reasons why this habit matters.",
        examples=[["clarity", "calm", "focus"]],
    )

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: str) -> str:
        stripped = v.strip() if isinstance(v, str) else v
        if not stripped:
            raise ValueError("title must not be empty after stripping whitespace")
        return stripped

    @field_validator("reasons")
    @classmethod
    def check_reasons(cls, v: list[str]) -> list[str]:
        return _check_reasons(v)


class HabitUpdate(BaseModel):
    """Partial update; omitted fields are left untouched."""
    model_config = ConfigDict(use_enum_values=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=256)
    description: Optional[str] = Field(default=None, max_length=2_000)
    category: Optional[HabitCategory] = None
    frequency: Optional[str] = Field(default=None, max_length=32)
    time_of_day: Optional[TimeOfDay] = None
    reasons: Optional[list[str]] = None

    @field_validator("title", "category", "frequency", "time_of_day", "reasons")
    @classmethod
    def reject_null(cls, v, info):
        # Omit a field to leave it unchanged; null is not a value for these columns.
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("reasons")
    @classmethod
    def check_reasons(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        return _check_reasons(v)


class HabitResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    category: str
    frequency: str
    time_of_day: str
    reasons: list[str] = Field(default_factory=list)
    streak: int = Field(description="Current streak, recomputed from the completion history.")
    longest_streak: int
    completed_today: bool
    at_risk: bool = Field(description="Live streak not yet extended today.")
    milestone: Optional[int] = None
    mastered: bool
    created_at: str


class HabitToggleResponse(BaseModel):
    day: str = Field(description="Day key the toggle applied to.")
    completed: bool
    habit: HabitResponse


class CalendarCellResponse(BaseModel):
    day: str
    completed: bool


class CalendarResponse(BaseModel):
    habit_id: int
    days: list[CalendarCellResponse] = Field(description="Oldest first, ending today.")
