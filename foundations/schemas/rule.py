"""
Rule request / response schemas.

POST /rules             → RuleCreate → RuleResponse
POST /rules/{id}/toggle →            → RuleResponse
POST /rules/{id}/break  →            → RuleResponse  (429 COOLDOWN_ACTIVE inside the window)
"""
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RuleCreate(BaseModel):
    text: Annotated[str, Field(
        min_length=1,
        max_length=512,
        examples=["No social media before 10 AM"],
    )]
    category: str = Field(default="Personal", max_length=64, examples=["Digital Wellness"])
    description: Optional[str] = Field(default=None, max_length=2_000)

    @field_validator("text", mode="before")
    @classmethod
    def strip_text(cls, v: str) -> str:
        stripped = v.strip() if isinstance(v, str) else v
        if not stripped:
            raise ValueError("text must not be empty after stripping whitespace")
        return stripped


class RuleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    text: str
    category: str
    description: Optional[str] = None
    streak: int
    longest_streak: int
    failures: int
    completed_today: bool
    violated_today: bool
    at_risk: bool
    last_violation_time: Optional[str] = None
    cooldown_hours: Optional[int] = Field(
        default=None,
        description="Hours until another violation may be recorded; null when allowed.",
    )
    created_at: str
