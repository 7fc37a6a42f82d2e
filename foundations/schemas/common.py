"""
Error envelope shared by every endpoint, wired into the routers'
`responses=` so /docs shows the `{code, message, details}` shape.
"""
from typing import Any, Optional

from pydantic import BaseModel, Field


class FieldError(BaseModel):
    field: str
    message: str
    type: str


class ErrorEnvelope(BaseModel):
    code: str = Field(examples=["NOT_FOUND", "FORBIDDEN", "COOLDOWN_ACTIVE", "INVALID_DAY"])
    message: str
    details: Optional[dict[str, Any]] = None


def error_responses(descriptions: dict[int, str]) -> dict[int, dict[str, Any]]:
    """{status: description} -> FastAPI `responses` mapping using ErrorEnvelope."""
    return {
        status_code: {"model": ErrorEnvelope, "description": text}
        for status_code, text in descriptions.items()
    }
