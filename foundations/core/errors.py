"""
Custom exception hierarchy for the Foundations API.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class FoundationsException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class NotFoundError(FoundationsException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"

    def __init__(self, kind: str, entity_id: int):
        super().__init__(
            message=f"{kind.capitalize()} {entity_id} not found.",
            details={"kind": kind, "id": entity_id},
        )


class ForbiddenError(NotFoundError):
    """The entity exists but belongs to another user."""
    http_status = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"

    def __init__(self, kind: str, entity_id: int):
        super().__init__(kind, entity_id)
        self.message = f"{kind.capitalize()} {entity_id} does not belong to the current user."
        self.args = (self.message,)


class CooldownActiveError(FoundationsException):
    http_status = status.HTTP_429_TOO_MANY_REQUESTS
    code = "COOLDOWN_ACTIVE"

    def __init__(self, remaining_hours: int, retry_at: datetime, window_hours: int = 24):
        unit = "hour" if remaining_hours == 1 else "hours"
        super().__init__(
            message=(
                f"You can only break this rule once every {window_hours} hours. "
                f"Try again in {remaining_hours} {unit}."
            ),
            details={
                "remaining_hours": remaining_hours,
                "retry_at": retry_at.isoformat(),
            },
        )
        self.remaining_hours = remaining_hours
        self.retry_at = retry_at


class InvalidDayError(FoundationsException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_DAY"

    def __init__(
        self,
        day_number: int,
        max_day: int,
        duration: int,
        starts_on: Optional[date] = None,
    ):
        if day_number > duration or day_number < 1:
            reason = f"Day {day_number} is outside the challenge range 1-{duration}."
        elif starts_on is not None:
            reason = f"The challenge starts on {starts_on.isoformat()}."
        else:
            reason = f"Day {day_number} has not started yet (current day is {max_day})."
        details: dict[str, Any] = {
            "day_number": day_number,
            "current_day": max_day,
            "duration": duration,
        }
        if starts_on is not None:
            details["starts_on"] = starts_on.isoformat()
        super().__init__(message=reason, details=details)


class RuleBrokenTodayError(FoundationsException):
    """The rule was broken today, so today cannot be marked as kept."""
    http_status = status.HTTP_409_CONFLICT
    code = "RULE_BROKEN_TODAY"

    def __init__(self, rule_id: int, day: date):
        super().__init__(
            message=f"Rule {rule_id} was broken on {day.isoformat()}; it can be kept again tomorrow.",
            details={"id": rule_id, "day": day.isoformat()},
        )


class EntityValidationError(FoundationsException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str):
        super().__init__(
            message=message,
            details={"errors": [{"field": field, "message": message, "type": "value_error"}]},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def foundations_exception_handler(
    request: Request, exc: FoundationsException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
