"""
Request-scoped dependencies shared by the routers.

Session auth lives outside this service; the gateway forwards the
authenticated user as the `X-User-Id` header.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated

from fastapi import Header


def get_current_user_id(
    x_user_id: Annotated[int, Header(ge=1, description="Authenticated user id.")],
) -> int:
    return x_user_id


def get_now() -> datetime:
    """Wall clock for the request. Overridden in tests to freeze time."""
    return datetime.now(tz=timezone.utc)
