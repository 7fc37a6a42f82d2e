"""
Violation Cooldown Gate — a rate limit, not a queue.

A new violation may be recorded only when none exists or the previous one is
at least `window` old in real elapsed time (not aligned to calendar days).
Attempts inside the window are rejected every time.
"""
from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Optional

from foundations.services.day_key import as_utc

DEFAULT_WINDOW = timedelta(hours=24)


def check_cooldown(
    last_violation: Optional[datetime],
    now: datetime,
    window: timedelta = DEFAULT_WINDOW,
) -> Optional[timedelta]:
    """Return the remaining wait, or None when a violation may be recorded."""
    if last_violation is None:
        return None
    elapsed = as_utc(now) - as_utc(last_violation)
    if elapsed >= window:
        return None
    # A previous violation stamped in the future never waits longer than window.
    return min(window - elapsed, window)


def remaining_hours(remaining: timedelta) -> int:
    """Whole hours to wait, rounded up for display."""
    return max(1, math.ceil(remaining.total_seconds() / 3600))
