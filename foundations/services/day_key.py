"""
Day Key Resolver — the single place where a moment becomes a tracking day.

Day boundary: local midnight in `settings.TIMEZONE`. Naive datetimes are
taken to be UTC (SQLite hands back naive values for timezone-aware columns).
Every per-day lookup in the ledger is keyed by the value returned here.
"""
from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo

from foundations.core.config import settings


@lru_cache(maxsize=32)
def _zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def default_zone() -> tzinfo:
    return _zone(settings.TIMEZONE)


def as_utc(moment: datetime) -> datetime:
    """Attach UTC to naive datetimes; convert aware ones to UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def resolve_day_key(moment: datetime, tz: Optional[tzinfo] = None) -> date:
    """Return the calendar day `moment` falls on in the tracking timezone."""
    return as_utc(moment).astimezone(tz or default_zone()).date()


def day_key_str(moment: datetime, tz: Optional[tzinfo] = None) -> str:
    """ISO `YYYY-MM-DD` form of resolve_day_key()."""
    return resolve_day_key(moment, tz).isoformat()
