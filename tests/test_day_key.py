"""
Tests for day key resolution: local-midnight boundaries and naive inputs.
"""
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from foundations.services.day_key import as_utc, day_key_str, resolve_day_key

NEW_YORK = ZoneInfo("America/New_York")
TOKYO = ZoneInfo("Asia/Tokyo")


class TestResolveDayKey:
    def test_utc_midday(self):
        moment = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
        assert resolve_day_key(moment, timezone.utc) == date(2026, 3, 10)

    def test_same_instant_different_zones(self):
        # 03:30 UTC is still the previous evening in New York.
        moment = datetime(2026, 3, 10, 3, 30, tzinfo=timezone.utc)
        assert resolve_day_key(moment, NEW_YORK) == date(2026, 3, 9)
        assert resolve_day_key(moment, TOKYO) == date(2026, 3, 10)

    def test_boundary_is_local_midnight(self):
        midnight = datetime(2026, 3, 10, 0, 0, tzinfo=TOKYO)
        just_before = midnight - timedelta(microseconds=1)
        assert resolve_day_key(midnight, TOKYO) == date(2026, 3, 10)
        assert resolve_day_key(just_before, TOKYO) == date(2026, 3, 9)

    def test_naive_datetime_treated_as_utc(self):
        naive = datetime(2026, 3, 10, 23, 30)
        assert resolve_day_key(naive, timezone.utc) == date(2026, 3, 10)
        assert resolve_day_key(naive, TOKYO) == date(2026, 3, 11)

    def test_default_zone_from_settings(self):
        # Test settings keep the default TIMEZONE of UTC.
        moment = datetime(2026, 3, 10, 23, 59, tzinfo=timezone.utc)
        assert resolve_day_key(moment) == date(2026, 3, 10)

    def test_day_key_str_is_iso(self):
        moment = datetime(2026, 1, 5, 8, 0, tzinfo=timezone.utc)
        assert day_key_str(moment, timezone.utc) == "2026-01-05"


class TestAsUtc:
    def test_naive_gets_utc(self):
        assert as_utc(datetime(2026, 3, 10, 1, 0)).tzinfo == timezone.utc

    def test_aware_is_converted(self):
        local = datetime(2026, 3, 10, 9, 0, tzinfo=TOKYO)
        assert as_utc(local) == datetime(2026, 3, 10, 0, 0, tzinfo=timezone.utc)
