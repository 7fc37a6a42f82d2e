"""
Tests for the violation cooldown gate (pure functions).
"""
from datetime import datetime, timedelta, timezone

from foundations.services.cooldown import DEFAULT_WINDOW, check_cooldown, remaining_hours

T0 = datetime(2026, 3, 10, 8, 0, tzinfo=timezone.utc)


class TestCheckCooldown:
    def test_no_previous_violation(self):
        assert check_cooldown(None, T0) is None

    def test_one_hour_later_is_blocked(self):
        remaining = check_cooldown(T0, T0 + timedelta(hours=1))
        assert remaining == timedelta(hours=23)
        assert remaining_hours(remaining) == 23

    def test_exactly_at_window_is_allowed(self):
        assert check_cooldown(T0, T0 + DEFAULT_WINDOW) is None

    def test_after_window_is_allowed(self):
        assert check_cooldown(T0, T0 + timedelta(hours=25)) is None

    def test_not_aligned_to_calendar_days(self):
        # 23:00 then 01:00 next day: a new calendar day, still inside 24h.
        late = datetime(2026, 3, 10, 23, 0, tzinfo=timezone.utc)
        assert check_cooldown(late, late + timedelta(hours=2)) is not None

    def test_naive_previous_violation_is_utc(self):
        naive = T0.replace(tzinfo=None)
        remaining = check_cooldown(naive, T0 + timedelta(hours=12))
        assert remaining == timedelta(hours=12)

    def test_future_stamp_never_exceeds_window(self):
        remaining = check_cooldown(T0 + timedelta(hours=3), T0)
        assert remaining == DEFAULT_WINDOW
        assert remaining_hours(remaining) == 24

    def test_custom_window(self):
        assert check_cooldown(T0, T0 + timedelta(hours=2), timedelta(hours=1)) is None


class TestRemainingHours:
    def test_rounds_up(self):
        assert remaining_hours(timedelta(hours=22, minutes=1)) == 23

    def test_never_below_one(self):
        assert remaining_hours(timedelta(seconds=5)) == 1
