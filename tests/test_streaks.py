"""
Tests for the streak calculator.

Policy under test: today is pending. A missing today keeps yesterday's run
alive; any earlier gap ends it.
"""
from datetime import date, timedelta

import pytest

from foundations.services.streaks import (
    MILESTONES,
    calendar,
    check_milestone,
    compute_streak_state,
    current_streak,
    longest_streak,
)

TODAY = date(2026, 3, 10)


def _days(*offsets: int) -> set[date]:
    """Days relative to TODAY (0 = today, 1 = yesterday, ...)."""
    return {TODAY - timedelta(days=o) for o in offsets}


class TestCurrentStreak:
    def test_empty_history(self):
        assert current_streak(set(), TODAY) == 0

    def test_only_today(self):
        assert current_streak(_days(0), TODAY) == 1

    def test_today_pending_keeps_yesterdays_run(self):
        assert current_streak(_days(1, 2, 3), TODAY) == 3

    def test_today_completed_extends_run(self):
        assert current_streak(_days(0, 1, 2), TODAY) == 3

    def test_gap_before_yesterday_ends_streak(self):
        # Last completion two days ago: yesterday is missed.
        assert current_streak(_days(2, 3, 4), TODAY) == 0

    def test_gap_inside_history(self):
        assert current_streak(_days(0, 1, 3, 4, 5), TODAY) == 2

    def test_floor_excludes_days_on_or_before(self):
        days = _days(0, 1, 2, 3)
        assert current_streak(days, TODAY, floor=TODAY - timedelta(days=2)) == 2

    def test_floor_on_today_zeroes_streak(self):
        assert current_streak(_days(0, 1, 2), TODAY, floor=TODAY) == 0


class TestLongestStreak:
    def test_empty(self):
        assert longest_streak(set()) == 0

    def test_single_day(self):
        assert longest_streak({TODAY}) == 1

    def test_picks_longest_run(self):
        d = date(2026, 1, 1)
        days = {d, d + timedelta(1), d + timedelta(2), d + timedelta(4), d + timedelta(5)}
        assert longest_streak(days) == 3

    def test_duplicates_ignored(self):
        assert longest_streak([TODAY, TODAY, TODAY - timedelta(1)]) == 2


class TestComputeStreakState:
    def test_days_1_2_3_5_6(self):
        # Days 1,2,3,5,6 of a month, evaluated on day 6: current 2, longest 3.
        days = {date(2026, 3, n) for n in (1, 2, 3, 5, 6)}
        state = compute_streak_state(days, date(2026, 3, 6))
        assert state.current == 2
        assert state.longest == 3
        assert state.completed_today is True
        assert state.at_risk is False

    def test_empty_history_is_all_zero(self):
        state = compute_streak_state(set(), TODAY)
        assert state.current == 0
        assert state.longest == 0
        assert state.completed_today is False
        assert state.at_risk is False
        assert state.milestone is None
        assert state.mastered is False

    def test_at_risk_when_today_pending(self):
        state = compute_streak_state(_days(1, 2), TODAY)
        assert state.current == 2
        assert state.at_risk is True

    def test_future_days_ignored(self):
        state = compute_streak_state(_days(0) | {TODAY + timedelta(days=1)}, TODAY)
        assert state.current == 1
        assert state.longest == 1

    def test_longest_never_below_current(self):
        state = compute_streak_state(_days(*range(10)), TODAY)
        assert state.longest >= state.current == 10

    def test_toggle_off_today_lowers_current(self):
        before = compute_streak_state(_days(0, 1, 2), TODAY)
        after = compute_streak_state(_days(1, 2), TODAY)
        assert before.current == 3
        assert after.current == 2

    def test_floor_hides_today_completion(self):
        state = compute_streak_state(_days(0, 1), TODAY, floor=TODAY)
        assert state.completed_today is False
        assert state.current == 0
        assert state.longest == 2

    def test_mastery(self):
        state = compute_streak_state(_days(*range(67)), TODAY, mastery_days=67)
        assert state.mastered is True
        assert state.milestone == 67


class TestMilestones:
    @pytest.mark.parametrize("value", MILESTONES)
    def test_exact_milestones(self, value):
        assert check_milestone(value) == value

    @pytest.mark.parametrize("value", [0, 1, 6, 8, 22, 99, 101])
    def test_non_milestones(self, value):
        assert check_milestone(value) is None


class TestCalendar:
    def test_span_and_order(self):
        cells = calendar(_days(0, 2), TODAY, span=5)
        assert len(cells) == 5
        assert cells[0].day == TODAY - timedelta(days=4)
        assert cells[-1].day == TODAY
        assert [c.completed for c in cells] == [False, False, True, False, True]


class TestInvariants:
    def test_current_never_exceeds_longest(self):
        # Every subset of the last six days, with and without a floor.
        window = [TODAY - timedelta(days=o) for o in range(6)]
        for mask in range(1 << len(window)):
            days = {d for i, d in enumerate(window) if mask & (1 << i)}
            for floor in (None, TODAY - timedelta(days=3)):
                state = compute_streak_state(days, TODAY, floor=floor)
                assert state.current <= state.longest
