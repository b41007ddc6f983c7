"""Tests for calendar-day streak rules."""

from datetime import datetime, timedelta, timezone

import pytest

from wikiquest.progression import StreakEngine


def engine_at(moment: datetime, tz="UTC") -> StreakEngine:
    return StreakEngine(tz, clock=lambda: moment)


@pytest.fixture
def now():
    return datetime(2026, 3, 10, 15, 30, tzinfo=timezone.utc)


@pytest.fixture
def engine(now):
    return engine_at(now)


class TestDayBoundaries:
    """Comparisons use calendar dates, not elapsed hours."""

    def test_late_night_then_early_morning_is_one_day(self):
        """Test two minutes across midnight count as one day."""
        evening = datetime(2026, 3, 9, 23, 59, tzinfo=timezone.utc)
        morning = datetime(2026, 3, 10, 0, 1, tzinfo=timezone.utc)
        engine = engine_at(morning)
        assert engine.calendar_days_between(morning, evening) == 1

    def test_same_day_far_apart_in_hours(self):
        """Test nearly 24 hours on one date count as zero days."""
        early = datetime(2026, 3, 10, 0, 5, tzinfo=timezone.utc)
        late = datetime(2026, 3, 10, 23, 55, tzinfo=timezone.utc)
        assert engine_at(late).calendar_days_between(late, early) == 0

    def test_naive_timestamps_are_utc(self, engine):
        """Test naive timestamps are read as UTC."""
        naive = datetime(2026, 3, 9, 12, 0)
        aware = datetime(2026, 3, 9, 12, 0, tzinfo=timezone.utc)
        assert engine.local_date(naive) == engine.local_date(aware)

    def test_configured_timezone_moves_the_boundary(self):
        """Test the day boundary follows the configured timezone."""
        # 03:00 UTC on the 10th is still the 9th in New York
        now = datetime(2026, 3, 10, 3, 0, tzinfo=timezone.utc)
        last = datetime(2026, 3, 9, 14, 0, tzinfo=timezone.utc)
        assert engine_at(now, "UTC").days_since(last) == 1
        assert engine_at(now, "America/New_York").days_since(last) == 0


class TestIsStreakActive:
    """Active means checked in today or yesterday."""

    def test_never_checked_in(self, engine):
        """Test no check-in means no active streak."""
        assert engine.is_streak_active(None) is False

    def test_checked_in_today(self, engine, now):
        """Test a check-in earlier today is active."""
        assert engine.is_streak_active(now - timedelta(hours=3)) is True

    def test_checked_in_yesterday(self, engine, now):
        """Test a check-in yesterday is still active."""
        assert engine.is_streak_active(now - timedelta(days=1)) is True

    def test_start_of_yesterday(self, engine):
        """Test midnight yesterday is still active."""
        assert engine.is_streak_active(datetime(2026, 3, 9, 0, 0)) is True

    def test_two_days_ago(self, engine, now):
        """Test a check-in two days ago has lapsed."""
        assert engine.is_streak_active(now - timedelta(days=2)) is False


class TestUpdateStreak:
    """Streak transitions on check-in."""

    def test_first_check_in(self, engine, now):
        """Test the first check-in starts a streak of 1."""
        update = engine.update_streak(0, None)
        assert update.streak == 1
        assert update.last_check_in == now
        assert update.updated is True

    def test_same_day_is_idempotent(self, engine, now):
        """Test repeated check-ins on one day change nothing."""
        earlier = now - timedelta(hours=5)
        first = engine.update_streak(4, earlier)
        second = engine.update_streak(first.streak, first.last_check_in)
        for update in (first, second):
            assert update.updated is False
            assert update.streak == 4
            assert update.last_check_in == earlier

    def test_consecutive_day_increments(self, engine, now):
        """Test checking in the next day extends the streak."""
        update = engine.update_streak(5, now - timedelta(days=1))
        assert (update.streak, update.last_check_in, update.updated) == (6, now, True)

    def test_gap_resets(self, engine, now):
        """Test a missed day resets the streak to 1."""
        update = engine.update_streak(10, now - timedelta(days=3))
        assert (update.streak, update.last_check_in, update.updated) == (1, now, True)

    def test_exactly_two_days_resets(self, engine, now):
        """Test a two-day gap resets the streak."""
        assert engine.update_streak(3, now - timedelta(days=2)).streak == 1

    def test_future_check_in_counts_as_today(self, engine, now):
        """Test a future-dated check-in is treated as today."""
        future = now + timedelta(days=2)
        update = engine.update_streak(7, future)
        assert update.updated is False
        assert update.streak == 7
        assert engine.checked_in_today(future) is True


class TestBonusXP:
    """Milestone bonuses, longest period first."""

    @pytest.mark.parametrize(
        "streak,expected",
        [
            (1, 5),
            (8, 5),
            (7, 30),
            (14, 30),
            (30, 105),
            (60, 105),
            (210, 105),
            (420, 105),
            (365, 505),
            (730, 505),
        ],
    )
    def test_bonus(self, streak, expected):
        """Test the check-in XP for each milestone."""
        assert StreakEngine.bonus_xp_for_check_in(streak) == expected

    def test_tiers_never_sum(self):
        """Test only the first matching milestone pays."""
        # 2555 = 7 * 365 matches every tier
        assert StreakEngine.bonus_xp_for_check_in(2555) == 505
