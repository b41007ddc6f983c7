"""Daily check-in streaks.

Streaks are counted in calendar days of the configured timezone. Two
check-ins belong to the same day when their local dates match, whatever
the time of day, so a check-in at 23:59 followed by one at 00:01 the next
morning extends the streak.
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone, tzinfo
from typing import Callable
from zoneinfo import ZoneInfo

CHECK_IN_BASE_XP = 5

# Checked longest period first; only the first match applies
STREAK_MILESTONES = (
    (365, 500),
    (30, 100),
    (7, 25),
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class StreakUpdate:
    """Result of applying a check-in to a streak."""

    streak: int
    last_check_in: datetime
    updated: bool


class StreakEngine:
    """Calendar-day streak rules and milestone bonuses."""

    def __init__(
        self,
        tz: tzinfo | str | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        if tz is None:
            tz = timezone.utc
        elif isinstance(tz, str):
            tz = ZoneInfo(tz)
        self.tz = tz
        self.clock = clock

    def now(self) -> datetime:
        return self._aware(self.clock())

    def local_date(self, moment: datetime) -> date:
        """Calendar date of ``moment`` in the engine timezone."""
        return self._aware(moment).astimezone(self.tz).date()

    def today(self) -> date:
        return self.local_date(self.now())

    def calendar_days_between(self, later: datetime, earlier: datetime) -> int:
        """Whole calendar days from ``earlier`` to ``later``."""
        return (self.local_date(later) - self.local_date(earlier)).days

    def days_since(self, last_check_in: datetime) -> int:
        """Calendar days since ``last_check_in``; future timestamps count as today."""
        return max(0, self.calendar_days_between(self.now(), last_check_in))

    def is_streak_active(self, last_check_in: datetime | None) -> bool:
        if last_check_in is None:
            return False
        return self.days_since(last_check_in) <= 1

    def checked_in_today(self, last_check_in: datetime | None) -> bool:
        if last_check_in is None:
            return False
        return self.days_since(last_check_in) == 0

    def update_streak(
        self, current_streak: int, last_check_in: datetime | None
    ) -> StreakUpdate:
        now = self.now()

        if last_check_in is None:
            return StreakUpdate(streak=1, last_check_in=now, updated=True)

        day_diff = self.days_since(last_check_in)

        if day_diff == 0:
            return StreakUpdate(
                streak=current_streak, last_check_in=last_check_in, updated=False
            )
        if day_diff == 1:
            return StreakUpdate(
                streak=current_streak + 1, last_check_in=now, updated=True
            )
        return StreakUpdate(streak=1, last_check_in=now, updated=True)

    @staticmethod
    def bonus_xp_for_check_in(streak: int) -> int:
        """Base check-in XP plus at most one milestone bonus."""
        bonus = CHECK_IN_BASE_XP
        for period, milestone_xp in STREAK_MILESTONES:
            if streak > 0 and streak % period == 0:
                bonus += milestone_xp
                break
        return bonus

    @staticmethod
    def _aware(moment: datetime) -> datetime:
        # Stored timestamps are naive UTC
        if moment.tzinfo is None:
            return moment.replace(tzinfo=timezone.utc)
        return moment
