"""XP awards and daily check-ins for a user."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from flask import current_app

from wikiquest.errors import ProgressConflict, StaleProgress
from wikiquest.models.user import User
from wikiquest.progression import (
    LevelEngine,
    StreakCount,
    StreakEngine,
    XPAmount,
    XPAward,
    get_level_engine,
    get_streak_engine,
)
from wikiquest.services.user_store import ProgressChange, UserStore, to_naive_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckInResult:
    """Outcome of a daily check-in."""

    streak: int
    last_check_in: datetime | None
    streak_updated: bool
    xp_awarded: int
    award: XPAward | None

    @property
    def already_checked_in(self) -> bool:
        return not self.streak_updated

    @property
    def leveled_up(self) -> bool:
        return bool(self.award and self.award.leveled_up)


@dataclass(frozen=True)
class XPAwardResult:
    """Outcome of an XP award with an optional streak update."""

    award: XPAward
    streak: int
    last_check_in: datetime | None
    streak_updated: bool


def _isoformat(moment: datetime | None) -> str | None:
    return moment.isoformat() if moment else None


def _stored_total(user: User) -> int:
    return XPAmount.parse(user.total_xp or 0, "totalXP").value


def _stored_streak(user: User) -> int:
    return StreakCount.parse(user.streak or 0, "streak").value


class ProgressionService:
    """Runs the read-compute-write cycle for XP and streak changes."""

    def __init__(
        self,
        store: UserStore | None = None,
        level_engine: LevelEngine | None = None,
        streak_engine: StreakEngine | None = None,
        max_retries: int | None = None,
    ):
        self.store = store or UserStore()
        self.level_engine = level_engine or get_level_engine()
        self.streak_engine = streak_engine or get_streak_engine()
        if max_retries is None:
            max_retries = current_app.config.get("PROGRESSION_MAX_RETRIES", 3)
        self.max_retries = max(1, max_retries)

    # ============ Read views ============

    def level_overview(self, user: User) -> dict:
        """Level info plus streak fields for the level endpoint."""
        data = self.level_engine.level_info(user.total_xp or 0).to_dict()
        data.update(
            {
                "streak": user.streak or 0,
                "lastStreakUpdate": _isoformat(user.last_check_in),
                "streakActive": self.streak_engine.is_streak_active(
                    user.last_check_in
                ),
            }
        )
        return data

    def streak_overview(self, user: User) -> dict:
        last_check_in = user.last_check_in
        checked_in_today = self.streak_engine.checked_in_today(last_check_in)

        # XP the next check-in would award
        next_check_in_xp = 0
        if not checked_in_today:
            next_streak = self.streak_engine.update_streak(
                user.streak or 0, last_check_in
            ).streak
            next_check_in_xp = self.streak_engine.bonus_xp_for_check_in(next_streak)

        return {
            "streak": user.streak or 0,
            "longestStreak": user.longest_streak or 0,
            "lastCheckIn": _isoformat(last_check_in),
            "streakActive": self.streak_engine.is_streak_active(last_check_in),
            "checkedInToday": checked_in_today,
            "nextCheckInXP": next_check_in_xp,
        }

    # ============ Writes ============

    def check_in(self, user: User) -> CheckInResult:
        """Record today's check-in, award streak XP once per calendar day."""

        def compute(current: User):
            if self.streak_engine.checked_in_today(current.last_check_in):
                result = CheckInResult(
                    streak=current.streak or 0,
                    last_check_in=current.last_check_in,
                    streak_updated=False,
                    xp_awarded=0,
                    award=None,
                )
                return None, result

            update = self.streak_engine.update_streak(
                _stored_streak(current), current.last_check_in
            )
            bonus = self.streak_engine.bonus_xp_for_check_in(update.streak)
            award = self.level_engine.award_xp(_stored_total(current), bonus)

            change = ProgressChange(
                user_id=current.id,
                seen_total_xp=award.old_total,
                seen_last_check_in=current.last_check_in,
                total_xp=award.new_total,
                level=award.new_level,
                streak=update.streak,
                longest_streak=max(current.longest_streak or 0, update.streak),
                last_check_in=update.last_check_in,
            )
            result = CheckInResult(
                streak=update.streak,
                last_check_in=to_naive_utc(update.last_check_in),
                streak_updated=True,
                xp_awarded=bonus,
                award=award,
            )
            return change, result

        result = self._run(user, compute)
        if result.streak_updated:
            logger.info(
                f"User {user.id} checked in: streak={result.streak}, "
                f"+{result.xp_awarded} XP"
            )
        return result

    def award_xp(
        self, user: User, amount: XPAmount, update_streak: bool = False
    ) -> XPAwardResult:
        """Add XP to the user's total, optionally counting today toward the streak."""
        result = self._run(
            user, lambda current: self._xp_change(current, amount.value, update_streak)
        )
        self._log_level_up(user, result)
        return result

    def award_claimed_xp(self, user: User, claim: Callable) -> XPAwardResult:
        """Award XP whose amount depends on another record of the user's.

        ``claim(current)`` reads that record and returns ``(amount, write)``.
        ``write()`` stages the record's update without committing; it raises
        ``StaleProgress`` if the record changed since it was read. Both writes
        commit together or the whole attempt is retried.
        """

        def compute(current: User):
            amount, write = claim(current)
            change, result = self._xp_change(current, amount, update_streak=False)
            write()
            return change, result

        result = self._run(user, compute)
        self._log_level_up(user, result)
        return result

    def _xp_change(self, current: User, amount: int, update_streak: bool):
        award = self.level_engine.award_xp(_stored_total(current), amount)
        streak = _stored_streak(current)
        last_check_in = current.last_check_in
        streak_updated = False

        if update_streak:
            update = self.streak_engine.update_streak(streak, last_check_in)
            streak = update.streak
            last_check_in = update.last_check_in
            streak_updated = update.updated

        change = ProgressChange(
            user_id=current.id,
            seen_total_xp=award.old_total,
            seen_last_check_in=current.last_check_in,
            total_xp=award.new_total,
            level=award.new_level,
            streak=streak,
            longest_streak=max(current.longest_streak or 0, streak),
            last_check_in=last_check_in,
        )
        result = XPAwardResult(
            award=award,
            streak=streak,
            last_check_in=to_naive_utc(last_check_in),
            streak_updated=streak_updated,
        )
        return change, result

    def _log_level_up(self, user: User, result: XPAwardResult) -> None:
        if result.award.leveled_up:
            logger.info(
                f"User {user.id} leveled up: "
                f"{result.award.old_level} -> {result.award.new_level}"
            )

    def _run(self, user: User, compute: Callable):
        """Apply ``compute`` under optimistic concurrency, reloading on conflict."""
        current = user
        for attempt in range(1, self.max_retries + 1):
            try:
                change, result = compute(current)
            except StaleProgress:
                self.store.rollback()
            else:
                if change is None or self.store.apply_progress(change):
                    return result

            current = self.store.find_by_identity(user.id)
            if current is None:
                break
            logger.debug(f"Retrying progress update for user {user.id} ({attempt})")

        raise ProgressConflict(f"user {user.id} after {self.max_retries} attempts")
