"""User record access with conditional progression writes."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import update

from wikiquest import db
from wikiquest.models.user import User

logger = logging.getLogger(__name__)


def to_naive_utc(moment: datetime | None) -> datetime | None:
    """Normalize a timestamp for the naive-UTC ``last_check_in`` column."""
    if moment is None or moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class ProgressChange:
    """New progression values for one user, written together.

    ``seen_total_xp`` and ``seen_last_check_in`` are the values the change
    was computed from; the write only lands if the row still holds them.
    """

    user_id: int
    seen_total_xp: int
    seen_last_check_in: datetime | None
    total_xp: int
    level: int
    streak: int
    longest_streak: int
    last_check_in: datetime | None


class UserStore:
    """Loads and saves user records."""

    def find_by_identity(self, identity) -> User | None:
        try:
            user_id = int(identity)
        except (TypeError, ValueError):
            return None
        return db.session.get(User, user_id)

    def find_by_email(self, email: str) -> User | None:
        return User.query.filter_by(email=email.strip().lower()).first()

    def save(self, user: User) -> User:
        db.session.add(user)
        db.session.commit()
        return user

    def rollback(self) -> None:
        db.session.rollback()

    def apply_progress(self, change: ProgressChange) -> bool:
        """Conditionally write ``change`` in a single UPDATE.

        Returns False when another request updated XP or the check-in first;
        the session is rolled back so the caller can reload and recompute.
        """
        seen_check_in = to_naive_utc(change.seen_last_check_in)
        if seen_check_in is None:
            check_in_unchanged = User.last_check_in.is_(None)
        else:
            check_in_unchanged = User.last_check_in == seen_check_in

        stmt = (
            update(User)
            .where(
                User.id == change.user_id,
                User.total_xp == change.seen_total_xp,
                check_in_unchanged,
            )
            .values(
                total_xp=change.total_xp,
                level=change.level,
                streak=change.streak,
                longest_streak=change.longest_streak,
                last_check_in=to_naive_utc(change.last_check_in),
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )

        result = db.session.execute(stmt)
        if result.rowcount != 1:
            db.session.rollback()
            logger.info(f"Stale progress write for user {change.user_id}, will reload")
            return False

        db.session.commit()
        return True
