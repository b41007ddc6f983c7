"""Quest completion scoring."""

import logging
import math
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, insert, select, update
from sqlalchemy.exc import IntegrityError

from wikiquest import db
from wikiquest.errors import StaleProgress
from wikiquest.models.quest import Quest, QuestProgress
from wikiquest.models.user import User
from wikiquest.progression.values import InvalidProgressionValue, parse_non_negative_int
from wikiquest.services.progression_service import ProgressionService, XPAwardResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuestCompletion:
    """Result of submitting a quest attempt."""

    quest: Quest
    progress: QuestProgress
    earned_xp: int
    xp_awarded: int
    award: XPAwardResult


class QuestService:
    """Scores quest attempts and awards XP for improvements."""

    def __init__(self, progression: ProgressionService | None = None):
        self.progression = progression or ProgressionService()

    def get_quest(self, quest_id: int) -> Quest | None:
        quest = db.session.get(Quest, quest_id)
        if quest is None or not quest.is_active:
            return None
        return quest

    @staticmethod
    def earned_xp(quest: Quest, score: int, total_possible: int) -> int:
        """XP proportional to the score, rounded half up."""
        if total_possible <= 0:
            return 0
        ratio = min(score, total_possible) / total_possible
        return math.floor(ratio * quest.xp_reward + 0.5)

    def complete_quest(
        self, user: User, quest: Quest, score, total_possible
    ) -> QuestCompletion:
        """Record an attempt and award XP above the user's previous best.

        The best result is read and rewritten in the same transaction as the
        XP award, so concurrent submissions cannot both pay the improvement.
        """
        score = parse_non_negative_int("score", score)
        total_possible = parse_non_negative_int("totalPossible", total_possible)
        if score > total_possible:
            raise InvalidProgressionValue("score", "must not exceed totalPossible")

        earned = self.earned_xp(quest, score, total_possible)
        awarded = {}

        def claim(current: User):
            seen = self._find_progress(current.id, quest.id)
            previous_best = seen.earned_xp if seen else 0
            awarded["xp"] = max(0, earned - previous_best)

            def write():
                self._record_attempt(
                    current.id, quest.id, seen, score, total_possible, earned
                )

            return awarded["xp"], write

        award = self.progression.award_claimed_xp(user, claim)
        progress = QuestProgress.query.filter_by(
            user_id=user.id, quest_id=quest.id
        ).one()

        logger.info(
            f"User {user.id} completed quest {quest.id}: "
            f"score {score}/{total_possible}, +{awarded['xp']} XP"
        )

        return QuestCompletion(
            quest=quest,
            progress=progress,
            earned_xp=earned,
            xp_awarded=awarded["xp"],
            award=award,
        )

    def _find_progress(self, user_id: int, quest_id: int):
        """Snapshot of the stored best result, or None before the first attempt."""
        return db.session.execute(
            select(
                QuestProgress.id, QuestProgress.earned_xp, QuestProgress.attempts
            ).where(
                QuestProgress.user_id == user_id, QuestProgress.quest_id == quest_id
            )
        ).first()

    def _record_attempt(
        self, user_id, quest_id, seen, score, total_possible, earned
    ) -> None:
        """Stage the attempt; raises StaleProgress if ``seen`` is out of date."""
        now = datetime.utcnow()

        if seen is None:
            try:
                db.session.execute(
                    insert(QuestProgress).values(
                        user_id=user_id,
                        quest_id=quest_id,
                        completed=True,
                        score=score,
                        total_possible=total_possible,
                        earned_xp=earned,
                        attempts=1,
                        completed_at=now,
                    )
                )
            except IntegrityError as e:
                raise StaleProgress(
                    f"quest {quest_id} first completed concurrently"
                ) from e
            return

        values = {
            "attempts": seen.attempts + 1,
            "completed": True,
            "completed_at": func.coalesce(QuestProgress.completed_at, now),
        }
        if earned >= seen.earned_xp:
            values.update(
                score=score, total_possible=total_possible, earned_xp=earned
            )

        result = db.session.execute(
            update(QuestProgress)
            .where(
                QuestProgress.id == seen.id,
                QuestProgress.attempts == seen.attempts,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise StaleProgress(f"quest {quest_id} progress changed concurrently")

    def completed_count(self, user_id: int) -> int:
        return QuestProgress.query.filter_by(user_id=user_id, completed=True).count()

    def active_count(self, user_id: int) -> int:
        """Active quests the user has not completed yet."""
        completed_ids = db.session.query(QuestProgress.quest_id).filter(
            QuestProgress.user_id == user_id, QuestProgress.completed.is_(True)
        )
        return Quest.query.filter(
            Quest.is_active.is_(True), Quest.id.notin_(completed_ids)
        ).count()
