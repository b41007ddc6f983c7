"""Quest and per-user quest progress models."""

from datetime import datetime
from enum import Enum

from wikiquest import db


class QuestDifficulty(str, Enum):
    """Quest difficulty tiers."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class Quest(db.Model):
    """A learning quest that rewards XP on completion."""

    __tablename__ = "quests"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    difficulty = db.Column(
        db.String(20), default=QuestDifficulty.BEGINNER.value, nullable=False
    )
    xp_reward = db.Column(db.Integer, default=100, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "difficulty": self.difficulty,
            "xpReward": self.xp_reward,
            "isActive": self.is_active,
        }


class QuestProgress(db.Model):
    """Best result a user has achieved on a quest."""

    __tablename__ = "quest_progress"
    __table_args__ = (
        db.UniqueConstraint("user_id", "quest_id", name="uq_quest_progress_user"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    quest_id = db.Column(
        db.Integer, db.ForeignKey("quests.id", ondelete="CASCADE"), nullable=False
    )
    completed = db.Column(db.Boolean, default=False, nullable=False)
    score = db.Column(db.Integer, default=0, nullable=False)
    total_possible = db.Column(db.Integer, default=0, nullable=False)
    earned_xp = db.Column(db.Integer, default=0, nullable=False)
    attempts = db.Column(db.Integer, default=0, nullable=False)
    completed_at = db.Column(db.DateTime, nullable=True)

    quest = db.relationship("Quest")

    def to_dict(self) -> dict:
        return {
            "questId": self.quest_id,
            "completed": self.completed,
            "score": self.score,
            "totalPossible": self.total_possible,
            "earnedXP": self.earned_xp,
            "attempts": self.attempts,
            "completedAt": self.completed_at.isoformat() if self.completed_at else None,
        }
