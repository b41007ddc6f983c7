"""Database models."""

from wikiquest.models.quest import Quest, QuestDifficulty, QuestProgress
from wikiquest.models.user import User

__all__ = [
    "User",
    "Quest",
    "QuestDifficulty",
    "QuestProgress",
]
