"""Business logic services."""

from wikiquest.services.progression_service import (
    CheckInResult,
    ProgressionService,
    XPAwardResult,
)
from wikiquest.services.quest_service import QuestCompletion, QuestService
from wikiquest.services.user_store import ProgressChange, UserStore

__all__ = [
    "CheckInResult",
    "ProgressChange",
    "ProgressionService",
    "QuestCompletion",
    "QuestService",
    "UserStore",
    "XPAwardResult",
]
