"""Quest completion API endpoints."""

from flask import request

from wikiquest.api import api_bp
from wikiquest.models import User
from wikiquest.services import QuestService
from wikiquest.utils import not_found, success_response, validation_error
from wikiquest.utils.auth import user_required


@api_bp.route("/quests/<int:quest_id>/complete", methods=["POST"])
@user_required
def complete_quest(quest_id: int, user: User):
    """
    Submit a quest result and collect XP.

    Request body:
    {
        "score": 4,
        "totalPossible": 5
    }
    """
    data = request.get_json(silent=True)
    if not data or "score" not in data or "totalPossible" not in data:
        return validation_error(
            {"body": "score and totalPossible are required"}
        )

    service = QuestService()
    quest = service.get_quest(quest_id)
    if not quest:
        return not_found("Quest not found")

    completion = service.complete_quest(
        user, quest, data["score"], data["totalPossible"]
    )
    award = completion.award.award

    return success_response(
        {
            "questId": quest.id,
            "earnedXP": completion.earned_xp,
            "xpAwarded": completion.xp_awarded,
            "totalXP": award.new_total,
            "leveledUp": award.leveled_up,
            "currentLevel": award.new_level,
            "progress": completion.progress.to_dict(),
        },
        message="Quest progress updated",
    )
