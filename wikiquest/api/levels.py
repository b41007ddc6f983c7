"""Level and XP API endpoints."""

from flask import request

from wikiquest.api import api_bp
from wikiquest.models import User
from wikiquest.progression import XPAmount
from wikiquest.services import ProgressionService
from wikiquest.utils import success_response, validation_error
from wikiquest.utils.auth import user_required


@api_bp.route("/users/level", methods=["GET"])
@user_required
def get_level(user: User):
    """Get level, XP progress and streak information."""
    return success_response(ProgressionService().level_overview(user))


@api_bp.route("/users/level", methods=["POST"])
@user_required
def add_xp(user: User):
    """
    Add XP to the caller's total.

    Request body:
    {
        "xpToAdd": 50,
        "updateStreak": true
    }
    """
    data = request.get_json(silent=True)
    if not data or "xpToAdd" not in data:
        return validation_error({"xpToAdd": "xpToAdd is required"})

    amount = XPAmount.parse(data["xpToAdd"], "xpToAdd")

    update_streak = data.get("updateStreak", True)
    if not isinstance(update_streak, bool):
        return validation_error({"updateStreak": "updateStreak must be a boolean"})

    service = ProgressionService()
    result = service.award_xp(user, amount, update_streak=update_streak)

    response = {
        "xpAdded": result.award.xp_added,
        "leveledUp": result.award.leveled_up,
        "oldLevel": result.award.old_level,
    }
    response.update(service.level_overview(user))
    response["streakUpdated"] = result.streak_updated

    return success_response(response)
