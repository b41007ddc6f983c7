"""Daily check-in streak API endpoints."""

from flask import current_app

from wikiquest.api import api_bp
from wikiquest.extensions import limiter
from wikiquest.models import User
from wikiquest.services import ProgressionService
from wikiquest.utils import success_response
from wikiquest.utils.auth import user_required


@api_bp.route("/users/streak", methods=["GET"])
@user_required
def get_streak(user: User):
    """Get the caller's current streak."""
    return success_response(ProgressionService().streak_overview(user))


@api_bp.route("/users/streak", methods=["POST"])
@limiter.limit(lambda: current_app.config["CHECK_IN_RATE_LIMIT"])
@user_required
def check_in(user: User):
    """Daily check-in. A second check-in on the same day awards nothing."""
    result = ProgressionService().check_in(user)

    data = {
        "streak": result.streak,
        "lastCheckIn": result.last_check_in.isoformat(),
        "streakUpdated": result.streak_updated,
        "streakActive": True,
        "xpAwarded": result.xp_awarded,
        "leveledUp": result.leveled_up,
    }

    if result.already_checked_in:
        return success_response(data, message="Already checked in today")

    data["totalXP"] = result.award.new_total
    data["currentLevel"] = result.award.new_level

    return success_response(data, message="Checked in")
