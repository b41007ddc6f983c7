"""User profile, settings and stats API endpoints."""

from flask import request

from wikiquest.api import api_bp
from wikiquest.models import User
from wikiquest.services import ProgressionService, QuestService, UserStore
from wikiquest.utils import conflict, success_response, validation_error
from wikiquest.utils.auth import user_required

# JSON field -> (model attribute, accepted types)
PROFILE_FIELDS = {
    "displayName": ("display_name", (str,)),
    "username": ("username", (str,)),
    "bio": ("bio", (str,)),
    "interests": ("interests", (list,)),
    "avatarId": ("avatar_id", (int,)),
    "learningPath": ("learning_path", (str,)),
    "hasCompletedOnboarding": ("has_completed_onboarding", (bool,)),
}

# Settings key -> (default, accepted type)
SETTINGS_FIELDS = {
    "darkMode": (False, bool),
    "highContrast": (False, bool),
    "shareProgress": (True, bool),
    "language": ("en", str),
    "wikipediaConnected": (False, bool),
}


def _settings_for(user: User) -> dict:
    settings = {key: default for key, (default, _) in SETTINGS_FIELDS.items()}
    settings.update(user.settings or {})
    return settings


@api_bp.route("/users/stats", methods=["GET"])
@user_required
def get_user_stats(user: User):
    """Get user statistics and progress."""
    progression = ProgressionService()
    quests = QuestService(progression)

    level_info = progression.level_engine.level_info(user.total_xp or 0)

    return success_response(
        {
            "xp": user.total_xp,
            "level": level_info.current_level,
            "levelProgress": level_info.progress_percent,
            "xpForNextLevel": level_info.next_level_xp,
            "maxLevel": level_info.max_level,
            "streak": user.streak,
            "longestStreak": user.longest_streak,
            "streakActive": progression.streak_engine.is_streak_active(
                user.last_check_in
            ),
            "edits": user.contributions,
            "completedQuests": quests.completed_count(user.id),
            "activeQuests": quests.active_count(user.id),
        }
    )


@api_bp.route("/users/profile", methods=["GET"])
@user_required
def get_profile(user: User):
    """Get the caller's profile."""
    return success_response({"user": user.to_dict()})


@api_bp.route("/users/profile", methods=["PUT"])
@user_required
def update_profile(user: User):
    """
    Update profile fields. Omitted fields are left unchanged.

    Request body:
    {
        "displayName": "Ada",
        "username": "ada",
        "bio": "...",
        "interests": ["history"],
        "avatarId": 3,
        "learningPath": "citations",
        "hasCompletedOnboarding": true
    }
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return validation_error({"body": "Request body is required"})

    errors = {}
    updates = {}
    for field, (attr, types) in PROFILE_FIELDS.items():
        if field not in data or data[field] is None:
            continue
        value = data[field]
        # bool is an int subclass; only accept it where bool is expected
        if not isinstance(value, types) or (
            isinstance(value, bool) and bool not in types
        ):
            errors[field] = "Invalid type"
            continue
        updates[attr] = value

    if "username" in updates:
        updates["username"] = updates["username"].strip()
        if not updates["username"]:
            errors["username"] = "Username must not be empty"

    if errors:
        return validation_error(errors)

    if "username" in updates and updates["username"] != user.username:
        taken = User.query.filter(
            User.username == updates["username"], User.id != user.id
        ).first()
        if taken:
            return conflict("Username already taken")

    for attr, value in updates.items():
        setattr(user, attr, value)

    UserStore().save(user)

    return success_response(
        {"user": user.to_dict()}, message="Profile updated successfully"
    )


@api_bp.route("/users/settings", methods=["GET"])
@user_required
def get_settings(user: User):
    """Get display and privacy settings, with defaults for unsaved keys."""
    return success_response({"settings": _settings_for(user)})


@api_bp.route("/users/settings", methods=["POST"])
@user_required
def update_settings(user: User):
    """
    Save settings. Keys not sent keep their current value.

    Request body:
    {
        "settings": {
            "darkMode": true,
            "language": "en"
        }
    }
    """
    data = request.get_json(silent=True) or {}
    settings = data.get("settings")
    if not isinstance(settings, dict) or not settings:
        return validation_error({"settings": "No settings provided"})

    errors = {}
    for key, value in settings.items():
        if key not in SETTINGS_FIELDS:
            errors[key] = "Unknown setting"
        elif not isinstance(value, SETTINGS_FIELDS[key][1]):
            errors[key] = "Invalid type"
    if errors:
        return validation_error(errors)

    merged = _settings_for(user)
    merged.update(settings)
    user.settings = merged
    UserStore().save(user)

    return success_response(
        {"settings": merged}, message="Settings updated successfully"
    )
