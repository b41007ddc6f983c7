"""API blueprints."""

from flask import Blueprint

api_bp = Blueprint("api", __name__)

from wikiquest.api import auth, levels, quests, streaks, users  # noqa: E402, F401
