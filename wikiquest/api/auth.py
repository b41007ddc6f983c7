"""Authentication API endpoints."""

import logging

from flask import current_app, request
from flask_jwt_extended import create_access_token

from wikiquest import db
from wikiquest.api import api_bp
from wikiquest.models import User
from wikiquest.services.user_store import UserStore
from wikiquest.utils import (
    conflict,
    success_response,
    unauthorized,
    validation_error,
)
from wikiquest.utils.auth import user_required

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _token_for(user: User) -> str:
    # Identity must be a string for Flask-JWT-Extended
    return create_access_token(identity=str(user.id))


@api_bp.route("/auth/register", methods=["POST"])
def register():
    """
    Create an account and return a token.

    Request body:
    {
        "email": "ada@example.org",
        "username": "ada",
        "password": "secret1"
    }
    """
    data = request.get_json(silent=True) or {}

    email = (data.get("email") or "").strip().lower()
    username = (data.get("username") or "").strip()
    password = data.get("password") or ""

    errors = {}
    if not email or "@" not in email:
        errors["email"] = "A valid email is required"
    if not username:
        errors["username"] = "Username is required"
    if len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = (
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    if errors:
        return validation_error(errors)

    existing = User.query.filter(
        db.or_(User.email == email, User.username == username)
    ).first()
    if existing:
        return conflict("User with this email or username already exists")

    user = User(email=email, username=username, display_name=username)
    user.set_password(password)
    UserStore().save(user)

    logger.info(f"Registered user {user.id}")

    return success_response(
        {"user": user.to_dict(), "token": _token_for(user)},
        message="User registered successfully",
        status_code=201,
    )


@api_bp.route("/auth/login", methods=["POST"])
def login():
    """Exchange email and password for a token."""
    data = request.get_json(silent=True) or {}

    email = (data.get("email") or "").strip()
    password = data.get("password") or ""
    if not email or not password:
        return validation_error({"credentials": "Email and password are required"})

    user = UserStore().find_by_email(email)
    if not user or not user.check_password(password):
        return unauthorized("Invalid email or password")

    return success_response({"user": user.to_dict(), "token": _token_for(user)})


@api_bp.route("/auth/check-email", methods=["GET"])
def check_email():
    """Report whether an email is already registered."""
    email = request.args.get("email", "").strip()
    if not email:
        return validation_error({"email": "Email parameter is required"})

    return success_response({"exists": UserStore().find_by_email(email) is not None})


@api_bp.route("/auth/me", methods=["GET"])
@user_required
def get_current_user(user: User):
    """Get current authenticated user."""
    return success_response({"user": user.to_dict()})


@api_bp.route("/auth/dev", methods=["POST"])
def dev_authenticate():
    """
    Development-only endpoint for testing without a password.
    Creates or gets a test user.

    Request body:
    {
        "email": "test@example.org",
        "username": "test_user"
    }
    """
    if not current_app.debug:
        return unauthorized("This endpoint is only available in development mode")

    data = request.get_json(silent=True) or {}

    email = data.get("email", "test@example.org").strip().lower()
    username = data.get("username", "test_user")

    user = UserStore().find_by_email(email)

    if not user:
        user = UserStore().save(
            User(email=email, username=username, display_name=username)
        )

    return success_response({"user": user.to_dict(), "token": _token_for(user)})
