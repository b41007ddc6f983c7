"""Authentication utilities."""

from functools import wraps

from flask_jwt_extended import get_jwt_identity, jwt_required

from wikiquest.services.user_store import UserStore
from wikiquest.utils.response import not_found


def user_required(fn):
    """
    Decorator that requires a valid token and loads the caller's record.

    The wrapped view receives the user as the ``user`` keyword argument.
    """

    @wraps(fn)
    @jwt_required()
    def wrapper(*args, **kwargs):
        user = UserStore().find_by_identity(get_jwt_identity())

        if not user:
            return not_found("User not found")

        return fn(*args, user=user, **kwargs)

    return wrapper
