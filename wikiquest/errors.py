"""Application-wide error handlers."""

import logging

from werkzeug.exceptions import HTTPException

from wikiquest.progression.values import InvalidProgressionValue
from wikiquest.utils.response import error_response, server_error, validation_error

logger = logging.getLogger(__name__)


class ProgressConflict(Exception):
    """Concurrent writes kept invalidating a progression update."""


class StaleProgress(Exception):
    """A record read for a progression update changed before the write."""


def register_error_handlers(app):
    """Map exceptions to the JSON error envelope."""

    @app.errorhandler(InvalidProgressionValue)
    def handle_invalid_value(e):
        return validation_error({e.field: e.message})

    @app.errorhandler(ProgressConflict)
    def handle_progress_conflict(e):
        logger.warning(f"Progress update conflict: {e}")
        return error_response(
            "CONFLICT",
            "Your progress changed while updating, please retry",
            status_code=409,
        )

    @app.errorhandler(429)
    def handle_rate_limited(e):
        return error_response(
            "RATE_LIMITED", f"Rate limit exceeded: {e.description}", status_code=429
        )

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        code = (e.name or "error").upper().replace(" ", "_")
        return error_response(code, e.description or e.name, status_code=e.code)

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        logger.exception(f"Unhandled error: {e}")
        return server_error()
