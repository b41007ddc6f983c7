"""Flask extensions initialization."""

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Storage and on/off come from RATELIMIT_* config keys
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["1000 per day", "100 per hour"],
)


def _drop_expected_errors(event, hint):
    """Keep validation failures and lost write races out of Sentry."""
    from wikiquest.errors import ProgressConflict
    from wikiquest.progression.values import InvalidProgressionValue

    exc_info = hint.get("exc_info")
    if exc_info and isinstance(
        exc_info[1], (InvalidProgressionValue, ProgressConflict)
    ):
        return None
    return event


def init_sentry(app):
    """Initialize Sentry error tracking when a DSN is configured."""
    sentry_dsn = app.config.get("SENTRY_DSN")
    if not sentry_dsn:
        app.logger.info("SENTRY_DSN not set, error tracking disabled")
        return

    import sentry_sdk
    from sentry_sdk.integrations.flask import FlaskIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=sentry_dsn,
        integrations=[FlaskIntegration(), SqlalchemyIntegration()],
        traces_sample_rate=app.config.get("SENTRY_TRACES_SAMPLE_RATE", 0.0),
        environment=app.config.get("ENV_NAME", "production"),
        before_send=_drop_expected_errors,
        send_default_pii=False,
    )
    app.logger.info("Sentry initialized")
