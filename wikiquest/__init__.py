"""Flask application factory."""

import os

from flask import Flask
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

from wikiquest.config import config

db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()


def create_app(config_name: str | None = None) -> Flask:
    """Create and configure the Flask application."""
    if config_name is None:
        config_name = os.environ.get("FLASK_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config[config_name])

    # Initialize extensions
    from wikiquest.extensions import init_sentry, limiter

    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    limiter.init_app(app)
    init_sentry(app)

    from wikiquest.logging_config import setup_logging

    setup_logging(app)

    # CORS
    CORS(app, origins=app.config["CORS_ORIGINS"], supports_credentials=True)

    # Register blueprints
    from wikiquest.api import api_bp

    app.register_blueprint(api_bp, url_prefix="/api/v1")

    from wikiquest.errors import register_error_handlers

    register_error_handlers(app)

    from wikiquest.cli import progression

    app.cli.add_command(progression)

    # Health check endpoint
    @app.route("/health")
    def health():
        return {"status": "ok"}

    # Shell context
    @app.shell_context_processor
    def make_shell_context():
        from wikiquest.models import Quest, QuestProgress, User

        return {
            "db": db,
            "User": User,
            "Quest": Quest,
            "QuestProgress": QuestProgress,
        }

    return app
