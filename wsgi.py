"""WSGI entry point."""

import os

from wikiquest import create_app, db

app = create_app(os.environ.get("FLASK_ENV", "production"))

# Create tables on startup
with app.app_context():
    db.create_all()
