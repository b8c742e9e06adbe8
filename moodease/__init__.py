"""MoodEase API: accounts, daily mood log, challenge streaks and community feed."""

import logging

import click
import pytz
from flask import Flask, jsonify
from flask_cors import CORS

from moodease.config import Config
from moodease.errors import register_error_handlers
from moodease.models import db
from moodease.routes import register_blueprints
from moodease.security import bcrypt, jwt


def create_app(config=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config:
        app.config.update(config)

    if not app.config.get("JWT_SECRET_KEY"):
        raise RuntimeError("JWT_SECRET_KEY is not set")
    try:
        pytz.timezone(app.config["DAY_TIMEZONE"])
    except pytz.UnknownTimeZoneError:
        raise RuntimeError("Unknown DAY_TIMEZONE: %s" % app.config["DAY_TIMEZONE"])

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    CORS(app, origins=app.config["CORS_ORIGINS"])
    db.init_app(app)
    bcrypt.init_app(app)
    jwt.init_app(app)

    register_error_handlers(app)
    register_blueprints(app)

    @app.route("/api/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok"})

    @app.cli.command("init-db")
    def init_db():
        """Create all database tables."""
        db.create_all()
        click.echo("Database initialised.")

    return app
