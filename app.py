"""
Local Library - a server-rendered library catalog built with Flask and SQLAlchemy.

Features:
- Authors, books, genres and book copies (list, detail, create, update, delete)
- Form validation with sanitized values shown back on failure
- Deletes refused while other records still depend on the entry
- Home page counts loaded concurrently
- Book summaries prefilled from Open Library by ISBN
"""

import os

from flask import Flask, redirect, render_template, url_for
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import NotFound

from aggregate import QueryAggregator
from blueprints import register_blueprints
from config import basedir, load_config
from data_models import db
from logging_config import get_logger

logger = get_logger(__name__)


def register_error_handlers(app):
    @app.errorhandler(NotFound)
    def not_found(error):
        return render_template("error.html", title="Not Found", message=error.description, status=404), 404

    @app.errorhandler(SQLAlchemyError)
    def store_failure(error):
        db.session.rollback()
        logger.exception("Database operation failed")
        return render_template(
            "error.html",
            title="Error",
            message="The catalog could not complete that request.",
            status=500,
        ), 500


def create_app(overrides=None):
    """
    Application factory. ``overrides`` is applied on top of the environment
    configuration (used by tests).
    """
    app = Flask(__name__)
    app.config.update(load_config())
    if overrides:
        app.config.update(overrides)

    db.init_app(app)
    QueryAggregator(app)
    register_blueprints(app)
    register_error_handlers(app)

    @app.route("/")
    def home():
        return redirect(url_for("catalog.index"))

    @app.cli.command("init-db")
    def init_db():
        """Create the catalog tables."""
        os.makedirs(os.path.join(basedir, "data"), exist_ok=True)
        db.create_all()
        logger.info("Catalog tables created")

    return app


if __name__ == "__main__":
    app = create_app()
    os.makedirs(os.path.join(basedir, "data"), exist_ok=True)
    with app.app_context():
        db.create_all()

    app.run(debug=app.config["DEBUG_MODE"])
