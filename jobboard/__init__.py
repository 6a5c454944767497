"""
Map Job Board - Application Factory

Job board with moderation, favorites and map-assisted radius search.
"""

import logging
from flask import Flask, jsonify
from flask_cors import CORS

from config_loader import get_config
from jobboard.database import close_db, init_db
from jobboard.errors import JobBoardError

logger = logging.getLogger(__name__)


def create_app(config_path=None, db_path=None):
    """
    Application factory for creating Flask app instances.

    Args:
        config_path: Optional path to config.yaml file
        db_path: Optional SQLite path overriding the configured one

    Returns:
        Configured Flask application instance
    """
    # Load environment variables
    from dotenv import load_dotenv

    load_dotenv()

    # Load configuration
    try:
        config = get_config(config_path)
    except FileNotFoundError as e:
        logger.error(f"Configuration Error: {e}")
        raise

    app = Flask(__name__, static_folder=None)
    CORS(app)

    app.config["JOBBOARD_CONFIG"] = config
    app.config["DATABASE_PATH"] = str(db_path or config.database_path)

    init_db(app.config["DATABASE_PATH"])
    app.teardown_appcontext(close_db)

    from jobboard.feed import FeedSession, SessionRegistry

    app.extensions["feed_sessions"] = SessionRegistry(lambda: FeedSession.from_config(config))

    register_error_handlers(app)
    register_blueprints(app)

    return app


def register_error_handlers(app):
    """Map job board errors to JSON responses."""

    @app.errorhandler(JobBoardError)
    def handle_job_board_error(e):
        if e.status_code >= 500:
            logger.error(f"{type(e).__name__}: {e.message}")
        else:
            logger.info(f"{type(e).__name__}: {e.message}")
        return jsonify({"error": e.message}), e.status_code


def register_blueprints(app):
    """Register all Flask blueprints."""
    from jobboard.routes import register_all_blueprints

    register_all_blueprints(app)
