"""
Routes Package - Flask Blueprints for the map job board

This module registers all Flask blueprints with the application.

Blueprint structure:
- main_bp: Frontend serving (/, static files)
- feed_bp: Filtered feed, radius search, filter options
- jobs_bp: Job submission and owner CRUD
- admin_bp: Moderation and user management
- favorites_bp: Saved jobs
- users_bp: Profile sync
"""

import logging

from .main import main_bp
from .feed import feed_bp
from .jobs import jobs_bp
from .admin import admin_bp
from .favorites import favorites_bp
from .users import users_bp

logger = logging.getLogger(__name__)


def register_all_blueprints(app):
    """
    Register all Flask blueprints with the application.

    Args:
        app: Flask application instance
    """
    for blueprint in (feed_bp, jobs_bp, admin_bp, favorites_bp, users_bp, main_bp):
        app.register_blueprint(blueprint)
        logger.debug(f"Registered blueprint {blueprint.name}")


__all__ = [
    "register_all_blueprints",
    "main_bp",
    "feed_bp",
    "jobs_bp",
    "admin_bp",
    "favorites_bp",
    "users_bp",
]
