#!/usr/bin/env python3
"""
Map Job Board - Main Entry Point

Uses the application factory pattern via jobboard.create_app().

Usage:
    python run.py

Environment Variables:
    JOBBOARD_ENV: development (default), production, testing
    JOBBOARD_CONFIG: Path to config.yaml (optional)
    JOBBOARD_DB_PATH: SQLite database path (optional)
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (optional)
    PORT: HTTP port (default 5000)
"""

import os
import sys
from pathlib import Path

# Ensure app directory is in path
APP_DIR = Path(__file__).parent
sys.path.insert(0, str(APP_DIR))

# Load environment variables from .env file
from dotenv import load_dotenv

load_dotenv(APP_DIR / ".env")

# Initialize logging first
from jobboard.logging_config import setup_logging, get_logger, current_env

env = current_env()
log_level = os.environ.get("LOG_LEVEL")
json_logs = env == "production"

setup_logging(level=log_level, json_logs=json_logs)
logger = get_logger(__name__)


def main():
    """Main entry point for the map job board."""

    logger.info("=" * 60)
    logger.info("Map Job Board - Starting Up")
    logger.info("=" * 60)

    from config_loader import get_config
    from jobboard.startup import run_startup_validation

    try:
        config = get_config()
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    logger.info("Running startup validation...")
    validation_passed, results = run_startup_validation(
        config_path=config.config_path,
        db_path=config.database_path,
        strict=False,  # Allow warnings in development
        log_results=True,
    )

    if not validation_passed:
        logger.error("Startup validation failed. Please fix the errors above.")
        sys.exit(1)

    from jobboard import create_app

    app = create_app(config.config_path)
    port = int(os.environ.get("PORT", "5000"))

    lon, lat = config.default_center
    logger.info("")
    logger.info("=" * 60)
    logger.info(f"  Environment: {env}")
    logger.info(f"  Configuration: {config.config_path}")
    logger.info(f"  Database: {app.config['DATABASE_PATH']}")
    logger.info(f"  Default center: ({lon}, {lat}), radius {config.default_radius_km:g} km")
    logger.info(f"  Moderation: {'on' if config.moderation_enabled else 'off'}")
    logger.info("")
    logger.info(f"  Feed API: http://localhost:{port}/api/feed")
    logger.info(f"  Health Check: http://localhost:{port}/api/health")
    logger.info("=" * 60)
    logger.info("")

    debug_mode = env != "production"
    app.run(debug=debug_mode, host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
