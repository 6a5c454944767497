"""
Main Routes Blueprint - Frontend serving and static files

This blueprint serves the single-page frontend from public/.
"""

import logging
from flask import Blueprint, jsonify, send_from_directory

from constants import FRONTEND_DIR
from jobboard.database import get_db
from jobboard.startup import get_health_status

logger = logging.getLogger(__name__)

main_bp = Blueprint("main", __name__)


@main_bp.route("/")
def index():
    """Serve the frontend entry page."""
    if (FRONTEND_DIR / "index.html").exists():
        return send_from_directory(FRONTEND_DIR, "index.html")
    return "Frontend not found! Place the built site in public/.", 500


@main_bp.route("/api/health")
def health():
    """Health check for uptime monitors."""
    status = get_health_status(get_db())
    return jsonify(status), 200 if status["status"] == "healthy" else 503


@main_bp.route("/<path:path>")
def serve_static(path):
    """
    Serve static files or fallback to index.html for hash/SPA routing.
    """
    if path.startswith("api/"):
        return {"error": "Not found"}, 404
    if (FRONTEND_DIR / path).is_file():
        return send_from_directory(FRONTEND_DIR, path)
    return index()
