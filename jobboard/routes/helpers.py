"""Shared lookups for route handlers."""

from flask import current_app, request

from jobboard.auth import current_session_id
from jobboard.database import get_db
from jobboard.feed import FeedSession
from jobboard.store import JobStore


def get_board_config():
    return current_app.config["JOBBOARD_CONFIG"]


def get_store() -> JobStore:
    return JobStore(get_db())


def get_feed_session() -> FeedSession:
    return current_app.extensions["feed_sessions"].get(current_session_id())


def json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}
