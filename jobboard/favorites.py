"""Saved jobs per user."""

import sqlite3
import logging
from datetime import datetime
from typing import List

from jobboard.errors import AuthenticationError, FetchError
from jobboard.models import Job

logger = logging.getLogger(__name__)


def _require_user(uid: str) -> None:
    if not uid:
        raise AuthenticationError("User not logged in.")


def is_job_saved(conn: sqlite3.Connection, uid: str, job_id: str) -> bool:
    if not uid:
        return False
    try:
        row = conn.execute(
            "SELECT 1 FROM favorites WHERE user_id = ? AND job_id = ?", (uid, job_id)
        ).fetchone()
    except sqlite3.Error as e:
        raise FetchError("Could not read favorites", cause=e) from e
    return row is not None


def save_job(conn: sqlite3.Connection, uid: str, job_id: str) -> None:
    """Save a job; saving twice refreshes the timestamp."""
    _require_user(uid)
    try:
        conn.execute(
            "INSERT OR REPLACE INTO favorites (user_id, job_id, saved_at) VALUES (?, ?, ?)",
            (uid, job_id, datetime.now().isoformat()),
        )
        conn.commit()
    except sqlite3.Error as e:
        raise FetchError("Could not save job", cause=e) from e
    logger.info(f"User {uid} saved job {job_id}")


def unsave_job(conn: sqlite3.Connection, uid: str, job_id: str) -> None:
    _require_user(uid)
    try:
        conn.execute("DELETE FROM favorites WHERE user_id = ? AND job_id = ?", (uid, job_id))
        conn.commit()
    except sqlite3.Error as e:
        raise FetchError("Could not remove saved job", cause=e) from e
    logger.info(f"User {uid} removed saved job {job_id}")


def list_saved_jobs(conn: sqlite3.Connection, uid: str) -> List[Job]:
    """Approved jobs the user saved, most recently saved first."""
    _require_user(uid)
    try:
        rows = conn.execute(
            """
            SELECT jobs.* FROM favorites
            JOIN jobs ON jobs.job_id = favorites.job_id
            WHERE favorites.user_id = ? AND jobs.approved = 1
            ORDER BY favorites.saved_at DESC
        """,
            (uid,),
        ).fetchall()
    except sqlite3.Error as e:
        raise FetchError("Could not load saved jobs", cause=e) from e
    return [Job.from_row(row) for row in rows]
