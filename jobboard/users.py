"""
User profiles and admin account management.

Authentication itself happens upstream in the identity provider; this
module only mirrors profiles and keeps the admin and blocked flags.
"""

import sqlite3
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from jobboard.errors import FetchError, NotFoundError, PermissionDeniedError, ValidationError

logger = logging.getLogger(__name__)


def save_user_profile(conn: sqlite3.Connection, uid: str, email: str,
                      display_name: str = '') -> None:
    """Create or refresh a profile on sign-in; admin/blocked flags are kept."""
    now = datetime.now().isoformat()
    try:
        conn.execute(
            """
            INSERT INTO users (uid, email, display_name, created_at, last_login)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(uid) DO UPDATE SET
                email = excluded.email,
                display_name = excluded.display_name,
                last_login = excluded.last_login
        """,
            (uid, email, display_name or '', now, now),
        )
        conn.commit()
    except sqlite3.Error as e:
        raise FetchError("Could not save user profile", cause=e) from e
    logger.info(f"User profile saved: {email}")


def get_user(conn: sqlite3.Connection, uid: str) -> Optional[Dict[str, Any]]:
    try:
        row = conn.execute("SELECT * FROM users WHERE uid = ?", (uid,)).fetchone()
    except sqlite3.Error as e:
        raise FetchError("Could not read user profile", cause=e) from e
    return dict(row) if row else None


def is_user_admin(conn: sqlite3.Connection, uid: Optional[str]) -> bool:
    """
    Check the admin flag for a user.

    Missing users and unreadable profiles are treated as non-admin.
    """
    if not uid:
        return False
    try:
        row = conn.execute("SELECT is_admin FROM users WHERE uid = ?", (uid,)).fetchone()
    except sqlite3.Error as e:
        logger.error(f"Error checking admin status for {uid}: {e}")
        return False
    if row is None:
        logger.debug(f"No user profile for {uid}, not an admin")
        return False
    return row['is_admin'] == 1


def is_user_blocked(conn: sqlite3.Connection, uid: Optional[str]) -> bool:
    user = get_user(conn, uid) if uid else None
    return bool(user and user.get('is_blocked'))


def list_users(conn: sqlite3.Connection) -> List[Dict[str, Any]]:
    """List every profile for the admin user-management tab."""
    try:
        rows = conn.execute(
            "SELECT uid, email, display_name, is_admin, is_blocked, last_login "
            "FROM users ORDER BY created_at"
        ).fetchall()
    except sqlite3.Error as e:
        raise FetchError("Unable to retrieve user list", cause=e) from e

    return [
        {
            'uid': row['uid'],
            'email': row['email'],
            'display_name': row['display_name'],
            'is_admin': row['is_admin'] == 1,
            'is_blocked': row['is_blocked'] == 1,
            'last_login': row['last_login'],
        }
        for row in rows
    ]


def set_block_status(conn: sqlite3.Connection, caller_uid: str, user_id: str,
                     status: Any) -> Dict[str, Any]:
    """
    Block or unblock an account.

    Args:
        caller_uid: Admin performing the change
        user_id: Account to change
        status: True to block, False to unblock

    Raises:
        ValidationError: If user_id is empty or status is not a boolean
        PermissionDeniedError: If the caller is not an admin or targets themselves
        NotFoundError: If the account does not exist
    """
    if not user_id or not isinstance(status, bool):
        raise ValidationError("A user id and a boolean status are required")
    if user_id == caller_uid:
        raise PermissionDeniedError("Admins cannot block their own account")
    if not is_user_admin(conn, caller_uid):
        raise PermissionDeniedError("Only administrators can block user accounts")
    if get_user(conn, user_id) is None:
        raise NotFoundError(f"User {user_id} not found")

    try:
        conn.execute("UPDATE users SET is_blocked = ? WHERE uid = ?",
                     (1 if status else 0, user_id))
        conn.commit()
    except sqlite3.Error as e:
        raise FetchError("Unable to update user block status", cause=e) from e

    action = 'blocked' if status else 'unblocked'
    logger.info(f"User {user_id} {action} by {caller_uid}")
    return {'success': True, 'message': f"User {user_id} successfully {action}."}
