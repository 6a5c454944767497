"""
Identity boundary.

Sign-in is handled by the upstream identity provider, which forwards the
authenticated user id in the X-User-Id header. This module reads it and
guards routes that need a user or an admin.
"""

import logging
from functools import wraps
from typing import Optional

from flask import g, request

from jobboard.database import get_db
from jobboard.errors import AuthenticationError, PermissionDeniedError
from jobboard.users import is_user_admin, is_user_blocked

logger = logging.getLogger(__name__)

USER_HEADER = "X-User-Id"
SESSION_HEADER = "X-Session-Id"


def current_user_id() -> Optional[str]:
    """Authenticated user id for this request, if any."""
    uid = request.headers.get(USER_HEADER, "").strip()
    return uid or None


def current_session_id() -> Optional[str]:
    """Key for the caller's feed session; None for anonymous callers."""
    session_id = request.headers.get(SESSION_HEADER, "").strip()
    return session_id or current_user_id()


def current_user_is_admin() -> bool:
    if "is_admin" not in g:
        g.is_admin = is_user_admin(get_db(), current_user_id())
    return g.is_admin


def login_required(f):
    """
    Decorator to require an authenticated, unblocked user.

    Raises AuthenticationError (401) or PermissionDeniedError (403),
    which the app's error handlers turn into JSON responses.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        uid = current_user_id()
        if not uid:
            raise AuthenticationError("Not authenticated")
        if is_user_blocked(get_db(), uid):
            logger.warning(f"Blocked user {uid} attempted {request.path}")
            raise PermissionDeniedError("This account has been blocked")
        return f(*args, **kwargs)
    return decorated_function


def admin_required(f):
    """Decorator to require an authenticated admin."""
    @wraps(f)
    @login_required
    def decorated_function(*args, **kwargs):
        if not current_user_is_admin():
            raise PermissionDeniedError("Administrator access required")
        return f(*args, **kwargs)
    return decorated_function
