"""
Users Routes Blueprint - Profile sync after sign-in
"""

import logging
from flask import Blueprint, jsonify

from jobboard.auth import current_user_id, current_user_is_admin, login_required
from jobboard.database import get_db
from jobboard.errors import NotFoundError, ValidationError
from jobboard.routes.helpers import json_body
from jobboard.users import get_user, save_user_profile

logger = logging.getLogger(__name__)

users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.route("/me", methods=["POST"])
@login_required
def sync_profile():
    """Called by the client after the identity provider signs the user in."""
    body = json_body()
    email = (body.get("email") or "").strip()
    if not email:
        raise ValidationError("email is required")

    save_user_profile(get_db(), current_user_id(), email, body.get("display_name") or "")
    return jsonify(get_user(get_db(), current_user_id()))


@users_bp.route("/me")
@login_required
def profile():
    user = get_user(get_db(), current_user_id())
    if user is None:
        raise NotFoundError("Profile not found; sign in again")
    user["is_admin"] = current_user_is_admin()
    user["is_blocked"] = bool(user.get("is_blocked"))
    return jsonify(user)
