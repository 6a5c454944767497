"""
Admin Routes Blueprint - Job moderation and user management
"""

import logging
from flask import Blueprint, jsonify

from jobboard.auth import admin_required, current_user_id
from jobboard.database import get_db
from jobboard.routes.helpers import get_store, json_body
from jobboard.users import list_users, set_block_status

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


@admin_bp.route("/jobs")
@admin_required
def moderation_queue():
    """All jobs including unapproved ones, newest first."""
    jobs = get_store().fetch_for_moderation()
    return jsonify({
        "jobs": [job.to_dict() for job in jobs],
        "pending": sum(1 for job in jobs if not job.approved),
    })


@admin_bp.route("/jobs/<job_id>/approve", methods=["POST"])
@admin_required
def approve_job(job_id):
    job = get_store().set_approved(job_id, True)
    return jsonify(job.to_dict())


@admin_bp.route("/jobs/<job_id>/reject", methods=["POST"])
@admin_required
def reject_job(job_id):
    job = get_store().set_approved(job_id, False)
    return jsonify(job.to_dict())


@admin_bp.route("/jobs/<job_id>", methods=["DELETE"])
@admin_required
def delete_job(job_id):
    get_store().delete_job(job_id)
    return jsonify({"success": True})


@admin_bp.route("/users")
@admin_required
def users():
    return jsonify({"users": list_users(get_db())})


@admin_bp.route("/users/<user_id>/block", methods=["POST"])
@admin_required
def block_user(user_id):
    """
    Block or unblock an account.

    Body: {"status": true} to block, {"status": false} to unblock
    """
    result = set_block_status(get_db(), current_user_id(), user_id, json_body().get("status"))
    return jsonify(result)
