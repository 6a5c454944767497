"""
Jobs Routes Blueprint - Posting, viewing, editing and deleting jobs

Unapproved postings are only visible to their owner and to admins.
"""

import logging
from flask import Blueprint, jsonify

from jobboard.auth import current_user_id, current_user_is_admin, login_required
from jobboard.database import get_db
from jobboard.errors import NotFoundError, PermissionDeniedError
from jobboard.favorites import is_job_saved
from jobboard.routes.helpers import get_board_config, get_store, json_body

logger = logging.getLogger(__name__)

jobs_bp = Blueprint("jobs", __name__)


def _can_manage(job) -> bool:
    uid = current_user_id()
    return bool(uid) and (job.created_by == uid or current_user_is_admin())


@jobs_bp.route("/api/jobs", methods=["POST"])
@login_required
def create_job():
    """
    Submit a new posting.

    Route: POST /api/jobs

    Body: title, company, location, category, description (required),
    application_link or application_email (one required), salary, tags
    (list or comma-separated), latitude/longitude (optional).

    New postings wait for moderation unless moderation is disabled.
    """
    config = get_board_config()
    approved = not config.moderation_enabled
    job_id = get_store().add_job(json_body(), created_by=current_user_id(), approved=approved)
    return jsonify({"job_id": job_id, "approved": approved}), 201


@jobs_bp.route("/api/jobs/<job_id>")
def get_job(job_id):
    """Job details, with the caller's saved flag."""
    job = get_store().get_job(job_id)
    if not job.approved and not _can_manage(job):
        raise NotFoundError(f"Job {job_id} not found")

    payload = job.to_dict()
    payload["saved"] = is_job_saved(get_db(), current_user_id(), job_id)
    return jsonify(payload)


@jobs_bp.route("/api/jobs/<job_id>", methods=["PATCH"])
@login_required
def update_job(job_id):
    """Edit a posting (owner or admin)."""
    store = get_store()
    job = store.get_job(job_id)
    if not _can_manage(job):
        raise PermissionDeniedError("Only the poster or an admin can edit this job")

    updated = store.update_job(job_id, json_body())
    return jsonify(updated.to_dict())


@jobs_bp.route("/api/jobs/<job_id>", methods=["DELETE"])
@login_required
def delete_job(job_id):
    """Delete a posting (owner or admin)."""
    store = get_store()
    job = store.get_job(job_id)
    if not _can_manage(job):
        raise PermissionDeniedError("Only the poster or an admin can delete this job")

    store.delete_job(job_id)
    return jsonify({"success": True})
