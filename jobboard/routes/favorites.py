"""
Favorites Routes Blueprint - Saved jobs for the signed-in user
"""

import logging
from flask import Blueprint, jsonify

from jobboard.auth import current_user_id, login_required
from jobboard.database import get_db
from jobboard.errors import NotFoundError
from jobboard.favorites import is_job_saved, list_saved_jobs, save_job, unsave_job
from jobboard.routes.helpers import get_store

logger = logging.getLogger(__name__)

favorites_bp = Blueprint("favorites", __name__, url_prefix="/api/favorites")


@favorites_bp.route("")
@login_required
def saved_jobs():
    jobs = list_saved_jobs(get_db(), current_user_id())
    return jsonify({"jobs": [job.to_dict() for job in jobs]})


@favorites_bp.route("/<job_id>")
@login_required
def saved_status(job_id):
    return jsonify({"saved": is_job_saved(get_db(), current_user_id(), job_id)})


@favorites_bp.route("/<job_id>", methods=["PUT"])
@login_required
def save(job_id):
    job = get_store().get_job(job_id)
    if not job.approved:
        raise NotFoundError(f"Job {job_id} not found")
    save_job(get_db(), current_user_id(), job_id)
    return jsonify({"saved": True})


@favorites_bp.route("/<job_id>", methods=["DELETE"])
@login_required
def unsave(job_id):
    unsave_job(get_db(), current_user_id(), job_id)
    return jsonify({"saved": False})
