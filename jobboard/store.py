"""
Job Store - SQLite-backed job collection

Implements the store query interface the filtering pipeline consumes
(fetch_approved) plus job submission, editing, moderation and deletion.
Any SQLite failure surfaces as FetchError; nothing here retries.
"""

import json
import uuid
import sqlite3
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Mapping, Optional

from constants import DEFAULT_SALARY, PUSHABLE_FIELDS
from jobboard.errors import FetchError, NotFoundError, ValidationError
from jobboard.models import Job

logger = logging.getLogger(__name__)

SUPPORTED_ORDERING = {
    'created_at desc': 'created_at DESC, rowid DESC',
}

REQUIRED_FIELDS = ('title', 'description', 'company', 'location', 'category')

EDITABLE_FIELDS = (
    'title', 'company', 'location', 'category', 'salary', 'description',
    'tags', 'latitude', 'longitude', 'application_link', 'application_email',
)


def parse_tags(raw: Any) -> List[str]:
    """Accept a list or a comma-separated string; drop blanks."""
    if not raw:
        return []
    if isinstance(raw, str):
        raw = raw.split(',')
    return [str(tag).strip() for tag in raw if str(tag).strip()]


def _parse_coordinate(value: Any, name: str, limit: float) -> Optional[float]:
    if value is None or value == '':
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a number")
    if not -limit <= number <= limit:
        raise ValidationError(f"{name} must be between -{limit:g} and {limit:g}")
    return number


def _clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def validate_job_data(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate and normalize a job submission.

    Args:
        data: Raw fields from the posting form

    Returns:
        Dict of cleaned column values

    Raises:
        ValidationError: If a required field or the application method is missing
    """
    cleaned = {name: _clean_text(data.get(name)) for name in REQUIRED_FIELDS}
    missing = [name for name, value in cleaned.items() if not value]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cleaned['application_link'] = _clean_text(data.get('application_link'))
    cleaned['application_email'] = _clean_text(data.get('application_email'))
    if not cleaned['application_link'] and not cleaned['application_email']:
        raise ValidationError("Provide either an application link or an application email")

    cleaned['salary'] = _clean_text(data.get('salary')) or DEFAULT_SALARY
    cleaned['tags'] = parse_tags(data.get('tags'))

    cleaned['latitude'] = _parse_coordinate(data.get('latitude'), 'latitude', 90)
    cleaned['longitude'] = _parse_coordinate(data.get('longitude'), 'longitude', 180)
    if (cleaned['latitude'] is None) != (cleaned['longitude'] is None):
        raise ValidationError("latitude and longitude must be provided together")

    return cleaned


class JobStore:
    """Job collection over an open SQLite connection."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    @contextmanager
    def _translate_errors(self, action: str) -> Iterator[None]:
        try:
            yield
        except sqlite3.Error as e:
            logger.error(f"Store failure while {action}: {e}")
            raise FetchError(f"Job store unavailable while {action}", cause=e) from e

    # ===== QUERIES =====

    def fetch_approved(
        self,
        equality_filters: Optional[Mapping[str, str]] = None,
        order_by: str = 'created_at desc',
    ) -> List[Job]:
        """
        Fetch approved jobs matching every equality filter, newest first.

        Args:
            equality_filters: Field -> exact value; only category and location
            order_by: Only "created_at desc" is supported

        Returns:
            List of Job objects

        Raises:
            ValueError: For unsupported filter fields or ordering
            FetchError: If the database cannot be read
        """
        equality_filters = dict(equality_filters or {})
        unknown = set(equality_filters) - set(PUSHABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unsupported store filters: {sorted(unknown)}")
        if order_by not in SUPPORTED_ORDERING:
            raise ValueError(f"Unsupported ordering: {order_by}")

        query = "SELECT * FROM jobs WHERE approved = 1"
        params = []
        for name in PUSHABLE_FIELDS:
            if name in equality_filters:
                query += f" AND {name} = ?"
                params.append(equality_filters[name])
        query += f" ORDER BY {SUPPORTED_ORDERING[order_by]}"

        with self._translate_errors("fetching approved jobs"):
            rows = self.conn.execute(query, params).fetchall()

        logger.debug(f"fetch_approved({equality_filters}) returned {len(rows)} jobs")
        return [Job.from_row(row) for row in rows]

    def fetch_for_moderation(self) -> List[Job]:
        """All jobs, approved or not, newest first."""
        with self._translate_errors("fetching jobs for moderation"):
            rows = self.conn.execute(
                "SELECT * FROM jobs ORDER BY created_at DESC, rowid DESC"
            ).fetchall()
        return [Job.from_row(row) for row in rows]

    def get_job(self, job_id: str) -> Job:
        """
        Look up a single job.

        Raises:
            NotFoundError: If no job has this id
        """
        with self._translate_errors("reading a job"):
            row = self.conn.execute(
                "SELECT * FROM jobs WHERE job_id = ?", (job_id,)
            ).fetchone()
        if row is None:
            raise NotFoundError(f"Job {job_id} not found")
        return Job.from_row(row)

    # ===== MUTATIONS =====

    def add_job(
        self,
        data: Mapping[str, Any],
        created_by: Optional[str],
        approved: bool = False,
    ) -> str:
        """
        Insert a new posting.

        Args:
            data: Raw posting fields (validated here)
            created_by: Poster's user id
            approved: Initial moderation state

        Returns:
            The new job id
        """
        cleaned = validate_job_data(data)
        job_id = uuid.uuid4().hex
        now = datetime.now().isoformat()

        with self._translate_errors("adding a job"):
            self.conn.execute(
                """
                INSERT INTO jobs
                (job_id, title, title_lower, company, location, category, salary,
                 description, tags, latitude, longitude, application_link,
                 application_email, approved, created_by, created_at, posted_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
                (
                    job_id,
                    cleaned['title'],
                    cleaned['title'].lower(),
                    cleaned['company'],
                    cleaned['location'],
                    cleaned['category'],
                    cleaned['salary'],
                    cleaned['description'],
                    json.dumps(cleaned['tags']),
                    cleaned['latitude'],
                    cleaned['longitude'],
                    cleaned['application_link'],
                    cleaned['application_email'],
                    1 if approved else 0,
                    created_by,
                    now,
                    data.get('posted_at') or now,
                    now,
                ),
            )
            self.conn.commit()

        logger.info(f"Added job {job_id}: {cleaned['title']} (approved={approved})")
        return job_id

    def update_job(self, job_id: str, changes: Mapping[str, Any]) -> Job:
        """
        Apply an owner/admin edit to a posting.

        Only editable fields are considered; the merged record must still
        pass submission validation.
        """
        current = self.get_job(job_id).to_dict()
        merged = dict(current)
        merged.update({k: v for k, v in changes.items() if k in EDITABLE_FIELDS})
        cleaned = validate_job_data(merged)

        with self._translate_errors("updating a job"):
            self.conn.execute(
                """
                UPDATE jobs
                SET title = ?, title_lower = ?, company = ?, location = ?, category = ?,
                    salary = ?, description = ?, tags = ?, latitude = ?, longitude = ?,
                    application_link = ?, application_email = ?, updated_at = ?
                WHERE job_id = ?
            """,
                (
                    cleaned['title'],
                    cleaned['title'].lower(),
                    cleaned['company'],
                    cleaned['location'],
                    cleaned['category'],
                    cleaned['salary'],
                    cleaned['description'],
                    json.dumps(cleaned['tags']),
                    cleaned['latitude'],
                    cleaned['longitude'],
                    cleaned['application_link'],
                    cleaned['application_email'],
                    datetime.now().isoformat(),
                    job_id,
                ),
            )
            self.conn.commit()

        logger.info(f"Updated job {job_id}")
        return self.get_job(job_id)

    def set_approved(self, job_id: str, approved: bool) -> Job:
        """Approve or reject a posting."""
        self.get_job(job_id)
        with self._translate_errors("moderating a job"):
            self.conn.execute(
                "UPDATE jobs SET approved = ?, updated_at = ? WHERE job_id = ?",
                (1 if approved else 0, datetime.now().isoformat(), job_id),
            )
            self.conn.commit()

        logger.info(f"Job {job_id} {'approved' if approved else 'rejected'}")
        return self.get_job(job_id)

    def delete_job(self, job_id: str) -> None:
        """Delete a posting and any favorites pointing at it."""
        self.get_job(job_id)
        with self._translate_errors("deleting a job"):
            self.conn.execute("DELETE FROM favorites WHERE job_id = ?", (job_id,))
            self.conn.execute("DELETE FROM jobs WHERE job_id = ?", (job_id,))
            self.conn.commit()
        logger.info(f"Job {job_id} deleted")
