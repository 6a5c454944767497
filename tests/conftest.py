"""
Pytest configuration and shared fixtures for the map job board tests.
"""

import os
import sys

import pytest
import yaml

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from jobboard.database import connect, create_schema  # noqa: E402
from jobboard.models import Job  # noqa: E402
from jobboard.store import JobStore  # noqa: E402
from jobboard.users import save_user_profile  # noqa: E402

LAGOS_CENTER = (3.3792, 6.5244)

# Inserted oldest first; the feed returns them newest first
SAMPLE_JOBS = [
    {
        "title": "Accounts Officer",
        "company": "Zenith Bank",
        "location": "Lagos",
        "category": "Finance",
        "salary": "₦150,000",
        "description": "Reconcile branch ledgers.",
        "application_email": "careers@example.com",
    },
    {
        "title": "Product Designer",
        "company": "Flutterwave",
        "location": "Abuja",
        "category": "IT",
        "salary": "Negotiable",
        "description": "Design checkout flows.",
        "application_link": "https://example.com/jobs/designer",
    },
    {
        "title": "Frontend Engineer",
        "company": "Andela",
        "location": "Remote",
        "category": "IT",
        "salary": "600k+",
        "description": "Ship React features.",
        "application_link": "https://example.com/jobs/frontend",
    },
    {
        "title": "Backend Engineer",
        "company": "Paystack",
        "location": "Lagos",
        "category": "IT",
        "salary": "₦500,000 - ₦600,000",
        "description": "Build payment APIs.",
        "tags": "python, go",
        "application_link": "https://example.com/jobs/backend",
    },
]

PENDING_JOB = {
    "title": "Data Analyst",
    "company": "Kuda",
    "location": "Lagos",
    "category": "IT",
    "salary": "900k",
    "description": "Awaiting moderation.",
    "application_link": "https://example.com/jobs/analyst",
}

TEST_CONFIG = {
    "map": {
        "default_center": list(LAGOS_CENTER),
        "default_radius_km": 50,
        "geolocation_timeout": 1,
        "geolocation_url": "",
        "canonical_locations": {
            "Lagos": list(LAGOS_CENTER),
            "Abuja": [7.4913, 9.0722],
            "Hybrid": list(LAGOS_CENTER),
        },
    },
    "search": {
        "categories": ["IT", "Finance", "Marketing"],
        "locations": ["Lagos", "Abuja", "Remote"],
        "salary_buckets": ["100k+", "300k+", "1M+"],
        "currency_symbol": "₦",
        "debounce_ms": 300,
    },
    "moderation": {"enabled": True},
}

ADMIN_UID = "admin-uid"
USER_UID = "user-uid"
OTHER_UID = "other-uid"


def seed_jobs(conn):
    """Insert the sample jobs plus one unapproved posting; returns title -> job_id."""
    store = JobStore(conn)
    ids = {}
    for data in SAMPLE_JOBS:
        ids[data["title"]] = store.add_job(data, created_by=USER_UID, approved=True)
    ids[PENDING_JOB["title"]] = store.add_job(PENDING_JOB, created_by=USER_UID)
    return ids


def seed_users(conn):
    save_user_profile(conn, ADMIN_UID, "admin@example.com", "Admin")
    conn.execute("UPDATE users SET is_admin = 1 WHERE uid = ?", (ADMIN_UID,))
    conn.commit()
    save_user_profile(conn, USER_UID, "user@example.com", "Poster")
    save_user_profile(conn, OTHER_UID, "other@example.com", "Other")


def make_job(job_id="job-1", title="Backend Engineer", **fields):
    """Build a Job without touching the database."""
    fields.setdefault("location", "Lagos")
    fields.setdefault("category", "IT")
    fields.setdefault("company", "Paystack")
    fields.setdefault("salary", "Competitive")
    return Job(job_id=job_id, title=title, approved=True, **fields)


@pytest.fixture
def temp_db():
    """
    Create a temporary in-memory SQLite database with the full schema.

    Yields:
        sqlite3.Connection: Database connection
    """
    conn = connect(":memory:")
    create_schema(conn)
    yield conn
    conn.close()


@pytest.fixture
def seeded_db(temp_db):
    """In-memory database with sample users and jobs."""
    seed_users(temp_db)
    return temp_db


@pytest.fixture
def job_ids(seeded_db):
    return seed_jobs(seeded_db)


@pytest.fixture
def store(seeded_db, job_ids):
    """JobStore over the seeded in-memory database."""
    return JobStore(seeded_db)


@pytest.fixture
def config_file(tmp_path):
    """Write a board config.yaml and return its path."""
    path = tmp_path / "config.yaml"
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(TEST_CONFIG, f, allow_unicode=True)
    return path


@pytest.fixture
def app(config_file, tmp_path):
    """Flask application over a seeded temporary database."""
    from jobboard import create_app

    db_path = tmp_path / "jobs.db"
    flask_app = create_app(config_file, db_path=db_path)
    flask_app.config["TESTING"] = True

    conn = connect(db_path)
    try:
        seed_users(conn)
        flask_app.config["SEEDED_JOB_IDS"] = seed_jobs(conn)
    finally:
        conn.close()

    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers():
    """Build request headers for a signed-in user and a feed session."""
    def build(uid=USER_UID, session_id=None):
        headers = {"X-User-Id": uid}
        if session_id:
            headers["X-Session-Id"] = session_id
        return headers
    return build
