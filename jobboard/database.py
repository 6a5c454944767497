"""
Database - Database operations for the map job board

This module handles database initialization, connection management,
and migrations for the SQLite database that backs the job store.
"""

import sqlite3
import logging
from pathlib import Path
from typing import Optional, Union

from flask import current_app, g

from constants import DB_PATH

logger = logging.getLogger(__name__)


def connect(db_path: Union[str, Path, None] = None) -> sqlite3.Connection:
    """
    Create and return a database connection with Row factory.

    Establishes a SQLite connection with a 30-second timeout to handle
    concurrent access. The Row factory allows dict-like access to rows.

    Args:
        db_path: Database file path, or ":memory:" (defaults to DB_PATH)

    Returns:
        sqlite3.Connection: Database connection with Row factory enabled

    Examples:
        >>> conn = connect()
        >>> job = conn.execute("SELECT * FROM jobs WHERE job_id = ?", (id,)).fetchone()
        >>> print(job['title'])  # Access by column name
    """
    conn = sqlite3.connect(str(db_path or DB_PATH), timeout=30.0, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def create_schema(conn: sqlite3.Connection) -> None:
    """
    Create tables and indexes on an open connection.

    Creates tables for:
    - users: Profiles mirrored from the identity provider, admin/blocked flags
    - jobs: Postings with moderation flag and optional coordinates
    - favorites: Jobs saved by each user
    """
    conn.execute("""
        CREATE TABLE IF NOT EXISTS users (
            uid TEXT PRIMARY KEY,
            email TEXT,
            display_name TEXT DEFAULT '',
            is_admin INTEGER DEFAULT 0,
            created_at TEXT
        )
    """)

    conn.execute("""
        CREATE TABLE IF NOT EXISTS jobs (
            job_id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            company TEXT,
            location TEXT,
            category TEXT,
            salary TEXT,
            description TEXT,
            tags TEXT DEFAULT '[]',
            latitude REAL,
            longitude REAL,
            application_link TEXT,
            application_email TEXT,
            approved INTEGER DEFAULT 0,
            created_by TEXT,
            created_at TEXT,
            posted_at TEXT
        )
    """)

    conn.execute("""
        CREATE TABLE IF NOT EXISTS favorites (
            user_id TEXT NOT NULL,
            job_id TEXT NOT NULL,
            saved_at TEXT,
            PRIMARY KEY (user_id, job_id),
            FOREIGN KEY (job_id) REFERENCES jobs(job_id) ON DELETE CASCADE
        )
    """)

    # Feed queries combine equality filters with recency ordering
    conn.execute("""
        CREATE INDEX IF NOT EXISTS idx_jobs_feed
        ON jobs (approved, category, location, created_at)
    """)
    conn.execute("""
        CREATE INDEX IF NOT EXISTS idx_jobs_recent
        ON jobs (approved, created_at)
    """)

    run_migrations(conn)
    conn.commit()


def init_db(db_path: Union[str, Path, None] = None) -> None:
    """
    Initialize the SQLite database with required tables.

    Uses WAL (Write-Ahead Logging) mode for better concurrency.

    Args:
        db_path: Database file path (defaults to DB_PATH)
    """
    conn = connect(db_path)
    try:
        conn.execute("PRAGMA journal_mode=WAL")
        create_schema(conn)
    finally:
        conn.close()
    logger.info(f"Database ready at {db_path or DB_PATH}")


def run_migrations(conn):
    """
    Run database migrations to add new columns as needed.

    Uses PRAGMA table_info() to check for missing columns and adds them
    with ALTER TABLE.

    Args:
        conn: SQLite connection
    """
    jobs_columns = {row[1] for row in conn.execute("PRAGMA table_info(jobs)").fetchall()}
    users_columns = {row[1] for row in conn.execute("PRAGMA table_info(users)").fetchall()}

    # Migration: lowercase title for prefix search
    if "title_lower" not in jobs_columns:
        logger.info("Migrating database: adding 'title_lower' column to jobs...")
        conn.execute("ALTER TABLE jobs ADD COLUMN title_lower TEXT")
        conn.execute("UPDATE jobs SET title_lower = lower(title)")

    # Migration: track owner/admin edits
    if "updated_at" not in jobs_columns:
        logger.info("Migrating database: adding 'updated_at' column to jobs...")
        conn.execute("ALTER TABLE jobs ADD COLUMN updated_at TEXT")

    # Migration: account blocking by admins
    if "is_blocked" not in users_columns:
        logger.info("Migrating database: adding 'is_blocked' column to users...")
        conn.execute("ALTER TABLE users ADD COLUMN is_blocked INTEGER DEFAULT 0")

    if "last_login" not in users_columns:
        logger.info("Migrating database: adding 'last_login' column to users...")
        conn.execute("ALTER TABLE users ADD COLUMN last_login TEXT")


def get_db() -> sqlite3.Connection:
    """
    Return the request-scoped connection, opening it on first use.

    The path comes from the app config key DATABASE_PATH.
    """
    if "db" not in g:
        g.db = connect(current_app.config.get("DATABASE_PATH", DB_PATH))
    return g.db


def close_db(e: Optional[BaseException] = None) -> None:
    """Close database connection if it exists in flask g."""
    db = g.pop("db", None)
    if db is not None:
        db.close()
