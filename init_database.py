#!/usr/bin/env python3
"""
Initialize the job board database with all required tables.
Run this on a fresh checkout; pass --seed for sample Lagos/Abuja jobs.

Usage:
    python init_database.py [--seed] [--admin UID EMAIL]
"""
import argparse
import logging

from config_loader import get_config
from jobboard.database import connect, init_db
from jobboard.logging_config import setup_logging
from jobboard.store import JobStore
from jobboard.users import save_user_profile

logger = logging.getLogger(__name__)

SAMPLE_JOBS = [
    {
        'title': 'Backend Engineer',
        'company': 'Paystack',
        'location': 'Lagos',
        'category': 'IT',
        'salary': '₦400,000 - ₦550,000',
        'description': 'Build payment APIs in Python and Go.',
        'tags': 'python, go, postgres',
        'application_link': 'https://example.com/jobs/backend',
    },
    {
        'title': 'Accounts Officer',
        'company': 'Zenith Bank',
        'location': 'Abuja',
        'category': 'Finance',
        'salary': '250k',
        'description': 'Reconcile branch ledgers and prepare monthly reports.',
        'tags': 'excel, reconciliation',
        'application_email': 'careers@example.com',
    },
    {
        'title': 'Growth Marketer',
        'company': 'Kuda',
        'location': 'Lagos',
        'category': 'Marketing',
        'salary': 'Negotiable',
        'description': 'Own acquisition campaigns across paid channels.',
        'latitude': 6.4281,
        'longitude': 3.4219,
        'application_link': 'https://example.com/jobs/growth',
    },
    {
        'title': 'Frontend Engineer',
        'company': 'Andela',
        'location': 'Remote',
        'category': 'IT',
        'salary': '600k+',
        'description': 'Ship React features for distributed teams.',
        'tags': ['react', 'typescript'],
        'application_link': 'https://example.com/jobs/frontend',
    },
]


def seed(db_path, admin=None, with_jobs=True):
    """Insert sample approved jobs and/or an admin profile."""
    conn = connect(db_path)
    try:
        if admin:
            uid, email = admin
            save_user_profile(conn, uid, email, 'Admin')
            conn.execute("UPDATE users SET is_admin = 1 WHERE uid = ?", (uid,))
            conn.commit()
            logger.info(f"Admin profile ready: {email}")

        if not with_jobs:
            return

        store = JobStore(conn)
        for job in SAMPLE_JOBS:
            store.add_job(job, created_by=admin[0] if admin else None, approved=True)
        logger.info(f"Seeded {len(SAMPLE_JOBS)} sample jobs")
    finally:
        conn.close()


def main():
    parser = argparse.ArgumentParser(description="Initialize the job board database")
    parser.add_argument('--seed', action='store_true', help="insert sample jobs")
    parser.add_argument('--admin', nargs=2, metavar=('UID', 'EMAIL'),
                        help="create an admin profile")
    args = parser.parse_args()

    setup_logging(level='INFO')
    db_path = get_config().database_path

    init_db(db_path)
    if args.seed or args.admin:
        seed(db_path, args.admin, with_jobs=args.seed)


if __name__ == '__main__':
    main()
