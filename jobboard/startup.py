"""
Startup validation and health checks for the map job board.

Validates environment, configuration and the database before the
application starts.
"""

import logging
import os
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from constants import FRONTEND_DIR
from jobboard.logging_config import get_logger, current_env, LOG_LEVELS

logger = get_logger(__name__)

SEVERITY_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
}


class ValidationResult:
    """Result of a validation check."""

    def __init__(
        self,
        name: str,
        passed: bool,
        message: str,
        severity: str = "error",  # error, warning, info
        fix_hint: Optional[str] = None,
    ):
        self.name = name
        self.passed = passed
        self.message = message
        self.severity = severity
        self.fix_hint = fix_hint

    def __str__(self) -> str:
        status = "PASS" if self.passed else self.severity.upper()
        return f"[{status}] {self.name}: {self.message}"


def validate_environment() -> List[ValidationResult]:
    """
    Validate environment variables.

    Returns:
        List of validation results
    """
    results = []

    env = current_env()
    if env in LOG_LEVELS:
        results.append(ValidationResult(
            name="Environment",
            passed=True,
            message=f"Running in {env} mode",
            severity="info",
        ))
    else:
        results.append(ValidationResult(
            name="Environment",
            passed=False,
            message=f"Unknown JOBBOARD_ENV '{env}'",
            severity="warning",
            fix_hint=f"Use one of: {', '.join(LOG_LEVELS)}",
        ))

    return results


def validate_config(config_path: Optional[Path] = None) -> List[ValidationResult]:
    """
    Validate that config.yaml loads and its filter options are usable.

    Returns:
        List of validation results
    """
    from config_loader import Config
    from jobboard.filters import parse_filter_bucket

    results = []

    try:
        config = Config(config_path)
    except (FileNotFoundError, ValueError) as e:
        results.append(ValidationResult(
            name="Configuration",
            passed=False,
            message=str(e),
            severity="error",
            fix_hint="Copy config.example.yaml to config.yaml",
        ))
        return results

    results.append(ValidationResult(
        name="Configuration",
        passed=True,
        message=f"Loaded {config.config_path}",
        severity="info",
    ))

    for token in config.salary_buckets:
        try:
            parse_filter_bucket(token)
        except ValueError as e:
            results.append(ValidationResult(
                name="Salary Buckets",
                passed=False,
                message=str(e),
                severity="warning",
                fix_hint="Use tokens like '300k+' or '100000-200000'",
            ))

    if config.default_center[0] == 0:
        results.append(ValidationResult(
            name="Default Center",
            passed=False,
            message="map.default_center has longitude 0, radius search cannot start",
            severity="error",
            fix_hint="Set map.default_center to the main city's [lon, lat]",
        ))

    if not config.canonical_locations:
        results.append(ValidationResult(
            name="Canonical Locations",
            passed=False,
            message="No canonical locations; jobs without coordinates never match a radius",
            severity="warning",
        ))

    return results


def validate_file_system(db_path: Optional[Path] = None) -> List[ValidationResult]:
    """
    Validate file system paths and permissions.

    Returns:
        List of validation results
    """
    results = []

    if db_path is not None:
        db_dir = Path(db_path).resolve().parent
        if os.access(db_dir, os.W_OK):
            results.append(ValidationResult(
                name="Database Directory",
                passed=True,
                message=f"{db_dir} is writable",
                severity="info",
            ))
        else:
            results.append(ValidationResult(
                name="Database Directory",
                passed=False,
                message=f"{db_dir} is not writable",
                severity="error",
                fix_hint="Set JOBBOARD_DB_PATH to a writable location",
            ))

    if not (FRONTEND_DIR / "index.html").exists():
        results.append(ValidationResult(
            name="Frontend",
            passed=False,
            message=f"{FRONTEND_DIR / 'index.html'} not found, only the API will be served",
            severity="warning",
        ))

    return results


def validate_database(db_path: Path) -> List[ValidationResult]:
    """Open the database, create missing tables, and count jobs."""
    from jobboard.database import connect, create_schema

    try:
        conn = connect(db_path)
        try:
            create_schema(conn)
            total = conn.execute("SELECT COUNT(*) FROM jobs").fetchone()[0]
            pending = conn.execute("SELECT COUNT(*) FROM jobs WHERE approved = 0").fetchone()[0]
        finally:
            conn.close()
    except sqlite3.Error as e:
        return [ValidationResult(
            name="Database",
            passed=False,
            message=f"Database check failed: {e}",
            severity="error",
        )]

    return [ValidationResult(
        name="Database",
        passed=True,
        message=f"{total} jobs ({pending} awaiting moderation)",
        severity="info",
    )]


def _log_results(results: List[ValidationResult]) -> None:
    logger.info("Startup checks:")
    for result in results:
        level = logging.INFO if result.passed else SEVERITY_LEVELS.get(result.severity, logging.INFO)
        logger.log(level, f"  {result}")
        if not result.passed and result.fix_hint:
            logger.log(level, f"    hint: {result.fix_hint}")


def run_startup_validation(
    config_path: Optional[Path] = None,
    db_path: Optional[Path] = None,
    strict: bool = False,
    log_results: bool = True,
) -> Tuple[bool, List[ValidationResult]]:
    """
    Run all startup validations.

    Args:
        config_path: config.yaml to validate
        db_path: SQLite database to check
        strict: Treat warnings as failures
        log_results: Log each result

    Returns:
        Tuple of (passed, results)
    """
    all_results = []
    all_results.extend(validate_environment())
    all_results.extend(validate_config(config_path))
    all_results.extend(validate_file_system(db_path))
    if db_path is not None:
        all_results.extend(validate_database(db_path))

    if log_results:
        _log_results(all_results)

    failed = [r for r in all_results if not r.passed]
    errors = [r for r in failed if r.severity == "error"]
    warnings = [r for r in failed if r.severity == "warning"]

    if errors:
        logger.error(f"Startup validation failed with {len(errors)} error(s)")
        return False, all_results

    if strict and warnings:
        logger.error(f"Startup validation failed with {len(warnings)} warning(s) (strict mode)")
        return False, all_results

    logger.info("Startup validation passed")
    return True, all_results


def get_health_status(conn: sqlite3.Connection) -> Dict:
    """
    Get current health status for health check endpoint.

    Returns:
        Health status dictionary
    """
    status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": {},
    }

    try:
        job_count = conn.execute("SELECT COUNT(*) FROM jobs WHERE approved = 1").fetchone()[0]
        status["checks"]["database"] = {
            "status": "healthy",
            "approved_jobs": job_count,
        }
    except sqlite3.Error as e:
        status["status"] = "unhealthy"
        status["checks"]["database"] = {
            "status": "unhealthy",
            "error": str(e),
        }

    return status
