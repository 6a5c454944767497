"""
Exception hierarchy for the map job board.

Every error raised by the filtering pipeline and the job services is local
and recoverable. The app factory maps each class to an HTTP status code.
"""

from typing import Optional


class JobBoardError(Exception):
    """Base class for all job board errors."""

    status_code = 500

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class FetchError(JobBoardError):
    """Raised when the backing store cannot be read or written."""

    status_code = 503


class FilterStateError(JobBoardError, ValueError):
    """Raised when filter input (salary bucket, radius) is malformed."""

    status_code = 400


class ValidationError(JobBoardError, ValueError):
    """Raised when a job submission or update is incomplete."""

    status_code = 400


class AuthenticationError(JobBoardError):
    status_code = 401


class PermissionDeniedError(JobBoardError):
    status_code = 403


class NotFoundError(JobBoardError):
    status_code = 404


class StalePassError(JobBoardError):
    """Raised internally when a newer filter pass superseded this one."""

    def __init__(self, generation: int, latest: int):
        super().__init__(f"Filter pass {generation} superseded by pass {latest}")
        self.generation = generation
        self.latest = latest
