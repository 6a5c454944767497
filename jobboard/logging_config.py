"""
Logging setup for the map job board.

Console output is colored in development and JSON in production, where a
rotating file under logs/ is added as well. Filter passes run inside a
LogContext so every record they emit carries the pass generation.
"""

import json
import logging
import logging.handlers
import os
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

LOGS_DIR = Path(__file__).parent.parent / "logs"
LOG_FILE_NAME = "jobboard.log"

LOG_LEVELS = {
    "development": logging.DEBUG,
    "production": logging.INFO,
    "testing": logging.WARNING,
}

# Libraries that log every HTTP request at INFO
QUIET_LOGGERS = ("urllib3", "requests", "werkzeug", "flask_cors")

_context: ContextVar[Dict[str, Any]] = ContextVar("jobboard_log_context", default={})
_base_record_factory = logging.getLogRecordFactory()


def _context_record_factory(*args, **kwargs) -> logging.LogRecord:
    record = _base_record_factory(*args, **kwargs)
    context = _context.get()
    if context:
        record.extra_data = dict(context)
    return record


logging.setLogRecordFactory(_context_record_factory)


def current_env() -> str:
    return os.environ.get("JOBBOARD_ENV", "development")


def _record_context(record: logging.LogRecord) -> Dict[str, Any]:
    return getattr(record, "extra_data", None) or {}


class JSONFormatter(logging.Formatter):
    """One JSON object per line for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "where": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        context = _record_context(record)
        if context:
            entry["context"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Short colored lines for a development terminal."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"
    MAX_MESSAGE = 500

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelname, self.RESET)
        message = record.getMessage()
        if len(message) > self.MAX_MESSAGE:
            message = message[:self.MAX_MESSAGE] + "..."

        tags = "".join(f" [{key}={value}]" for key, value in _record_context(record).items())
        line = (
            f"{color}{datetime.now():%H:%M:%S} {record.levelname:<8}{self.RESET}"
            f" {record.name}{tags}: {message}"
        )
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _rotating_file_handler(log_file: Optional[str]) -> logging.Handler:
    if log_file is None:
        LOGS_DIR.mkdir(exist_ok=True)
        log_file = str(LOGS_DIR / LOG_FILE_NAME)
    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(
    level: Optional[str] = None,
    json_logs: bool = False,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the root logger for the board.

    Args:
        level: Explicit level name; defaults to the JOBBOARD_ENV level
        json_logs: JSON console output instead of colored lines
        log_file: Write JSON records to this file as well. Production
            always writes to logs/jobboard.log when no file is given.

    Returns:
        The root logger
    """
    env = current_env()
    if level:
        log_level = getattr(logging, level.upper(), logging.INFO)
    else:
        log_level = LOG_LEVELS.get(env, logging.INFO)

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()

    console = logging.StreamHandler()
    console.setFormatter(JSONFormatter() if json_logs else ConsoleFormatter())
    root.addHandler(console)

    if log_file or env == "production":
        root.addHandler(_rotating_file_handler(log_file))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LogContext:
    """
    Tag every record logged inside the block with key/value context.

    Nested blocks merge with the outer context. Values are scoped to the
    current thread, so concurrent requests never see each other's tags.
    """

    def __init__(self, logger: Optional[logging.Logger] = None, **kwargs):
        self.logger = logger
        self.extra_data = kwargs
        self._token = None

    def __enter__(self) -> "LogContext":
        self._token = _context.set({**_context.get(), **self.extra_data})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        _context.reset(self._token)
