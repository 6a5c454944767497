"""
Tests for structured logging helpers.
"""

import json
import logging
import threading

from jobboard.logging_config import ConsoleFormatter, JSONFormatter, LogContext, get_logger

logger = get_logger("jobboard.test")


def make_record(message="Filter pass done"):
    return logger.makeRecord(logger.name, logging.INFO, __file__, 1, message, (), None)


def test_log_context_attaches_extra_data():
    with LogContext(logger, generation=7):
        record = make_record()
    outside = make_record()

    assert record.extra_data == {"generation": 7}
    assert not hasattr(outside, "extra_data")


def test_nested_contexts_merge():
    with LogContext(logger, session="tab-1"):
        with LogContext(logger, generation=2):
            inner = make_record()
        outer = make_record()

    assert inner.extra_data == {"session": "tab-1", "generation": 2}
    assert outer.extra_data == {"session": "tab-1"}


def test_context_does_not_leak_across_threads():
    seen = {}

    def log_elsewhere():
        seen["record"] = make_record()

    with LogContext(logger, generation=9):
        worker = threading.Thread(target=log_elsewhere)
        worker.start()
        worker.join()

    assert not hasattr(seen["record"], "extra_data")


def test_json_formatter_includes_context():
    with LogContext(logger, generation=3):
        record = make_record("Filter pass 3: 4 candidates -> 1 jobs")

    entry = json.loads(JSONFormatter().format(record))
    assert entry["message"] == "Filter pass 3: 4 candidates -> 1 jobs"
    assert entry["level"] == "INFO"
    assert entry["context"] == {"generation": 3}


def test_console_formatter_shows_tags_and_truncates():
    with LogContext(logger, generation=5):
        record = make_record("x" * 600)

    output = ConsoleFormatter().format(record)
    assert "[generation=5]" in output
    assert output.endswith("x" * 500 + "...")
