"""Structured Logging — tests for JSONFormatter and setup_logging."""

import json
import logging

from assignment_tracker.infrastructure.observability import (
    JSONFormatter, setup_logging,
)


def _record(**extra):
    record = logging.LogRecord(
        "assignment_tracker.services", logging.INFO, __file__, 1,
        "Task '%s' created", ("t1",), None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_core_fields():
    payload = json.loads(JSONFormatter().format(_record()))
    assert payload["level"] == "INFO"
    assert payload["logger"] == "assignment_tracker.services"
    assert payload["message"] == "Task 't1' created"
    assert "timestamp" in payload


def test_json_formatter_surfaces_known_extras_only():
    payload = json.loads(JSONFormatter().format(
        _record(task_id="t1", user_id="u1", operation="create_task", unrelated="x"),
    ))
    assert payload["task_id"] == "t1"
    assert payload["user_id"] == "u1"
    assert payload["operation"] == "create_task"
    assert "unrelated" not in payload


def test_json_formatter_skips_none_extras():
    payload = json.loads(JSONFormatter().format(_record(user_id=None)))
    assert "user_id" not in payload


def test_setup_logging_installs_handler():
    handler = setup_logging("debug", "text")
    try:
        assert handler in logging.root.handlers
        assert logging.root.level == logging.DEBUG
        assert not isinstance(handler.formatter, JSONFormatter)
    finally:
        logging.root.removeHandler(handler)
        logging.root.setLevel(logging.WARNING)


def test_setup_logging_json_format():
    handler = setup_logging("INFO", "json")
    try:
        assert isinstance(handler.formatter, JSONFormatter)
    finally:
        logging.root.removeHandler(handler)
        logging.root.setLevel(logging.WARNING)


def test_setup_logging_replaces_previous_handler():
    first = setup_logging("INFO", "json")
    second = setup_logging("INFO", "json")
    try:
        assert first not in logging.root.handlers
        assert second in logging.root.handlers
    finally:
        logging.root.removeHandler(second)
        logging.root.setLevel(logging.WARNING)
