"""Structured Logging — JSON formatter fields and idempotent setup."""

import json
import logging

from fedlink.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("fedlink.test", logging.WARNING, __file__, 1, "hello %s", ("x",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_known_extras():
    """JSON logs carry whitelisted extras only."""
    out = json.loads(JSONFormatter().format(_record(user_id=7, error_code="CONFLICT", other="no")))
    assert out["message"] == "hello x"
    assert out["level"] == "WARNING"
    assert out["user_id"] == 7
    assert out["error_code"] == "CONFLICT"
    assert "other" not in out


def test_setup_logging_replaces_its_own_handler():
    """Repeated setup replaces the handler instead of stacking."""
    before = len(logging.root.handlers)
    setup_logging("DEBUG", "text")
    setup_logging("INFO", "json")
    assert len(logging.root.handlers) <= before + 1
    assert logging.root.level == logging.INFO
