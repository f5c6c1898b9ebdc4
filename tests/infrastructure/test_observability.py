"""Structured logging: JSON formatter fields and idempotent setup."""

import json
import logging
import sys

from budget_gateway.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "budget_gateway.test", logging.INFO, __file__, 1, "hello %s", ("world",), None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_base_fields():
    payload = json.loads(JSONFormatter().format(_record()))
    assert payload["level"] == "INFO"
    assert payload["logger"] == "budget_gateway.test"
    assert payload["message"] == "hello world"
    assert "timestamp" in payload


def test_json_formatter_includes_known_extras_only():
    payload = json.loads(JSONFormatter().format(
        _record(path="/api/accounts", status_code=200, duration_ms=1.5, secret="x"),
    ))
    assert payload["path"] == "/api/accounts"
    assert payload["status_code"] == 200
    assert payload["duration_ms"] == 1.5
    assert "secret" not in payload


def test_json_formatter_includes_exception():
    try:
        raise ValueError("bad")
    except ValueError:
        record = logging.LogRecord(
            "x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info(),
        )
    payload = json.loads(JSONFormatter().format(record))
    assert "ValueError: bad" in payload["exception"]


def test_setup_logging_does_not_stack_handlers():
    setup_logging("DEBUG", "json")
    setup_logging("INFO", "text")
    named = [h for h in logging.root.handlers if h.get_name() == "budget_gateway"]
    assert len(named) == 1
    assert not isinstance(named[0].formatter, JSONFormatter)
    assert logging.root.level == logging.INFO
    logging.root.removeHandler(named[0])


def test_json_formatter_includes_error_classification():
    payload = json.loads(JSONFormatter().format(
        _record(error_code="MISSING_PARAMETER", error_category="validation",
                severity="warning", operation="getting payees"),
    ))
    assert payload["error_category"] == "validation"
    assert payload["severity"] == "warning"
    assert payload["operation"] == "getting payees"
