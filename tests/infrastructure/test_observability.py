"""Structured Logging — JSON shape and re-entrant setup."""

import json
import logging

from payments_api.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "payments_api.test", logging.ERROR, __file__, 1, "boom %s", ("now",), None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_base_fields():
    log = json.loads(JSONFormatter().format(_record()))
    assert log["level"] == "ERROR"
    assert log["logger"] == "payments_api.test"
    assert log["message"] == "boom now"
    assert "timestamp" in log


def test_json_formatter_surfaces_known_extras_only():
    log = json.loads(JSONFormatter().format(
        _record(payment_id="p1", status=409, unrelated="x"),
    ))
    assert log["payment_id"] == "p1"
    assert log["status"] == 409
    assert "unrelated" not in log
    assert "operation" not in log


def test_setup_logging_does_not_stack_handlers():
    before = list(logging.root.handlers)
    level = logging.root.level
    try:
        setup_logging("DEBUG", "json")
        setup_logging("WARNING", "text")
        added = [h for h in logging.root.handlers if h not in before]
        assert len(added) == 1
        assert not isinstance(added[0].formatter, JSONFormatter)
        assert logging.root.level == logging.WARNING
    finally:
        for h in list(logging.root.handlers):
            if h not in before:
                logging.root.removeHandler(h)
        logging.root.setLevel(level)
