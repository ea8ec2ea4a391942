"""Structured Logging - JSON formatter surfaces registry extras."""

import json
import logging

from fname_registry.infrastructure.observability import JSONFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "fname_registry.test", logging.WARNING, __file__, 1,
        "Transfer rejected: %s", ("USERNAME_TAKEN",), None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_base_fields():
    log = json.loads(JSONFormatter().format(_record()))
    assert log["level"] == "WARNING"
    assert log["logger"] == "fname_registry.test"
    assert log["message"] == "Transfer rejected: USERNAME_TAKEN"
    assert "timestamp" in log


def test_json_formatter_surfaces_transfer_extras():
    log = json.loads(JSONFormatter().format(
        _record(error_code="USERNAME_TAKEN", username="alice", transfer_id=3),
    ))
    assert log["error_code"] == "USERNAME_TAKEN"
    assert log["username"] == "alice"
    assert log["transfer_id"] == 3


def test_json_formatter_omits_absent_extras():
    log = json.loads(JSONFormatter().format(_record()))
    assert "fid" not in log
    assert "error_code" not in log
