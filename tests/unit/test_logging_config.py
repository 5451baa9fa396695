"""Unit tests for structured logging."""

import json
import logging
import sys

from campusvote.core.logging_config import ElectionAuditLogger, JSONFormatter


def _record(message: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="audit",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_fields():
    record = _record(
        "Ballot recorded",
        extra_fields={"event_type": "ballot_accepted", "candidate_ids": [3, 4]},
    )

    data = json.loads(JSONFormatter().format(record))

    assert data["message"] == "Ballot recorded"
    assert data["level"] == "INFO"
    assert data["logger"] == "audit"
    assert data["event_type"] == "ballot_accepted"
    assert data["candidate_ids"] == [3, 4]


def test_json_formatter_includes_exception():
    try:
        raise RuntimeError("store offline")
    except RuntimeError:
        record = _record("failed")
        record.exc_info = sys.exc_info()

    data = json.loads(JSONFormatter().format(record))

    assert "RuntimeError: store offline" in data["exception"]


def test_audit_logger_ballot_rejected(caplog):
    audit = ElectionAuditLogger()

    with caplog.at_level(logging.WARNING, logger="audit"):
        audit.log_ballot_rejected("ENG001", "Voting has ended")

    record = caplog.records[-1]
    assert record.extra_fields["event_type"] == "ballot_rejected"
    assert record.extra_fields["student_id"] == "ENG001"


def test_audit_logger_failed_login_reason(caplog):
    audit = ElectionAuditLogger()

    with caplog.at_level(logging.INFO, logger="audit"):
        audit.log_login_attempt("ENG001", success=False, reason="bad password")
        audit.log_login_attempt("ENG001", success=True, reason="ignored")

    failed, succeeded = caplog.records[-2:]
    assert failed.levelno == logging.WARNING
    assert failed.extra_fields["failure_reason"] == "bad password"
    assert "failure_reason" not in succeeded.extra_fields
