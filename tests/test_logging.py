"""Tests for the contextual log formatter and the event log."""

import logging

from amper_tracker.core.logging import ContextualFormatter, EventLog


def _record(message: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("amper_tracker.test", logging.INFO, __file__, 1, message, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_appends_known_context() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    line = formatter.format(_record("readings.recent", username="alice", count=3, other="x"))

    assert line == "readings.recent | username=alice count=3"


def test_formatter_skips_missing_and_none_values() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    assert formatter.format(_record("plain", sensor=None)) == "plain"


def test_event_log_emits_structured_records(caplog) -> None:
    events = EventLog(logging.getLogger("amper_tracker.test.events"))

    with caplog.at_level(logging.INFO, logger="amper_tracker.test.events"):
        events.emit("reading.created", username="alice", product_id="abc")

    record = caplog.records[-1]
    assert record.getMessage() == "reading.created"
    assert record.event == "reading.created"
    assert record.username == "alice"
    assert record.product_id == "abc"


def test_event_log_failure_carries_exception(caplog) -> None:
    events = EventLog(logging.getLogger("amper_tracker.test.events"))
    error = RuntimeError("boom")

    with caplog.at_level(logging.ERROR, logger="amper_tracker.test.events"):
        events.failure("reading.insert_failed", error, username="alice")

    record = caplog.records[-1]
    assert record.levelno == logging.ERROR
    assert record.exc_info[1] is error
    assert "boom" in record.getMessage()
