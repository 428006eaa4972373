"""Tests for the sqltrace logging helpers."""

import json
import logging

import pytest

from sqltrace.utils.logging import (
    CorrelationIDFilter,
    StructuredFormatter,
    configure_logging,
    correlation_scope,
    get_correlation_id,
    get_logger,
    log_with_context,
)


class RecordingHandler(logging.Handler):
    """Keeps emitted records in memory."""

    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


def make_record(message: str = "hello") -> logging.LogRecord:
    return logging.LogRecord("sqltrace.test", logging.INFO, __file__, 10, message, (), None)


def test_get_logger_namespaces_names() -> None:
    """Names are placed under the sqltrace namespace."""
    assert get_logger().name == "sqltrace"
    assert get_logger("sqltrace").name == "sqltrace"
    assert get_logger("core").name == "sqltrace.core"
    assert get_logger("sqltrace.storage").name == "sqltrace.storage"


def test_correlation_scope_sets_and_resets() -> None:
    """An explicit ID is active only inside the block."""
    assert get_correlation_id() is None
    with correlation_scope("abc") as active:
        assert active == "abc"
        assert get_correlation_id() == "abc"
    assert get_correlation_id() is None


def test_correlation_scope_generates_id() -> None:
    """Omitting the ID yields a random hex one."""
    with correlation_scope() as active:
        assert len(active) == 32
        int(active, 16)
        assert get_correlation_id() == active


def test_nested_correlation_scopes_restore_outer_id() -> None:
    """Leaving an inner scope restores the outer ID."""
    with correlation_scope("outer"):
        with correlation_scope("inner"):
            assert get_correlation_id() == "inner"
        assert get_correlation_id() == "outer"


def test_structured_formatter() -> None:
    """Records become JSON with the standard keys and extra fields."""
    record = make_record()
    record.extra_fields = {"mode": "declare"}

    with correlation_scope("req-1"):
        entry = json.loads(StructuredFormatter().format(record))

    assert entry["message"] == "hello"
    assert entry["level"] == "INFO"
    assert entry["logger"] == "sqltrace.test"
    assert entry["correlation_id"] == "req-1"
    assert entry["mode"] == "declare"


def test_structured_formatter_keeps_standard_keys() -> None:
    """Extra fields never replace the record's own level or message."""
    record = make_record()
    record.extra_fields = {"level": "DEBUG", "message": "other", "handler_count": 1}

    entry = json.loads(StructuredFormatter().format(record))

    assert entry["level"] == "INFO"
    assert entry["message"] == "hello"
    assert entry["handler_count"] == 1


def test_structured_formatter_omits_missing_correlation_id() -> None:
    """No correlation_id key is written outside a scope."""
    record = make_record()
    CorrelationIDFilter().filter(record)

    entry = json.loads(StructuredFormatter().format(record))

    assert "correlation_id" not in entry


def test_correlation_filter_sets_attribute() -> None:
    """The filter stamps the active ID on the record."""
    record = make_record()

    with correlation_scope("req-2"):
        assert CorrelationIDFilter().filter(record)

    assert record.correlation_id == "req-2"


def test_correlation_filter_outside_scope() -> None:
    """The filter stamps a dash when no scope is active."""
    record = make_record()

    assert CorrelationIDFilter().filter(record)
    assert record.correlation_id == "-"


def test_configure_logging_replaces_handlers() -> None:
    """Handlers are replaced and each one gets the correlation filter."""
    captured = RecordingHandler()
    configure_logging(level="debug", format_style="structured", extra_handlers=[captured])
    root = logging.getLogger("sqltrace")

    assert root.level == logging.DEBUG
    assert root.propagate is False
    assert len(root.handlers) == 2
    assert isinstance(root.handlers[0].formatter, StructuredFormatter)
    assert root.handlers[1] is captured
    assert all(any(isinstance(f, CorrelationIDFilter) for f in handler.filters) for handler in root.handlers)


def test_configure_logging_reports_configured_level() -> None:
    """The setup record carries the configured level under its own key."""
    captured = RecordingHandler()
    configure_logging(level="debug", extra_handlers=[captured])

    [record] = captured.records
    assert record.getMessage() == "sqltrace logging configured"
    assert record.levelname == "DEBUG"
    assert record.extra_fields["configured_level"] == "DEBUG"
    assert record.extra_fields["handler_count"] == 2
    assert "level" not in record.extra_fields


def test_configured_handlers_see_scope_id() -> None:
    """Records logged inside a scope carry its ID through configured handlers."""
    captured = RecordingHandler()
    configure_logging(level="info", extra_handlers=[captured])

    with correlation_scope("run-7"):
        get_logger("core").info("inside")
    get_logger("core").info("outside")

    assert [(r.getMessage(), r.correlation_id) for r in captured.records] == [("inside", "run-7"), ("outside", "-")]


def test_log_with_context_attaches_fields(caplog: pytest.LogCaptureFixture) -> None:
    """Fields ride along on enabled records only."""
    logger = get_logger("context")

    with caplog.at_level(logging.INFO, logger="sqltrace"):
        log_with_context(logger, logging.INFO, "generated", mode="inline")
        log_with_context(logger, logging.DEBUG, "hidden")

    assert [record.getMessage() for record in caplog.records] == ["generated"]
    assert caplog.records[0].extra_fields == {"mode": "inline"}
