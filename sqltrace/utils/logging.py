# ruff: noqa: PLR6301
"""Logging for sqltrace.

Every logger lives under the ``sqltrace`` namespace and is silent until
:func:`configure_logging` installs handlers (the command line does this from
``--log-level``/``--log-format``). Each generation run can be tagged with a
correlation ID through :func:`correlation_scope`; handlers installed here stamp
it on every record so text and JSON lines from one run can be grouped.
"""

from __future__ import annotations

import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from sqltrace._serialization import encode_json

if TYPE_CHECKING:
    from collections.abc import Iterator
    from logging import LogRecord

__all__ = (
    "CorrelationIDFilter",
    "StructuredFormatter",
    "configure_logging",
    "correlation_scope",
    "get_correlation_id",
    "get_logger",
    "log_with_context",
)

ROOT_LOGGER_NAME = "sqltrace"
NO_CORRELATION_ID = "-"
TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(correlation_id)s] %(message)s"

_correlation_id: ContextVar[str | None] = ContextVar("sqltrace_correlation_id", default=None)


def get_correlation_id() -> str | None:
    """Return the correlation ID of the current run, if any."""
    return _correlation_id.get()


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Tag every record logged inside the block with one correlation ID.

    Args:
        correlation_id: ID to use. A random hex ID is generated when omitted.

    Yields:
        The active correlation ID.
    """
    active = correlation_id or uuid.uuid4().hex
    token = _correlation_id.set(active)
    try:
        yield active
    finally:
        _correlation_id.reset(token)


class CorrelationIDFilter(logging.Filter):
    """Stamps ``record.correlation_id``, using ``-`` outside a correlation scope."""

    def filter(self, record: LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or NO_CORRELATION_ID  # type: ignore[attr-defined]
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per record.

    Fields passed through :func:`log_with_context` are merged in, but never
    replace the standard keys (``level``, ``message`` and so on).
    """

    def format(self, record: LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        correlation_id = getattr(record, "correlation_id", None) or get_correlation_id()
        if correlation_id and correlation_id != NO_CORRELATION_ID:
            entry["correlation_id"] = correlation_id

        for key, value in getattr(record, "extra_fields", {}).items():
            entry.setdefault(key, value)

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return encode_json(entry)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the ``sqltrace`` namespace.

    Args:
        name: Dotted logger name; ``sqltrace.`` is prefixed when missing.

    Returns:
        The logger. The package root logger when ``name`` is None.
    """
    if name is None or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    level: str = "WARNING",
    format_style: str = "simple",
    log_to_file: str | None = None,
    extra_handlers: list[logging.Handler] | None = None,
) -> None:
    """Install handlers on the ``sqltrace`` logger, replacing earlier ones.

    Console output goes to stderr so it never mixes with SQL printed on stdout.

    Args:
        level: Level name such as ``DEBUG`` or ``warning``.
        format_style: ``structured`` for JSON lines, anything else for text.
        log_to_file: Optional path that receives JSON lines as well.
        extra_handlers: Further handlers to attach as-is.
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(
        StructuredFormatter() if format_style == "structured" else logging.Formatter(TEXT_FORMAT)
    )
    handlers: list[logging.Handler] = [console_handler]

    if log_to_file:
        file_handler = logging.FileHandler(log_to_file)
        file_handler.setFormatter(StructuredFormatter())
        handlers.append(file_handler)

    handlers.extend(extra_handlers or ())
    for handler in handlers:
        handler.addFilter(CorrelationIDFilter())
        root_logger.addHandler(handler)

    root_logger.propagate = False
    log_with_context(
        root_logger,
        logging.DEBUG,
        "sqltrace logging configured",
        configured_level=level.upper(),
        format_style=format_style,
        handler_count=len(handlers),
    )


def log_with_context(logger: logging.Logger, level: int, message: str, **extra_fields: Any) -> None:
    """Log ``message`` with structured fields for :class:`StructuredFormatter`.

    Args:
        logger: Logger to emit on.
        level: Numeric log level.
        message: Log message.
        **extra_fields: Fields added to the JSON entry.
    """
    if logger.isEnabledFor(level):
        logger.log(level, message, extra={"extra_fields": extra_fields}, stacklevel=2)
