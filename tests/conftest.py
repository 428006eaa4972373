from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from sqltrace.config import FormatOptions

here = Path(__file__).parent
root_path = here.parent


class PassthroughFormatter:
    """Formatter that records its calls and returns the text unchanged."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    def format(self, sql: str, options: FormatOptions | None = None) -> str:
        self.calls.append((sql, options))
        return sql


class FailingFormatter:
    """Formatter that always raises."""

    def __init__(self, message: str = "boom") -> None:
        self.message = message

    def format(self, sql: str, options: FormatOptions | None = None) -> str:
        raise RuntimeError(self.message)


@pytest.fixture
def passthrough_formatter() -> PassthroughFormatter:
    return PassthroughFormatter()


@pytest.fixture
def failing_formatter() -> FailingFormatter:
    return FailingFormatter()


@pytest.fixture(autouse=True)
def _restore_sqltrace_logger() -> Generator[None, None, None]:
    """Undo handler changes made by ``configure_logging`` during a test."""
    logger = logging.getLogger("sqltrace")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep tests independent of the developer's SQLTRACE_* settings and home directory."""
    for key in (
        "SQLTRACE_DECLARE_POLICY",
        "SQLTRACE_DIALECT",
        "SQLTRACE_KEYWORD_CASE",
        "SQLTRACE_FORMAT_OUTPUT",
        "SQLTRACE_COLLAPSE_LINE_BREAKS",
        "SQLTRACE_DECLARE_INDENT",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("SQLTRACE_STATE_PATH", str(tmp_path / "state.json"))
