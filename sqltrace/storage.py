"""Persistence of the last SQL and EXEC inputs between sessions.

Stored state is plain JSON ``{"sql": ..., "exec": ...}``. It has no effect on
generation; the command line uses it to fill in inputs that were not given.
"""

import os
from pathlib import Path
from typing import Any, Final, Optional, Union

from sqltrace._serialization import decode_json, encode_json
from sqltrace.exceptions import InputStateError
from sqltrace.utils.logging import get_logger

__all__ = (
    "DEFAULT_STATE_PATH",
    "FileInputStateStore",
    "InputState",
    "MemoryInputStateStore",
    "default_state_path",
)

logger = get_logger("sqltrace.storage")

DEFAULT_STATE_PATH: Final = Path("~/.sqltrace/state.json")
STATE_PATH_ENV: Final = "SQLTRACE_STATE_PATH"


class InputState:
    """The raw SQL and EXEC text last entered by the user."""

    __slots__ = ("exec_text", "sql_text")

    def __init__(self, sql_text: str = "", exec_text: str = "") -> None:
        self.sql_text = sql_text
        self.exec_text = exec_text

    @property
    def is_empty(self) -> bool:
        return not self.sql_text and not self.exec_text

    def to_dict(self) -> "dict[str, str]":
        return {"sql": self.sql_text, "exec": self.exec_text}

    @classmethod
    def from_dict(cls, data: Any) -> "InputState":
        if not isinstance(data, dict):
            msg = f"Expected a JSON object for input state, got {type(data).__name__}"
            raise InputStateError(msg)
        sql_text = data.get("sql") or ""
        exec_text = data.get("exec") or ""
        if not isinstance(sql_text, str) or not isinstance(exec_text, str):
            msg = "Input state values must be strings"
            raise InputStateError(msg)
        return cls(sql_text=sql_text, exec_text=exec_text)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return False
        return self.sql_text == other.sql_text and self.exec_text == other.exec_text

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sql_text={self.sql_text!r}, exec_text={self.exec_text!r})"


def default_state_path() -> Path:
    """Resolve the state file from ``SQLTRACE_STATE_PATH`` or the home directory."""
    configured = os.getenv(STATE_PATH_ENV)
    return Path(configured).expanduser() if configured else DEFAULT_STATE_PATH.expanduser()


class FileInputStateStore:
    """Stores input state as a JSON file."""

    __slots__ = ("path",)

    def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
        self.path = Path(path).expanduser() if path is not None else default_state_path()

    def load(self) -> InputState:
        """Read the remembered inputs.

        Raises:
            InputStateError: If the file exists but cannot be read or decoded.

        Returns:
            The stored state, or an empty state when no file exists.
        """
        if not self.path.exists():
            return InputState()
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            msg = f"Could not read input state from {self.path}: {e}"
            raise InputStateError(msg) from e
        if not raw.strip():
            return InputState()
        try:
            data = decode_json(raw)
        except ValueError as e:
            msg = f"Input state file {self.path} is not valid JSON: {e}"
            raise InputStateError(msg) from e
        return InputState.from_dict(data)

    def save(self, state: InputState) -> None:
        """Write ``state`` to the file, creating parent directories.

        Raises:
            InputStateError: If the file cannot be written.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(encode_json(state.to_dict(), indent=2), encoding="utf-8")
        except OSError as e:
            msg = f"Could not write input state to {self.path}: {e}"
            raise InputStateError(msg) from e
        logger.debug("Saved input state to %s", self.path)

    def clear(self) -> None:
        """Delete the state file if present.

        Raises:
            InputStateError: If the file exists but cannot be removed.
        """
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            msg = f"Could not remove input state {self.path}: {e}"
            raise InputStateError(msg) from e


class MemoryInputStateStore:
    """In-process input state, mainly for tests and embedding."""

    __slots__ = ("_state",)

    def __init__(self, state: Optional[InputState] = None) -> None:
        self._state = state or InputState()

    def load(self) -> InputState:
        return InputState(self._state.sql_text, self._state.exec_text)

    def save(self, state: InputState) -> None:
        self._state = InputState(state.sql_text, state.exec_text)

    def clear(self) -> None:
        self._state = InputState()
