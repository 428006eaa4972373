"""Runtime-checkable protocols for the collaborators sqltrace talks to."""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sqltrace.config import FormatOptions
    from sqltrace.storage import InputState

__all__ = ("InputStateStoreProtocol", "SQLFormatterProtocol")


@runtime_checkable
class SQLFormatterProtocol(Protocol):
    """Pretty-printer for generated SQL. May raise for any reason."""

    def format(self, sql: str, options: "FormatOptions") -> str:
        """Return ``sql`` reformatted according to ``options``."""
        ...


@runtime_checkable
class InputStateStoreProtocol(Protocol):
    """Key-value persistence for the last SQL and EXEC inputs."""

    def load(self) -> "InputState":
        """Return the remembered inputs, empty when nothing is stored."""
        ...

    def save(self, state: "InputState") -> None:
        """Remember ``state``, replacing anything stored before."""
        ...

    def clear(self) -> None:
        """Forget the remembered inputs."""
        ...
