"""Tests for remembered input state."""

from pathlib import Path

import pytest

from sqltrace.exceptions import InputStateError
from sqltrace.protocols import InputStateStoreProtocol
from sqltrace.storage import FileInputStateStore, InputState, MemoryInputStateStore, default_state_path


def test_default_state_path_uses_environment(tmp_path: Path) -> None:
    """SQLTRACE_STATE_PATH sets the state path."""
    assert default_state_path() == tmp_path / "state.json"


def test_default_state_path_falls_back_to_home(monkeypatch: pytest.MonkeyPatch) -> None:
    """Without the variable the path is under home."""
    monkeypatch.delenv("SQLTRACE_STATE_PATH")
    assert default_state_path() == Path("~/.sqltrace/state.json").expanduser()


def test_load_missing_file_returns_empty_state(tmp_path: Path) -> None:
    """A missing file loads as empty state."""
    state = FileInputStateStore(tmp_path / "missing.json").load()
    assert state.is_empty
    assert state == InputState()


def test_save_and_load(tmp_path: Path) -> None:
    """Saved inputs load back."""
    path = tmp_path / "nested" / "dir" / "state.json"
    store = FileInputStateStore(path)

    store.save(InputState(sql_text="SELECT @0", exec_text="@0=N'é'"))

    assert path.exists()
    assert '"sql": "SELECT @0"' in path.read_text(encoding="utf-8")
    assert store.load() == InputState(sql_text="SELECT @0", exec_text="@0=N'é'")


def test_store_without_path_uses_default(tmp_path: Path) -> None:
    """The default path is used when none is given."""
    store = FileInputStateStore()
    store.save(InputState("SELECT 1", ""))

    assert store.path == tmp_path / "state.json"
    assert store.load().sql_text == "SELECT 1"


def test_blank_file_is_empty_state(tmp_path: Path) -> None:
    """A blank file loads as empty state."""
    path = tmp_path / "state.json"
    path.write_text("  \n", encoding="utf-8")
    assert FileInputStateStore(path).load().is_empty


def test_invalid_json_raises(tmp_path: Path) -> None:
    """Invalid JSON raises InputStateError."""
    path = tmp_path / "state.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(InputStateError, match="not valid JSON"):
        FileInputStateStore(path).load()


@pytest.mark.parametrize("payload", ["[]", '"text"', '{"sql": 1}'])
def test_unexpected_payload_raises(tmp_path: Path, payload: str) -> None:
    """Payloads that are not an object of strings raise InputStateError."""
    path = tmp_path / "state.json"
    path.write_text(payload, encoding="utf-8")

    with pytest.raises(InputStateError):
        FileInputStateStore(path).load()


def test_missing_keys_default_to_empty() -> None:
    """Missing keys load as empty strings."""
    assert InputState.from_dict({"sql": "SELECT 1"}) == InputState("SELECT 1", "")
    assert InputState.from_dict({"sql": None, "exec": None}).is_empty


def test_clear(tmp_path: Path) -> None:
    """clear deletes the file."""
    store = FileInputStateStore(tmp_path / "state.json")
    store.save(InputState("a", "b"))

    store.clear()
    store.clear()

    assert not store.path.exists()
    assert store.load().is_empty


def test_memory_store_copies_state() -> None:
    """The memory store keeps its own copy."""
    store = MemoryInputStateStore()
    state = InputState("SELECT @0", "@0=1")
    store.save(state)
    state.sql_text = "changed"

    assert store.load() == InputState("SELECT @0", "@0=1")
    store.clear()
    assert store.load().is_empty


@pytest.mark.parametrize("store_class", [FileInputStateStore, MemoryInputStateStore])
def test_stores_satisfy_protocol(store_class: type) -> None:
    """Both stores match the store protocol."""
    assert isinstance(store_class(), InputStateStoreProtocol)
