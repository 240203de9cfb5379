"""Tests for turning chosen actions into clipboard copies or companion signals."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import pytest

from helpers import RecordingClipboard, RecordingEmitter
from tooly.core.errors import (
    ActionLookupError,
    AtomicWriteError,
    SerializationError,
    TriggerError,
)
from tooly.core.models import ActionType, MenuItemConfig, MenuSettings
from tooly.core.selection import SelectionContext
from tooly.services.dispatcher import ActionDispatcher, DispatchOutcome
from tooly.services.signal import parse_trigger_uri


@pytest.fixture
def payload_path(tmp_path: Path) -> Path:
    return tmp_path / "companion" / "payload.json"


@pytest.fixture
def dispatcher(
    payload_path: Path, clipboard: RecordingClipboard, emitter: RecordingEmitter
) -> ActionDispatcher:
    return ActionDispatcher(payload_path, clipboard=clipboard, emitter=emitter)


def test_copy_puts_newline_joined_paths_on_clipboard(
    dispatcher: ActionDispatcher,
    clipboard: RecordingClipboard,
    emitter: RecordingEmitter,
    payload_path: Path,
) -> None:
    item = MenuItemConfig(action_type=ActionType.COPY)

    result = dispatcher.dispatch(item, ["/a/one.txt", "/b/two.txt"], name="Copy Path")

    assert result.outcome is DispatchOutcome.COPIED
    assert result.ok
    assert clipboard.texts == ["/a/one.txt\n/b/two.txt"]
    assert emitter.uris == []
    assert not payload_path.exists()


def test_copy_with_empty_selection_is_skipped(
    dispatcher: ActionDispatcher, clipboard: RecordingClipboard
) -> None:
    result = dispatcher.dispatch(MenuItemConfig(action_type=ActionType.COPY), [])

    assert result.outcome is DispatchOutcome.SKIPPED
    assert clipboard.texts == []


def test_signal_writes_payload_then_emits_uri(
    dispatcher: ActionDispatcher,
    clipboard: RecordingClipboard,
    emitter: RecordingEmitter,
    payload_path: Path,
) -> None:
    item = MenuItemConfig(
        action_type=ActionType.TERMINAL, action="ls -la", target_type="folder"
    )
    selection = SelectionContext.from_paths(["/p/z", "/p/a"], target="/p")

    result = dispatcher.dispatch(item, selection, name="Open in Terminal")

    assert result.outcome is DispatchOutcome.SIGNALED
    assert result.payload_path == payload_path
    assert json.loads(payload_path.read_text(encoding="utf-8")) == {
        "actionType": "terminal",
        "action": "ls -la",
        "targetType": "folder",
        "items": ["/p/z", "/p/a"],
        "target": "/p",
    }
    assert emitter.uris == [result.trigger_uri]
    assert parse_trigger_uri(emitter.uris[0]).payload_path == payload_path
    assert clipboard.texts == []


@pytest.mark.parametrize(
    "action_type",
    [t for t in ActionType if t is not ActionType.COPY],
)
def test_every_non_copy_type_is_signaled(
    dispatcher: ActionDispatcher, emitter: RecordingEmitter, action_type: ActionType
) -> None:
    result = dispatcher.dispatch(MenuItemConfig(action_type=action_type, action="x"), ["/f"])

    assert result.outcome is DispatchOutcome.SIGNALED
    assert len(emitter.uris) == 1


def test_missing_target_without_fallback_is_null(
    dispatcher: ActionDispatcher, payload_path: Path
) -> None:
    dispatcher.dispatch(MenuItemConfig(action_type=ActionType.CREATE, action="touch x"), ["/f"])

    assert json.loads(payload_path.read_text(encoding="utf-8"))["target"] is None


def test_missing_target_uses_fallback(
    payload_path: Path,
    clipboard: RecordingClipboard,
    emitter: RecordingEmitter,
    tmp_path: Path,
) -> None:
    dispatcher = ActionDispatcher(
        payload_path, clipboard=clipboard, emitter=emitter, fallback_target=tmp_path
    )

    dispatcher.dispatch(MenuItemConfig(action_type=ActionType.CREATE, action="touch x"), [])

    payload = json.loads(payload_path.read_text(encoding="utf-8"))
    assert payload["target"] == str(tmp_path)
    assert payload["items"] == []


def test_write_failure_suppresses_trigger(
    tmp_path: Path, clipboard: RecordingClipboard, emitter: RecordingEmitter
) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    dispatcher = ActionDispatcher(
        blocker / "payload.json", clipboard=clipboard, emitter=emitter
    )

    result = dispatcher.dispatch(MenuItemConfig(action_type=ActionType.SCRIPT, action="x"), ["/f"])

    assert result.outcome is DispatchOutcome.FAILED
    assert isinstance(result.error, AtomicWriteError)
    assert result.trigger_uri is None
    assert emitter.uris == []


def test_emitter_failure_is_reported_not_raised(
    payload_path: Path, clipboard: RecordingClipboard
) -> None:
    dispatcher = ActionDispatcher(
        payload_path, clipboard=clipboard, emitter=RecordingEmitter(fail=True)
    )

    result = dispatcher.dispatch(MenuItemConfig(action_type=ActionType.APP, action="x"), ["/f"])

    assert result.outcome is DispatchOutcome.FAILED
    assert isinstance(result.error, TriggerError)
    assert result.payload_path == payload_path
    assert payload_path.exists()


def test_invoke_looks_up_items_by_name(
    dispatcher: ActionDispatcher,
    clipboard: RecordingClipboard,
    settings_payload: dict[str, Any],
) -> None:
    settings = MenuSettings.from_payload(settings_payload)

    result = dispatcher.invoke("Copy Path", settings, ["/x"])

    assert result.outcome is DispatchOutcome.COPIED
    assert result.name == "Copy Path"
    assert clipboard.texts == ["/x"]


def test_invoke_stale_name_is_a_noop(
    dispatcher: ActionDispatcher,
    clipboard: RecordingClipboard,
    emitter: RecordingEmitter,
    payload_path: Path,
) -> None:
    result = dispatcher.invoke("Gone", MenuSettings.empty(), ["/x"])

    assert result.outcome is DispatchOutcome.SKIPPED
    assert isinstance(result.error, ActionLookupError)
    assert result.error.name == "Gone"
    assert clipboard.texts == []
    assert emitter.uris == []
    assert not payload_path.exists()


def test_default_payload_path_lives_in_app_dir(
    tmp_path: Path, clipboard: RecordingClipboard, emitter: RecordingEmitter
) -> None:
    dispatcher = ActionDispatcher(clipboard=clipboard, emitter=emitter)

    assert dispatcher.payload_path == tmp_path / "app" / "payload.json"


def test_undecodable_path_name_fails_without_trigger(
    dispatcher: ActionDispatcher, emitter: RecordingEmitter, payload_path: Path
) -> None:
    selection = SelectionContext.from_paths([os.fsdecode(b"/tmp/caf\xe9.txt")], target="/tmp")

    result = dispatcher.dispatch(MenuItemConfig(action_type=ActionType.SCRIPT, action="x"), selection)

    assert result.outcome is DispatchOutcome.FAILED
    assert isinstance(result.error, SerializationError)
    assert result.trigger_uri is None
    assert emitter.uris == []
    assert not payload_path.exists()
