"""Shared pytest fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from helpers import RecordingClipboard, RecordingEmitter


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TOOLY_APP_DIR", str(tmp_path / "app"))
    monkeypatch.setenv("TOOLY_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("TOOLY_SETTINGS_PATH", raising=False)
    monkeypatch.delenv("TOOLY_PAYLOAD_PATH", raising=False)
    monkeypatch.setenv("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture
def settings_payload() -> dict[str, Any]:
    return {
        "order": ["Copy Path", "%sprt%", "Open in Terminal", "Compress", "Resize", "Missing"],
        "groups": {"Tools": {"iconType": "symbol", "icon": "wrench"}},
        "items": {
            "Copy Path": {
                "group": "",
                "targetType": "any",
                "iconType": "symbol",
                "icon": "doc.on.doc",
                "actionType": "copy",
                "action": "",
                "key": "c",
                "enabled": True,
            },
            "Open in Terminal": {
                "group": "",
                "targetType": "folder",
                "iconType": "app",
                "icon": "/Applications/Utilities/Terminal.app",
                "actionType": "terminal",
                "action": "ls -la",
                "key": "",
                "enabled": True,
            },
            "Compress": {
                "group": "Tools",
                "targetType": "any",
                "iconType": "",
                "icon": "",
                "actionType": "script",
                "action": "zip -r out.zip \"$@\"",
                "key": "",
                "enabled": True,
            },
            "Resize": {
                "group": "Tools",
                "targetType": "jpg,png",
                "iconType": "image",
                "icon": "/tmp/resize.png",
                "actionType": "script",
                "action": "sips -Z 1024 \"$@\"",
                "key": "",
                "enabled": True,
            },
        },
        "separators": True,
    }


@pytest.fixture
def write_settings(tmp_path: Path) -> Callable[[Any], Path]:
    path = tmp_path / "settings.json"

    def _write(payload: Any) -> Path:
        body = payload if isinstance(payload, str) else json.dumps(payload, indent=2)
        path.write_text(body, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def clipboard() -> RecordingClipboard:
    return RecordingClipboard()


@pytest.fixture
def emitter() -> RecordingEmitter:
    return RecordingEmitter()
