"""Tests for the file IO and logging helpers."""

from __future__ import annotations

import codecs
import logging
import os
from pathlib import Path

import pytest

from tooly.core.errors import ConfigReadError
from tooly.services.settings import SettingsStore
from tooly.utils import file_io, logging as logging_utils


def test_read_text_detects_bom(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_bytes(codecs.BOM_UTF8 + '{"order": ["Ünïcode"]}'.encode("utf-8"))

    assert file_io.read_text(path) == '{"order": ["Ünïcode"]}'


def test_read_text_handles_utf16(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_bytes(codecs.BOM_UTF16_LE + "{}".encode("utf-16-le"))

    assert file_io.read_text(path) == "{}"


def test_read_text_rejects_non_utf8_bytes(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_bytes('{"order": ["café"]}'.encode("latin-1"))

    with pytest.raises(UnicodeDecodeError):
        file_io.read_text(path)


def test_latin1_settings_file_is_a_read_error(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_bytes('{"order": ["café"], "items": {}}'.encode("latin-1"))
    store = SettingsStore(path)

    store.load()

    assert isinstance(store.last_error, ConfigReadError)
    assert store.revision == 0


def test_write_text_replaces_content(tmp_path: Path) -> None:
    path = tmp_path / "deep" / "payload.json"

    file_io.write_text(path, "first")
    file_io.write_text(path, "second\r\n")

    assert path.read_bytes() == b"second\r\n"
    assert os.listdir(path.parent) == ["payload.json"]


def test_failed_write_removes_temp_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = tmp_path / "payload.json"

    def _fail_replace(src: str, dst: object) -> None:
        raise PermissionError("denied")

    with monkeypatch.context() as patch:
        patch.setattr(file_io.os, "replace", _fail_replace)
        with pytest.raises(PermissionError):
            file_io.write_text(path, "body")

    assert os.listdir(tmp_path) == []


def test_unencodable_text_leaves_nothing_behind(tmp_path: Path) -> None:
    path = tmp_path / "payload.json"

    with pytest.raises(UnicodeEncodeError):
        file_io.write_text(path, "/tmp/caf\udce9.txt")

    assert os.listdir(tmp_path) == []


def test_compute_text_digest_changes_with_content() -> None:
    digest_one = file_io.compute_text_digest("alpha")
    digest_two = file_io.compute_text_digest("beta")

    assert digest_one == file_io.compute_text_digest("alpha")
    assert digest_one != digest_two


def test_setup_logging_creates_rotating_file(tmp_path: Path) -> None:
    log_dir = tmp_path / "explicit"

    log_path = logging_utils.setup_logging(
        level=logging.INFO,
        log_dir=log_dir,
        console=False,
        force=True,
    )

    logging.getLogger("tooly.tests").info("Logging smoke test")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_path == log_dir / "tooly.log"
    assert "Logging smoke test" in log_path.read_text(encoding="utf-8")
    assert logging.getLogger("watchdog").level == logging.WARNING


def test_setup_logging_is_idempotent_without_force(tmp_path: Path) -> None:
    first = logging_utils.setup_logging(log_dir=tmp_path / "one", console=False, force=True)

    second = logging_utils.setup_logging(log_dir=tmp_path / "two", console=False)

    assert second == first


def test_log_dir_honours_env_override(tmp_path: Path) -> None:
    assert logging_utils.resolve_log_dir() == tmp_path / "logs"


def test_log_dir_defaults_under_app_dir(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("TOOLY_LOG_DIR", raising=False)
    monkeypatch.setenv("TOOLY_APP_DIR", str(tmp_path / "appdir"))

    log_path = logging_utils.setup_logging(console=False, force=True)

    assert logging_utils.resolve_log_dir() == tmp_path / "appdir" / "logs"
    assert log_path == tmp_path / "appdir" / "logs" / "tooly.log"
