"""Settings store: loads, validates and hot-reloads the menu configuration."""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path

from ..core.errors import ConfigError, ConfigParseError, ConfigReadError
from ..core.models import MenuSettings
from ..utils.file_io import compute_text_digest, read_text, write_text
from .validation import parse_settings_text
from .watcher import FileEventSource, Subscription, WatchdogEventSource

__all__ = [
    "SettingsStore",
    "resolve_app_dir",
    "default_settings_path",
    "default_payload_path",
]

LOGGER = logging.getLogger(__name__)
_DEFAULT_APP_DIR = Path.home() / ".tooly"
_SETTINGS_FILENAME = "settings.json"
_PAYLOAD_FILENAME = "payload.json"


def resolve_app_dir() -> Path:
    """Return the application data directory, honouring ``TOOLY_APP_DIR``."""

    env_override = os.environ.get("TOOLY_APP_DIR")
    return Path(env_override or _DEFAULT_APP_DIR).expanduser()


def default_settings_path() -> Path:
    env_override = os.environ.get("TOOLY_SETTINGS_PATH")
    if env_override:
        return Path(env_override).expanduser()
    return resolve_app_dir() / _SETTINGS_FILENAME


def default_payload_path() -> Path:
    env_override = os.environ.get("TOOLY_PAYLOAD_PATH")
    if env_override:
        return Path(env_override).expanduser()
    return resolve_app_dir() / _PAYLOAD_FILENAME


class SettingsStore:
    """Single source of truth for the menu configuration.

    Readers call :meth:`snapshot`, which returns the currently installed
    :class:`MenuSettings` without locking. :meth:`load` builds a complete new
    snapshot off to the side and publishes it with a single reference
    assignment, so a reader sees either the old or the new configuration.
    Loads are serialized with a lock; a failed load leaves the previous
    snapshot in place.
    """

    def __init__(
        self,
        path: Path | str | None = None,
        *,
        event_source: FileEventSource | None = None,
    ) -> None:
        self._path = Path(path).expanduser() if path is not None else default_settings_path()
        self._event_source = event_source
        self._owns_event_source = False
        self._snapshot = MenuSettings.empty()
        self._digest: str | None = None
        self._revision = 0
        self._last_error: ConfigError | None = None
        self._load_lock = threading.Lock()
        self._subscription: Subscription | None = None

    @property
    def path(self) -> Path:
        """Return the resolved path backing this store."""

        return self._path

    @property
    def revision(self) -> int:
        """Number of snapshots installed since construction."""

        return self._revision

    @property
    def last_error(self) -> ConfigError | None:
        """The most recent load failure, cleared by the next successful load."""

        return self._last_error

    @property
    def watching(self) -> bool:
        return self._subscription is not None and self._subscription.active

    def snapshot(self) -> MenuSettings:
        """Return the current configuration; never blocks on a reload."""

        return self._snapshot

    def load(self) -> MenuSettings:
        """Reload the settings file and return the snapshot now in effect."""

        with self._load_lock:
            try:
                text = self._read_text()
                digest = compute_text_digest(text)
                if digest == self._digest:
                    LOGGER.debug(
                        "Settings file %s unchanged; keeping revision %d",
                        self._path,
                        self._revision,
                    )
                    self._last_error = None
                    return self._snapshot
                payload = parse_settings_text(text, path=self._path)
                settings = self._build_settings(payload)
            except ConfigError as exc:
                self._last_error = exc
                LOGGER.warning("Keeping previous settings (revision %d): %s", self._revision, exc)
                return self._snapshot

            self._snapshot = settings
            self._digest = digest
            self._revision += 1
            self._last_error = None
            LOGGER.info(
                "Settings loaded from %s: %d item(s), %d group(s), revision %d",
                self._path,
                len(settings.items),
                len(settings.groups),
                self._revision,
            )
            return settings

    def watch(self, path: Path | str | None = None) -> Subscription:
        """Reload whenever the settings file changes.

        The reload runs on the event source's thread. Watching again replaces
        the previous subscription.
        """

        if self._event_source is None:
            self._event_source = WatchdogEventSource()
            self._owns_event_source = True
        if self._subscription is not None:
            self._subscription.cancel()
        target = Path(path).expanduser() if path is not None else self._path
        self._subscription = self._event_source.subscribe(target, self._handle_change)
        return self._subscription

    def save(self, settings: MenuSettings) -> Path:
        """Persist settings to disk with atomic file writes."""

        body = json.dumps(settings.to_payload(), indent=2, ensure_ascii=False)
        write_text(self._path, body + "\n")
        LOGGER.debug("Settings saved to %s", self._path)
        return self._path

    def close(self) -> None:
        """Stop watching; the current snapshot remains readable."""

        subscription = self._subscription
        self._subscription = None
        if subscription is not None:
            subscription.cancel()
        if self._owns_event_source and isinstance(self._event_source, WatchdogEventSource):
            self._event_source.stop()

    def _handle_change(self, path: Path) -> None:
        LOGGER.debug("Settings change notification for %s", path)
        self.load()

    def _read_text(self) -> str:
        try:
            return read_text(self._path)
        except FileNotFoundError as exc:
            raise ConfigReadError(self._path, "Settings file does not exist.") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigReadError(self._path, f"Unable to read settings file: {exc}") from exc

    def _build_settings(self, payload: dict) -> MenuSettings:
        try:
            return MenuSettings.from_payload(payload)
        except (TypeError, ValueError, AttributeError) as exc:
            raise ConfigParseError(
                self._path, f"Settings payload contained unexpected data: {exc}"
            ) from exc
