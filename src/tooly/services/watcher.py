"""File change notifications delivered on a background observer thread."""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Any, Callable, Protocol

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

__all__ = ["ChangeCallback", "FileEventSource", "Subscription", "WatchdogEventSource"]

_LOGGER = logging.getLogger(__name__)

ChangeCallback = Callable[[Path], None]


class Subscription:
    """Handle returned by :meth:`FileEventSource.subscribe`."""

    __slots__ = ("path", "_cancel", "_active", "_lock")

    def __init__(self, path: Path, cancel: Callable[[], None]) -> None:
        self.path = path
        self._cancel = cancel
        self._active = True
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        """Stop delivering change events. Safe to call more than once."""

        with self._lock:
            if not self._active:
                return
            self._active = False
        self._cancel()


class FileEventSource(Protocol):
    """Anything able to call ``on_change`` whenever ``path`` is written."""

    def subscribe(self, path: Path | str, on_change: ChangeCallback) -> Subscription:
        ...  # pragma: no cover - Protocol placeholder


class _FileChangeHandler(FileSystemEventHandler):
    """Forwards events that touch a single file inside the watched directory."""

    def __init__(self, target: Path, callback: ChangeCallback) -> None:
        super().__init__()
        self._target = _normalize(target)
        self._path = target
        self._callback = callback

    def on_created(self, event: FileSystemEvent) -> None:
        self._forward(event.src_path, event)

    def on_modified(self, event: FileSystemEvent) -> None:
        self._forward(event.src_path, event)

    def on_moved(self, event: FileSystemEvent) -> None:
        # Atomic writers rename a temp file over the target.
        self._forward(getattr(event, "dest_path", ""), event)

    def _forward(self, raw_path: Any, event: FileSystemEvent) -> None:
        if event.is_directory or not raw_path:
            return
        if _normalize(os.fsdecode(raw_path)) != self._target:
            return
        _LOGGER.debug("Change detected (%s) for %s", event.event_type, self._path)
        try:
            self._callback(self._path)
        except Exception:  # pragma: no cover - keep the observer thread alive
            _LOGGER.exception("Change callback for %s failed", self._path)


class WatchdogEventSource:
    """Event source backed by one lazily started ``watchdog`` observer.

    The parent directory of each subscribed file is watched so replacements
    via rename are reported, not only in-place writes. Callbacks run on the
    observer thread, never on the caller's thread.
    """

    def __init__(self, observer_factory: Callable[[], Any] = Observer) -> None:
        self._observer_factory = observer_factory
        self._observer: Any | None = None
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._observer is not None

    def subscribe(self, path: Path | str, on_change: ChangeCallback) -> Subscription:
        target = Path(os.path.abspath(Path(path).expanduser()))
        target.parent.mkdir(parents=True, exist_ok=True)
        handler = _FileChangeHandler(target, on_change)
        with self._lock:
            observer = self._ensure_observer()
            watch = observer.schedule(handler, str(target.parent), recursive=False)
        _LOGGER.info("Watching %s for changes", target)
        return Subscription(target, lambda: self._remove(handler, watch))

    def stop(self, timeout: float = 2.0) -> None:
        """Stop the observer thread; later subscriptions start a fresh one."""

        with self._lock:
            observer = self._observer
            self._observer = None
        if observer is None:
            return
        observer.stop()
        observer.join(timeout)
        _LOGGER.debug("File observer stopped")

    def _ensure_observer(self) -> Any:
        if self._observer is None:
            observer = self._observer_factory()
            observer.daemon = True
            observer.start()
            self._observer = observer
        return self._observer

    def _remove(self, handler: _FileChangeHandler, watch: Any) -> None:
        with self._lock:
            observer = self._observer
            if observer is None:
                return
            try:
                observer.remove_handler_for_watch(handler, watch)
            except KeyError:
                _LOGGER.debug("Watch handler already removed")


def _normalize(path: Path | str) -> str:
    return os.path.normcase(os.path.realpath(os.fspath(path)))
