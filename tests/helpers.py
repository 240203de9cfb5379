"""Shared test stubs for the host-side collaborators.

Import from here instead of redefining them in individual test files::

    from helpers import RecordingClipboard, RecordingEmitter
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from tooly.services.watcher import Subscription


class RecordingClipboard:
    """Clipboard stub remembering every text it was given."""

    def __init__(self) -> None:
        self.texts: list[str] = []

    def set_text(self, text: str) -> None:
        self.texts.append(text)


class RecordingEmitter:
    """Trigger emitter stub; ``fail=True`` simulates a missing URL handler."""

    def __init__(self, *, fail: bool = False) -> None:
        self.uris: list[str] = []
        self.fail = fail

    def emit(self, uri: str) -> None:
        if self.fail:
            raise RuntimeError("no handler registered")
        self.uris.append(uri)


class ManualEventSource:
    """Event source whose change notifications are fired by the test."""

    def __init__(self) -> None:
        self.callbacks: dict[Path, Callable[[Path], None]] = {}
        self.subscriptions: list[Subscription] = []

    def subscribe(self, path: Path | str, on_change: Callable[[Path], None]) -> Subscription:
        target = Path(path)
        self.callbacks[target] = on_change
        subscription = Subscription(target, lambda: self.callbacks.pop(target, None))
        self.subscriptions.append(subscription)
        return subscription

    def fire(self, path: Path | str) -> None:
        callback = self.callbacks.get(Path(path))
        if callback is not None:
            callback(Path(path))
