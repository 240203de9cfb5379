"""Service layer: settings store, file watcher, signal protocol and dispatcher."""

from .dispatcher import ActionDispatcher, DispatchOutcome, DispatchResult
from .settings import SettingsStore
from .watcher import Subscription, WatchdogEventSource

__all__ = [
    "ActionDispatcher",
    "DispatchOutcome",
    "DispatchResult",
    "SettingsStore",
    "Subscription",
    "WatchdogEventSource",
]
