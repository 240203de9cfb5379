"""The service object the file-browser host talks to."""

from __future__ import annotations

import logging
from typing import Sequence

from .core.menu import MenuTree, assemble_menu
from .core.selection import SelectionContext
from .services.dispatcher import ActionDispatcher, DispatchResult
from .services.settings import SettingsStore

__all__ = ["ContextMenuExtension"]

_LOGGER = logging.getLogger(__name__)


class ContextMenuExtension:
    """Owns the settings store and dispatcher for the lifetime of the host process.

    The host calls :meth:`build_menu` when a context menu is about to open and
    :meth:`invoke` when the user picks an entry. Both read the store's current
    snapshot only, so neither touches the disk for settings.
    """

    def __init__(self, store: SettingsStore, dispatcher: ActionDispatcher) -> None:
        self._store = store
        self._dispatcher = dispatcher

    @property
    def store(self) -> SettingsStore:
        return self._store

    @property
    def dispatcher(self) -> ActionDispatcher:
        return self._dispatcher

    def start(self, *, watch: bool = True) -> ContextMenuExtension:
        """Load the settings file and, optionally, start watching it."""

        self._store.load()
        if watch:
            self._store.watch()
        return self

    def close(self) -> None:
        self._store.close()
        _LOGGER.debug("Context menu extension closed")

    def __enter__(self) -> ContextMenuExtension:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    def build_menu(self, selection: SelectionContext | Sequence[str]) -> MenuTree:
        tree = assemble_menu(self._store.snapshot(), selection)
        _LOGGER.debug("Built menu with %d top-level entries", len(tree))
        return tree

    def invoke(self, name: str, selection: SelectionContext | Sequence[str]) -> DispatchResult:
        return self._dispatcher.invoke(name, self._store.snapshot(), selection)
