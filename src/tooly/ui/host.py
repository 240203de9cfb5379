"""Clipboard and trigger adapters backed by the running Qt application."""

from __future__ import annotations

import logging

from PySide6.QtCore import QUrl
from PySide6.QtGui import QDesktopServices, QGuiApplication

__all__ = ["QtClipboard", "QtTriggerEmitter"]

_LOGGER = logging.getLogger(__name__)


class QtClipboard:
    """Writes plain text to the system clipboard through ``QGuiApplication``."""

    def set_text(self, text: str) -> None:
        if QGuiApplication.instance() is None:
            raise RuntimeError("A QGuiApplication must exist before using the clipboard.")
        clipboard = QGuiApplication.clipboard()
        if clipboard is None:  # pragma: no cover - platform without clipboard
            raise RuntimeError("The platform does not provide a clipboard.")
        clipboard.setText(text)


class QtTriggerEmitter:
    """Hands the trigger URI to the desktop's URL handler for the ``tooly`` scheme."""

    def emit(self, uri: str) -> None:
        url = QUrl(uri)
        if not url.isValid():
            raise ValueError(f"Invalid trigger URI: {uri}")
        if not QDesktopServices.openUrl(url):
            raise RuntimeError(f"No handler accepted {uri}")
        _LOGGER.debug("Opened trigger URI %s", uri)
