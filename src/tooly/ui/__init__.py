"""Qt boundary: native menus, icons, clipboard and trigger delivery."""

from .host import QtClipboard, QtTriggerEmitter
from .qt_menu import ICON_SIZE, aspect_fit_pixmap, build_qmenu, load_icon_pixmap, resolve_icon

__all__ = [
    # Menus & icons
    "ICON_SIZE",
    "aspect_fit_pixmap",
    "build_qmenu",
    "load_icon_pixmap",
    "resolve_icon",
    # Host adapters
    "QtClipboard",
    "QtTriggerEmitter",
]
