"""Translate an assembled :class:`~tooly.core.menu.MenuTree` into Qt menus."""

from __future__ import annotations

import logging
from typing import Any, Callable

from PySide6.QtCore import QFileInfo, QSize, Qt
from PySide6.QtGui import QIcon, QKeySequence, QPainter, QPixmap
from PySide6.QtWidgets import QFileIconProvider, QMenu

from ..core.menu import MenuEntry, MenuIcon, MenuLeaf, MenuSeparator, MenuTree, SubMenu
from ..core.models import IconKind

__all__ = [
    "ICON_SIZE",
    "aspect_fit_pixmap",
    "load_icon_pixmap",
    "resolve_icon",
    "build_qmenu",
]

_LOGGER = logging.getLogger(__name__)

ICON_SIZE = 18
_SOURCE_SIZE = QSize(64, 64)

IconResolver = Callable[[MenuIcon], "QIcon | None"]
TriggerHandler = Callable[[str], Any]


def load_icon_pixmap(icon: MenuIcon) -> QPixmap | None:
    """Load the unscaled artwork for ``icon``; ``None`` when nothing usable exists."""

    if icon.kind is IconKind.APP:
        pixmap = QFileIconProvider().icon(QFileInfo(icon.ref)).pixmap(_SOURCE_SIZE)
    elif icon.kind is IconKind.IMAGE:
        pixmap = QPixmap(icon.ref)
    elif icon.kind is IconKind.SYMBOL:
        themed = QIcon.fromTheme(icon.ref)
        if themed.isNull():
            _LOGGER.debug("Theme icon %r not available", icon.ref)
            return None
        pixmap = themed.pixmap(_SOURCE_SIZE)
    else:
        return None

    if pixmap.isNull():
        _LOGGER.debug("Icon %s:%s could not be loaded", icon.kind.value, icon.ref)
        return None
    return pixmap


def aspect_fit_pixmap(source: QPixmap, size: int = ICON_SIZE) -> QPixmap:
    """Scale ``source`` uniformly and center it on a transparent square canvas."""

    canvas = QPixmap(size, size)
    canvas.fill(Qt.GlobalColor.transparent)
    scaled = source.scaled(
        size,
        size,
        Qt.AspectRatioMode.KeepAspectRatio,
        Qt.TransformationMode.SmoothTransformation,
    )
    painter = QPainter(canvas)
    try:
        painter.drawPixmap((size - scaled.width()) // 2, (size - scaled.height()) // 2, scaled)
    finally:
        painter.end()
    return canvas


def resolve_icon(icon: MenuIcon, *, size: int = ICON_SIZE) -> QIcon | None:
    if icon.is_empty:
        return None
    pixmap = load_icon_pixmap(icon)
    if pixmap is None:
        return None
    return QIcon(aspect_fit_pixmap(pixmap, size))


def build_qmenu(
    tree: MenuTree,
    on_trigger: TriggerHandler,
    *,
    parent: Any | None = None,
    title: str = "",
    icon_resolver: IconResolver | None = None,
) -> QMenu:
    """Create a ``QMenu`` mirroring ``tree``.

    Picking a leaf calls ``on_trigger`` with the leaf title, which is the
    action name the dispatcher looks up.
    """

    resolver = icon_resolver or resolve_icon
    menu = QMenu(_qt_text(title), parent)
    for entry in tree:
        _add_entry(menu, entry, on_trigger, resolver)
    return menu


def _add_entry(
    menu: QMenu,
    entry: MenuEntry,
    on_trigger: TriggerHandler,
    resolver: IconResolver,
) -> None:
    if isinstance(entry, MenuSeparator):
        action = menu.addAction(_qt_text(entry.title))
        action.setEnabled(False)
        return

    if isinstance(entry, SubMenu):
        submenu = menu.addMenu(_qt_text(entry.title))
        icon = resolver(entry.icon)
        if icon is not None:
            submenu.setIcon(icon)
        for child in entry.children:
            _add_leaf(submenu, child, on_trigger, resolver)
        return

    _add_leaf(menu, entry, on_trigger, resolver)


def _add_leaf(
    menu: QMenu,
    leaf: MenuLeaf,
    on_trigger: TriggerHandler,
    resolver: IconResolver,
) -> None:
    action = menu.addAction(_qt_text(leaf.title))
    icon = resolver(leaf.icon)
    if icon is not None:
        action.setIcon(icon)
    if leaf.shortcut_key:
        action.setShortcut(QKeySequence(leaf.shortcut_key))
    action.triggered.connect(lambda _checked=False, name=leaf.title: on_trigger(name))


def _qt_text(title: str) -> str:
    # Qt reads a single "&" as a mnemonic marker; configured names are literal.
    return title.replace("&", "&&")
