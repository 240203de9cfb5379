"""Core domain types: settings models, selection, matcher and menu tree."""

from .matcher import matches
from .menu import MenuLeaf, MenuSeparator, MenuTree, SubMenu, assemble_menu
from .models import (
    SEPARATOR_SENTINEL,
    ActionKind,
    ActionPayload,
    ActionType,
    IconKind,
    MenuGroupConfig,
    MenuItemConfig,
    MenuSettings,
)
from .selection import SelectionContext

__all__ = [
    "SEPARATOR_SENTINEL",
    "ActionKind",
    "ActionPayload",
    "ActionType",
    "IconKind",
    "MenuGroupConfig",
    "MenuItemConfig",
    "MenuLeaf",
    "MenuSeparator",
    "MenuSettings",
    "MenuTree",
    "SelectionContext",
    "SubMenu",
    "assemble_menu",
    "matches",
]
