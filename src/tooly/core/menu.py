"""Host-independent menu tree and the assembler that builds it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator, Sequence, Union

from .matcher import matches
from .models import SEPARATOR_SENTINEL, ActionType, IconKind, MenuSettings
from .selection import SelectionContext

__all__ = [
    "HEADER_TITLE",
    "SEPARATOR_TITLE",
    "NEUTRAL_ICON",
    "MenuIcon",
    "MenuLeaf",
    "MenuSeparator",
    "SubMenu",
    "MenuEntry",
    "MenuTree",
    "assemble_menu",
]

HEADER_TITLE = "─ Tooly"
SEPARATOR_TITLE = "──"

Matcher = Callable[[str, SelectionContext], bool]


@dataclass(slots=True, frozen=True)
class MenuIcon:
    """Icon reference resolved by the host boundary."""

    kind: IconKind = IconKind.NONE
    ref: str = ""

    @property
    def is_empty(self) -> bool:
        return self.kind is IconKind.NONE


NEUTRAL_ICON = MenuIcon()


@dataclass(slots=True, frozen=True)
class MenuSeparator:
    """Disabled divider line; ``header`` marks the leading title row."""

    title: str = SEPARATOR_TITLE
    header: bool = False


@dataclass(slots=True, frozen=True)
class MenuLeaf:
    """Clickable entry bound to a configured action by its display name."""

    title: str
    action_type: ActionType
    icon: MenuIcon = NEUTRAL_ICON
    shortcut_key: str = ""


@dataclass(slots=True, frozen=True)
class SubMenu:
    """One level of grouping below the top-level menu."""

    title: str
    icon: MenuIcon = NEUTRAL_ICON
    children: tuple[MenuLeaf, ...] = ()


MenuEntry = Union[MenuLeaf, MenuSeparator, SubMenu]


@dataclass(slots=True, frozen=True)
class MenuTree:
    """Ordered top-level entries of an assembled context menu."""

    entries: tuple[MenuEntry, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[MenuEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def leaves(self) -> Iterator[MenuLeaf]:
        """Yield every clickable entry, descending into submenus."""

        for entry in self.entries:
            if isinstance(entry, MenuLeaf):
                yield entry
            elif isinstance(entry, SubMenu):
                yield from entry.children

    def find(self, title: str) -> MenuLeaf | None:
        for leaf in self.leaves():
            if leaf.title == title:
                return leaf
        return None

    def titles(self) -> list[str]:
        return [entry.title for entry in self.entries]

    def render_text(self, indent: str = "  ") -> str:
        lines: list[str] = []
        for entry in self.entries:
            if isinstance(entry, SubMenu):
                lines.append(f"{entry.title} >")
                lines.extend(f"{indent}{child.title}" for child in entry.children)
            else:
                lines.append(entry.title)
        return "\n".join(lines)


class _PendingGroup:
    __slots__ = ("title", "icon", "children")

    def __init__(self, title: str, icon: MenuIcon) -> None:
        self.title = title
        self.icon = icon
        self.children: list[MenuLeaf] = []

    def freeze(self) -> SubMenu:
        return SubMenu(title=self.title, icon=self.icon, children=tuple(self.children))


def assemble_menu(
    settings: MenuSettings,
    selection: SelectionContext | Sequence[str],
    *,
    matcher: Matcher | None = None,
) -> MenuTree:
    """Translate a settings snapshot and the current selection into a menu tree.

    The result depends only on the two inputs. Separators are emitted only when
    the snapshot enables them; unknown names in ``order``, disabled items and
    items whose target type rejects the selection are skipped. Grouped items
    land in a submenu positioned where the group first appears.
    """

    context = (
        selection
        if isinstance(selection, SelectionContext)
        else SelectionContext.from_paths(selection)
    )
    accepts = matcher or matches
    entries: list[MenuLeaf | MenuSeparator | _PendingGroup] = []
    groups: dict[str, _PendingGroup] = {}

    if settings.separators_enabled:
        entries.append(MenuSeparator(title=HEADER_TITLE, header=True))

    for name in settings.order:
        if name == SEPARATOR_SENTINEL:
            if settings.separators_enabled:
                entries.append(MenuSeparator())
            continue
        item = settings.items.get(name)
        if item is None or not item.enabled:
            continue
        if not accepts(item.target_type, context):
            continue

        leaf = MenuLeaf(
            title=name,
            action_type=item.action_type,
            icon=MenuIcon(item.icon_kind, item.icon_ref),
            shortcut_key=item.shortcut_key,
        )
        if not item.group:
            entries.append(leaf)
            continue

        pending = groups.get(item.group)
        if pending is None:
            group_config = settings.groups.get(item.group)
            icon = (
                MenuIcon(group_config.icon_kind, group_config.icon_ref)
                if group_config is not None
                else NEUTRAL_ICON
            )
            pending = _PendingGroup(item.group, icon)
            groups[item.group] = pending
            entries.append(pending)
        pending.children.append(leaf)

    return MenuTree(
        entries=tuple(
            entry.freeze() if isinstance(entry, _PendingGroup) else entry for entry in entries
        )
    )
