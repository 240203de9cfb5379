"""Typed configuration and payload models shared by the menu core."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Sequence

__all__ = [
    "SEPARATOR_SENTINEL",
    "ActionKind",
    "ActionType",
    "IconKind",
    "MenuGroupConfig",
    "MenuItemConfig",
    "MenuSettings",
    "ActionPayload",
]

SEPARATOR_SENTINEL = "%sprt%"
"""Reserved ``order`` entry marking an explicit separator slot."""

_EMPTY_MAPPING: Mapping[str, Any] = MappingProxyType({})


class ActionKind(Enum):
    """How the dispatcher handles an action: locally or through the companion."""

    COPY = "copy"
    SIGNAL = "signal"


class ActionType(str, Enum):
    """Action types understood by the extension and its companion process."""

    COPY = "copy"
    CREATE = "create"
    APP = "app"
    SHORTCUT = "shortcut"
    TERMINAL = "terminal"
    SCRIPT = "script"
    REPLACE = "replace"

    @property
    def kind(self) -> ActionKind:
        return ActionKind.COPY if self is ActionType.COPY else ActionKind.SIGNAL

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)


class IconKind(str, Enum):
    """Where a menu icon comes from."""

    APP = "app"
    IMAGE = "image"
    SYMBOL = "symbol"
    NONE = ""

    @classmethod
    def from_value(cls, value: Any) -> IconKind:
        """Map a settings ``iconType`` to a kind; unknown values render without an icon."""

        text = str(value or "").strip().lower()
        for member in cls:
            if member.value == text:
                return member
        return cls.NONE


@dataclass(slots=True, frozen=True)
class MenuGroupConfig:
    """Submenu header configuration for a named group."""

    icon_kind: IconKind = IconKind.NONE
    icon_ref: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> MenuGroupConfig:
        return cls(
            icon_kind=IconKind.from_value(payload.get("iconType")),
            icon_ref=str(payload.get("icon") or ""),
        )

    def to_payload(self) -> dict[str, Any]:
        return {"iconType": self.icon_kind.value, "icon": self.icon_ref}


@dataclass(slots=True, frozen=True)
class MenuItemConfig:
    """One configured action as it appears in the settings file."""

    action_type: ActionType
    action: str = ""
    group: str = ""
    target_type: str = "any"
    icon_kind: IconKind = IconKind.NONE
    icon_ref: str = ""
    shortcut_key: str = ""
    enabled: bool = True

    @property
    def kind(self) -> ActionKind:
        return self.action_type.kind

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> MenuItemConfig:
        """Build an item from a validated settings entry.

        Raises ``ValueError`` when ``actionType`` is outside the closed set.
        """

        return cls(
            action_type=ActionType(str(payload.get("actionType") or "")),
            action=str(payload.get("action") or ""),
            group=str(payload.get("group") or ""),
            target_type=str(payload.get("targetType", "any") or ""),
            icon_kind=IconKind.from_value(payload.get("iconType")),
            icon_ref=str(payload.get("icon") or ""),
            shortcut_key=str(payload.get("key") or ""),
            enabled=bool(payload.get("enabled", True)),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "group": self.group,
            "targetType": self.target_type,
            "iconType": self.icon_kind.value,
            "icon": self.icon_ref,
            "actionType": self.action_type.value,
            "action": self.action,
            "key": self.shortcut_key,
            "enabled": self.enabled,
        }


@dataclass(slots=True, frozen=True)
class MenuSettings:
    """Immutable snapshot of the menu configuration.

    ``order`` is the only source of display order. Names in ``order`` that are
    missing from ``items`` are ignored by the assembler.
    """

    order: tuple[str, ...] = ()
    groups: Mapping[str, MenuGroupConfig] = field(default_factory=lambda: _EMPTY_MAPPING)
    items: Mapping[str, MenuItemConfig] = field(default_factory=lambda: _EMPTY_MAPPING)
    separators_enabled: bool = True

    def __post_init__(self) -> None:
        # Freeze containers so a published snapshot can be shared across threads.
        object.__setattr__(self, "order", tuple(self.order))
        if not isinstance(self.groups, MappingProxyType):
            object.__setattr__(self, "groups", MappingProxyType(dict(self.groups)))
        if not isinstance(self.items, MappingProxyType):
            object.__setattr__(self, "items", MappingProxyType(dict(self.items)))

    @classmethod
    def empty(cls) -> MenuSettings:
        return cls()

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> MenuSettings:
        """Build a snapshot from a decoded, schema-validated settings document."""

        groups_payload = payload.get("groups") or {}
        items_payload = payload.get("items") or {}
        return cls(
            order=tuple(str(name) for name in payload.get("order") or ()),
            groups={
                str(name): MenuGroupConfig.from_payload(entry)
                for name, entry in groups_payload.items()
            },
            items={
                str(name): MenuItemConfig.from_payload(entry)
                for name, entry in items_payload.items()
            },
            separators_enabled=bool(payload.get("separators", True)),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "order": list(self.order),
            "groups": {name: group.to_payload() for name, group in self.groups.items()},
            "items": {name: item.to_payload() for name, item in self.items.items()},
            "separators": self.separators_enabled,
        }


@dataclass(slots=True, frozen=True)
class ActionPayload:
    """Request handed to the companion process through the payload file."""

    action_type: str
    action: str
    target_type: str
    items: tuple[str, ...] = ()
    target: str | None = None

    @classmethod
    def for_item(
        cls,
        item: MenuItemConfig,
        paths: Sequence[str],
        target: str | None = None,
    ) -> ActionPayload:
        return cls(
            action_type=item.action_type.value,
            action=item.action,
            target_type=item.target_type,
            items=tuple(paths),
            target=target or None,
        )

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> ActionPayload:
        target = payload.get("target")
        return cls(
            action_type=str(payload.get("actionType") or ""),
            action=str(payload.get("action") or ""),
            target_type=str(payload.get("targetType") or ""),
            items=tuple(str(entry) for entry in payload.get("items") or ()),
            target=str(target) if target else None,
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "actionType": self.action_type,
            "action": self.action,
            "targetType": self.target_type,
            "items": list(self.items),
            "target": self.target,
        }
