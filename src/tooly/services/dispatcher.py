"""Turns a chosen menu action into a clipboard copy or a companion signal."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol, Sequence

from ..core.errors import ActionLookupError, DispatchError, ToolyError, TriggerError
from ..core.models import ActionKind, ActionPayload, MenuItemConfig, MenuSettings
from ..core.selection import SelectionContext
from .settings import default_payload_path
from .signal import build_trigger_uri, write_payload

__all__ = [
    "Clipboard",
    "TriggerEmitter",
    "DispatchOutcome",
    "DispatchResult",
    "ActionDispatcher",
]

_LOGGER = logging.getLogger(__name__)


class Clipboard(Protocol):
    """Shared clipboard owned by the host."""

    def set_text(self, text: str) -> None:
        ...  # pragma: no cover - Protocol placeholder


class TriggerEmitter(Protocol):
    """Delivers a trigger URI across the process boundary without waiting."""

    def emit(self, uri: str) -> None:
        ...  # pragma: no cover - Protocol placeholder


class DispatchOutcome(str, Enum):
    COPIED = "copied"
    SIGNALED = "signaled"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class DispatchResult:
    """What happened to a single action invocation."""

    outcome: DispatchOutcome
    name: str = ""
    payload_path: Path | None = None
    trigger_uri: str | None = None
    error: ToolyError | None = None

    @property
    def ok(self) -> bool:
        return self.outcome in (DispatchOutcome.COPIED, DispatchOutcome.SIGNALED)


class ActionDispatcher:
    """Performs the effect for a chosen action.

    ``copy`` actions put the selected paths on the clipboard. Every other
    action type is written to the payload file and announced with a trigger
    URI. Failures are logged and reported in the returned
    :class:`DispatchResult`; nothing is raised to the caller and nothing is
    retried.
    """

    def __init__(
        self,
        payload_path: Path | str | None = None,
        *,
        clipboard: Clipboard,
        emitter: TriggerEmitter,
        fallback_target: Path | str | None = None,
    ) -> None:
        resolved = Path(payload_path).expanduser() if payload_path is not None else default_payload_path()
        self._payload_path = resolved.absolute()
        self._clipboard = clipboard
        self._emitter = emitter
        self._fallback_target = str(fallback_target) if fallback_target else None

    @property
    def payload_path(self) -> Path:
        return self._payload_path

    def invoke(
        self,
        name: str,
        settings: MenuSettings,
        selection: SelectionContext | Sequence[str],
    ) -> DispatchResult:
        """Dispatch the action called ``name`` in ``settings``.

        A name missing from ``settings`` (the menu was built before a reload)
        is a no-op.
        """

        item = settings.items.get(name)
        if item is None:
            error = ActionLookupError(name)
            _LOGGER.info("Ignoring stale menu entry: %s", error)
            return DispatchResult(DispatchOutcome.SKIPPED, name=name, error=error)
        return self.dispatch(item, selection, name=name)

    def dispatch(
        self,
        item: MenuItemConfig,
        selection: SelectionContext | Sequence[str],
        *,
        name: str = "",
    ) -> DispatchResult:
        context = (
            selection
            if isinstance(selection, SelectionContext)
            else SelectionContext.from_paths(selection)
        )
        _LOGGER.debug(
            "Dispatching %s (%s) for %d path(s)",
            name or item.action,
            item.action_type.value,
            len(context),
        )
        if item.kind is ActionKind.COPY:
            return self._copy_paths(context, name)
        return self._signal(item, context, name)

    def _copy_paths(self, context: SelectionContext, name: str) -> DispatchResult:
        if context.is_empty:
            return DispatchResult(DispatchOutcome.SKIPPED, name=name)
        text = "\n".join(context.selected_paths)
        try:
            self._clipboard.set_text(text)
        except Exception as exc:  # pragma: no cover - host clipboard failures vary
            _LOGGER.warning("Copying %d path(s) failed: %s", len(context), exc)
            return DispatchResult(DispatchOutcome.FAILED, name=name, error=DispatchError(str(exc)))
        _LOGGER.info("Copied %d path(s) to the clipboard", len(context))
        return DispatchResult(DispatchOutcome.COPIED, name=name)

    def _signal(self, item: MenuItemConfig, context: SelectionContext, name: str) -> DispatchResult:
        target = context.target or self._fallback_target
        payload = ActionPayload.for_item(item, context.selected_paths, target)
        try:
            path = write_payload(payload, self._payload_path)
            uri = build_trigger_uri(path)
        except DispatchError as exc:
            _LOGGER.warning("Signal for %s aborted: %s", name or item.action, exc)
            return DispatchResult(DispatchOutcome.FAILED, name=name, error=exc)

        try:
            self._emitter.emit(uri)
        except Exception as exc:
            error = TriggerError(f"Unable to emit {uri}: {exc}")
            _LOGGER.warning("Signal for %s not delivered: %s", name or item.action, error)
            return DispatchResult(
                DispatchOutcome.FAILED, name=name, payload_path=path, trigger_uri=uri, error=error
            )

        _LOGGER.info("Signaled companion: %s", uri)
        return DispatchResult(DispatchOutcome.SIGNALED, name=name, payload_path=path, trigger_uri=uri)
