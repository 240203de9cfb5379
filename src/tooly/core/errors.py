"""Exception hierarchy for the context-menu core.

None of these errors are meant to reach the host process. The settings store
and the dispatcher catch them at their boundaries, log them, and keep the
previous state.
"""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "ToolyError",
    "ConfigError",
    "ConfigReadError",
    "ConfigParseError",
    "ActionLookupError",
    "DispatchError",
    "SerializationError",
    "AtomicWriteError",
    "TriggerError",
]


class ToolyError(Exception):
    """Base class for every recoverable error raised by this package."""


# -----------------------------------------------------------------------------
# Configuration errors
# -----------------------------------------------------------------------------


class ConfigError(ToolyError):
    """Raised when the settings file cannot be turned into a snapshot."""

    def __init__(self, path: Path | str | None, message: str) -> None:
        self.path = Path(path) if path is not None else None
        self.message = message
        location = f"{self.path}: " if self.path is not None else ""
        super().__init__(f"{location}{message}")


class ConfigReadError(ConfigError):
    """The settings file is missing or unreadable."""


class ConfigParseError(ConfigError):
    """The settings file is not valid JSON or violates the settings schema."""

    def __init__(
        self,
        path: Path | str | None,
        message: str,
        *,
        problems: tuple[str, ...] = (),
    ) -> None:
        self.problems = problems
        super().__init__(path, message)


# -----------------------------------------------------------------------------
# Action errors
# -----------------------------------------------------------------------------


class ActionLookupError(ToolyError, LookupError):
    """The chosen menu entry no longer exists in the active settings."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Action '{name}' is not configured")


class DispatchError(ToolyError):
    """Base class for failures while handing an action to the companion."""


class SerializationError(DispatchError):
    """The action payload could not be encoded."""


class AtomicWriteError(DispatchError):
    """The payload file could not be written atomically."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        super().__init__(f"Unable to write payload to {self.path}: {reason}")


class TriggerError(DispatchError):
    """The trigger URI could not be built, parsed or emitted."""
