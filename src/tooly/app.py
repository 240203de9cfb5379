"""Application bootstrap helpers and the ``tooly`` command-line entry point."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Sequence, cast

from .core.menu import assemble_menu
from .core.selection import SelectionContext
from .extension import ContextMenuExtension
from .services.dispatcher import ActionDispatcher, Clipboard, TriggerEmitter
from .services.settings import SettingsStore
from .services.watcher import FileEventSource
from .utils import logging as logging_utils

_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_LOGGER = logging.getLogger(__name__)


def configure_logging(debug: bool = False, *, force: bool = False) -> None:
    """Configure structured logging for the extension host or CLI."""

    level = logging.DEBUG if debug else logging.INFO
    log_path = logging_utils.setup_logging(level, force=force)
    _LOGGER.debug("Logging configured (level=%s, file=%s)", logging.getLevelName(level), log_path)
    _install_qt_message_handler()


def create_extension(
    settings_path: Path | str | None = None,
    payload_path: Path | str | None = None,
    *,
    clipboard: Clipboard | None = None,
    emitter: TriggerEmitter | None = None,
    event_source: FileEventSource | None = None,
    watch: bool = True,
) -> ContextMenuExtension:
    """Build, load and (optionally) start watching the extension service.

    Call once at host start-up and :meth:`ContextMenuExtension.close` at exit.
    Without explicit adapters the Qt clipboard and URL handler are used.
    """

    if clipboard is None or emitter is None:
        from .ui import QtClipboard, QtTriggerEmitter

        clipboard = clipboard or QtClipboard()
        emitter = emitter or QtTriggerEmitter()

    store = SettingsStore(settings_path, event_source=event_source)
    dispatcher = ActionDispatcher(
        payload_path,
        clipboard=clipboard,
        emitter=emitter,
        fallback_target=Path.home(),
    )
    extension = ContextMenuExtension(store, dispatcher)
    return extension.start(watch=watch)


def create_gui_app() -> Any:
    """Return the running ``QGuiApplication`` or create one for CLI use."""

    try:  # Local import to avoid mandatory PySide6 dependency at import time.
        from PySide6.QtGui import QGuiApplication
    except ImportError as exc:  # pragma: no cover - depends on desktop stack
        raise RuntimeError("PySide6 must be installed to dispatch actions.") from exc

    app = cast(Any, QGuiApplication.instance() or QGuiApplication(sys.argv[:1]))
    app.setApplicationName("Tooly")
    return app


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point invoked by the `tooly` console script."""

    parser = _build_parser()
    args = parser.parse_args(argv)

    debug = args.debug or _env_flag("TOOLY_DEBUG", default=False)
    configure_logging(debug)

    store = SettingsStore(args.settings_path)
    store.load()
    error = store.last_error

    if args.validate:
        if error is None:
            print(f"{store.path}: OK ({len(store.snapshot().items)} item(s))")
            return 0
        print(str(error), file=sys.stderr)
        for problem in getattr(error, "problems", ()):
            print(f"  - {problem}", file=sys.stderr)
        return 1

    if args.dump_settings:
        print(json.dumps(store.snapshot().to_payload(), indent=2, ensure_ascii=False))
        return 0 if error is None else 1

    selection = SelectionContext.from_paths(args.paths, args.target)

    if args.menu:
        print(assemble_menu(store.snapshot(), selection).render_text())
        return 0

    if args.invoke:
        from .ui import QtClipboard, QtTriggerEmitter

        create_gui_app()
        dispatcher = ActionDispatcher(
            args.payload_path,
            clipboard=QtClipboard(),
            emitter=QtTriggerEmitter(),
            fallback_target=Path.home(),
        )
        result = dispatcher.invoke(args.invoke, store.snapshot(), selection)
        print(result.outcome.value)
        if result.error is not None:
            print(str(result.error), file=sys.stderr)
        return 0 if result.ok else 1

    parser.print_help()
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tooly",
        add_help=True,
        description="Inspect the Tooly context menu configuration or dispatch an action.",
    )
    parser.add_argument(
        "--settings-path",
        metavar="PATH",
        help="Override the default ~/.tooly/settings.json path.",
    )
    parser.add_argument(
        "--payload-path",
        metavar="PATH",
        help="Override the default ~/.tooly/payload.json path.",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--validate",
        action="store_true",
        help="Check the settings file and report problems.",
    )
    mode.add_argument(
        "--dump-settings",
        action="store_true",
        help="Print the effective settings snapshot and exit.",
    )
    mode.add_argument(
        "--menu",
        action="store_true",
        help="Print the menu assembled for the given paths.",
    )
    mode.add_argument(
        "--invoke",
        metavar="NAME",
        help="Dispatch the named action for the given paths.",
    )
    parser.add_argument(
        "--target",
        metavar="DIR",
        help="Directory the menu was opened against.",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    parser.add_argument("paths", nargs="*", help="Selected paths, in selection order.")
    return parser


def _env_flag(name: str, *, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _install_qt_message_handler() -> None:
    """Redirect Qt warnings to the Python logging stack when available."""

    try:
        from PySide6.QtCore import QtMsgType, qInstallMessageHandler
    except Exception:  # pragma: no cover - PySide6 optional during tests
        return

    level_map = {
        QtMsgType.QtDebugMsg: logging.DEBUG,
        QtMsgType.QtInfoMsg: logging.INFO,
        QtMsgType.QtWarningMsg: logging.WARNING,
        QtMsgType.QtCriticalMsg: logging.ERROR,
        QtMsgType.QtFatalMsg: logging.CRITICAL,
    }

    def _handler(mode, context, message):  # type: ignore[no-untyped-def]
        del context
        level = level_map.get(mode, logging.INFO)
        logging.getLogger("PySide6").log(level, message)

    qInstallMessageHandler(_handler)


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
