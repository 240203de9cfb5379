"""Target-type predicate deciding whether an action applies to a selection."""

from __future__ import annotations

import os
from typing import Callable, Iterable, Sequence

from .selection import SelectionContext

__all__ = ["TARGET_ANY", "TARGET_FOLDER", "TARGET_FILE", "matches", "parse_extensions"]

TARGET_ANY = "any"
TARGET_FOLDER = "folder"
TARGET_FILE = "file"

DirectoryProbe = Callable[[str], bool]


def matches(
    target_type: str,
    selection: SelectionContext | Sequence[str],
    *,
    is_directory: DirectoryProbe | None = None,
) -> bool:
    """Return ``True`` when ``target_type`` accepts at least one selected path."""

    paths = _selected_paths(selection)
    probe = is_directory or _is_directory
    keyword = (target_type or "").strip().lower()

    if keyword == TARGET_ANY:
        return True
    if keyword == TARGET_FOLDER:
        return any(probe(path) for path in paths)
    if keyword == TARGET_FILE:
        return any(not probe(path) for path in paths)

    extensions = parse_extensions(target_type)
    if not extensions:
        return False
    return any(_extension(path) in extensions for path in paths)


def parse_extensions(target_type: str) -> frozenset[str]:
    """Split a comma-separated extension list into a normalized set."""

    entries: set[str] = set()
    for raw in (target_type or "").split(","):
        entry = raw.strip().lstrip(".").lower()
        if entry:
            entries.add(entry)
    return frozenset(entries)


def _selected_paths(selection: SelectionContext | Iterable[str]) -> tuple[str, ...]:
    if isinstance(selection, SelectionContext):
        return selection.selected_paths
    return tuple(os.fspath(path) for path in selection)


def _is_directory(path: str) -> bool:
    if path.endswith(("/", os.sep)):
        return True
    return os.path.isdir(path)


def _extension(path: str) -> str:
    name = os.path.basename(path.rstrip("/" + os.sep))
    return os.path.splitext(name)[1].lstrip(".").lower()
