"""Selection context supplied by the host when it builds or invokes a menu."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable

__all__ = ["SelectionContext"]


@dataclass(slots=True, frozen=True)
class SelectionContext:
    """Ordered selected paths plus the optional directory the menu targets."""

    selected_paths: tuple[str, ...] = ()
    target_path: str = ""

    @classmethod
    def from_paths(
        cls,
        paths: Iterable[str | os.PathLike[str]] = (),
        target: str | os.PathLike[str] | None = None,
    ) -> SelectionContext:
        return cls(
            selected_paths=tuple(os.fspath(path) for path in paths),
            target_path=os.fspath(target) if target else "",
        )

    @property
    def target(self) -> str | None:
        return self.target_path or None

    @property
    def is_empty(self) -> bool:
        return not self.selected_paths

    def __len__(self) -> int:
        return len(self.selected_paths)
