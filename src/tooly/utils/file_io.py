"""File IO helpers for the settings and payload files."""

from __future__ import annotations

import codecs
import hashlib
import os
import tempfile
from pathlib import Path

__all__ = [
    "read_text",
    "write_text",
    "compute_text_digest",
]

_BOM_MAP: dict[bytes, str] = {
    codecs.BOM_UTF32_LE: "utf-32-le",
    codecs.BOM_UTF32_BE: "utf-32-be",
    codecs.BOM_UTF8: "utf-8-sig",
    codecs.BOM_UTF16_LE: "utf-16-le",
    codecs.BOM_UTF16_BE: "utf-16-be",
}


def read_text(path: Path | str) -> str:
    """Read a UTF-8 text file, honouring a leading byte-order mark.

    Undecodable bytes raise ``UnicodeDecodeError``; there is no fallback to the
    locale encoding.
    """

    raw = Path(path).read_bytes()
    text = raw.decode(_detect_encoding(raw))
    return text[1:] if text.startswith("\ufeff") else text


def write_text(path: Path | str, content: str) -> Path:
    """Atomically replace ``path`` with UTF-8 ``content``.

    The text is written to a sibling temp file which is then renamed over the
    target, so readers see either the previous or the complete new content.
    The temp file is removed on failure.
    """

    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    data = content.encode("utf-8")

    descriptor, tmp_name = tempfile.mkstemp(
        dir=str(target.parent), prefix=f".{target.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(descriptor, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, target)
    finally:
        if os.path.exists(tmp_name):
            try:
                os.unlink(tmp_name)
            except OSError:  # pragma: no cover - cleanup path
                pass
    return target


def compute_text_digest(text: str) -> str:
    """Return a SHA-256 digest for the provided text."""

    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def _detect_encoding(raw: bytes) -> str:
    # UTF-32 LE starts with the UTF-16 LE mark, so it is checked first.
    for bom, encoding in _BOM_MAP.items():
        if raw.startswith(bom):
            return encoding
    return "utf-8"
