"""Wire format of the hand-off to the companion process.

An action request is a JSON payload file plus a ``tooly://run`` URI whose
``payload`` query parameter carries the payload file's absolute path. The
companion reads the file on its own schedule; nothing is acknowledged.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import parse_qs, quote, urlencode, urlsplit, urlunsplit

from ..core.errors import AtomicWriteError, SerializationError, TriggerError
from ..core.models import ActionPayload
from ..utils.file_io import read_text, write_text

__all__ = [
    "TRIGGER_SCHEME",
    "TRIGGER_COMMAND",
    "PAYLOAD_QUERY_KEY",
    "TriggerRequest",
    "build_trigger_uri",
    "parse_trigger_uri",
    "encode_payload",
    "write_payload",
    "read_payload",
]

TRIGGER_SCHEME = "tooly"
TRIGGER_COMMAND = "run"
PAYLOAD_QUERY_KEY = "payload"


@dataclass(slots=True, frozen=True)
class TriggerRequest:
    """Decoded trigger URI as seen by the companion process."""

    command: str
    payload_path: Path


def build_trigger_uri(payload_path: Path | str, *, command: str = TRIGGER_COMMAND) -> str:
    """Return ``tooly://<command>?payload=<absolute path>``."""

    absolute = os.path.abspath(os.fspath(payload_path))
    try:
        query = urlencode({PAYLOAD_QUERY_KEY: absolute}, quote_via=quote, safe="/")
    except UnicodeEncodeError as exc:
        raise TriggerError(f"Payload path {absolute!r} cannot be put in a URI: {exc}") from exc
    return urlunsplit((TRIGGER_SCHEME, command, "", query, ""))


def parse_trigger_uri(uri: str) -> TriggerRequest:
    parts = urlsplit(uri or "")
    if parts.scheme != TRIGGER_SCHEME:
        raise TriggerError(f"Unsupported trigger scheme: {parts.scheme!r}")
    command = parts.netloc or parts.path.strip("/")
    if not command:
        raise TriggerError("Trigger URI does not name a command")
    values = parse_qs(parts.query).get(PAYLOAD_QUERY_KEY) or []
    if not values or not values[0]:
        raise TriggerError(f"Trigger URI is missing the '{PAYLOAD_QUERY_KEY}' parameter")
    return TriggerRequest(command=command, payload_path=Path(values[0]))


def encode_payload(payload: ActionPayload) -> str:
    """Return the payload as JSON text that is guaranteed to encode as UTF-8.

    Paths holding undecodable file-name bytes (lone surrogates) are rejected
    here rather than when the file is written.
    """

    try:
        body = json.dumps(payload.to_payload(), ensure_ascii=False, allow_nan=False)
        body.encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Unable to encode action payload: {exc}") from exc
    return body


def write_payload(payload: ActionPayload, path: Path | str) -> Path:
    """Serialize ``payload`` and atomically replace the file at ``path``."""

    body = encode_payload(payload)
    try:
        return write_text(path, body)
    except (OSError, UnicodeError) as exc:
        raise AtomicWriteError(path, str(exc)) from exc


def read_payload(path: Path | str) -> ActionPayload:
    try:
        decoded = json.loads(read_text(path))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise SerializationError(f"Payload file {path} is not valid JSON: {exc}") from exc
    if not isinstance(decoded, dict):
        raise SerializationError(f"Payload file {path} must contain a JSON object")
    return ActionPayload.from_payload(decoded)
