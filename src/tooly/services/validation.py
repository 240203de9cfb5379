"""Decoding and JSON-Schema validation for the settings file."""

from __future__ import annotations

import json
from json import JSONDecodeError
from pathlib import Path
from typing import Any, Iterable, Sequence

import jsonschema

from ..core.errors import ConfigParseError
from ..core.models import ActionType

__all__ = [
    "MAX_SCHEMA_ERRORS",
    "SETTINGS_SCHEMA",
    "DuplicateJSONKeyError",
    "decode_settings_text",
    "validate_settings_payload",
    "parse_settings_text",
]

MAX_SCHEMA_ERRORS = 25

_ICON_PROPERTIES: dict[str, Any] = {
    "iconType": {"type": "string"},
    "icon": {"type": "string"},
}

SETTINGS_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["order", "items"],
    "properties": {
        "order": {"type": "array", "items": {"type": "string"}},
        "separators": {"type": "boolean"},
        "groups": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "properties": dict(_ICON_PROPERTIES),
            },
        },
        "items": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "required": ["actionType", "action"],
                "properties": {
                    **_ICON_PROPERTIES,
                    "group": {"type": "string"},
                    "targetType": {"type": "string"},
                    "actionType": {"enum": list(ActionType.values())},
                    "action": {"type": "string"},
                    "key": {"type": "string"},
                    "enabled": {"type": "boolean"},
                },
            },
        },
    },
}


class DuplicateJSONKeyError(ValueError):
    """Raised when a duplicate key is encountered during JSON parsing."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Duplicate key '{key}' found in JSON object.")
        self.key = key


def decode_settings_text(text: str, *, path: Path | str | None = None) -> dict[str, Any]:
    """Decode settings JSON, rejecting duplicate keys and non-object documents."""

    try:
        parsed = json.loads(text, object_pairs_hook=_no_duplicate_keys)
    except DuplicateJSONKeyError as exc:
        raise ConfigParseError(path, str(exc)) from exc
    except JSONDecodeError as exc:
        raise ConfigParseError(path, _format_json_decode_message(exc)) from exc

    if not isinstance(parsed, dict):
        raise ConfigParseError(path, "Settings document must be a JSON object.")
    return parsed


def validate_settings_payload(payload: Any) -> list[str]:
    """Validate a decoded settings document and return readable problems."""

    validator = jsonschema.Draft202012Validator(SETTINGS_SCHEMA)
    problems: list[str] = []
    issues = sorted(
        validator.iter_errors(payload),
        key=lambda error: [str(token) for token in error.absolute_path],
    )
    for issue in issues:
        location = _format_schema_path(issue.absolute_path)
        problems.append(f"{location}: {issue.message}" if location else issue.message)
        if len(problems) >= MAX_SCHEMA_ERRORS:
            problems.append("Too many validation errors; stopping early.")
            break
    return problems


def parse_settings_text(text: str, *, path: Path | str | None = None) -> dict[str, Any]:
    """Decode and validate settings text, raising :class:`ConfigParseError` on any problem."""

    payload = decode_settings_text(text, path=path)
    problems = validate_settings_payload(payload)
    if problems:
        raise ConfigParseError(
            path,
            f"Settings failed validation ({len(problems)} problem(s)): {problems[0]}",
            problems=tuple(problems),
        )
    return payload


def _no_duplicate_keys(pairs: Iterable[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise DuplicateJSONKeyError(key)
        result[key] = value
    return result


def _format_json_decode_message(exc: JSONDecodeError) -> str:
    lines = exc.doc.splitlines() if exc.doc else []
    snippet = lines[exc.lineno - 1].strip() if 0 < exc.lineno <= len(lines) else ""
    detail = exc.msg
    if snippet:
        return f"{detail} (line {exc.lineno}, column {exc.colno}): {snippet}"
    return f"{detail} (line {exc.lineno}, column {exc.colno})"


def _format_schema_path(path: Sequence[Any]) -> str:
    if not path:
        return ""
    parts: list[str] = []
    for token in path:
        if isinstance(token, int):
            parts.append(f"[{token}]")
        elif parts:
            parts.append(f".{token}")
        else:
            parts.append(str(token))
    return "".join(parts)
