"""Payload decoding, dispatched on the LOG_TYPE tag.

Each line's payload is JSON whose shape depends on the log type:

  1. type contains 'NOT.COLLECTED'     → {"Payload": "..."}
  2. type contains 'ErrorsAndWarnings' → {"Error", "Operation", "AppID", "UpdateID", "ErrorCode"}
  3. anything else                     → generic key/value object
  4. undecodable                       → raw text

decode_payload() never raises; failures become RawPayload.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

SEPARATOR = " | "


@dataclass(frozen=True)
class NotCollectedPayload:
    payload: str | None = None

    def to_message(self) -> str:
        return self.payload or ""


@dataclass(frozen=True)
class ErrorReportPayload:
    error: str | None = None
    operation: str | None = None
    app_id: str | None = None
    update_id: str | None = None
    error_code: str | None = None

    def to_message(self) -> str:
        parts = []
        if self.error is not None:
            parts.append(self.error)
        if self.operation is not None:
            parts.append(f"[{self.operation}]")
        if self.app_id is not None:
            parts.append(f"App: {self.app_id}")
        if self.error_code is not None:
            parts.append(f"Code: {self.error_code}")
        return SEPARATOR.join(parts)


@dataclass(frozen=True)
class KeyValuePayload:
    items: dict[str, Any] = field(default_factory=dict)

    def to_message(self) -> str:
        return SEPARATOR.join(
            f"{_format_key(k)}: {_format_value(v)}" for k, v in self.items.items()
        )


@dataclass(frozen=True)
class RawPayload:
    text: str

    def to_message(self) -> str:
        return self.text


Payload = NotCollectedPayload | ErrorReportPayload | KeyValuePayload | RawPayload


def _format_key(key: str) -> str:
    """'update_base_version' → 'Update Base Version', 'retry-count' → 'Retry-Count'."""
    return "".join(part.capitalize() for part in re.split(r"(\W)", key.replace("_", " ")))


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _load_object(text: str) -> dict[str, Any] | None:
    try:
        data = json.loads(text)
    except (ValueError, RecursionError, TypeError):
        return None
    if not isinstance(data, dict):
        return None
    return data


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    """Fetch an optional string field; a non-string value is a shape mismatch."""
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"{key} is {type(value).__name__}, expected string")
    return value


def _decode_not_collected(text: str) -> Payload:
    data = _load_object(text)
    if data is None:
        return RawPayload(text)
    try:
        return NotCollectedPayload(payload=_optional_str(data, "Payload"))
    except TypeError as e:
        logger.debug("NOT.COLLECTED payload mismatch: %s", e)
        return RawPayload(text)


def _decode_error_report(text: str) -> Payload:
    data = _load_object(text)
    if data is None:
        return RawPayload(text)
    try:
        return ErrorReportPayload(
            error=_optional_str(data, "Error"),
            operation=_optional_str(data, "Operation"),
            app_id=_optional_str(data, "AppID"),
            update_id=_optional_str(data, "UpdateID"),
            error_code=_optional_str(data, "ErrorCode"),
        )
    except TypeError as e:
        logger.debug("ErrorsAndWarnings payload mismatch: %s", e)
        return RawPayload(text)


def _decode_key_value(text: str) -> Payload:
    data = _load_object(text)
    if data is None:
        return RawPayload(text)
    return KeyValuePayload(items=data)


def decode_payload(log_type: str, text: str) -> Payload:
    """Decode *text* into the payload variant selected by *log_type*."""
    if "NOT.COLLECTED" in log_type:
        return _decode_not_collected(text)
    if "ErrorsAndWarnings" in log_type:
        return _decode_error_report(text)
    return _decode_key_value(text)
