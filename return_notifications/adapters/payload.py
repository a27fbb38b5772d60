"""Payload adapter functions.

Mental model refresher:
- This is an adapter/edge module.
- It translates transport-shaped data (an HTTP form `data` parameter or a
  Kafka message value) into the plain request mapping the use-case expects.
- It sanitizes text the way a special-chars input filter does, but it does
  not validate business fields; that is the request validator's job.
"""

from __future__ import annotations

from typing import Any, Mapping

from ..types import Request, RequestDict

_SPECIAL_CHARS = {ord(char): f"&#{ord(char)};" for char in "&\"'<>"}
_SPECIAL_CHARS.update({code: f"&#{code};" for code in range(32)})


def parse_request_payload(payload: Request) -> RequestDict:
    """Return the sanitized `data` member of an incoming request.

    Payloads without a `data` key are treated as the data itself.
    """
    if not isinstance(payload, Mapping):
        raise ValueError("request payload must be a mapping")

    data = payload.get("data", payload)
    if not isinstance(data, Mapping):
        raise ValueError("request data must be a mapping")

    return {str(key): sanitize_value(value) for key, value in data.items()}


def sanitize_value(value: Any) -> Any:
    if isinstance(value, str):
        return value.translate(_SPECIAL_CHARS)
    if isinstance(value, Mapping):
        return {str(key): sanitize_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [sanitize_value(item) for item in value]
    return value
