"""Loose value checks shared by the domain modules.

Request payloads arrive untyped, so "empty" is deliberately broad:
None, False, 0, 0.0, blank strings, "0" and empty containers all count.
"""

from __future__ import annotations

from typing import Any, Mapping


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, bool):
        return not value
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, str):
        text = value.strip()
        return not text or text == "0"
    if isinstance(value, (Mapping, list, tuple, set, frozenset)):
        return len(value) == 0
    return False


def as_int(value: Any) -> int:
    """Coerce an integer-like request value, raising ValueError otherwise."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            return int(float(text))
    raise ValueError(f"Not an integer value: {value!r}")


def as_int_or_zero(value: Any) -> int:
    try:
        return as_int(value)
    except (TypeError, ValueError, OverflowError):
        return 0
