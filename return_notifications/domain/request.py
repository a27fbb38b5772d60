"""Request validation: the minimal checks made before anything is loaded.

Only `resellerId` and `notificationType` are checked and coerced here. Every
other field passes through untouched; missing values surface later, when the
template data is validated.
"""

from __future__ import annotations

from typing import Any, Mapping

from ..errors import InvalidInput
from ..types import Request, RequestDict
from .values import as_int, is_empty

MISSING_REQUIRED_MESSAGE = "Reseller ID or Notification Type is missing."


def validate_request(payload: Request) -> RequestDict:
    """Return a normalized copy of `payload` with integer id and type."""
    if not isinstance(payload, Mapping):
        raise InvalidInput("Request data must be a mapping.")

    data = dict(payload)
    if is_empty(data.get("resellerId")) or data.get("notificationType") is None:
        raise InvalidInput(MISSING_REQUIRED_MESSAGE)

    try:
        reseller_id = as_int(data["resellerId"])
        notification_type = as_int(data["notificationType"])
    except (TypeError, ValueError, OverflowError) as exc:
        raise InvalidInput(f"Reseller ID and Notification Type must be integers: {exc}") from exc

    if reseller_id == 0:
        raise InvalidInput(MISSING_REQUIRED_MESSAGE)

    data["resellerId"] = reseller_id
    data["notificationType"] = notification_type
    return data


def differences_target(request: Request) -> Any:
    """Return the `differences.to` status code, or None when absent."""
    differences = request.get("differences")
    if not isinstance(differences, Mapping):
        return None
    return differences.get("to")
