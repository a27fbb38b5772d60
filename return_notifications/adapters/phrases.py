"""Default phrase catalog used as the `render_phrase` port.

Placeholders are written as `{KEY}` and filled from the params mapping;
placeholders without a value are left in place. Unknown phrase keys render
as the key itself so a missing translation is visible, not fatal.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

_PLACEHOLDER = re.compile(r"\{([A-Z_]+)\}")

DEFAULT_PHRASES = {
    "NewPositionAdded": "New position added",
    "PositionStatusHasChanged": "Position status has changed from {FROM} to {TO}",
    "complaintEmployeeEmailSubject": "Complaint {COMPLAINT_NUMBER}: goods return update",
    "complaintEmployeeEmailBody": (
        "Complaint {COMPLAINT_NUMBER} (id {COMPLAINT_ID}) for client {CLIENT_NAME}.\n"
        "Consumption {CONSUMPTION_NUMBER}, agreement {AGREEMENT_NUMBER}, date {DATE}.\n"
        "Created by {CREATOR_NAME}, expert {EXPERT_NAME}.\n"
        "{DIFFERENCES}"
    ),
    "complaintClientEmailSubject": "Your complaint {COMPLAINT_NUMBER} was updated",
    "complaintClientEmailBody": (
        "Dear {CLIENT_NAME},\n"
        "{DIFFERENCES} for complaint {COMPLAINT_NUMBER} dated {DATE}."
    ),
    "complaintClientSmsBody": "Complaint {COMPLAINT_NUMBER}: {DIFFERENCES}",
}


class PhraseCatalog:
    def __init__(
        self,
        phrases: Mapping[str, str] | None = None,
        *,
        reseller_overrides: Mapping[int, Mapping[str, str]] | None = None,
    ) -> None:
        self._phrases = dict(DEFAULT_PHRASES if phrases is None else phrases)
        self._overrides = {
            reseller_id: dict(by_key) for reseller_id, by_key in (reseller_overrides or {}).items()
        }

    def render(
        self,
        key: str,
        params: Mapping[str, Any] | None = None,
        reseller_id: int | None = None,
    ) -> str:
        phrase = self._overrides.get(reseller_id, {}).get(key) or self._phrases.get(key, key)
        if not params:
            return phrase
        return _PLACEHOLDER.sub(lambda match: _fill(match, params), phrase)

    __call__ = render


def _fill(match: re.Match[str], params: Mapping[str, Any]) -> str:
    name = match.group(1)
    if name not in params or params[name] is None:
        return match.group(0)
    return str(params[name])
