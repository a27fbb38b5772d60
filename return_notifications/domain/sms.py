"""SMS channel decision logic.

The SMS collaborator owns message rendering and delivery; this module only
decides whether the client can be reached and normalizes what comes back.
"""

from __future__ import annotations

from ..types import ChannelResult, SendSMSFn, TemplateData
from .entities import Entity
from .values import is_empty


def send_client_sms_notification(
    *,
    reseller_id: int,
    client: Entity,
    template_data: TemplateData,
    event: str,
    send_sms: SendSMSFn,
) -> ChannelResult:
    """Run SMS-channel rules and return a plain channel result dictionary."""
    if is_empty(client.mobile):
        return {"channel": "client_sms", "requested": False, "success": False, "error": None}

    try:
        sent, error = send_sms(
            reseller_id=reseller_id,
            client_id=client.id,
            event=event,
            template_data=template_data,
        )
    except Exception as exc:
        return {"channel": "client_sms", "requested": True, "success": False, "error": str(exc)}

    return {
        "channel": "client_sms",
        "requested": True,
        "success": bool(sent),
        "error": error or None,
    }
