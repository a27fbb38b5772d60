"""Collaborator bundle injected into the return-notification use-case."""

from __future__ import annotations

from dataclasses import dataclass

from ..domain.entities import status_name
from ..types import (
    LookupEntityFn,
    PermittedEmailsFn,
    RenderPhraseFn,
    ResellerEmailFromFn,
    SendMessagesFn,
    SendSMSFn,
    StatusNameFn,
)


@dataclass(frozen=True)
class NotificationPorts:
    lookup_entity: LookupEntityFn
    render_phrase: RenderPhraseFn
    reseller_email_from: ResellerEmailFromFn
    permitted_emails: PermittedEmailsFn
    send_messages: SendMessagesFn
    send_sms: SendSMSFn
    status_name: StatusNameFn = status_name
