"""Email channel decision logic.

Mental model refresher:
- Domain modules hold channel/business rules.
- They decide what should happen for this channel:
  - is this channel requested (are sender and recipients configured)?
  - what subject/body should be rendered?
- They do not look up entities or touch the notification result; they return
  a plain channel result dictionary and let the dispatcher fold it in.
- Nothing here raises. Sender/recipient lookups, rendering and sending all
  fail into the channel result.
"""

from __future__ import annotations

from ..types import (
    ChannelResult,
    EmailMessage,
    PermittedEmailsFn,
    RenderPhraseFn,
    ResellerEmailFromFn,
    SendMessagesFn,
    TemplateData,
)
from .entities import Entity, NotificationEvents
from .values import is_empty


def send_employee_email_notifications(
    *,
    reseller_id: int,
    template_data: TemplateData,
    event: str,
    reseller_email_from: ResellerEmailFromFn,
    permitted_emails: PermittedEmailsFn,
    render_phrase: RenderPhraseFn,
    send_messages: SendMessagesFn,
) -> ChannelResult:
    """Send one message per permitted employee address.

    `success` means at least one send was attempted; per-recipient
    transport errors are collected in `error`.
    """
    try:
        email_from = reseller_email_from(reseller_id)
        recipients = list(
            permitted_emails(reseller_id, NotificationEvents.GOODS_RETURN_PERMIT) or []
        )
    except Exception as exc:
        return _channel_result("employee_email", requested=True, success=False, error=str(exc))

    if is_empty(email_from) or is_empty(recipients):
        return _channel_result("employee_email", requested=False, success=False)

    try:
        subject = render_phrase("complaintEmployeeEmailSubject", template_data, reseller_id)
        body = render_phrase("complaintEmployeeEmailBody", template_data, reseller_id)
    except Exception as exc:
        return _channel_result("employee_email", requested=True, success=False, error=str(exc))

    attempted = 0
    sent = 0
    errors: list[str] = []
    for recipient in recipients:
        attempted += 1
        try:
            send_messages(
                [_email_message(email_from, recipient, subject, body)],
                reseller_id=reseller_id,
                event=event,
            )
        except Exception as exc:
            errors.append(f"{recipient}: {exc}")
            continue
        sent += 1

    result = _channel_result(
        "employee_email",
        requested=True,
        success=attempted > 0,
        error="; ".join(errors) or None,
    )
    result["sent"] = sent
    return result


def send_client_email_notification(
    *,
    reseller_id: int,
    client: Entity,
    template_data: TemplateData,
    event: str,
    reseller_email_from: ResellerEmailFromFn,
    render_phrase: RenderPhraseFn,
    send_messages: SendMessagesFn,
) -> ChannelResult:
    """Send the status-change message to the client's own address."""
    try:
        email_from = reseller_email_from(reseller_id)
    except Exception as exc:
        return _channel_result("client_email", requested=True, success=False, error=str(exc))

    if is_empty(email_from) or is_empty(client.email):
        return _channel_result("client_email", requested=False, success=False)

    try:
        message = _email_message(
            email_from,
            client.email,
            render_phrase("complaintClientEmailSubject", template_data, reseller_id),
            render_phrase("complaintClientEmailBody", template_data, reseller_id),
        )
        send_messages([message], reseller_id=reseller_id, client_id=client.id, event=event)
    except Exception as exc:
        return _channel_result("client_email", requested=True, success=False, error=str(exc))

    return _channel_result("client_email", requested=True, success=True)


def _email_message(email_from: str, email_to: str, subject: str, body: str) -> EmailMessage:
    return {
        "emailFrom": email_from,
        "emailTo": email_to,
        "subject": subject,
        "message": body,
    }


def _channel_result(
    channel: str,
    *,
    requested: bool,
    success: bool,
    error: str | None = None,
) -> ChannelResult:
    return {"channel": channel, "requested": requested, "success": success, "error": error}
