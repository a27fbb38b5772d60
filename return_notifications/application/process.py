"""Application orchestration for the goods-return status notification.

Mental model refresher:
- Application layer coordinates use-case flow across domain modules.
- In this project it:
  1) validates the request and resolves entities (fail fast)
  2) builds and validates template data (fail fast)
  3) calls employee email, then client email and SMS domain logic
  4) folds channel results into one notification result
- Nothing is sent until every validation step has passed. After that,
  channel failures are reported in the result and never raised.
"""

from __future__ import annotations

from ..domain.email import send_client_email_notification, send_employee_email_notifications
from ..domain.entities import Entity, NotificationEvents, NotificationType
from ..domain.request import differences_target, validate_request
from ..domain.resolver import resolve_entities
from ..domain.sms import send_client_sms_notification
from ..domain.template import build_template_data, validate_template_data
from ..domain.values import is_empty
from ..types import ChannelResult, NotificationResult, Request, TemplateData
from .ports import NotificationPorts


def do_return_operation(payload: Request, ports: NotificationPorts) -> NotificationResult:
    """Run the status-change notification for one request payload."""
    request = validate_request(payload)
    reseller_id = request["resellerId"]
    notification_type = request["notificationType"]

    result = new_notification_result()

    entities = resolve_entities(request, ports.lookup_entity)

    template_data = build_template_data(
        request,
        client=entities.client,
        creator=entities.creator,
        expert=entities.expert,
        reseller_id=reseller_id,
        notification_type=notification_type,
        render_phrase=ports.render_phrase,
        status_name=ports.status_name,
    )
    validate_template_data(template_data)

    dispatch_notifications(
        request,
        notification_type=notification_type,
        reseller_id=reseller_id,
        client=entities.client,
        template_data=template_data,
        result=result,
        ports=ports,
    )
    return result


def new_notification_result() -> NotificationResult:
    return {
        "notificationEmployeeByEmail": False,
        "notificationClientByEmail": False,
        "notificationClientBySms": {
            "isSent": False,
            "message": "",
        },
    }


def dispatch_notifications(
    request: Request,
    *,
    notification_type: int,
    reseller_id: int,
    client: Entity,
    template_data: TemplateData,
    result: NotificationResult,
    ports: NotificationPorts,
) -> list[ChannelResult]:
    """Send every applicable notification and record outcomes in `result`.

    Employee mail always runs first. Client email and SMS run only for
    status changes that carry a target status. Never raises: every channel
    reports its own failure.
    """
    employee_result = send_employee_email_notifications(
        reseller_id=reseller_id,
        template_data=template_data,
        event=NotificationEvents.CHANGE_RETURN_STATUS,
        reseller_email_from=ports.reseller_email_from,
        permitted_emails=ports.permitted_emails,
        render_phrase=ports.render_phrase,
        send_messages=ports.send_messages,
    )
    if employee_result["success"]:
        result["notificationEmployeeByEmail"] = True
    channel_results = [employee_result]

    if notification_type != NotificationType.CHANGE or is_empty(differences_target(request)):
        return channel_results

    client_email_result = send_client_email_notification(
        reseller_id=reseller_id,
        client=client,
        template_data=template_data,
        event=NotificationEvents.CHANGE_RETURN_STATUS,
        reseller_email_from=ports.reseller_email_from,
        render_phrase=ports.render_phrase,
        send_messages=ports.send_messages,
    )
    if client_email_result["success"]:
        result["notificationClientByEmail"] = True

    sms_result = send_client_sms_notification(
        reseller_id=reseller_id,
        client=client,
        template_data=template_data,
        event=NotificationEvents.CHANGE_RETURN_STATUS,
        send_sms=ports.send_sms,
    )
    if sms_result["success"]:
        result["notificationClientBySms"]["isSent"] = True
    if sms_result["error"]:
        result["notificationClientBySms"]["message"] = sms_result["error"]

    channel_results.extend([client_email_result, sms_result])
    return channel_results
