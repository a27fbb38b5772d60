"""Goods-return complaint status notifications (employee email, client email and SMS)."""

from .adapters import (
    InMemoryDirectory,
    PhraseCatalog,
    TwilioSmsNotifier,
    build_ports_from_env,
    handle_batch,
    handle_message,
    parse_request_payload,
    publish_return_status_event,
    run_return_worker_forever,
    send_messages_via_console,
    send_messages_via_mailgun_from_env,
    send_sms_via_console,
    send_sms_via_twilio_from_env,
)
from .application.ports import NotificationPorts
from .application.process import do_return_operation, new_notification_result
from .domain.entities import Entity, EntityKind, NotificationEvents, NotificationType
from .errors import EntityNotFound, IncompleteTemplate, InvalidInput, OperationError

__all__ = [
    "Entity",
    "EntityKind",
    "EntityNotFound",
    "InMemoryDirectory",
    "IncompleteTemplate",
    "InvalidInput",
    "NotificationEvents",
    "NotificationPorts",
    "NotificationType",
    "OperationError",
    "PhraseCatalog",
    "TwilioSmsNotifier",
    "build_ports_from_env",
    "do_return_operation",
    "handle_batch",
    "handle_message",
    "new_notification_result",
    "parse_request_payload",
    "publish_return_status_event",
    "run_return_worker_forever",
    "send_messages_via_console",
    "send_messages_via_mailgun_from_env",
    "send_sms_via_console",
    "send_sms_via_twilio_from_env",
]
