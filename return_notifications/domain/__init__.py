"""Domain layer: request rules, entities, template data and channel logic."""

from .email import send_client_email_notification, send_employee_email_notifications
from .entities import (
    CONTRACTOR_TYPE_CUSTOMER,
    Entity,
    EntityKind,
    NotificationEvents,
    NotificationType,
    status_name,
)
from .request import differences_target, validate_request
from .resolver import ResolvedEntities, resolve_entities
from .sms import send_client_sms_notification
from .template import build_template_data, determine_differences, validate_template_data

__all__ = [
    "CONTRACTOR_TYPE_CUSTOMER",
    "Entity",
    "EntityKind",
    "NotificationEvents",
    "NotificationType",
    "ResolvedEntities",
    "build_template_data",
    "determine_differences",
    "differences_target",
    "resolve_entities",
    "send_client_email_notification",
    "send_client_sms_notification",
    "send_employee_email_notifications",
    "status_name",
    "validate_request",
    "validate_template_data",
]
