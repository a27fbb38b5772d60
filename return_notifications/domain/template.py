"""Template data assembly and validation.

Mental model refresher:
- The template is a flat, ordered mapping of placeholder -> value.
- It is built once per request and shared by every channel.
- Validation is a hard gate: one empty value aborts the whole operation
  before anything is sent.
"""

from __future__ import annotations

from typing import Mapping

from ..errors import IncompleteTemplate
from ..types import RenderPhraseFn, Request, StatusNameFn, TemplateData
from .entities import Entity, NotificationType
from .values import as_int_or_zero, is_empty

TEMPLATE_KEYS = (
    "COMPLAINT_ID",
    "COMPLAINT_NUMBER",
    "CREATOR_ID",
    "CREATOR_NAME",
    "EXPERT_ID",
    "EXPERT_NAME",
    "CLIENT_ID",
    "CLIENT_NAME",
    "CONSUMPTION_ID",
    "CONSUMPTION_NUMBER",
    "AGREEMENT_NUMBER",
    "DATE",
    "DIFFERENCES",
)


def build_template_data(
    request: Request,
    *,
    client: Entity,
    creator: Entity,
    expert: Entity,
    reseller_id: int,
    notification_type: int,
    render_phrase: RenderPhraseFn,
    status_name: StatusNameFn,
) -> TemplateData:
    """Assemble the placeholder mapping used by every message template."""
    client_name = client.full_name or client.name
    differences = determine_differences(
        notification_type,
        request,
        reseller_id,
        render_phrase=render_phrase,
        status_name=status_name,
    )

    return {
        "COMPLAINT_ID": request.get("complaintId"),
        "COMPLAINT_NUMBER": request.get("complaintNumber"),
        "CREATOR_ID": creator.id,
        "CREATOR_NAME": creator.full_name,
        "EXPERT_ID": expert.id,
        "EXPERT_NAME": expert.full_name,
        "CLIENT_ID": client.id,
        "CLIENT_NAME": client_name,
        "CONSUMPTION_ID": request.get("consumptionId"),
        "CONSUMPTION_NUMBER": request.get("consumptionNumber"),
        "AGREEMENT_NUMBER": request.get("agreementNumber"),
        "DATE": request.get("date"),
        "DIFFERENCES": differences,
    }


def determine_differences(
    notification_type: int,
    request: Request,
    reseller_id: int,
    *,
    render_phrase: RenderPhraseFn,
    status_name: StatusNameFn,
) -> str:
    """Describe what changed: a new position, a status move, or nothing."""
    if notification_type == NotificationType.NEW:
        return render_phrase("NewPositionAdded", None, reseller_id)

    differences = request.get("differences")
    if (
        notification_type == NotificationType.CHANGE
        and isinstance(differences, Mapping)
        and not is_empty(differences)
    ):
        params = {
            "FROM": status_name(as_int_or_zero(differences.get("from"))),
            "TO": status_name(as_int_or_zero(differences.get("to"))),
        }
        return render_phrase("PositionStatusHasChanged", params, reseller_id)

    return ""


def validate_template_data(template_data: TemplateData) -> None:
    """Raise IncompleteTemplate naming the first empty placeholder."""
    for key, value in template_data.items():
        if is_empty(value):
            raise IncompleteTemplate(key)
