"""Business entities, enumerations and lookup tables for goods returns."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, StrEnum

CONTRACTOR_TYPE_CUSTOMER = 0


class NotificationType(IntEnum):
    NEW = 1
    CHANGE = 2


class EntityKind(StrEnum):
    SELLER = "seller"
    CONTRACTOR = "contractor"
    EMPLOYEE = "employee"


class NotificationEvents:
    CHANGE_RETURN_STATUS = "changeReturnStatus"

    # Permission key used to find employees subscribed to goods-return mail.
    GOODS_RETURN_PERMIT = "tsGoodsReturn"


@dataclass(frozen=True)
class Entity:
    """One shape for sellers, contractors and employees, tagged by `kind`."""

    id: int
    kind: str
    name: str = ""
    type: int = CONTRACTOR_TYPE_CUSTOMER
    seller_id: int | None = None
    email: str | None = None
    mobile: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.id}".strip()

    def is_customer_of(self, reseller_id: int) -> bool:
        return self.type == CONTRACTOR_TYPE_CUSTOMER and self.seller_id == reseller_id


STATUS_NAMES = {
    0: "Completed",
    1: "Pending",
    2: "Rejected",
}


def status_name(code: int) -> str:
    return STATUS_NAMES.get(code, "Unknown")
