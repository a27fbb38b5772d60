"""In-memory directory adapter.

Implements the entity lookup, reseller sender address and permitted
recipient ports from plain dictionaries. The JSON layout is::

    {
      "sellers": [{"id": 5, "name": "...", "email_from": "...",
                   "permits": {"tsGoodsReturn": ["a@example.com"]}}],
      "contractors": [{"id": 10, "type": 0, "name": "...", "seller_id": 5,
                       "email": "...", "mobile": "+1..."}],
      "employees": [{"id": 20, "name": "..."}]
    }
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

from ..domain.entities import CONTRACTOR_TYPE_CUSTOMER, Entity, EntityKind

_SECTIONS = {
    "sellers": EntityKind.SELLER,
    "contractors": EntityKind.CONTRACTOR,
    "employees": EntityKind.EMPLOYEE,
}


class InMemoryDirectory:
    def __init__(
        self,
        entities: Iterable[Entity] = (),
        *,
        reseller_emails: Mapping[int, str] | None = None,
        permits: Mapping[int, Mapping[str, Sequence[str]]] | None = None,
    ) -> None:
        self._entities: dict[tuple[str, int], Entity] = {}
        for entity in entities:
            self.add(entity)
        self._reseller_emails = dict(reseller_emails or {})
        self._permits = {
            reseller_id: {event: list(emails) for event, emails in by_event.items()}
            for reseller_id, by_event in (permits or {}).items()
        }

    def add(self, entity: Entity) -> None:
        self._entities[(str(entity.kind), entity.id)] = entity

    def lookup_entity(self, kind: str, entity_id: int) -> Entity | None:
        return self._entities.get((str(kind), entity_id))

    def reseller_email_from(self, reseller_id: int) -> str:
        return self._reseller_emails.get(reseller_id, "")

    def permitted_emails(self, reseller_id: int, event: str) -> list[str]:
        return list(self._permits.get(reseller_id, {}).get(event, []))

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "InMemoryDirectory":
        entities: list[Entity] = []
        reseller_emails: dict[int, str] = {}
        permits: dict[int, dict[str, list[str]]] = {}

        for section, kind in _SECTIONS.items():
            for item in raw.get(section, []) or []:
                entity = _entity_from_dict(kind, item)
                entities.append(entity)
                if kind == EntityKind.SELLER:
                    if item.get("email_from"):
                        reseller_emails[entity.id] = str(item["email_from"])
                    permits[entity.id] = {
                        str(event): [str(email) for email in emails]
                        for event, emails in (item.get("permits") or {}).items()
                    }

        return cls(entities, reseller_emails=reseller_emails, permits=permits)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "InMemoryDirectory":
        with Path(path).open("r", encoding="utf-8") as file_handle:
            raw = json.load(file_handle)
        if not isinstance(raw, dict):
            raise ValueError(f"Directory file must hold a JSON object: {path}")
        return cls.from_dict(raw)


def _entity_from_dict(kind: EntityKind, item: Mapping[str, Any]) -> Entity:
    seller_id = item.get("seller_id")
    return Entity(
        id=int(item["id"]),
        kind=kind,
        name=str(item.get("name", "")),
        type=int(item.get("type", CONTRACTOR_TYPE_CUSTOMER)),
        seller_id=int(seller_id) if seller_id is not None else None,
        email=item.get("email"),
        mobile=item.get("mobile"),
    )
