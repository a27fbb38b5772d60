"""Entity resolution for one return notification."""

from __future__ import annotations

from typing import NamedTuple

from ..errors import EntityNotFound
from ..types import LookupEntityFn, Request
from .entities import Entity, EntityKind
from .values import as_int_or_zero


class ResolvedEntities(NamedTuple):
    reseller: Entity
    client: Entity
    creator: Entity
    expert: Entity


def resolve_entities(request: Request, lookup_entity: LookupEntityFn) -> ResolvedEntities:
    """Load the reseller, client, creator and expert named by `request`.

    The client must be a customer owned by the request's reseller; a foreign
    or non-customer client is reported the same way as a missing one.
    """
    reseller_id = request["resellerId"]

    reseller = load_entity(lookup_entity, EntityKind.SELLER, reseller_id, "Seller")
    client = load_entity(
        lookup_entity,
        EntityKind.CONTRACTOR,
        as_int_or_zero(request.get("clientId")),
        "Client",
    )
    if not client.is_customer_of(reseller_id):
        raise EntityNotFound("Client", "Client not found or does not belong to the reseller!")

    creator = load_entity(
        lookup_entity, EntityKind.EMPLOYEE, as_int_or_zero(request.get("creatorId")), "Creator"
    )
    expert = load_entity(
        lookup_entity, EntityKind.EMPLOYEE, as_int_or_zero(request.get("expertId")), "Expert"
    )
    return ResolvedEntities(reseller=reseller, client=client, creator=creator, expert=expert)


def load_entity(
    lookup_entity: LookupEntityFn,
    kind: EntityKind,
    entity_id: int,
    entity_name: str,
) -> Entity:
    entity = lookup_entity(kind, entity_id)
    if entity is None:
        raise EntityNotFound(entity_name)
    return entity
