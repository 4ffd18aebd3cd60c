"""Writing new entities to the graph.

Each entity is validated against its type before it is created, and every
created entity carries ``DEFAULT_RELATIONSHIPS``. No retries happen here; one
failed attempt is final for the run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from graphrecon.domain.model import DEFAULT_RELATIONSHIPS, Entity

if TYPE_CHECKING:
    from graphrecon.domain.model import (
        AccountId,
        LinkData,
        OwnedById,
        PropertyObject,
        VersionedUrl,
    )
    from graphrecon.domain.ports import GraphApi


def error_message(exc: BaseException) -> str:
    """The message of ``exc`` as a user would want to read it."""

    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or type(exc).__name__


def failure_reason_from(exc: BaseException) -> str:
    return f"{error_message(exc)}."


async def create_entity(
    graph_api: GraphApi,
    *,
    actor_id: AccountId,
    owned_by_id: OwnedById,
    entity_type_id: VersionedUrl,
    properties: PropertyObject,
    link_data: LinkData | None = None,
    draft: bool = False,
) -> Entity:
    await graph_api.validate_entity(
        actor_id,
        entity_type_id=entity_type_id,
        properties=properties,
        link_data=link_data,
        draft=draft,
        operations=("all",),
    )
    metadata = await graph_api.create_entity(
        actor_id,
        entity_type_id=entity_type_id,
        owned_by_id=owned_by_id,
        properties=properties,
        link_data=link_data,
        draft=draft,
        relationships=DEFAULT_RELATIONSHIPS,
    )
    return Entity(metadata=metadata, properties=properties, link_data=link_data)
