"""Port for the external graph storage API."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from graphrecon.domain.model import (
        AccountId,
        Entity,
        EntityMetadata,
        EntityRelationship,
        LinkData,
        OwnedById,
        PropertyObject,
        RequestedEntityType,
        VersionedUrl,
    )

type QueryFilter = Mapping[str, object]
type TemporalAxes = Mapping[str, object]
type LogSink = Callable[[str], None]


@runtime_checkable
class GraphApi(Protocol):
    """Operations reconciliation needs from the graph store.

    Every method is a suspension point. Failures are raised as exceptions whose
    message is fit to show a user.
    """

    async def validate_entity(
        self,
        actor_id: AccountId,
        *,
        entity_type_id: VersionedUrl,
        properties: PropertyObject,
        link_data: LinkData | None = None,
        draft: bool = False,
        operations: Sequence[str] = ("all",),
    ) -> None: ...

    async def create_entity(
        self,
        actor_id: AccountId,
        *,
        entity_type_id: VersionedUrl,
        owned_by_id: OwnedById,
        properties: PropertyObject,
        link_data: LinkData | None = None,
        draft: bool = False,
        relationships: Sequence[EntityRelationship] = (),
    ) -> EntityMetadata: ...

    async def query_entities(
        self,
        actor_id: AccountId,
        *,
        filter: QueryFilter,  # noqa: A002
        temporal_axes: TemporalAxes,
        include_drafts: bool = False,
    ) -> list[Entity]: ...

    async def get_entity_type(
        self,
        actor_id: AccountId,
        *,
        entity_type_id: VersionedUrl,
    ) -> RequestedEntityType: ...
