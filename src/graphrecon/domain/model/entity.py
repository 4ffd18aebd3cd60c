"""Persisted graph entities as returned by the storage API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .identifiers import extract_entity_uuid, extract_owned_by_id

if TYPE_CHECKING:
    from .identifiers import EntityId, EntityUuid, OwnedById, PropertyObject, VersionedUrl


@dataclass(slots=True, frozen=True, kw_only=True)
class EntityRecordId:
    entity_id: EntityId
    edition_id: str


@dataclass(slots=True, frozen=True, kw_only=True)
class EntityMetadata:
    record_id: EntityRecordId
    entity_type_id: VersionedUrl
    archived: bool = False
    draft: bool = False

    @property
    def owned_by_id(self) -> OwnedById:
        return extract_owned_by_id(self.record_id.entity_id)

    @property
    def entity_uuid(self) -> EntityUuid:
        return extract_entity_uuid(self.record_id.entity_id)


@dataclass(slots=True, frozen=True, kw_only=True)
class LinkData:
    """Endpoints of a link entity, as persisted entity ids."""

    left_entity_id: EntityId
    right_entity_id: EntityId


@dataclass(slots=True, kw_only=True)
class Entity:
    """An entity that exists in the graph.

    Only its identity and property bag matter to reconciliation.
    """

    metadata: EntityMetadata
    properties: PropertyObject = field(default_factory=dict["str", "object"])
    link_data: LinkData | None = None

    @property
    def entity_id(self) -> EntityId:
        return self.metadata.record_id.entity_id
