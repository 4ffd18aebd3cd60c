"""Domain model for entity reconciliation."""

from __future__ import annotations

from .entity import Entity, EntityMetadata, EntityRecordId, LinkData
from .entity_type import EntityTypeSchema, RequestedEntityType
from .identifiers import (
    AccountId,
    BaseUrl,
    EntityId,
    EntityUuid,
    OwnedById,
    PropertyObject,
    TemporaryId,
    VersionedUrl,
    entity_id_from,
    extract_entity_uuid,
    extract_owned_by_id,
    split_versioned_url,
)
from .proposals import (
    InferenceState,
    ProposalBatch,
    ProposedEntitiesByType,
    ProposedEntity,
    ProposedEntitySummary,
)
from .relationships import (
    DEFAULT_RELATIONSHIPS,
    EntityRelationship,
    EntityRelationSubject,
    RelationSubjectKind,
    WebSetting,
)

__all__ = [
    "DEFAULT_RELATIONSHIPS",
    "AccountId",
    "BaseUrl",
    "Entity",
    "EntityId",
    "EntityMetadata",
    "EntityRecordId",
    "EntityRelationSubject",
    "EntityRelationship",
    "EntityTypeSchema",
    "EntityUuid",
    "InferenceState",
    "LinkData",
    "OwnedById",
    "PropertyObject",
    "ProposalBatch",
    "ProposedEntitiesByType",
    "ProposedEntity",
    "ProposedEntitySummary",
    "RelationSubjectKind",
    "RequestedEntityType",
    "TemporaryId",
    "VersionedUrl",
    "WebSetting",
    "entity_id_from",
    "extract_entity_uuid",
    "extract_owned_by_id",
    "split_versioned_url",
]
