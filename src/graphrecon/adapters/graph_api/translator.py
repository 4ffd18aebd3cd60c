"""Translation between graph API payloads and domain objects."""

from __future__ import annotations

from typing import TYPE_CHECKING

from graphrecon.domain.model import (
    Entity,
    EntityMetadata,
    EntityRecordId,
    EntityTypeSchema,
    InferenceState,
    LinkData,
    ProposalBatch,
    ProposedEntity,
    ProposedEntitySummary,
    RequestedEntityType,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from graphrecon.domain.model import EntityRelationship

    from .schema import (
        EntityMetadataPayload,
        EntityPayload,
        EntityTypePayload,
        LinkDataPayload,
        ProposalBatchPayload,
    )


def metadata_from_payload(payload: EntityMetadataPayload) -> EntityMetadata:
    return EntityMetadata(
        record_id=EntityRecordId(
            entity_id=payload.record_id.entity_id,
            edition_id=payload.record_id.edition_id,
        ),
        entity_type_id=payload.entity_type_id,
        archived=payload.archived,
        draft=payload.draft,
    )


def link_data_from_payload(payload: LinkDataPayload | None) -> LinkData | None:
    if payload is None:
        return None
    return LinkData(
        left_entity_id=payload.left_entity_id,
        right_entity_id=payload.right_entity_id,
    )


def entity_from_payload(payload: EntityPayload) -> Entity:
    return Entity(
        metadata=metadata_from_payload(payload.metadata),
        properties=dict(payload.properties),
        link_data=link_data_from_payload(payload.link_data),
    )


def entity_type_from_payload(payload: EntityTypePayload) -> RequestedEntityType:
    schema = payload.schema_
    return RequestedEntityType(
        schema=EntityTypeSchema(
            entity_type_id=schema.id,
            title=schema.title,
            description=schema.description,
            properties=dict(schema.properties),
        ),
        is_link=payload.is_link,
    )


def link_data_to_payload(link_data: LinkData) -> dict[str, str]:
    return {
        "leftEntityId": link_data.left_entity_id,
        "rightEntityId": link_data.right_entity_id,
    }


def relationships_to_payload(
    relationships: Sequence[EntityRelationship],
) -> list[dict[str, object]]:
    return [
        {
            "relation": relationship.relation,
            "subject": {
                "kind": str(relationship.subject.kind),
                "subjectId": relationship.subject.subject_id,
            },
        }
        for relationship in relationships
    ]


def proposal_batch_from_payload(payload: ProposalBatchPayload) -> ProposalBatch:
    proposed_entities_by_type = {
        entity_type_id: [
            ProposedEntity(
                temporary_id=proposal.entity_id,
                entity_type_id=entity_type_id,
                properties=None if proposal.properties is None else dict(proposal.properties),
                source_entity_id=proposal.source_entity_id,
                target_entity_id=proposal.target_entity_id,
            )
            for proposal in proposals
        ]
        for entity_type_id, proposals in payload.proposed_entities.items()
    }
    entity_types = (entity_type_from_payload(entity_type) for entity_type in payload.entity_types)
    inference_state = InferenceState(
        proposed_entity_summaries=[
            ProposedEntitySummary(
                temporary_id=summary.entity_id,
                entity_type_id=summary.entity_type_id,
                summary=summary.summary,
                source_entity_id=summary.source_entity_id,
                target_entity_id=summary.target_entity_id,
            )
            for summary in payload.proposed_entity_summaries
        ],
        results_by_temporary_id={
            temporary_id: entity_from_payload(entity)
            for temporary_id, entity in payload.prior_results.items()
        },
    )
    return ProposalBatch(
        proposed_entities_by_type=proposed_entities_by_type,
        requested_entity_types={
            entity_type.entity_type_id: entity_type for entity_type in entity_types
        },
        inference_state=inference_state,
    )
