"""Caller-supplied proposals and the inference state they come from."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .entity import Entity
    from .entity_type import RequestedEntityType
    from .identifiers import PropertyObject, TemporaryId, VersionedUrl


@dataclass(slots=True, kw_only=True)
class ProposedEntity:
    """A candidate entity (or link) awaiting reconciliation.

    ``temporary_id`` is unique within a batch and is how links refer to their
    endpoints before anything is persisted. ``properties`` is the one field the
    engine may rewrite, when the target type declares no properties.
    """

    temporary_id: TemporaryId
    entity_type_id: VersionedUrl
    properties: PropertyObject | None = None
    source_entity_id: TemporaryId | None = None
    target_entity_id: TemporaryId | None = None

    @property
    def has_link_endpoints(self) -> bool:
        return self.source_entity_id is not None and self.target_entity_id is not None


@dataclass(slots=True, frozen=True, kw_only=True)
class ProposedEntitySummary:
    """What the inference step first claimed about an entity, before validation."""

    temporary_id: TemporaryId
    entity_type_id: VersionedUrl
    summary: str | None = None
    source_entity_id: TemporaryId | None = None
    target_entity_id: TemporaryId | None = None


type ProposedEntitiesByType = dict[VersionedUrl, list[ProposedEntity]]


@dataclass(slots=True, kw_only=True)
class InferenceState:
    """State carried over from earlier phases of an inference workflow."""

    proposed_entity_summaries: list[ProposedEntitySummary] = field(
        default_factory=list["ProposedEntitySummary"]
    )
    results_by_temporary_id: dict[TemporaryId, Entity] = field(
        default_factory=dict["TemporaryId", "Entity"]
    )

    def summary_for(self, temporary_id: TemporaryId) -> ProposedEntitySummary | None:
        for summary in self.proposed_entity_summaries:
            if summary.temporary_id == temporary_id:
                return summary
        return None


@dataclass(slots=True, kw_only=True)
class ProposalBatch:
    """Everything one reconciliation run needs besides the graph itself.

    ``requested_entity_types`` may lack types that still have to be fetched.
    """

    proposed_entities_by_type: ProposedEntitiesByType
    requested_entity_types: dict[VersionedUrl, RequestedEntityType] = field(
        default_factory=dict["VersionedUrl", "RequestedEntityType"]
    )
    inference_state: InferenceState = field(default_factory=InferenceState)

    def missing_entity_type_ids(self) -> tuple[VersionedUrl, ...]:
        return tuple(
            entity_type_id
            for entity_type_id in self.proposed_entities_by_type
            if entity_type_id not in self.requested_entity_types
        )
