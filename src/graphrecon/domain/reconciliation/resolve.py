"""Resolution of link endpoints to persisted entities.

A link proposal names its source and target by temporary id. Before the link
can be written, both ids must resolve to entities that exist in the graph:
created, found as update candidates or unchanged in this run, or supplied by
an earlier phase of the workflow. When an endpoint does not resolve, the
failure reason says why, quoting the endpoint's own failure if it has one.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from graphrecon.domain.model import LinkData

if TYPE_CHECKING:
    from graphrecon.domain.model import (
        Entity,
        InferenceState,
        ProposedEntity,
        TemporaryId,
    )

    from .arena import ProposalIndex
    from .contracts import EntityStatusMap


class EndpointRole(StrEnum):
    SOURCE = "source"
    TARGET = "target"


@dataclass(slots=True, frozen=True, kw_only=True)
class ResolutionFailure:
    reason: str
    role: EndpointRole | None = None
    temporary_id: TemporaryId | None = None


@dataclass(slots=True, frozen=True, kw_only=True)
class ResolvedEndpoints:
    source: Entity
    target: Entity

    @property
    def link_data(self) -> LinkData:
        return LinkData(
            left_entity_id=self.source.entity_id,
            right_entity_id=self.target.entity_id,
        )


def missing_endpoints_reason(
    proposed_entity: ProposedEntity,
    inference_state: InferenceState,
) -> str:
    reason = "Link entities must have both a sourceEntityId and a targetEntityId."
    original = inference_state.summary_for(proposed_entity.temporary_id)
    if original is None:
        return reason
    source = "" if original.source_entity_id is None else original.source_entity_id
    target = "" if original.target_entity_id is None else original.target_entity_id
    return (
        f"{reason}You originally proposed that entityId {proposed_entity.temporary_id} "
        f"should have sourceEntityId {source} and targetEntityId {target}."
    )


def resolve_endpoint(
    temporary_id: TemporaryId,
    *,
    role: EndpointRole,
    status_map: EntityStatusMap,
    proposals: ProposalIndex,
    inference_state: InferenceState,
) -> Entity | ResolutionFailure:
    entity = status_map.find_persisted_entity(
        temporary_id,
        prior_results=inference_state.results_by_temporary_id,
    )
    if entity is not None:
        return entity

    failure = status_map.failure_for(temporary_id)
    if failure is not None:
        return ResolutionFailure(
            role=role,
            temporary_id=temporary_id,
            reason=(
                f"Link entity could not be created – {role} with temporary id {temporary_id} "
                f"failed to be created with reason: {failure.failure_reason}"
            ),
        )

    # Reachable for a well-formed batch only if an endpoint is itself a link,
    # which the two-phase schedule does not support.
    if temporary_id in proposals:
        reason = (
            f"{role} with temporaryId {temporary_id} was proposed but not created, "
            "and no creation error is recorded"
        )
    else:
        reason = f"{role} with temporaryId {temporary_id} not found in proposed entities"
    return ResolutionFailure(role=role, temporary_id=temporary_id, reason=reason)


def resolve_link_endpoints(
    proposed_entity: ProposedEntity,
    *,
    status_map: EntityStatusMap,
    proposals: ProposalIndex,
    inference_state: InferenceState,
) -> ResolvedEndpoints | ResolutionFailure:
    """Resolve source then target; the first failing side decides the reason."""

    source_id = proposed_entity.source_entity_id
    target_id = proposed_entity.target_entity_id
    if source_id is None or target_id is None:
        return ResolutionFailure(reason=missing_endpoints_reason(proposed_entity, inference_state))

    source = resolve_endpoint(
        source_id,
        role=EndpointRole.SOURCE,
        status_map=status_map,
        proposals=proposals,
        inference_state=inference_state,
    )
    if isinstance(source, ResolutionFailure):
        return source

    target = resolve_endpoint(
        target_id,
        role=EndpointRole.TARGET,
        status_map=status_map,
        proposals=proposals,
        inference_state=inference_state,
    )
    if isinstance(target, ResolutionFailure):
        return target

    return ResolvedEndpoints(source=source, target=target)
