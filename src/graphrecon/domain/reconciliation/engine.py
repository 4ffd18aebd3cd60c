"""Orchestrator for reconciling a batch of proposed entities with the graph.

Scheduling is two-phase: every non-link proposal runs concurrently first,
and link proposals run concurrently only once that phase has drained. All link
endpoints are resolved between the two phases, against the non-link results,
so a link can never point at another link.

Each task writes only the status slot of its own temporary id, so the shared
``EntityStatusMap`` needs no locking.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from graphrecon.domain.model import InferenceState

from .arena import ProposalIndex
from .contracts import (
    CreationFailure,
    CreationSuccess,
    EntityStatusMap,
    MatchesExisting,
    UpdateCandidate,
)
from .deduplicate import find_duplicate, find_duplicate_link, is_match
from .normalize import normalize_proposed_entity
from .persist import create_entity, failure_reason_from
from .resolve import ResolutionFailure, resolve_link_endpoints

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from graphrecon.domain.model import (
        AccountId,
        Entity,
        LinkData,
        OwnedById,
        PropertyObject,
        ProposedEntity,
        RequestedEntityType,
        VersionedUrl,
    )
    from graphrecon.domain.ports import GraphApi, LogSink

log = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True, kw_only=True)
class _PendingLink:
    proposed_entity: ProposedEntity
    entity_type_id: VersionedUrl
    properties: PropertyObject
    link_data: LinkData


@dataclass(slots=True, kw_only=True)
class EntityPersistenceEngine:
    """Classify and persist every proposal of a batch into an ``EntityStatusMap``."""

    graph_api: GraphApi
    actor_id: AccountId
    owned_by_id: OwnedById
    create_as_draft: bool = False
    log_sink: LogSink | None = field(default=None, repr=False)

    async def persist(
        self,
        proposed_entities_by_type: Mapping[VersionedUrl, Sequence[ProposedEntity]],
        requested_entity_types: Mapping[VersionedUrl, RequestedEntityType],
        inference_state: InferenceState | None = None,
    ) -> EntityStatusMap:
        state = inference_state or InferenceState()
        proposals = ProposalIndex.build(proposed_entities_by_type, requested_entity_types)
        status_map = EntityStatusMap()

        non_link_types = [t for t in requested_entity_types.values() if not t.is_link]
        link_types = [t for t in requested_entity_types.values() if t.is_link]

        log.info(
            "Reconciling %d proposed entities across %d entity types and %d link types",
            len(proposals),
            len(non_link_types),
            len(link_types),
        )

        await asyncio.gather(
            *(
                self._persist_entity(proposal, entity_type, status_map=status_map)
                for entity_type in non_link_types
                for proposal in proposals.proposals_for(entity_type.entity_type_id)
            )
        )

        # endpoints resolve against the settled non-link phase only, before any
        # link task runs, so a link never sees another link's outcome
        pending_links: list[_PendingLink] = []
        for entity_type in link_types:
            for proposal in proposals.proposals_for(entity_type.entity_type_id):
                pending = self._prepare_link(
                    proposal,
                    entity_type,
                    status_map=status_map,
                    proposals=proposals,
                    inference_state=state,
                )
                if pending is not None:
                    pending_links.append(pending)

        await asyncio.gather(
            *(self._persist_link(pending, status_map=status_map) for pending in pending_links)
        )

        counts = status_map.counts()
        log.info(
            "Reconciliation finished: created=%d, failed=%d, update_candidates=%d, unchanged=%d",
            counts.created,
            counts.failed,
            counts.update_candidates,
            counts.unchanged,
        )
        return status_map

    async def _persist_entity(
        self,
        proposed_entity: ProposedEntity,
        entity_type: RequestedEntityType,
        *,
        status_map: EntityStatusMap,
    ) -> None:
        entity_type_id = entity_type.entity_type_id
        properties = normalize_proposed_entity(
            proposed_entity,
            entity_type.schema,
            report=self._report,
        )

        try:
            existing = await find_duplicate(
                self.graph_api,
                actor_id=self.actor_id,
                owned_by_id=self.owned_by_id,
                entity_type_id=entity_type_id,
                properties=properties,
            )
        except Exception as exc:  # noqa: BLE001
            self._record_failure(status_map, proposed_entity, entity_type_id, exc, noun="entity")
            return

        if existing is not None:
            if is_match(existing.properties, properties):
                self._report(
                    f"Proposed entity {proposed_entity.temporary_id} exactly matches "
                    "existing entity – continuing"
                )
                self._record_unchanged(status_map, existing, entity_type_id, proposed_entity)
            else:
                self._report(
                    f"Proposed entity {proposed_entity.temporary_id} differs from existing "
                    f"entity {existing.entity_id} – recording update candidate"
                )
                status_map.record_update_candidate(
                    UpdateCandidate(entity=existing, proposed_entity=proposed_entity)
                )
            return

        try:
            created = await self._create(entity_type_id, properties)
        except Exception as exc:  # noqa: BLE001
            self._record_failure(status_map, proposed_entity, entity_type_id, exc, noun="entity")
            return
        status_map.record_success(
            CreationSuccess(
                entity=created,
                entity_type_id=entity_type_id,
                proposed_entity=proposed_entity,
            )
        )

    def _prepare_link(
        self,
        proposed_entity: ProposedEntity,
        entity_type: RequestedEntityType,
        *,
        status_map: EntityStatusMap,
        proposals: ProposalIndex,
        inference_state: InferenceState,
    ) -> _PendingLink | None:
        """Normalize a link proposal and pin its endpoints, or record why it cannot be."""

        entity_type_id = entity_type.entity_type_id
        properties = normalize_proposed_entity(
            proposed_entity,
            entity_type.schema,
            report=self._report,
        )

        resolution = resolve_link_endpoints(
            proposed_entity,
            status_map=status_map,
            proposals=proposals,
            inference_state=inference_state,
        )
        if isinstance(resolution, ResolutionFailure):
            self._report(
                f"Link entity {proposed_entity.temporary_id} not created: {resolution.reason}",
                level=logging.WARNING,
            )
            status_map.record_failure(
                CreationFailure(
                    entity_type_id=entity_type_id,
                    proposed_entity=proposed_entity,
                    failure_reason=resolution.reason,
                )
            )
            return None

        return _PendingLink(
            proposed_entity=proposed_entity,
            entity_type_id=entity_type_id,
            properties=properties,
            link_data=resolution.link_data,
        )

    async def _persist_link(self, pending: _PendingLink, *, status_map: EntityStatusMap) -> None:
        proposed_entity = pending.proposed_entity
        entity_type_id = pending.entity_type_id

        try:
            existing = await find_duplicate_link(
                self.graph_api,
                actor_id=self.actor_id,
                link_data=pending.link_data,
            )
        except Exception as exc:  # noqa: BLE001
            self._record_failure(
                status_map, proposed_entity, entity_type_id, exc, noun="link entity"
            )
            return

        if existing is not None:
            if is_match(existing.properties, pending.properties):
                self._record_unchanged(status_map, existing, entity_type_id, proposed_entity)
            else:
                status_map.record_update_candidate(
                    UpdateCandidate(entity=existing, proposed_entity=proposed_entity)
                )
            # FIXME: logged for both branches, although only one of them matches exactly
            self._report(
                f"Proposed link entity {proposed_entity.temporary_id} exactly matches "
                "existing entity – continuing"
            )
            return

        try:
            created = await self._create(
                entity_type_id, pending.properties, link_data=pending.link_data
            )
        except Exception as exc:  # noqa: BLE001
            self._record_failure(
                status_map, proposed_entity, entity_type_id, exc, noun="link entity"
            )
            return
        status_map.record_success(
            CreationSuccess(
                entity=created,
                entity_type_id=entity_type_id,
                proposed_entity=proposed_entity,
            )
        )

    @staticmethod
    def _record_unchanged(
        status_map: EntityStatusMap,
        existing: Entity,
        entity_type_id: VersionedUrl,
        proposed_entity: ProposedEntity,
    ) -> None:
        status_map.record_unchanged(
            MatchesExisting(
                entity=existing,
                entity_type_id=entity_type_id,
                proposed_entity=proposed_entity,
            )
        )

    async def _create(
        self,
        entity_type_id: VersionedUrl,
        properties: PropertyObject,
        *,
        link_data: LinkData | None = None,
    ) -> Entity:
        return await create_entity(
            self.graph_api,
            actor_id=self.actor_id,
            owned_by_id=self.owned_by_id,
            entity_type_id=entity_type_id,
            properties=properties,
            link_data=link_data,
            draft=self.create_as_draft,
        )

    def _record_failure(
        self,
        status_map: EntityStatusMap,
        proposed_entity: ProposedEntity,
        entity_type_id: VersionedUrl,
        exc: Exception,
        *,
        noun: str,
    ) -> None:
        self._report(
            f"Creation of {noun} id {proposed_entity.temporary_id} failed with err: {exc!r}",
            level=logging.WARNING,
        )
        status_map.record_failure(
            CreationFailure(
                entity_type_id=entity_type_id,
                proposed_entity=proposed_entity,
                failure_reason=failure_reason_from(exc),
            )
        )

    def _report(self, message: str, *, level: int = logging.INFO) -> None:
        log.log(level, message)
        if self.log_sink is None:
            return
        try:
            self.log_sink(message)
        except Exception:
            log.exception("Log sink failed while reporting: %s", message)


async def reconcile_and_persist(
    *,
    graph_api: GraphApi,
    actor_id: AccountId,
    owned_by_id: OwnedById,
    create_as_draft: bool,
    proposed_entities_by_type: Mapping[VersionedUrl, Sequence[ProposedEntity]],
    requested_entity_types: Mapping[VersionedUrl, RequestedEntityType],
    inference_state: InferenceState | None = None,
    log_sink: LogSink | None = None,
) -> EntityStatusMap:
    """Reconcile a batch of proposals against the graph and persist what is new."""

    engine = EntityPersistenceEngine(
        graph_api=graph_api,
        actor_id=actor_id,
        owned_by_id=owned_by_id,
        create_as_draft=create_as_draft,
        log_sink=log_sink,
    )
    return await engine.persist(
        proposed_entities_by_type,
        requested_entity_types,
        inference_state,
    )
