"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
import json
from logging import getLogger
from typing import TYPE_CHECKING

from graphrecon.adapters.graph_api import (
    GraphApiClient,
    ProposalBatchPayload,
    proposal_batch_from_payload,
)
from graphrecon.config import get_graph_api_config
from graphrecon.domain.reconciliation import reconcile_and_persist

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from graphrecon.adapters.http_resilience import ResilientClient
    from graphrecon.config import GraphApiConfig, ResilienceConfig
    from graphrecon.domain.model import AccountId, OwnedById, ProposalBatch
    from graphrecon.domain.ports import GraphApi, LogSink
    from graphrecon.domain.reconciliation import EntityStatusMap

type ClientFactory = Callable[[ResilienceConfig], ResilientClient]

log = getLogger(__name__)


def load_proposal_batch(path: Path) -> ProposalBatch:
    """Read a proposal batch from a JSON file."""

    with path.open(encoding="utf-8") as handle:
        payload = json.load(handle)
    return proposal_batch_from_payload(ProposalBatchPayload.model_validate(payload))


async def complete_entity_types(
    batch: ProposalBatch,
    *,
    graph_api: GraphApi,
    actor_id: AccountId,
) -> None:
    """Fetch the schemas of proposed types the batch does not describe itself."""

    missing = batch.missing_entity_type_ids()
    if not missing:
        return
    log.info("Fetching %d entity types from the graph API", len(missing))
    entity_types = await asyncio.gather(
        *(
            graph_api.get_entity_type(actor_id, entity_type_id=entity_type_id)
            for entity_type_id in missing
        )
    )
    for entity_type_id, entity_type in zip(missing, entity_types, strict=True):
        batch.requested_entity_types[entity_type_id] = entity_type


def persist_proposed_entities(
    batch: ProposalBatch,
    *,
    actor_id: AccountId,
    owned_by_id: OwnedById,
    create_as_draft: bool = False,
    config: GraphApiConfig | None = None,
    client_factory: ClientFactory | None = None,
    log_sink: LogSink | None = None,
) -> EntityStatusMap:
    """Reconcile ``batch`` against the configured graph API and persist new entities."""

    return asyncio.run(
        _persist_proposed_entities_async(
            batch,
            actor_id=actor_id,
            owned_by_id=owned_by_id,
            create_as_draft=create_as_draft,
            config=config or get_graph_api_config(),
            client_factory=client_factory,
            log_sink=log_sink,
        )
    )


async def _persist_proposed_entities_async(
    batch: ProposalBatch,
    *,
    actor_id: AccountId,
    owned_by_id: OwnedById,
    create_as_draft: bool,
    config: GraphApiConfig,
    client_factory: ClientFactory | None,
    log_sink: LogSink | None,
) -> EntityStatusMap:
    log.info(
        "Starting persistence: actor=%s, owned_by=%s, draft=%s, base_url=%s",
        actor_id,
        owned_by_id,
        create_as_draft,
        config.base_url,
    )
    async with GraphApiClient(config=config, client_factory=client_factory) as graph_api:
        await complete_entity_types(batch, graph_api=graph_api, actor_id=actor_id)
        return await reconcile_and_persist(
            graph_api=graph_api,
            actor_id=actor_id,
            owned_by_id=owned_by_id,
            create_as_draft=create_as_draft,
            proposed_entities_by_type=batch.proposed_entities_by_type,
            requested_entity_types=batch.requested_entity_types,
            inference_state=batch.inference_state,
            log_sink=log_sink,
        )
