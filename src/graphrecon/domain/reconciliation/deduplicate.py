"""Duplicate matching against entities that already exist in the graph.

Responsibilities of this stage:
- pick the identity-like properties a proposal can be matched on
- query the graph for an existing entity (or link) the proposal duplicates
- decide whether an existing entity already holds the proposed properties

Nothing here writes to the graph.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Final

from .filters import (
    all_of,
    any_of,
    current_time_instant_temporal_axes,
    link_endpoints_filter,
    not_archived,
    owned_by,
    property_equals,
    versioned_url_matching_filter,
)

if TYPE_CHECKING:
    from graphrecon.domain.model import (
        AccountId,
        BaseUrl,
        Entity,
        LinkData,
        OwnedById,
        PropertyObject,
        VersionedUrl,
    )
    from graphrecon.domain.ports import GraphApi, QueryFilter

log = logging.getLogger(__name__)

IDENTITY_PROPERTY_NAMES: Final[tuple[str, ...]] = (
    "name",
    "display-name",
    "legal-name",
    "preferred-name",
    "profile-url",
)


def property_name(base_url: BaseUrl) -> str:
    """Last path segment of a property base URL, e.g. ``.../property-type/name/`` -> ``name``."""

    return base_url.rstrip("/").rsplit("/", 1)[-1]


def identity_property_keys(properties: Mapping[BaseUrl, object]) -> tuple[BaseUrl, ...]:
    return tuple(key for key in properties if property_name(key) in IDENTITY_PROPERTY_NAMES)


def is_match(existing: object, proposed: object) -> bool:
    """Partial deep comparison: does ``existing`` contain everything in ``proposed``?

    Mappings match when every proposed key is present with a matching value;
    extra existing keys are ignored. Sequences match when every proposed element
    matches some existing element.
    """

    if isinstance(proposed, Mapping):
        if not isinstance(existing, Mapping):
            return False
        return all(
            key in existing and is_match(existing[key], value) for key, value in proposed.items()
        )
    if isinstance(proposed, Sequence) and not isinstance(proposed, str):
        if not isinstance(existing, Sequence) or isinstance(existing, str):
            return False
        return all(any(is_match(candidate, value) for candidate in existing) for value in proposed)
    if isinstance(proposed, bool) or isinstance(existing, bool):
        return existing is proposed
    return existing == proposed


def duplicate_filter(
    *,
    owned_by_id: OwnedById,
    entity_type_id: VersionedUrl,
    properties: PropertyObject,
    keys: Sequence[BaseUrl],
) -> QueryFilter:
    return all_of(
        [
            not_archived(),
            any_of(property_equals(key, properties[key]) for key in keys),
            owned_by(owned_by_id),
            versioned_url_matching_filter(entity_type_id),
        ]
    )


async def find_duplicate(
    graph_api: GraphApi,
    *,
    actor_id: AccountId,
    owned_by_id: OwnedById,
    entity_type_id: VersionedUrl,
    properties: PropertyObject,
) -> Entity | None:
    """Find an existing entity sharing any identity property with the proposal.

    Proposals without identity properties are never matched, and no query is sent.
    """

    keys = identity_property_keys(properties)
    if not keys:
        return None

    query = duplicate_filter(
        owned_by_id=owned_by_id,
        entity_type_id=entity_type_id,
        properties=properties,
        keys=keys,
    )
    return await _first_entity(graph_api, actor_id=actor_id, query=query)


async def find_duplicate_link(
    graph_api: GraphApi,
    *,
    actor_id: AccountId,
    link_data: LinkData,
) -> Entity | None:
    query = all_of([not_archived(), link_endpoints_filter(link_data)])
    return await _first_entity(graph_api, actor_id=actor_id, query=query)


async def _first_entity(
    graph_api: GraphApi,
    *,
    actor_id: AccountId,
    query: QueryFilter,
) -> Entity | None:
    entities = await graph_api.query_entities(
        actor_id,
        filter=query,
        temporal_axes=current_time_instant_temporal_axes(),
        include_drafts=False,
    )
    if not entities:
        return None
    if len(entities) > 1:
        log.debug("Duplicate query matched %d entities, using the first", len(entities))
    return entities[0]
