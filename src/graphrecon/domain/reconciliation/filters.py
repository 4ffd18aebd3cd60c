"""Builders for graph query filters.

Filters are plain JSON-compatible mappings understood by the graph API:
``equal`` compares a path against a parameter, ``any``/``all`` combine filters.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from graphrecon.domain.model import (
    extract_entity_uuid,
    extract_owned_by_id,
    split_versioned_url,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from graphrecon.domain.model import (
        BaseUrl,
        EntityId,
        LinkData,
        OwnedById,
        VersionedUrl,
    )
    from graphrecon.domain.ports import QueryFilter, TemporalAxes


def equal(path: Sequence[str], parameter: object) -> QueryFilter:
    return {"equal": [{"path": list(path)}, {"parameter": parameter}]}


def any_of(filters: Iterable[QueryFilter]) -> QueryFilter:
    return {"any": list(filters)}


def all_of(filters: Iterable[QueryFilter]) -> QueryFilter:
    return {"all": list(filters)}


def not_archived() -> QueryFilter:
    return equal(["archived"], False)


def owned_by(owned_by_id: OwnedById) -> QueryFilter:
    return equal(["ownedById"], owned_by_id)


def property_equals(base_url: BaseUrl, value: object) -> QueryFilter:
    return equal(["properties", base_url], value)


def versioned_url_matching_filter(
    versioned_url: VersionedUrl,
    *,
    match_any_version: bool = False,
) -> QueryFilter:
    """Match entities of exactly ``versioned_url``, or of any version of its type."""

    if not match_any_version:
        return equal(["type", "versionedUrl"], versioned_url)
    base_url, _version = split_versioned_url(versioned_url)
    return equal(["type", "baseUrl"], base_url)


def _endpoint_filters(side: str, entity_id: EntityId) -> list[QueryFilter]:
    return [
        equal([side, "ownedById"], extract_owned_by_id(entity_id)),
        equal([side, "uuid"], extract_entity_uuid(entity_id)),
    ]


def link_endpoints_filter(link_data: LinkData) -> QueryFilter:
    """Match links running from ``left_entity_id`` to ``right_entity_id``."""

    return all_of(
        [
            *_endpoint_filters("leftEntity", link_data.left_entity_id),
            *_endpoint_filters("rightEntity", link_data.right_entity_id),
        ]
    )


def current_time_instant_temporal_axes() -> TemporalAxes:
    """Latest transaction time, any decision time."""

    return {
        "pinned": {"axis": "transactionTime", "timestamp": None},
        "variable": {
            "axis": "decisionTime",
            "interval": {"start": None, "end": None},
        },
    }
