"""Identifier aliases and helpers for persisted graph entities.

A persisted entity id has the shape ``<ownedById>~<entityUuid>``. Type ids are
versioned URLs of the shape ``<baseUrl>v/<version>``.
"""

from __future__ import annotations

import re
from typing import Final

type TemporaryId = int
type AccountId = str
type OwnedById = str
type EntityUuid = str
type EntityId = str
type BaseUrl = str
type VersionedUrl = str
type PropertyObject = dict[BaseUrl, object]

ENTITY_ID_DELIMITER: Final[str] = "~"
_VERSIONED_URL_PATTERN = re.compile(r"^(?P<base_url>.+/)v/(?P<version>\d+)$")


def entity_id_from(*, owned_by_id: OwnedById, entity_uuid: EntityUuid) -> EntityId:
    return f"{owned_by_id}{ENTITY_ID_DELIMITER}{entity_uuid}"


def _split_entity_id(entity_id: EntityId) -> tuple[OwnedById, EntityUuid]:
    owned_by_id, delimiter, entity_uuid = entity_id.partition(ENTITY_ID_DELIMITER)
    if not delimiter or not owned_by_id or not entity_uuid:
        raise ValueError(f"Malformed entity id: {entity_id!r}")
    return owned_by_id, entity_uuid


def extract_owned_by_id(entity_id: EntityId) -> OwnedById:
    return _split_entity_id(entity_id)[0]


def extract_entity_uuid(entity_id: EntityId) -> EntityUuid:
    return _split_entity_id(entity_id)[1]


def split_versioned_url(versioned_url: VersionedUrl) -> tuple[BaseUrl, int]:
    """Return ``(base_url, version)`` for a versioned type URL."""

    match = _VERSIONED_URL_PATTERN.match(versioned_url)
    if match is None:
        raise ValueError(f"Not a versioned URL: {versioned_url!r}")
    return match.group("base_url"), int(match.group("version"))
