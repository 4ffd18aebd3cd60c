"""Entity type schemas the proposals are checked against."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .identifiers import BaseUrl, VersionedUrl


@dataclass(slots=True, frozen=True, kw_only=True)
class EntityTypeSchema:
    """A dereferenced entity type; ``properties`` is keyed by property base URL."""

    entity_type_id: VersionedUrl
    title: str
    properties: dict[BaseUrl, object] = field(default_factory=dict["BaseUrl", "object"])
    description: str | None = None

    @property
    def declares_properties(self) -> bool:
        return bool(self.properties)


@dataclass(slots=True, frozen=True, kw_only=True)
class RequestedEntityType:
    schema: EntityTypeSchema
    is_link: bool = False

    @property
    def entity_type_id(self) -> VersionedUrl:
        return self.schema.entity_type_id
