"""Wire schemas of the graph storage API and of proposal batch files."""

from __future__ import annotations

import logging
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

log = logging.getLogger(__name__)


class GraphApiBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.debug(
            "Graph API %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class RecordIdPayload(GraphApiBaseModel):
    entity_id: str = Field(alias="entityId")
    edition_id: str = Field(alias="editionId")


class EntityMetadataPayload(GraphApiBaseModel):
    record_id: RecordIdPayload = Field(alias="recordId")
    entity_type_id: str = Field(alias="entityTypeId")
    archived: bool = False
    draft: bool = False


class LinkDataPayload(GraphApiBaseModel):
    left_entity_id: str = Field(alias="leftEntityId")
    right_entity_id: str = Field(alias="rightEntityId")


class EntityPayload(GraphApiBaseModel):
    metadata: EntityMetadataPayload
    properties: dict[str, object] = Field(default_factory=dict)
    link_data: LinkDataPayload | None = Field(default=None, alias="linkData")


class QueryEntitiesResponse(GraphApiBaseModel):
    entities: list[EntityPayload] = Field(default_factory=list)


class EntityTypeSchemaPayload(GraphApiBaseModel):
    id: str = Field(alias="$id")
    title: str
    description: str | None = None
    properties: dict[str, object] = Field(default_factory=dict)


class EntityTypePayload(GraphApiBaseModel):
    schema_: EntityTypeSchemaPayload = Field(alias="schema")
    is_link: bool = Field(default=False, alias="isLink")


class ErrorResponse(GraphApiBaseModel):
    message: str
    code: str | None = None


class ProposedEntityPayload(GraphApiBaseModel):
    entity_id: int = Field(alias="entityId")
    properties: dict[str, object] | None = None
    source_entity_id: int | None = Field(default=None, alias="sourceEntityId")
    target_entity_id: int | None = Field(default=None, alias="targetEntityId")


class ProposedEntitySummaryPayload(GraphApiBaseModel):
    entity_id: int = Field(alias="entityId")
    entity_type_id: str = Field(alias="entityTypeId")
    summary: str | None = None
    source_entity_id: int | None = Field(default=None, alias="sourceEntityId")
    target_entity_id: int | None = Field(default=None, alias="targetEntityId")


class ProposalBatchPayload(GraphApiBaseModel):
    """Contents of a batch file handed to the CLI."""

    proposed_entities: dict[str, list[ProposedEntityPayload]] = Field(alias="proposedEntities")
    entity_types: list[EntityTypePayload] = Field(default_factory=list, alias="entityTypes")
    proposed_entity_summaries: list[ProposedEntitySummaryPayload] = Field(
        default_factory=list, alias="proposedEntitySummaries"
    )
    prior_results: dict[int, EntityPayload] = Field(default_factory=dict, alias="priorResults")
