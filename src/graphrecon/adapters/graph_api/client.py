"""HTTP client for the graph storage API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING
from urllib.parse import quote

from pydantic import ValidationError

from graphrecon.adapters.http_resilience import ResilientClient

from .schema import (
    EntityMetadataPayload,
    EntityTypePayload,
    ErrorResponse,
    GraphApiBaseModel,
    QueryEntitiesResponse,
)
from .translator import (
    entity_from_payload,
    entity_type_from_payload,
    link_data_to_payload,
    metadata_from_payload,
    relationships_to_payload,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import TracebackType

    import httpx

    from graphrecon.config.graph_api import GraphApiConfig
    from graphrecon.config.http_resilience import ResilienceConfig
    from graphrecon.domain.model import (
        AccountId,
        Entity,
        EntityMetadata,
        EntityRelationship,
        LinkData,
        OwnedById,
        PropertyObject,
        RequestedEntityType,
        VersionedUrl,
    )
    from graphrecon.domain.ports import QueryFilter, TemporalAxes

log = getLogger(__name__)

ACTOR_HEADER = "X-Authenticated-User-Actor-Id"


class GraphApiError(RuntimeError):
    """Raised when the graph API rejects a request or answers unexpectedly."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class GraphApiClient:
    """``GraphApi`` implementation over HTTP.

    Use as an async context manager; one underlying connection pool is shared
    by every request made inside the block.
    """

    def __init__(
        self,
        *,
        config: GraphApiConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        if config.base_url is None:
            raise GraphApiError("Missing graph API base_url in resilience configuration")
        self._config = config
        self._client_factory = client_factory or _default_client_factory
        self._client: ResilientClient | None = None

    async def __aenter__(self) -> GraphApiClient:
        self._client = self._client_factory(self._config.resilience)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def validate_entity(
        self,
        actor_id: AccountId,
        *,
        entity_type_id: VersionedUrl,
        properties: PropertyObject,
        link_data: LinkData | None = None,
        draft: bool = False,
        operations: Sequence[str] = ("all",),
    ) -> None:
        body: dict[str, object] = {
            "entityTypeId": entity_type_id,
            "properties": properties,
            "draft": draft,
            "operations": list(operations),
        }
        if link_data is not None:
            body["linkData"] = link_data_to_payload(link_data)
        await self._post("/entities/validate", actor_id=actor_id, body=body)

    async def create_entity(
        self,
        actor_id: AccountId,
        *,
        entity_type_id: VersionedUrl,
        owned_by_id: OwnedById,
        properties: PropertyObject,
        link_data: LinkData | None = None,
        draft: bool = False,
        relationships: Sequence[EntityRelationship] = (),
    ) -> EntityMetadata:
        body: dict[str, object] = {
            "entityTypeId": entity_type_id,
            "ownedById": owned_by_id,
            "properties": properties,
            "draft": draft,
            "relationships": relationships_to_payload(relationships),
        }
        if link_data is not None:
            body["linkData"] = link_data_to_payload(link_data)
        payload = await self._post("/entities", actor_id=actor_id, body=body)
        return metadata_from_payload(_parse(EntityMetadataPayload, payload))

    async def query_entities(
        self,
        actor_id: AccountId,
        *,
        filter: QueryFilter,  # noqa: A002
        temporal_axes: TemporalAxes,
        include_drafts: bool = False,
    ) -> list[Entity]:
        body = {
            "filter": filter,
            "temporalAxes": temporal_axes,
            "includeDrafts": include_drafts,
        }
        payload = await self._post("/entities/query", actor_id=actor_id, body=body)
        response = _parse(QueryEntitiesResponse, payload)
        return [entity_from_payload(entity) for entity in response.entities]

    async def get_entity_type(
        self,
        actor_id: AccountId,
        *,
        entity_type_id: VersionedUrl,
    ) -> RequestedEntityType:
        client = self._require_client()
        response = await client.get(
            f"/entity-types/{quote(entity_type_id, safe='')}",
            headers={ACTOR_HEADER: actor_id},
        )
        _raise_for_error(response)
        return entity_type_from_payload(_parse(EntityTypePayload, _json(response)))

    async def _post(self, path: str, *, actor_id: AccountId, body: object) -> object:
        client = self._require_client()
        response = await client.post(path, json=body, headers={ACTOR_HEADER: actor_id})
        _raise_for_error(response)
        if not response.content:
            return None
        return _json(response)

    def _require_client(self) -> ResilientClient:
        if self._client is None:
            raise GraphApiError("GraphApiClient must be used inside 'async with'")
        return self._client


def _raise_for_error(response: httpx.Response) -> None:
    if response.is_success:
        return

    message: str | None = None
    try:
        message = ErrorResponse.model_validate(response.json()).message
    except (ValueError, ValidationError):
        message = None
    if not message:
        message = response.text.strip() or response.reason_phrase
    log.debug("Graph API %s %s failed: %s", response.request.method, response.request.url, message)
    raise GraphApiError(message, status_code=response.status_code)


def _parse[TModel: GraphApiBaseModel](
    model: type[TModel],
    payload: object,
) -> TModel:
    if not isinstance(payload, dict):
        raise GraphApiError(f"Unexpected graph API response payload for {model.__name__}")
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise GraphApiError(f"Malformed graph API response for {model.__name__}") from exc


def _json(response: httpx.Response) -> object:
    try:
        return response.json()
    except ValueError as exc:
        raise GraphApiError(
            "Graph API returned a non-JSON response", status_code=response.status_code
        ) from exc
