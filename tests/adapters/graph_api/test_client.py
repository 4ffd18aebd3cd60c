from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable  # noqa: TC003

import httpx
import pytest
from httpx_retries import RetryTransport

from graphrecon.adapters.graph_api import GraphApiClient, GraphApiError
from graphrecon.adapters.graph_api.client import ACTOR_HEADER
from graphrecon.adapters.http_resilience import ResilienceConfig, ResilientClient, build_retry
from graphrecon.config import GraphApiConfig, graph_api_retry_policy
from graphrecon.domain.model import DEFAULT_RELATIONSHIPS, LinkData
from graphrecon.domain.reconciliation.filters import current_time_instant_temporal_axes, equal
from tests.support.graph_api import ACTOR_ID, NAME, PERSON_TYPE, WEB_ID, WORKS_FOR_TYPE

BASE_URL = "https://graph.example.com"


def _make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            base_url=BASE_URL, transport=httpx.MockTransport(async_handler)
        )
        return client

    return factory


def _config() -> GraphApiConfig:
    return GraphApiConfig(
        resilience=ResilienceConfig(name="graph-api", base_url=BASE_URL, cache=None)
    )


def _metadata_payload(entity_id: str, entity_type_id: str = PERSON_TYPE) -> dict[str, object]:
    return {
        "recordId": {"entityId": entity_id, "editionId": "edition-1"},
        "entityTypeId": entity_type_id,
        "archived": False,
        "draft": False,
    }


def _call[T](
    handler: Callable[[httpx.Request], httpx.Response],
    operation: Callable[[GraphApiClient], Awaitable[T]],
) -> T:
    async def run() -> T:
        async with GraphApiClient(
            config=_config(), client_factory=_make_client_factory(handler)
        ) as client:
            return await operation(client)

    return asyncio.run(run())


def test_validate_entity_posts_body_with_actor_header() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200)

    _call(
        handler,
        lambda client: client.validate_entity(
            ACTOR_ID,
            entity_type_id=PERSON_TYPE,
            properties={NAME: "Ada"},
            draft=True,
        ),
    )

    (request,) = requests
    assert request.method == "POST"
    assert request.url.path == "/entities/validate"
    assert request.headers[ACTOR_HEADER] == ACTOR_ID
    assert json.loads(request.content) == {
        "entityTypeId": PERSON_TYPE,
        "properties": {NAME: "Ada"},
        "draft": True,
        "operations": ["all"],
    }


def test_create_entity_sends_link_data_and_relationships() -> None:
    bodies: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json=_metadata_payload("web-1~new", WORKS_FOR_TYPE))

    metadata = _call(
        handler,
        lambda client: client.create_entity(
            ACTOR_ID,
            entity_type_id=WORKS_FOR_TYPE,
            owned_by_id=WEB_ID,
            properties={},
            link_data=LinkData(left_entity_id="web-1~a", right_entity_id="web-1~b"),
            relationships=DEFAULT_RELATIONSHIPS,
        ),
    )

    assert metadata.record_id.entity_id == "web-1~new"
    assert metadata.owned_by_id == "web-1"
    assert metadata.entity_uuid == "new"
    (body,) = bodies
    assert body["ownedById"] == WEB_ID
    assert body["linkData"] == {"leftEntityId": "web-1~a", "rightEntityId": "web-1~b"}
    assert body["relationships"] == [
        {"relation": "setting", "subject": {"kind": "setting", "subjectId": setting}}
        for setting in ("administratorFromWeb", "updateFromWeb", "viewFromWeb")
    ]


def test_query_entities_parses_entities() -> None:
    bodies: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(
            200,
            json={
                "entities": [
                    {
                        "metadata": _metadata_payload("web-1~ada"),
                        "properties": {NAME: "Ada"},
                        "unmodeled": True,
                    }
                ]
            },
        )

    query = equal(["properties", NAME], "Ada")
    entities = _call(
        handler,
        lambda client: client.query_entities(
            ACTOR_ID,
            filter=query,
            temporal_axes=current_time_instant_temporal_axes(),
        ),
    )

    (entity,) = entities
    assert entity.entity_id == "web-1~ada"
    assert entity.properties == {NAME: "Ada"}
    assert entity.link_data is None
    assert bodies[0]["filter"] == query
    assert bodies[0]["includeDrafts"] is False


def test_get_entity_type_quotes_versioned_url() -> None:
    paths: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.raw_path.decode())
        return httpx.Response(
            200,
            json={
                "schema": {"$id": PERSON_TYPE, "title": "Person", "properties": {NAME: {}}},
                "isLink": False,
            },
        )

    entity_type = _call(
        handler,
        lambda client: client.get_entity_type(ACTOR_ID, entity_type_id=PERSON_TYPE),
    )

    assert entity_type.entity_type_id == PERSON_TYPE
    assert entity_type.schema.title == "Person"
    assert entity_type.schema.declares_properties
    assert not entity_type.is_link
    assert paths[0].startswith("/entity-types/https%3A%2F%2Fhash.ai")


def test_error_response_message_is_surfaced() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"message": "Property name is required", "code": "X"})

    with pytest.raises(GraphApiError) as excinfo:
        _call(
            handler,
            lambda client: client.validate_entity(
                ACTOR_ID, entity_type_id=PERSON_TYPE, properties={}
            ),
        )

    assert excinfo.value.message == "Property name is required"
    assert excinfo.value.status_code == 400


def test_plain_text_error_falls_back_to_body() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(409, text="conflict on entity")

    with pytest.raises(GraphApiError, match="conflict on entity"):
        _call(
            handler,
            lambda client: client.validate_entity(
                ACTOR_ID, entity_type_id=PERSON_TYPE, properties={}
            ),
        )


def test_malformed_success_payload_is_reported() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"entities": [{"properties": {}}]})

    with pytest.raises(GraphApiError, match="Malformed graph API response"):
        _call(
            handler,
            lambda client: client.query_entities(
                ACTOR_ID,
                filter={},
                temporal_axes=current_time_instant_temporal_axes(),
            ),
        )


def test_non_json_success_payload_is_reported() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>")

    with pytest.raises(GraphApiError, match="non-JSON"):
        _call(
            handler,
            lambda client: client.get_entity_type(ACTOR_ID, entity_type_id=PERSON_TYPE),
        )


def test_client_requires_base_url() -> None:
    config = GraphApiConfig(resilience=ResilienceConfig(name="graph-api", cache=None))

    with pytest.raises(GraphApiError, match="base_url"):
        GraphApiClient(config=config)


def test_client_must_be_entered_before_use() -> None:
    client = GraphApiClient(config=_config())

    with pytest.raises(GraphApiError, match="async with"):
        asyncio.run(client.validate_entity(ACTOR_ID, entity_type_id=PERSON_TYPE, properties={}))


def test_writes_are_sent_once_when_server_is_unavailable() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(503, json={"message": "Service unavailable"})

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            base_url=BASE_URL,
            transport=RetryTransport(
                transport=httpx.MockTransport(handler),
                retry=build_retry(graph_api_retry_policy()),
            ),
        )
        return client

    async def run() -> None:
        async with GraphApiClient(config=_config(), client_factory=factory) as client:
            with pytest.raises(GraphApiError) as validate_error:
                await client.validate_entity(ACTOR_ID, entity_type_id=PERSON_TYPE, properties={})
            with pytest.raises(GraphApiError) as create_error:
                await client.create_entity(
                    ACTOR_ID,
                    entity_type_id=PERSON_TYPE,
                    owned_by_id=WEB_ID,
                    properties={},
                )
        assert validate_error.value.status_code == 503
        assert create_error.value.message == "Service unavailable"

    asyncio.run(run())

    assert [request.url.path for request in requests] == ["/entities/validate", "/entities"]
