from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from graphrecon.domain.model import ProposedEntity
from tests.support.graph_api import NAME, PERSON_TYPE, FakeGraphApi, default_entity_types

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from graphrecon.domain.model import RequestedEntityType, VersionedUrl


@pytest.fixture
def graph_api() -> FakeGraphApi:
    return FakeGraphApi()


@pytest.fixture
def entity_types() -> dict[VersionedUrl, RequestedEntityType]:
    return default_entity_types()


@pytest.fixture
def person() -> ProposedEntity:
    return ProposedEntity(temporary_id=1, entity_type_id=PERSON_TYPE, properties={NAME: "Ada"})


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    for name in (
        "GRAPH_API_BASE_URL",
        "GRAPH_API_ACTOR_ID",
        "GRAPH_API_OWNED_BY_ID",
        "GRAPH_API_TIMEOUT_SECONDS",
        "GRAPH_API_MAX_CALLS_PER_SECOND",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GRAPHRECON_DATA_DIR", str(tmp_path / "data"))
    yield
