from __future__ import annotations

from graphrecon.adapters.graph_api import ProposalBatchPayload, proposal_batch_from_payload
from graphrecon.adapters.graph_api.schema import EntityPayload
from graphrecon.adapters.graph_api.translator import entity_from_payload
from tests.support.graph_api import NAME, PERSON_TYPE, ROLE, WORKS_FOR_TYPE


def _batch_payload() -> dict[str, object]:
    return {
        "proposedEntities": {
            PERSON_TYPE: [{"entityId": 1, "properties": {NAME: "Ada"}}],
            WORKS_FOR_TYPE: [
                {
                    "entityId": 10,
                    "properties": {ROLE: "engineer"},
                    "sourceEntityId": 1,
                    "targetEntityId": 99,
                }
            ],
        },
        "entityTypes": [
            {
                "schema": {"$id": WORKS_FOR_TYPE, "title": "Works For", "properties": {ROLE: {}}},
                "isLink": True,
            }
        ],
        "proposedEntitySummaries": [
            {"entityId": 10, "entityTypeId": WORKS_FOR_TYPE, "sourceEntityId": 1}
        ],
        "priorResults": {
            "99": {
                "metadata": {
                    "recordId": {"entityId": "web-1~acme", "editionId": "e1"},
                    "entityTypeId": "https://hash.ai/@example/types/entity-type/organization/v/2",
                },
                "properties": {NAME: "Acme"},
            }
        },
    }


def test_proposal_batch_from_payload_builds_domain_batch() -> None:
    batch = proposal_batch_from_payload(ProposalBatchPayload.model_validate(_batch_payload()))

    (person,) = batch.proposed_entities_by_type[PERSON_TYPE]
    assert person.temporary_id == 1
    assert person.entity_type_id == PERSON_TYPE
    assert person.properties == {NAME: "Ada"}
    (link,) = batch.proposed_entities_by_type[WORKS_FOR_TYPE]
    assert (link.source_entity_id, link.target_entity_id) == (1, 99)
    assert batch.requested_entity_types[WORKS_FOR_TYPE].is_link
    assert batch.missing_entity_type_ids() == (PERSON_TYPE,)
    summary = batch.inference_state.summary_for(10)
    assert summary is not None
    assert summary.source_entity_id == 1
    assert summary.target_entity_id is None
    assert batch.inference_state.results_by_temporary_id[99].entity_id == "web-1~acme"


def test_minimal_batch_defaults_optional_sections() -> None:
    payload = ProposalBatchPayload.model_validate(
        {"proposedEntities": {PERSON_TYPE: [{"entityId": 3}]}}
    )

    batch = proposal_batch_from_payload(payload)

    assert batch.proposed_entities_by_type[PERSON_TYPE][0].properties is None
    assert batch.requested_entity_types == {}
    assert batch.inference_state.proposed_entity_summaries == []


def test_entity_from_payload_keeps_link_data() -> None:
    payload = EntityPayload.model_validate(
        {
            "metadata": {
                "recordId": {"entityId": "web-1~link", "editionId": "e1"},
                "entityTypeId": WORKS_FOR_TYPE,
                "draft": True,
            },
            "linkData": {"leftEntityId": "web-1~a", "rightEntityId": "web-1~b"},
        }
    )

    entity = entity_from_payload(payload)

    assert entity.metadata.draft
    assert entity.properties == {}
    assert entity.link_data is not None
    assert entity.link_data.left_entity_id == "web-1~a"
