from __future__ import annotations

import pytest

from graphrecon.domain.model import ProposedEntity
from graphrecon.domain.reconciliation import InvalidProposalBatchError, ProposalIndex
from tests.support.graph_api import (
    ORGANIZATION_TYPE,
    PERSON_TYPE,
    WORKS_FOR_TYPE,
    default_entity_types,
)


def test_build_indexes_proposals_by_temporary_id_and_type() -> None:
    ada = ProposedEntity(temporary_id=1, entity_type_id=PERSON_TYPE)
    grace = ProposedEntity(temporary_id=2, entity_type_id=PERSON_TYPE)
    acme = ProposedEntity(temporary_id=3, entity_type_id=ORGANIZATION_TYPE)

    index = ProposalIndex.build(
        {PERSON_TYPE: [ada, grace], ORGANIZATION_TYPE: [acme]},
        default_entity_types(),
    )

    assert len(index) == 3
    assert index.get(2) is grace
    assert 3 in index
    assert 4 not in index
    assert index.proposals_for(PERSON_TYPE) == (ada, grace)
    assert index.proposals_for(WORKS_FOR_TYPE) == ()
    assert index.temporary_ids() == frozenset({1, 2, 3})


def test_build_rejects_unrequested_entity_types() -> None:
    unknown = "https://hash.ai/@example/types/entity-type/unknown/v/1"
    proposal = ProposedEntity(temporary_id=1, entity_type_id=unknown)

    with pytest.raises(InvalidProposalBatchError, match="not requested"):
        ProposalIndex.build({unknown: [proposal]}, default_entity_types())


def test_build_rejects_reused_temporary_ids() -> None:
    person = ProposedEntity(temporary_id=1, entity_type_id=PERSON_TYPE)
    organization = ProposedEntity(temporary_id=1, entity_type_id=ORGANIZATION_TYPE)

    with pytest.raises(InvalidProposalBatchError, match="more than one"):
        ProposalIndex.build(
            {PERSON_TYPE: [person], ORGANIZATION_TYPE: [organization]},
            default_entity_types(),
        )


def test_add_rejects_proposal_filed_under_other_type() -> None:
    proposal = ProposedEntity(temporary_id=1, entity_type_id=PERSON_TYPE)

    with pytest.raises(InvalidProposalBatchError, match="filed under"):
        ProposalIndex().add(proposal, entity_type_id=ORGANIZATION_TYPE)
