from __future__ import annotations

import pytest

from graphrecon.domain.model import ProposedEntity
from graphrecon.domain.reconciliation import (
    CreationFailure,
    CreationSuccess,
    EntityOutcome,
    EntityStatusMap,
    MatchesExisting,
    Operation,
    ResultStatus,
    StatusAlreadyRecordedError,
    StatusCounts,
    UpdateCandidate,
)
from tests.support.graph_api import PERSON_TYPE, make_entity


def _proposal(temporary_id: int) -> ProposedEntity:
    return ProposedEntity(temporary_id=temporary_id, entity_type_id=PERSON_TYPE)


def _status_map() -> EntityStatusMap:
    status_map = EntityStatusMap()
    status_map.record_success(
        CreationSuccess(
            entity=make_entity("created"), entity_type_id=PERSON_TYPE, proposed_entity=_proposal(1)
        )
    )
    status_map.record_failure(
        CreationFailure(
            entity_type_id=PERSON_TYPE, proposed_entity=_proposal(2), failure_reason="boom."
        )
    )
    status_map.record_update_candidate(
        UpdateCandidate(entity=make_entity("candidate"), proposed_entity=_proposal(3))
    )
    status_map.record_unchanged(
        MatchesExisting(
            entity=make_entity("same"), entity_type_id=PERSON_TYPE, proposed_entity=_proposal(4)
        )
    )
    return status_map


def test_result_records_carry_status_and_operation() -> None:
    status_map = _status_map()

    assert status_map.creation_successes[1].status is ResultStatus.SUCCESS
    assert status_map.creation_successes[1].operation is Operation.CREATE
    assert status_map.creation_failures[2].status == "failure"
    assert status_map.update_candidates[3].status == "update-candidate"
    assert status_map.unchanged_entities[4].operation == "already-exists-as-proposed"


def test_status_of_reports_the_single_slot() -> None:
    status_map = _status_map()

    assert status_map.status_of(1) is EntityOutcome.CREATED
    assert status_map.status_of(2) is EntityOutcome.CREATION_FAILED
    assert status_map.status_of(3) is EntityOutcome.UPDATE_CANDIDATE
    assert status_map.status_of(4) is EntityOutcome.UNCHANGED
    assert status_map.status_of(5) is None
    assert status_map.recorded_ids() == {1, 2, 3, 4}


def test_recording_a_temporary_id_twice_is_rejected() -> None:
    status_map = _status_map()

    with pytest.raises(StatusAlreadyRecordedError) as excinfo:
        status_map.record_failure(
            CreationFailure(
                entity_type_id=PERSON_TYPE, proposed_entity=_proposal(1), failure_reason="late."
            )
        )

    assert excinfo.value.existing is EntityOutcome.CREATED
    assert status_map.failure_for(1) is None


def test_find_persisted_entity_skips_failures() -> None:
    status_map = _status_map()

    assert status_map.find_persisted_entity(1) == make_entity("created")
    assert status_map.find_persisted_entity(2) is None
    assert status_map.find_persisted_entity(3) == make_entity("candidate")
    assert status_map.find_persisted_entity(4) == make_entity("same")


def test_find_persisted_entity_prefers_this_run_over_prior_results() -> None:
    status_map = _status_map()
    prior = {1: make_entity("prior-1"), 9: make_entity("prior-9")}

    assert status_map.find_persisted_entity(1, prior_results=prior) == make_entity("created")
    assert status_map.find_persisted_entity(9, prior_results=prior) == make_entity("prior-9")
    assert status_map.find_persisted_entity(2, prior_results=prior) is None


def test_counts_cover_every_recorded_id() -> None:
    counts = _status_map().counts()

    assert counts == StatusCounts(created=1, failed=1, update_candidates=1, unchanged=1)
    assert counts.total == 4
