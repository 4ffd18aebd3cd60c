"""Result records and the status map for one reconciliation run.

Every proposed entity ends up in exactly one of four mappings, keyed by its
temporary id. Each slot is written once, by the task that owns the proposal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from collections.abc import Mapping

    from graphrecon.domain.model import Entity, ProposedEntity, TemporaryId, VersionedUrl


class ResultStatus(StrEnum):
    SUCCESS = "success"
    FAILURE = "failure"
    UPDATE_CANDIDATE = "update-candidate"


class Operation(StrEnum):
    CREATE = "create"
    ALREADY_EXISTS_AS_PROPOSED = "already-exists-as-proposed"


class EntityOutcome(StrEnum):
    """Terminal state of one proposed entity."""

    CREATED = "created"
    CREATION_FAILED = "creation_failed"
    UPDATE_CANDIDATE = "update_candidate"
    UNCHANGED = "unchanged"


@dataclass(slots=True, kw_only=True)
class CreationSuccess:
    entity: Entity
    entity_type_id: VersionedUrl
    proposed_entity: ProposedEntity
    operation: Literal[Operation.CREATE] = Operation.CREATE
    status: Literal[ResultStatus.SUCCESS] = ResultStatus.SUCCESS


@dataclass(slots=True, kw_only=True)
class CreationFailure:
    entity_type_id: VersionedUrl
    proposed_entity: ProposedEntity
    failure_reason: str
    operation: Literal[Operation.CREATE] = Operation.CREATE
    status: Literal[ResultStatus.FAILURE] = ResultStatus.FAILURE


@dataclass(slots=True, kw_only=True)
class UpdateCandidate:
    """An existing entity that differs from the proposal. Not applied here."""

    entity: Entity
    proposed_entity: ProposedEntity
    status: Literal[ResultStatus.UPDATE_CANDIDATE] = ResultStatus.UPDATE_CANDIDATE


@dataclass(slots=True, kw_only=True)
class MatchesExisting:
    entity: Entity
    entity_type_id: VersionedUrl
    proposed_entity: ProposedEntity
    operation: Literal[Operation.ALREADY_EXISTS_AS_PROPOSED] = (
        Operation.ALREADY_EXISTS_AS_PROPOSED
    )
    status: Literal[ResultStatus.SUCCESS] = ResultStatus.SUCCESS


class StatusAlreadyRecordedError(RuntimeError):
    """Raised when a temporary id would be recorded twice in one run."""

    def __init__(self, temporary_id: TemporaryId, existing: EntityOutcome) -> None:
        self.temporary_id = temporary_id
        self.existing = existing
        super().__init__(f"Temporary id {temporary_id} is already recorded as {existing.value}")


@dataclass(slots=True, frozen=True)
class StatusCounts:
    created: int = 0
    failed: int = 0
    update_candidates: int = 0
    unchanged: int = 0

    @property
    def total(self) -> int:
        return self.created + self.failed + self.update_candidates + self.unchanged


@dataclass(slots=True)
class EntityStatusMap:
    """Aggregated outcome of a reconciliation run, keyed by temporary id."""

    creation_successes: dict[TemporaryId, CreationSuccess] = field(
        default_factory=dict["TemporaryId", "CreationSuccess"]
    )
    creation_failures: dict[TemporaryId, CreationFailure] = field(
        default_factory=dict["TemporaryId", "CreationFailure"]
    )
    update_candidates: dict[TemporaryId, UpdateCandidate] = field(
        default_factory=dict["TemporaryId", "UpdateCandidate"]
    )
    unchanged_entities: dict[TemporaryId, MatchesExisting] = field(
        default_factory=dict["TemporaryId", "MatchesExisting"]
    )

    def record_success(self, result: CreationSuccess) -> None:
        temporary_id = self._claim(result.proposed_entity)
        self.creation_successes[temporary_id] = result

    def record_failure(self, result: CreationFailure) -> None:
        temporary_id = self._claim(result.proposed_entity)
        self.creation_failures[temporary_id] = result

    def record_update_candidate(self, result: UpdateCandidate) -> None:
        temporary_id = self._claim(result.proposed_entity)
        self.update_candidates[temporary_id] = result

    def record_unchanged(self, result: MatchesExisting) -> None:
        temporary_id = self._claim(result.proposed_entity)
        self.unchanged_entities[temporary_id] = result

    def find_persisted_entity(
        self,
        temporary_id: TemporaryId,
        *,
        prior_results: Mapping[TemporaryId, Entity] | None = None,
    ) -> Entity | None:
        """Look up the graph entity a temporary id stands for.

        Checked in order: created, update candidates, unchanged, then results
        from earlier phases of the workflow.
        """

        if (success := self.creation_successes.get(temporary_id)) is not None:
            return success.entity
        if (candidate := self.update_candidates.get(temporary_id)) is not None:
            return candidate.entity
        if (unchanged := self.unchanged_entities.get(temporary_id)) is not None:
            return unchanged.entity
        if prior_results is not None:
            return prior_results.get(temporary_id)
        return None

    def failure_for(self, temporary_id: TemporaryId) -> CreationFailure | None:
        return self.creation_failures.get(temporary_id)

    def status_of(self, temporary_id: TemporaryId) -> EntityOutcome | None:
        if temporary_id in self.creation_successes:
            return EntityOutcome.CREATED
        if temporary_id in self.creation_failures:
            return EntityOutcome.CREATION_FAILED
        if temporary_id in self.update_candidates:
            return EntityOutcome.UPDATE_CANDIDATE
        if temporary_id in self.unchanged_entities:
            return EntityOutcome.UNCHANGED
        return None

    def recorded_ids(self) -> set[TemporaryId]:
        return {
            *self.creation_successes,
            *self.creation_failures,
            *self.update_candidates,
            *self.unchanged_entities,
        }

    def counts(self) -> StatusCounts:
        return StatusCounts(
            created=len(self.creation_successes),
            failed=len(self.creation_failures),
            update_candidates=len(self.update_candidates),
            unchanged=len(self.unchanged_entities),
        )

    def _claim(self, proposed_entity: ProposedEntity) -> TemporaryId:
        temporary_id = proposed_entity.temporary_id
        existing = self.status_of(temporary_id)
        if existing is not None:
            raise StatusAlreadyRecordedError(temporary_id, existing)
        return temporary_id
