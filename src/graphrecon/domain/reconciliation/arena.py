"""Index of the proposals in one batch, addressed by temporary id.

Links refer to their endpoints through temporary ids, not object references,
so that a link can point at a sibling that has not been persisted yet. The
index is the table those references are looked up in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping, Sequence

    from graphrecon.domain.model import (
        ProposedEntity,
        RequestedEntityType,
        TemporaryId,
        VersionedUrl,
    )


class InvalidProposalBatchError(ValueError):
    """Raised when a batch breaks the calling contract and cannot be reconciled at all."""


@dataclass(slots=True)
class ProposalIndex:
    _proposals: dict[TemporaryId, ProposedEntity] = field(
        default_factory=dict["TemporaryId", "ProposedEntity"], repr=False
    )
    _ids_by_type: dict[VersionedUrl, list[TemporaryId]] = field(
        default_factory=dict["VersionedUrl", "list[TemporaryId]"], repr=False
    )

    @classmethod
    def build(
        cls,
        proposed_entities_by_type: Mapping[VersionedUrl, Sequence[ProposedEntity]],
        requested_entity_types: Mapping[VersionedUrl, RequestedEntityType],
    ) -> ProposalIndex:
        """Index a batch, rejecting unknown types and reused temporary ids."""

        index = cls()
        for entity_type_id, proposals in proposed_entities_by_type.items():
            if entity_type_id not in requested_entity_types:
                raise InvalidProposalBatchError(
                    f"Entities were proposed for {entity_type_id}, which was not requested"
                )
            for proposal in proposals:
                index.add(proposal, entity_type_id=entity_type_id)
        return index

    def add(self, proposal: ProposedEntity, *, entity_type_id: VersionedUrl) -> None:
        if proposal.entity_type_id != entity_type_id:
            raise InvalidProposalBatchError(
                f"Proposed entity {proposal.temporary_id} has type {proposal.entity_type_id} "
                f"but was filed under {entity_type_id}"
            )
        if proposal.temporary_id in self._proposals:
            raise InvalidProposalBatchError(
                f"Temporary id {proposal.temporary_id} is used by more than one proposed entity"
            )
        self._proposals[proposal.temporary_id] = proposal
        self._ids_by_type.setdefault(entity_type_id, []).append(proposal.temporary_id)

    def get(self, temporary_id: TemporaryId) -> ProposedEntity | None:
        return self._proposals.get(temporary_id)

    def proposals_for(self, entity_type_id: VersionedUrl) -> tuple[ProposedEntity, ...]:
        ids = self._ids_by_type.get(entity_type_id, [])
        return tuple(self._proposals[temporary_id] for temporary_id in ids)

    def temporary_ids(self) -> frozenset[TemporaryId]:
        return frozenset(self._proposals)

    def __contains__(self, temporary_id: object) -> bool:
        return temporary_id in self._proposals

    def __iter__(self) -> Iterator[ProposedEntity]:
        return iter(self._proposals.values())

    def __len__(self) -> int:
        return len(self._proposals)
