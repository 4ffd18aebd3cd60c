"""Reconciliation of proposed entities with the knowledge graph.

Layered flow for one batch:
1) index proposals by temporary id
2) normalize property bags against the target schema
3) match non-link proposals against existing entities, create what is new
4) resolve link endpoints to persisted entities
5) match links against existing links, create what is new
6) report every proposal in exactly one slot of the status map
"""

from __future__ import annotations

from .arena import InvalidProposalBatchError, ProposalIndex
from .contracts import (
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
from .engine import EntityPersistenceEngine, reconcile_and_persist

__all__ = [
    "CreationFailure",
    "CreationSuccess",
    "EntityOutcome",
    "EntityPersistenceEngine",
    "EntityStatusMap",
    "InvalidProposalBatchError",
    "MatchesExisting",
    "Operation",
    "ProposalIndex",
    "ResultStatus",
    "StatusAlreadyRecordedError",
    "StatusCounts",
    "UpdateCandidate",
    "reconcile_and_persist",
]
