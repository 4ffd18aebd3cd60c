"""Graph storage API adapter."""

from __future__ import annotations

from .client import GraphApiClient, GraphApiError
from .schema import ProposalBatchPayload
from .translator import proposal_batch_from_payload

__all__ = [
    "GraphApiClient",
    "GraphApiError",
    "ProposalBatchPayload",
    "proposal_batch_from_payload",
]
