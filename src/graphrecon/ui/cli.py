# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from pydantic import ValidationError

from graphrecon.app import load_proposal_batch, persist_proposed_entities
from graphrecon.common import configure_logging
from graphrecon.config.env import optional_env_var

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from graphrecon.domain.reconciliation import EntityStatusMap

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile proposed entities with the graph")
    subparsers = parser.add_subparsers(dest="command", required=True)

    persist = subparsers.add_parser("persist", help="Persist a batch of proposed entities")
    persist.add_argument(
        "batch",
        type=Path,
        help="JSON file with proposedEntities and optional entityTypes",
    )
    persist.add_argument(
        "--actor-id",
        type=str,
        default=None,
        help="Account acting against the graph (defaults to GRAPH_API_ACTOR_ID)",
    )
    persist.add_argument(
        "--owned-by-id",
        type=str,
        default=None,
        help="Web that will own created entities (defaults to GRAPH_API_OWNED_BY_ID)",
    )
    persist.add_argument(
        "--draft",
        action="store_true",
        help="Create entities as drafts",
    )
    persist.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output, including HTTP requests",
    )

    return parser.parse_args(list(argv))


def _require_option(value: str | None, *, flag: str, env_var: str) -> str:
    resolved = (value or "").strip() or optional_env_var(env_var)
    if resolved is None:
        raise ValueError(f"Missing {flag} (or set {env_var})")
    return resolved


def format_status_report(status_map: EntityStatusMap) -> str:
    counts = status_map.counts()
    lines = [
        f"created: {counts.created}",
        f"update candidates: {counts.update_candidates}",
        f"unchanged: {counts.unchanged}",
        f"failed: {counts.failed}",
    ]
    for temporary_id, failure in sorted(status_map.creation_failures.items()):
        lines.append(f"  [{temporary_id}] {failure.failure_reason}")
    return "\n".join(lines)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
        actor_id = _require_option(
            parsed_args.actor_id, flag="--actor-id", env_var="GRAPH_API_ACTOR_ID"
        )
        owned_by_id = _require_option(
            parsed_args.owned_by_id, flag="--owned-by-id", env_var="GRAPH_API_OWNED_BY_ID"
        )
        batch = load_proposal_batch(parsed_args.batch)
    except (OSError, ValueError, ValidationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    try:
        status_map = persist_proposed_entities(
            batch,
            actor_id=actor_id,
            owned_by_id=owned_by_id,
            create_as_draft=parsed_args.draft,
        )
    except Exception:
        log.exception("Fatal error while persisting proposed entities")
        sys.exit(1)

    print(format_status_report(status_map))


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
