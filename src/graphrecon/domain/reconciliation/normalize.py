"""Property normalization for proposed entities.

Proposal generators are sloppy about two things this stage fixes:
- property keys must be base URLs, which always end in ``/``
- types without properties still receive a property bag
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from graphrecon.domain.model import EntityTypeSchema, PropertyObject, ProposedEntity
    from graphrecon.domain.ports import LogSink


def ensure_trailing_slash(properties: Mapping[str, object]) -> PropertyObject:
    """Return a copy of ``properties`` whose keys all end with ``/``."""

    return {key if key.endswith("/") else f"{key}/": value for key, value in properties.items()}


def normalize_properties(
    schema: EntityTypeSchema,
    raw_properties: Mapping[str, object] | None,
) -> PropertyObject:
    if not schema.declares_properties:
        return {}
    return ensure_trailing_slash(raw_properties or {})


def normalize_proposed_entity(
    proposed_entity: ProposedEntity,
    schema: EntityTypeSchema,
    *,
    report: LogSink,
) -> PropertyObject:
    """Normalize the proposal's properties against ``schema``.

    When the schema declares no properties the proposal itself is cleared, so
    callers inspecting it afterwards see what was actually persisted.
    """

    properties = normalize_properties(schema, proposed_entity.properties)
    if not schema.declares_properties:
        report(
            "Overwriting properties of entity with temporary id "
            f"{proposed_entity.temporary_id} to an empty object, "
            "as the target type has no properties"
        )
        proposed_entity.properties = {}
    return properties
