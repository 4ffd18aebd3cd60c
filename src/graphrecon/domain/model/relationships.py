"""Authorization relationships attached to newly created entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Final


class RelationSubjectKind(StrEnum):
    SETTING = "setting"


class WebSetting(StrEnum):
    """Web-scoped capability settings an entity can be granted."""

    ADMINISTRATOR_FROM_WEB = "administratorFromWeb"
    UPDATE_FROM_WEB = "updateFromWeb"
    VIEW_FROM_WEB = "viewFromWeb"


@dataclass(slots=True, frozen=True, kw_only=True)
class EntityRelationSubject:
    kind: RelationSubjectKind
    subject_id: str


@dataclass(slots=True, frozen=True, kw_only=True)
class EntityRelationship:
    relation: str
    subject: EntityRelationSubject


def _web_setting(setting: WebSetting) -> EntityRelationship:
    return EntityRelationship(
        relation="setting",
        subject=EntityRelationSubject(kind=RelationSubjectKind.SETTING, subject_id=setting),
    )


# Granted to every created entity; other flows change these afterwards.
DEFAULT_RELATIONSHIPS: Final[tuple[EntityRelationship, ...]] = (
    _web_setting(WebSetting.ADMINISTRATOR_FROM_WEB),
    _web_setting(WebSetting.UPDATE_FROM_WEB),
    _web_setting(WebSetting.VIEW_FROM_WEB),
)
