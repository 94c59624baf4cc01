# src/identity/schema.py - v2
"""Versioned content schemas used to detect stale entities.

Each required field is a dotted path into entity.content, tagged with the
schema version that introduced it. An entity missing any of them (absent or
None) is stale and may be regenerated in place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from pathwise.core.models import BaseEntity, EntityDraft


@dataclass(frozen=True)
class RequiredField:
    path: str
    since: int = 1


@dataclass(frozen=True)
class ContentSchema:
    """Explicit schema-compatibility check for one entity kind."""

    kind: str
    version: int
    required_fields: tuple[RequiredField, ...]

    def missing_fields(self, entity: BaseEntity | EntityDraft) -> list[str]:
        """Dotted paths of required fields absent from the entity (or draft) content."""
        content = getattr(entity, "content", None)
        return [
            f.path
            for f in self.required_fields
            if f.since <= self.version and _resolve(content, f.path) is None
        ]

    def is_stale(self, entity: BaseEntity | EntityDraft) -> bool:
        return bool(self.missing_fields(entity))


def _resolve(obj: Any, path: str) -> Any:
    current = obj
    for part in path.split("."):
        if current is None:
            return None
        if isinstance(current, BaseModel):
            current = getattr(current, part, None)
        elif isinstance(current, dict):
            current = current.get(part)
        else:
            return None
    return current


ROADMAP_SCHEMA = ContentSchema(
    kind="roadmap",
    version=2,
    required_fields=(
        RequiredField("steps"),
        RequiredField("insights"),
        RequiredField("insights.technical_skills", since=2),
        RequiredField("insights.soft_skills", since=2),
        RequiredField("insights.tools_and_software", since=2),
        RequiredField("insights.certifications", since=2),
    ),
)

SKILL_SCHEMA = ContentSchema(
    kind="skill",
    version=1,
    required_fields=(RequiredField("levels"),),
)
