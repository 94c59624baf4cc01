# src/core/models.py - v1
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.
Entities are keyed externally by (kind, slug) and internally by id.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, Field

EntityKind = Literal["roadmap", "skill"]
QuizKind = Literal["quick", "long"]
QuizVariant = Literal["standard", "long"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


# === ROADMAP CONTENT ===


class SalaryRange(BaseModel):
    """Expected salary band in local currency."""

    min: float | None = None
    max: float | None = None
    currency: str = "LKR"


class MarketInsights(BaseModel):
    """Job-market context attached to a career roadmap.

    The last four fields arrived with content schema v2 and are None on
    older records.
    """

    demand: Literal["high", "medium", "low"] = "medium"
    salary_range: SalaryRange | None = None
    required_skills: list[str] = Field(default_factory=list)
    future_outlook: str = ""
    job_growth_rate: str | None = None
    top_employers: list[str] = Field(default_factory=list)
    technical_skills: list[str] | None = None
    soft_skills: list[str] | None = None
    tools_and_software: list[str] | None = None
    certifications: list[str] | None = None


class RoadmapStep(BaseModel):
    """One stage of a career roadmap."""

    step: int
    title: str
    description: str = ""
    duration: str = ""
    qualifications: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    salary_range_lkr: str = ""
    institutes: list[str] = Field(default_factory=list)
    prerequisites: list[str] = Field(default_factory=list)


class RoadmapContent(BaseModel):
    steps: list[RoadmapStep] | None = None
    insights: MarketInsights | None = None
    alternative_careers: list[str] = Field(default_factory=list)


# === SOFT SKILL CONTENT ===


class SkillLevel(BaseModel):
    level: str
    title: str
    description: str = ""
    practices: list[str] = Field(default_factory=list)


class SkillResource(BaseModel):
    title: str
    type: str = "article"
    url: str | None = None


class SkillContent(BaseModel):
    levels: list[SkillLevel] | None = None
    resources: list[SkillResource] = Field(default_factory=list)


# === ENTITIES ===


class BaseEntity(BaseModel):
    """Persisted content entity. Slug is unique per kind."""

    id: str = Field(default_factory=new_id)
    kind: EntityKind
    name: str
    slug: str
    category: str | None = None
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    source: Literal["curated", "generated"] = "generated"
    schema_version: int = 1
    views: int = 0
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class RoadmapEntity(BaseEntity):
    kind: Literal["roadmap"] = "roadmap"
    content: RoadmapContent = Field(default_factory=RoadmapContent)


class SkillEntity(BaseEntity):
    kind: Literal["skill"] = "skill"
    content: SkillContent = Field(default_factory=SkillContent)


ENTITY_MODELS: dict[str, type[BaseEntity]] = {
    "roadmap": RoadmapEntity,
    "skill": SkillEntity,
}


def entity_from_dict(data: dict[str, Any]) -> BaseEntity:
    """Rebuild the concrete entity model from a stored mapping."""
    model = ENTITY_MODELS.get(data.get("kind", "roadmap"))
    if model is None:
        raise ValueError(f"Unknown entity kind: {data.get('kind')!r}")
    return model.model_validate(data)


class EntityDraft(BaseModel):
    """Content produced by a factory for a not-yet-persisted entity."""

    category: str | None = None
    description: str = ""
    content: RoadmapContent | SkillContent
    tags: list[str] = Field(default_factory=list)


# === QUIZ ===


class CareerSuggestion(BaseModel):
    """One career proposed for a set of quiz answers."""

    career: str
    description: str = ""
    reasoning: str = ""
    roadmap_path: str | None = Field(
        default=None, validation_alias=AliasChoices("roadmap_path", "roadmapPath")
    )


class EnrichedSuggestion(CareerSuggestion):
    """Suggestion with its derived roadmap slug (None if derivation failed)."""

    roadmap_slug: str | None = None


# === TAXONOMY ===


class CareerRef(BaseModel):
    """Display name plus slug of a career listed under a category."""

    model_config = {"frozen": True}

    name: str
    slug: str


class CategoryDefinition(BaseModel):
    """Curated category from the static taxonomy."""

    model_config = {"frozen": True}

    name: str
    icon: str = "Briefcase"
    careers: tuple[CareerRef, ...] = ()


class MergedCategory(BaseModel):
    """Runtime view: taxonomy category plus dynamically generated careers."""

    name: str
    icon: str
    careers: list[CareerRef] = Field(default_factory=list)
    deduplicated: int = 0


@dataclass(frozen=True)
class CategoryTaxonomy:
    """Immutable taxonomy configuration passed into the resolution engine."""

    categories: tuple[CategoryDefinition, ...]
    keywords: tuple[tuple[str, tuple[str, ...]], ...] = ()
    legacy_labels: frozenset[str] = frozenset()
    fallback_name: str = "Community Generated"
    fallback_icon: str = "Globe"
    _names: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_names", frozenset(c.name for c in self.categories))

    @property
    def category_names(self) -> list[str]:
        return [c.name for c in self.categories]

    def has_category(self, name: str | None) -> bool:
        return name is not None and name in self._names

    def is_legacy(self, label: str | None) -> bool:
        return label is not None and (
            label in self.legacy_labels or label == self.fallback_name
        )
