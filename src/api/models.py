# src/api/models.py - v2
"""API-level models returned by ContentEngine."""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, Field

from pathwise.core.models import EnrichedSuggestion, QuizKind, RoadmapEntity, SkillEntity


class ContentResolution(BaseModel):
    """Roadmap or skill returned by a resolve-or-create call."""

    entity: Union[RoadmapEntity, SkillEntity] = Field(discriminator="kind")
    cached: bool
    refreshed: bool = False
    persisted: bool = True


class QuizResolution(BaseModel):
    """Career suggestions for a quiz submission."""

    fingerprint: str
    kind: QuizKind
    suggestions: list[EnrichedSuggestion]
    cached: bool


class PlatformStats(BaseModel):
    total_roadmaps: int = 0
    generated_roadmaps: int = 0
    total_skills: int = 0
    total_categories: int = 0
    total_views: int = 0
    quiz_results_by_kind: dict[str, int] = Field(default_factory=dict)
