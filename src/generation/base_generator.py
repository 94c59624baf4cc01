# src/generation/base_generator.py - v1
"""Abstract generation service consumed by the resolution components.

Generators produce content only; persistence and identity are handled by
the caller. Implementations raise freely, callers wrap into GenerationFailure.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from pathwise.core.models import (
    CareerSuggestion,
    MarketInsights,
    QuizVariant,
    RoadmapStep,
    SkillLevel,
    SkillResource,
)


class GeneratedRoadmap(BaseModel):
    """Career roadmap as produced by a generator."""

    steps: list[RoadmapStep]
    insights: MarketInsights | None = None
    alternative_careers: list[str] = Field(default_factory=list)
    category: str | None = None


class GeneratedSkill(BaseModel):
    """Soft-skill roadmap as produced by a generator."""

    description: str = ""
    levels: list[SkillLevel]
    resources: list[SkillResource] = Field(default_factory=list)


class BaseRoadmapGenerator(ABC):
    """Generates career and soft-skill roadmaps."""

    @abstractmethod
    async def generate_roadmap(
        self, name: str, known_categories: list[str]
    ) -> GeneratedRoadmap:
        """Generate a roadmap, picking a category from known_categories."""

    @abstractmethod
    async def generate_skill_roadmap(self, name: str) -> GeneratedSkill:
        """Generate a leveled soft-skill roadmap."""


class BaseQuizGenerator(ABC):
    """Generates career suggestions from quiz answers."""

    @abstractmethod
    async def generate_quiz_suggestions(
        self, answers: dict[str, str], variant: QuizVariant
    ) -> list[CareerSuggestion]:
        """Suggest careers for the given answers; may return an empty list."""
