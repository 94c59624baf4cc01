# tests/conftest.py - v2
"""Shared test fixtures for all unit and integration tests.

Provides settings, an in-memory store, fake generators that count their
calls, and entity builders. No network access; all generation is faked.
"""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import AsyncMock

import pytest

from pathwise.config.settings import Settings
from pathwise.core.models import (
    CareerSuggestion,
    MarketInsights,
    RoadmapContent,
    RoadmapEntity,
    RoadmapStep,
    SalaryRange,
    SkillContent,
    SkillEntity,
    SkillLevel,
)
from pathwise.generation.base_generator import (
    BaseQuizGenerator,
    BaseRoadmapGenerator,
    GeneratedRoadmap,
    GeneratedSkill,
)
from pathwise.llm.models import LLMResponse
from pathwise.store.memory_store import MemoryContentStore


# === FIXTURES: Sample content ===


def full_insights() -> MarketInsights:
    return MarketInsights(
        demand="high",
        salary_range=SalaryRange(min=80000, max=450000),
        required_skills=["Python", "SQL"],
        future_outlook="Strong growth expected",
        job_growth_rate="12%",
        top_employers=["WSO2", "Virtusa"],
        technical_skills=["Python"],
        soft_skills=["Communication"],
        tools_and_software=["Git"],
        certifications=["AWS Cloud Practitioner"],
    )


def sample_steps() -> list[RoadmapStep]:
    return [
        RoadmapStep(step=1, title="G.C.E. A/L", duration="2 years"),
        RoadmapStep(step=2, title="BSc in Computer Science", duration="4 years"),
    ]


class FakeRoadmapGenerator(BaseRoadmapGenerator):
    """Deterministic roadmap generator recording every call."""

    def __init__(self, category: str | None = "Information Technology & Digital Careers", delay: float = 0.0):
        self.category = category
        self.delay = delay
        self.roadmap_calls: list[str] = []
        self.skill_calls: list[str] = []
        self.known_categories: list[str] = []

    async def generate_roadmap(self, name: str, known_categories: list[str]) -> GeneratedRoadmap:
        self.roadmap_calls.append(name)
        self.known_categories = list(known_categories)
        if self.delay:
            await asyncio.sleep(self.delay)
        return GeneratedRoadmap(
            steps=sample_steps(),
            insights=full_insights(),
            alternative_careers=["Data Engineer"],
            category=self.category,
        )

    async def generate_skill_roadmap(self, name: str) -> GeneratedSkill:
        self.skill_calls.append(name)
        return GeneratedSkill(
            description=f"How to get better at {name}",
            levels=[SkillLevel(level="beginner", title="Foundations", practices=["Practice daily"])],
        )


class FakeQuizGenerator(BaseQuizGenerator):
    """Quiz generator returning a fixed list and recording its inputs."""

    def __init__(self, suggestions: list[CareerSuggestion] | None = None, delay: float = 0.0):
        self.suggestions = suggestions if suggestions is not None else [
            CareerSuggestion(career="Software Engineer", roadmap_path="Software Engineering"),
            CareerSuggestion(career="Data Scientist"),
        ]
        self.delay = delay
        self.calls: list[tuple[dict[str, str], str]] = []

    async def generate_quiz_suggestions(self, answers: dict[str, str], variant: Any) -> list[CareerSuggestion]:
        self.calls.append((answers, variant))
        if self.delay:
            await asyncio.sleep(self.delay)
        return list(self.suggestions)


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None, store_backend="memory", log_format="text")


@pytest.fixture
def memory_store() -> MemoryContentStore:
    return MemoryContentStore()


@pytest.fixture
def roadmap_generator() -> FakeRoadmapGenerator:
    return FakeRoadmapGenerator()


@pytest.fixture
def quiz_generator() -> FakeQuizGenerator:
    return FakeQuizGenerator()


@pytest.fixture
def make_roadmap():
    """Builder for RoadmapEntity with complete (current schema) content."""

    def _make(name: str, slug: str, category: str | None = None, **overrides: Any) -> RoadmapEntity:
        data: dict[str, Any] = dict(
            name=name,
            slug=slug,
            category=category,
            content=RoadmapContent(steps=sample_steps(), insights=full_insights()),
            schema_version=2,
        )
        data.update(overrides)
        return RoadmapEntity(**data)

    return _make


@pytest.fixture
def make_skill():
    def _make(name: str, slug: str, **overrides: Any) -> SkillEntity:
        data: dict[str, Any] = dict(
            name=name,
            slug=slug,
            content=SkillContent(levels=[SkillLevel(level="beginner", title="Start")]),
        )
        data.update(overrides)
        return SkillEntity(**data)

    return _make


@pytest.fixture
def mock_llm_response() -> LLMResponse:
    return LLMResponse(
        content='{"suggestions": []}',
        input_tokens=100,
        output_tokens=50,
        model="gemini-2.5-flash",
        provider="google",
        latency_ms=200,
    )


@pytest.fixture
def mock_llm_client(mock_llm_response: LLMResponse) -> AsyncMock:
    client = AsyncMock()
    client.complete = AsyncMock(return_value=mock_llm_response)
    client.provider_name = "google"
    client.model_name = "gemini-2.5-flash"
    return client


@pytest.fixture
def make_roadmap_generator():
    """FakeRoadmapGenerator class, for tests that need custom arguments."""
    return FakeRoadmapGenerator


@pytest.fixture
def make_quiz_generator():
    return FakeQuizGenerator


@pytest.fixture
def insights() -> MarketInsights:
    return full_insights()
