# tests/unit/api/test_unit_facade.py - v2
"""Tests for api/facade.py - ContentEngine operations over an in-memory store."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from pathwise.api.facade import ContentEngine
from pathwise.core.errors import (
    GenerationFailure,
    InvalidAnswers,
    InvalidIdentity,
    NotFound,
    PersistenceFailure,
)
from pathwise.core.models import MarketInsights, RoadmapContent
from pathwise.taxonomy.careers import IT, TOURISM


@pytest.fixture
def engine(memory_store, roadmap_generator, quiz_generator, settings) -> ContentEngine:
    return ContentEngine(memory_store, roadmap_generator, quiz_generator, settings=settings)


class TestRoadmaps:
    @pytest.mark.asyncio
    async def test_first_call_generates(self, engine, roadmap_generator, memory_store):
        result = await engine.resolve_or_create_roadmap("Cloud Architect")

        assert result.cached is False
        assert result.persisted is True
        entity = result.entity
        assert entity.slug == "cloud-architect"
        assert entity.category == IT
        assert entity.description == "Career roadmap for Cloud Architect"
        assert entity.tags == ["Cloud Architect", "search-generated"]
        assert entity.schema_version == 2
        assert roadmap_generator.roadmap_calls == ["Cloud Architect"]
        assert IT in roadmap_generator.known_categories
        assert await memory_store.get_by_slug("roadmap", "cloud-architect") is not None

    @pytest.mark.asyncio
    async def test_equivalent_names_share_one_entity(self, engine, roadmap_generator):
        first = await engine.resolve_or_create_roadmap("Cloud Architect")
        second = await engine.resolve_or_create_roadmap("  cloud   ARCHITECT! ")
        assert second.cached is True
        assert second.entity.id == first.entity.id
        assert len(roadmap_generator.roadmap_calls) == 1

    @pytest.mark.asyncio
    async def test_explicit_slug(self, engine):
        result = await engine.resolve_or_create_roadmap("Cloud Architect", slug="Cloud Arch")
        assert result.entity.slug == "cloud-arch"
        assert result.entity.name == "Cloud Architect"

    @pytest.mark.asyncio
    async def test_concurrent_requests_generate_once(
        self, memory_store, quiz_generator, settings, make_roadmap_generator
    ):
        generator = make_roadmap_generator(delay=0.05)
        engine = ContentEngine(memory_store, generator, quiz_generator, settings=settings)

        results = await asyncio.gather(
            *(engine.resolve_or_create_roadmap("Cloud Architect") for _ in range(5))
        )

        assert len(generator.roadmap_calls) == 1
        assert len({r.entity.id for r in results}) == 1
        assert sum(not r.cached for r in results) == 1

    @pytest.mark.asyncio
    async def test_uncurated_category_uses_fallback(
        self, memory_store, quiz_generator, settings, make_roadmap_generator
    ):
        generator = make_roadmap_generator(category="Space Jobs")
        engine = ContentEngine(memory_store, generator, quiz_generator, settings=settings)
        result = await engine.resolve_or_create_roadmap("Astronaut")
        assert result.entity.category == "Community Generated"

    @pytest.mark.asyncio
    async def test_invalid_name(self, engine, roadmap_generator):
        with pytest.raises(InvalidIdentity):
            await engine.resolve_or_create_roadmap("!!! ???")
        assert roadmap_generator.roadmap_calls == []

    @pytest.mark.asyncio
    async def test_generation_failure_stores_nothing(
        self, memory_store, quiz_generator, settings, roadmap_generator
    ):
        roadmap_generator.generate_roadmap = AsyncMock(side_effect=RuntimeError("quota"))
        engine = ContentEngine(memory_store, roadmap_generator, quiz_generator, settings=settings)
        with pytest.raises(GenerationFailure):
            await engine.resolve_or_create_roadmap("Chef")
        assert await memory_store.count("roadmap") == 0

    @pytest.mark.asyncio
    async def test_persistence_failure_still_returns_content(self, engine, memory_store):
        memory_store.create = AsyncMock(side_effect=PersistenceFailure("disk full"))
        result = await engine.resolve_or_create_roadmap("Chef")
        assert result.persisted is False
        assert result.entity.content.steps

    @pytest.mark.asyncio
    async def test_stale_roadmap_is_refreshed(self, engine, memory_store, make_roadmap, roadmap_generator):
        stale = make_roadmap(
            "Chef", "chef", category=TOURISM,
            content=RoadmapContent(steps=[], insights=MarketInsights(demand="high")),
            schema_version=1,
        )
        await memory_store.create(stale)

        result = await engine.resolve_or_create_roadmap("Chef")

        assert result.refreshed is True
        assert result.cached is True
        assert result.entity.id == stale.id
        assert result.entity.category == TOURISM
        assert result.entity.content.insights.certifications == ["AWS Cloud Practitioner"]
        assert roadmap_generator.roadmap_calls == ["Chef"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("partial", [MarketInsights(demand="high"), None])
    async def test_partial_insights_are_completed_and_not_regenerated(
        self, memory_store, quiz_generator, settings, make_roadmap_generator, partial
    ):
        class SparseGenerator(make_roadmap_generator):
            async def generate_roadmap(self, name, known_categories):
                generated = await super().generate_roadmap(name, known_categories)
                return generated.model_copy(update={"insights": partial})

        generator = SparseGenerator()
        engine = ContentEngine(memory_store, generator, quiz_generator, settings=settings)

        results = [await engine.resolve_or_create_roadmap("Chef") for _ in range(4)]

        assert generator.roadmap_calls == ["Chef"]
        assert [r.refreshed for r in results] == [False] * 4
        stored = results[-1].entity.content.insights
        assert stored.technical_skills == []
        assert stored.soft_skills == []
        assert stored.tools_and_software == []
        assert stored.certifications == []

    @pytest.mark.asyncio
    async def test_stale_refresh_disabled(
        self, memory_store, roadmap_generator, quiz_generator, settings, make_roadmap
    ):
        settings = settings.model_copy(update={"refresh_stale_content": False})
        engine = ContentEngine(memory_store, roadmap_generator, quiz_generator, settings=settings)
        await memory_store.create(make_roadmap("Chef", "chef", content=RoadmapContent(steps=[]), schema_version=1))

        result = await engine.resolve_or_create_roadmap("Chef")

        assert result.refreshed is False
        assert roadmap_generator.roadmap_calls == []

    @pytest.mark.asyncio
    async def test_get_roadmap(self, engine, make_roadmap, memory_store):
        await memory_store.create(make_roadmap("Chef", "chef"))
        assert (await engine.get_roadmap("chef")).name == "Chef"
        assert await engine.get_roadmap("missing") is None


class TestSkills:
    @pytest.mark.asyncio
    async def test_resolve_skill(self, engine, roadmap_generator):
        result = await engine.resolve_or_create_skill("Public Speaking")
        entity = result.entity
        assert entity.kind == "skill"
        assert entity.slug == "public-speaking"
        assert entity.category is None
        assert entity.description == "How to get better at Public Speaking"
        assert entity.tags == ["Public Speaking", "soft-skill", "ai-generated"]
        again = await engine.resolve_or_create_skill("public speaking")
        assert again.cached is True
        assert roadmap_generator.skill_calls == ["Public Speaking"]

    @pytest.mark.asyncio
    async def test_get_skill_records_view(self, engine, memory_store, make_skill):
        skill = make_skill("Teamwork", "teamwork")
        await memory_store.create(skill)
        await engine.get_skill("teamwork")
        assert (await memory_store.get_by_id("skill", skill.id)).views == 1

    @pytest.mark.asyncio
    async def test_get_skill_view_failure_is_ignored(self, engine, memory_store, make_skill):
        await memory_store.create(make_skill("Teamwork", "teamwork"))
        memory_store.increment_views = AsyncMock(side_effect=PersistenceFailure("down"))
        assert (await engine.get_skill("teamwork")).slug == "teamwork"


class TestRecordView:
    @pytest.mark.asyncio
    async def test_by_slug_and_id(self, engine, memory_store, make_roadmap):
        roadmap = make_roadmap("Chef", "chef")
        await memory_store.create(roadmap)
        assert (await engine.record_view("chef")).ok
        assert (await engine.record_view(roadmap.id)).ok
        assert await memory_store.total_views("roadmap") == 2

    @pytest.mark.asyncio
    async def test_missing(self, engine):
        outcome = await engine.record_view("nobody", kind="skill")
        assert not outcome.ok
        assert isinstance(outcome.error, NotFound)

    @pytest.mark.asyncio
    async def test_store_failure(self, engine, memory_store):
        memory_store.get_by_id = AsyncMock(side_effect=PersistenceFailure("down"))
        outcome = await engine.record_view("chef")
        assert isinstance(outcome.error, PersistenceFailure)


class TestQuiz:
    @pytest.mark.asyncio
    async def test_miss_then_hit(self, engine, quiz_generator):
        first = await engine.resolve_quiz_result(["Helping people", "Biology"])
        second = await engine.resolve_quiz_result(["biology", "  helping   PEOPLE"])

        assert first.cached is False
        assert second.cached is True
        assert first.fingerprint == second.fingerprint
        assert len(quiz_generator.calls) == 1
        assert quiz_generator.calls[0][1] == "standard"
        slugs = [s.roadmap_slug for s in second.suggestions]
        assert slugs == ["software-engineering", "data-scientist"]

    @pytest.mark.asyncio
    async def test_quiz_kinds_are_cached_separately(self, engine, quiz_generator):
        quick = await engine.resolve_quiz_result({"activity": "Helping people"})
        long = await engine.resolve_quiz_result({"activity": "Helping people"}, "long")
        assert quick.kind == "quick"
        assert long.kind == "long"
        assert long.cached is False
        assert [variant for _, variant in quiz_generator.calls] == ["standard", "long"]

    @pytest.mark.asyncio
    async def test_invalid_answers(self, engine):
        with pytest.raises(InvalidAnswers):
            await engine.resolve_quiz_result(42)

    @pytest.mark.asyncio
    async def test_lookup(self, engine):
        result = await engine.resolve_quiz_result(["a", "b"], "long")
        found = await engine.lookup_quiz_result(result.fingerprint)
        assert found.cached is True
        assert found.kind == "long"
        assert await engine.lookup_quiz_result(result.fingerprint, "quick") is None
        assert await engine.lookup_quiz_result("0" * 32) is None


class TestListings:
    @pytest.mark.asyncio
    async def test_list_merged_categories(self, engine, memory_store, make_roadmap):
        await memory_store.create(make_roadmap("Chef", "chef", category="Quiz Generated"))
        await memory_store.create(make_roadmap("Underwater Basket Weaver", "basket-weaver"))

        merged = await engine.list_merged_categories()

        tourism = next(m for m in merged if m.name == TOURISM)
        assert tourism.deduplicated == 1
        assert merged[-1].name == "Community Generated"
        assert [c.slug for c in merged[-1].careers] == ["basket-weaver"]

    @pytest.mark.asyncio
    async def test_stats(self, engine, memory_store, make_roadmap, make_skill):
        await memory_store.create(make_roadmap("Chef", "chef", category=TOURISM, source="curated", views=3))
        await memory_store.create(make_roadmap("Cloud Architect", "cloud-architect", category=IT))
        await memory_store.create(make_skill("Teamwork", "teamwork", views=2))
        await engine.resolve_quiz_result(["a"])

        stats = await engine.stats()

        assert stats.total_roadmaps == 2
        assert stats.generated_roadmaps == 1
        assert stats.total_skills == 1
        assert stats.total_categories == 2
        assert stats.total_views == 5
        assert stats.quiz_results_by_kind == {"quick": 1}
