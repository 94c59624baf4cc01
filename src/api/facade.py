# src/api/facade.py - v3
"""Public API facade: ContentEngine wires the resolution components.

Usage:
    from pathwise.api.facade import ContentEngine
    engine = ContentEngine.from_settings()
    result = await engine.resolve_or_create_roadmap("Data Scientist")
"""

from __future__ import annotations

import logging
from typing import Any

from pathwise.api.models import ContentResolution, PlatformStats, QuizResolution
from pathwise.cache.enrichment import enrich_suggestions
from pathwise.cache.fingerprint_cache import FingerprintCache, normalize_quiz_kind
from pathwise.cache.inflight import InflightRegistry
from pathwise.config.settings import Settings, load_settings
from pathwise.core.errors import GenerationFailure, NotFound, PersistenceFailure
from pathwise.core.models import (
    BaseEntity,
    CategoryTaxonomy,
    EntityDraft,
    EntityKind,
    MarketInsights,
    MergedCategory,
    RoadmapContent,
    SkillContent,
)
from pathwise.core.outcome import Outcome, attempt
from pathwise.generation.base_generator import BaseQuizGenerator, BaseRoadmapGenerator
from pathwise.identity.resolver import IdentityResolution, IdentityResolver
from pathwise.identity.schema import ROADMAP_SCHEMA, SKILL_SCHEMA
from pathwise.logging.context import set_operation_context
from pathwise.store.base_store import BaseContentStore
from pathwise.taxonomy.careers import build_taxonomy
from pathwise.taxonomy.category_resolver import CategoryResolutionEngine

logger = logging.getLogger(__name__)


class ContentEngine:
    """Single entry point for roadmaps, soft skills, quiz results and categories."""

    def __init__(
        self,
        store: BaseContentStore,
        roadmap_generator: BaseRoadmapGenerator,
        quiz_generator: BaseQuizGenerator,
        taxonomy: CategoryTaxonomy | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or load_settings()
        self._store = store
        self._roadmap_generator = roadmap_generator
        self._categories = CategoryResolutionEngine(taxonomy or build_taxonomy(self._settings))
        inflight = InflightRegistry(lease_timeout_s=self._settings.inflight_lease_timeout_s)
        refresh = self._settings.refresh_stale_content
        self._roadmaps = IdentityResolver(store, "roadmap", ROADMAP_SCHEMA, inflight, refresh)
        self._skills = IdentityResolver(store, "skill", SKILL_SCHEMA, inflight, refresh)
        self._quiz_cache = FingerprintCache(store, quiz_generator, inflight)

    @classmethod
    def from_settings(cls, settings: Settings | None = None, llm_client: Any = None) -> ContentEngine:
        """Build store and generators from configuration."""
        from pathwise.generation.generator_factory import (
            create_quiz_generator,
            create_roadmap_generator,
        )
        from pathwise.store.store_factory import create_content_store

        settings = settings or load_settings()
        return cls(
            store=create_content_store(settings),
            roadmap_generator=create_roadmap_generator(settings, llm_client),
            quiz_generator=create_quiz_generator(settings, llm_client),
            settings=settings,
        )

    @property
    def store(self) -> BaseContentStore:
        return self._store

    @property
    def categories(self) -> CategoryResolutionEngine:
        return self._categories

    # --- Roadmaps & skills ---

    async def resolve_or_create_roadmap(
        self, name: str, slug: str | None = None
    ) -> ContentResolution:
        """Return the roadmap for name, generating and storing it on first use.

        Raises:
            InvalidIdentity: If name (or slug) has no alphanumeric content.
            GenerationFailure: If the roadmap is new and generation fails.
        """
        set_operation_context("resolve_roadmap", name)
        resolution = await self._roadmaps.resolve_or_create(name, self._roadmap_draft, slug=slug)
        return _to_api(resolution)

    async def resolve_or_create_skill(self, name: str) -> ContentResolution:
        """Return the soft-skill roadmap for name, generating it on first use."""
        set_operation_context("resolve_skill", name)
        resolution = await self._skills.resolve_or_create(name, self._skill_draft)
        return _to_api(resolution)

    async def get_roadmap(self, slug: str) -> BaseEntity | None:
        set_operation_context("get_roadmap", slug)
        return await self._store.get_by_slug("roadmap", slug)

    async def get_skill(self, slug: str) -> BaseEntity | None:
        """Slug lookup that also records a view (best-effort)."""
        set_operation_context("get_skill", slug)
        skill = await self._store.get_by_slug("skill", slug)
        if skill is not None:
            outcome = await attempt(self._store.increment_views("skill", skill.id), PersistenceFailure)
            outcome.log_if_failed(logger, "View not recorded for skill %s", slug)
        return skill

    async def record_view(self, slug_or_id: str, kind: EntityKind = "roadmap") -> Outcome[bool]:
        """Increment the view counter of an entity found by id or slug.

        Never raises for a missing entity or a store failure; the failure is
        carried by the returned Outcome.
        """
        set_operation_context("record_view", slug_or_id)
        lookup = await attempt(self._find(kind, slug_or_id), PersistenceFailure)
        if not lookup.ok:
            return Outcome.failure(lookup.error)
        if lookup.value is None:
            return Outcome.failure(NotFound(kind, slug_or_id))

        outcome = await attempt(self._store.increment_views(kind, lookup.value.id), PersistenceFailure)
        if outcome.ok and not outcome.value:
            return Outcome.failure(NotFound(kind, slug_or_id))
        return outcome.log_if_failed(logger, "View not recorded for %s %s", kind, slug_or_id)

    # --- Quiz ---

    async def resolve_quiz_result(self, answers: Any, quiz_type: Any = None) -> QuizResolution:
        """Suggestions for answers, served from the fingerprint cache when possible.

        Raises:
            InvalidAnswers: If answers are neither a list nor a mapping.
            GenerationFailure: On a cache miss when generation fails.
        """
        kind = normalize_quiz_kind(quiz_type)
        set_operation_context("resolve_quiz", kind)
        resolution = await self._quiz_cache.resolve(answers, kind)
        return QuizResolution(
            fingerprint=resolution.fingerprint,
            kind=kind,
            suggestions=enrich_suggestions(resolution.suggestions),
            cached=resolution.cached,
        )

    async def lookup_quiz_result(
        self, fingerprint: str, quiz_type: Any = None
    ) -> QuizResolution | None:
        """Stored result for a fingerprint; None when nothing was cached."""
        set_operation_context("lookup_quiz", fingerprint)
        kind = None if quiz_type is None else normalize_quiz_kind(quiz_type)
        record = await self._quiz_cache.lookup(fingerprint, kind)
        if record is None:
            return None
        return QuizResolution(
            fingerprint=record.fingerprint,
            kind=record.result_kind,
            suggestions=enrich_suggestions(record.payload),
            cached=True,
        )

    # --- Listings ---

    async def list_merged_categories(self) -> list[MergedCategory]:
        set_operation_context("list_categories")
        roadmaps = await self._store.get_all_active(
            "roadmap", limit=self._settings.category_scan_limit
        )
        return self._categories.resolve(roadmaps)

    async def stats(self) -> PlatformStats:
        set_operation_context("stats")
        roadmaps = await self._store.get_all_active(
            "roadmap", limit=self._settings.category_scan_limit
        )
        categories = {self._categories.classify(r).category for r in roadmaps}
        return PlatformStats(
            total_roadmaps=await self._store.count("roadmap"),
            generated_roadmaps=await self._store.count("roadmap", generated_only=True),
            total_skills=await self._store.count("skill"),
            total_categories=len(categories),
            total_views=await self._store.total_views("roadmap") + await self._store.total_views("skill"),
            quiz_results_by_kind=await self._store.count_by_kind(),
        )

    # --- Factories ---

    async def _roadmap_draft(self, name: str, slug: str) -> EntityDraft:
        generated = await self._roadmap_generator.generate_roadmap(
            name, self._categories.known_categories
        )
        if not generated.steps:
            raise GenerationFailure(name, "roadmap has no steps")
        category = self._categories.creation_category(generated.category)
        if category != generated.category:
            logger.info("Generated category %r for %s not curated, storing %r", generated.category, slug, category)
        return EntityDraft(
            category=category,
            description=f"Career roadmap for {name}",
            content=RoadmapContent(
                steps=generated.steps,
                insights=_complete_insights(generated.insights),
                alternative_careers=generated.alternative_careers,
            ),
            tags=[name, "search-generated"],
        )

    async def _skill_draft(self, name: str, slug: str) -> EntityDraft:
        generated = await self._roadmap_generator.generate_skill_roadmap(name)
        if not generated.levels:
            raise GenerationFailure(name, "skill roadmap has no levels")
        return EntityDraft(
            description=generated.description or f"Soft skill roadmap for {name}",
            content=SkillContent(levels=generated.levels, resources=generated.resources),
            tags=[name, "soft-skill", "ai-generated"],
        )

    async def _find(self, kind: EntityKind, slug_or_id: str) -> BaseEntity | None:
        entity = await self._store.get_by_id(kind, slug_or_id)
        if entity is None:
            entity = await self._store.get_by_slug(kind, slug_or_id)
        return entity


_INSIGHT_LISTS = ("technical_skills", "soft_skills", "tools_and_software", "certifications")


def _complete_insights(insights: MarketInsights | None) -> MarketInsights:
    """Fill insight lists the generator left out with empty lists."""
    insights = insights or MarketInsights()
    return insights.model_copy(
        update={f: getattr(insights, f) or [] for f in _INSIGHT_LISTS}
    )


def _to_api(resolution: IdentityResolution) -> ContentResolution:
    return ContentResolution(
        entity=resolution.entity,
        cached=resolution.cached,
        refreshed=resolution.refreshed,
        persisted=resolution.persisted,
    )
