# src/identity/resolver.py - v2
"""Identity resolution: at most one persisted entity per (kind, slug).

resolve_or_create() is idempotent: a second call for the same name (mod
case, whitespace, punctuation) returns the existing entity and never creates
a duplicate. The only in-place mutation is a stale-content refresh, which
falls back to the stale entity when regeneration or the update fails.

If persisting a freshly generated entity fails, the entity is still returned
for the current request (persisted=False): computed at least once, durable at
most once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from pathwise.cache.inflight import InflightRegistry
from pathwise.canonical.slug import slugify
from pathwise.core.errors import (
    DuplicateSlugError,
    GenerationFailure,
    InvalidIdentity,
    PathwiseError,
    PersistenceFailure,
)
from pathwise.core.models import ENTITY_MODELS, BaseEntity, EntityDraft, EntityKind
from pathwise.identity.schema import ContentSchema
from pathwise.store.base_store import BaseContentStore

logger = logging.getLogger(__name__)

EntityFactory = Callable[[str, str], Awaitable[EntityDraft]]


@dataclass(frozen=True)
class IdentityResolution:
    """Resolved entity plus how it was obtained."""

    entity: BaseEntity
    cached: bool
    refreshed: bool = False
    persisted: bool = True


class IdentityResolver:
    """Maps names to a single persisted entity of one kind."""

    def __init__(
        self,
        store: BaseContentStore,
        kind: EntityKind,
        schema: ContentSchema | None = None,
        inflight: InflightRegistry | None = None,
        refresh_stale: bool = True,
    ) -> None:
        self._store = store
        self._kind = kind
        self._schema = schema
        self._inflight = inflight or InflightRegistry()
        self._refresh_stale = refresh_stale

    @property
    def kind(self) -> EntityKind:
        return self._kind

    async def resolve_or_create(
        self,
        name: str,
        factory: EntityFactory,
        slug: str | None = None,
    ) -> IdentityResolution:
        """Return the entity for name, creating it through factory on first use.

        Args:
            name: Human-readable name (display name of the new entity).
            factory: Async callable (name, slug) -> EntityDraft, typically
                backed by the generation service.
            slug: Optional caller-provided slug; canonicalized like a name.

        Raises:
            InvalidIdentity: If no usable slug can be derived.
            GenerationFailure: If the entity is new and the factory fails.
        """
        canonical = slugify(slug or name)
        if not canonical:
            raise InvalidIdentity(name)

        existing = await self._store.get_by_slug(self._kind, canonical)
        if existing is not None:
            return await self._refresh_if_stale(existing, factory)

        async with self._inflight.lease(f"{self._kind}:{canonical}") as waited:
            if waited:
                existing = await self._store.get_by_slug(self._kind, canonical)
                if existing is not None:
                    return IdentityResolution(entity=existing, cached=True)

            draft = await self._run_factory(factory, name.strip(), canonical)
            missing = self._missing(draft)
            if missing:
                raise GenerationFailure(
                    name.strip(), f"incomplete content, missing {', '.join(missing)}"
                )
            entity = self._build(name.strip(), canonical, draft)
            try:
                await self._store.create(entity)
            except DuplicateSlugError:
                winner = await self._store.get_by_slug(self._kind, canonical)
                if winner is not None:
                    logger.info("Concurrent creation of %s/%s, using stored entity", self._kind, canonical)
                    return IdentityResolution(entity=winner, cached=True)
                logger.warning("Slug %s/%s reported taken but unreadable", self._kind, canonical)
                return IdentityResolution(entity=entity, cached=False, persisted=False)
            except PersistenceFailure as e:
                logger.warning("Generated %s/%s could not be persisted: %s", self._kind, canonical, e)
                return IdentityResolution(entity=entity, cached=False, persisted=False)

        logger.info("Created %s %s (category=%s)", self._kind, canonical, entity.category)
        return IdentityResolution(entity=entity, cached=False)

    async def _refresh_if_stale(
        self, existing: BaseEntity, factory: EntityFactory
    ) -> IdentityResolution:
        if not self._needs_refresh(existing):
            return IdentityResolution(entity=existing, cached=True)

        logger.info(
            "%s %s is stale (missing %s), regenerating",
            self._kind, existing.slug, ", ".join(self._missing(existing)),
        )
        async with self._inflight.lease(f"{self._kind}:{existing.slug}") as waited:
            if waited:
                current = await self._store.get_by_slug(self._kind, existing.slug)
                if current is not None and not self._needs_refresh(current):
                    return IdentityResolution(entity=current, cached=True)
            try:
                draft = await self._run_factory(factory, existing.name, existing.slug)
                missing = self._missing(draft)
                if missing:
                    logger.warning(
                        "Regenerated %s %s is still missing %s, serving stale",
                        self._kind, existing.slug, ", ".join(missing),
                    )
                    await self._stamp_version(existing)
                    return IdentityResolution(entity=existing, cached=True)
                updated = await self._store.update(
                    self._kind,
                    existing.id,
                    {"content": draft.content, "schema_version": self._schema.version},
                )
            except (GenerationFailure, PersistenceFailure) as e:
                logger.warning("Refresh of %s %s failed, serving stale: %s", self._kind, existing.slug, e)
                return IdentityResolution(entity=existing, cached=True)

        if updated is None:
            return IdentityResolution(entity=existing, cached=True)
        return IdentityResolution(entity=updated, cached=True, refreshed=True)

    def _missing(self, item: BaseEntity | EntityDraft) -> list[str]:
        if self._schema is None:
            return []
        return self._schema.missing_fields(item)

    def _needs_refresh(self, entity: BaseEntity) -> bool:
        """Stale entities are regenerated at most once per schema version."""
        if self._schema is None or not self._refresh_stale:
            return False
        if entity.schema_version >= self._schema.version:
            return False
        return self._schema.is_stale(entity)

    async def _stamp_version(self, entity: BaseEntity) -> None:
        try:
            await self._store.update(
                self._kind, entity.id, {"schema_version": self._schema.version}
            )
        except PersistenceFailure as e:
            logger.warning("Could not stamp %s %s with schema version: %s", self._kind, entity.slug, e)

    @staticmethod
    async def _run_factory(factory: EntityFactory, name: str, slug: str) -> EntityDraft:
        try:
            return await factory(name, slug)
        except PathwiseError:
            raise
        except Exception as e:
            raise GenerationFailure(name, str(e)) from e

    def _build(self, name: str, slug: str, draft: EntityDraft) -> BaseEntity:
        model = ENTITY_MODELS[self._kind]
        return model(
            name=name,
            slug=slug,
            category=draft.category,
            description=draft.description,
            content=draft.content,
            tags=draft.tags,
            source="generated",
            schema_version=self._schema.version if self._schema else 1,
        )
