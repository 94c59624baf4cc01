# src/store/base_store.py - v1
"""Abstract persistent store interface.

Narrow contract consumed by the resolution components. Lookups return None
when nothing matches; writes raise PersistenceFailure (DuplicateSlugError on
a slug collision). Implementations never retry internally.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pathwise.cache.models import CachedResult
from pathwise.core.models import (
    BaseEntity,
    EntityKind,
    QuizKind,
    entity_from_dict,
    utc_now,
)


class BaseContentStore(ABC):
    """Unified interface for entity and cached-result storage backends."""

    # --- Entities ---

    @abstractmethod
    async def get_by_slug(self, kind: EntityKind, slug: str) -> BaseEntity | None:
        """Retrieve an entity by its canonical slug."""

    @abstractmethod
    async def get_by_id(self, kind: EntityKind, entity_id: str) -> BaseEntity | None:
        """Retrieve an entity by its storage id."""

    @abstractmethod
    async def create(self, entity: BaseEntity) -> BaseEntity:
        """Insert a new entity. Raises DuplicateSlugError if the slug exists."""

    @abstractmethod
    async def update(
        self, kind: EntityKind, entity_id: str, changes: dict[str, Any]
    ) -> BaseEntity | None:
        """Apply a partial update; returns the updated entity or None if absent."""

    @abstractmethod
    async def delete(self, kind: EntityKind, entity_id: str) -> bool:
        """Remove an entity. Returns False if it did not exist."""

    @abstractmethod
    async def increment_views(self, kind: EntityKind, entity_id: str) -> bool:
        """Increase the view counter by one. Returns False if absent."""

    @abstractmethod
    async def get_all_active(
        self, kind: EntityKind, limit: int = 100, skip: int = 0
    ) -> list[BaseEntity]:
        """List active entities ordered by (category, name)."""

    @abstractmethod
    async def count(self, kind: EntityKind, generated_only: bool = False) -> int:
        """Count entities of a kind (optionally only generated ones)."""

    @abstractmethod
    async def total_views(self, kind: EntityKind) -> int:
        """Sum of view counters over all entities of a kind."""

    # --- Cached results ---

    @abstractmethod
    async def find_cached_result(
        self, fingerprint: str, result_kind: QuizKind | None = None
    ) -> CachedResult | None:
        """Earliest cached result for a fingerprint (any kind if None)."""

    @abstractmethod
    async def create_cached_result(self, record: CachedResult) -> CachedResult:
        """Insert a cached result (pure insert, never an update)."""

    @abstractmethod
    async def count_by_kind(self) -> dict[str, int]:
        """Number of cached results per quiz kind."""

    # --- Shared helpers ---

    @staticmethod
    def _sort_key(entity: BaseEntity) -> tuple[str, str]:
        return (entity.category or "", entity.name)

    @staticmethod
    def _apply_changes(entity: BaseEntity, changes: dict[str, Any]) -> BaseEntity:
        """Return a validated copy of entity with changes applied."""
        data = entity.model_dump()
        data.update(changes)
        data["id"] = entity.id
        data["kind"] = entity.kind
        data["updated_at"] = utc_now()
        return entity_from_dict(data)
