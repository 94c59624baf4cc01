# src/store/memory_store.py - v1
"""In-memory store (STORE_BACKEND=memory).

Process-local, used for tests and ephemeral runs.
"""

from __future__ import annotations

from typing import Any

from pathwise.cache.models import CachedResult
from pathwise.core.errors import DuplicateSlugError
from pathwise.core.models import BaseEntity, EntityKind, QuizKind
from pathwise.store.base_store import BaseContentStore


class MemoryContentStore(BaseContentStore):
    """Dict-backed store. Records are copied on the way in and out."""

    def __init__(self) -> None:
        self._entities: dict[str, dict[str, BaseEntity]] = {"roadmap": {}, "skill": {}}
        self._results: list[CachedResult] = []

    async def get_by_slug(self, kind: EntityKind, slug: str) -> BaseEntity | None:
        for entity in self._entities[kind].values():
            if entity.slug == slug:
                return entity.model_copy(deep=True)
        return None

    async def get_by_id(self, kind: EntityKind, entity_id: str) -> BaseEntity | None:
        entity = self._entities[kind].get(entity_id)
        return entity.model_copy(deep=True) if entity else None

    async def create(self, entity: BaseEntity) -> BaseEntity:
        if await self.get_by_slug(entity.kind, entity.slug) is not None:
            raise DuplicateSlugError(entity.kind, entity.slug)
        self._entities[entity.kind][entity.id] = entity.model_copy(deep=True)
        return entity

    async def update(
        self, kind: EntityKind, entity_id: str, changes: dict[str, Any]
    ) -> BaseEntity | None:
        current = self._entities[kind].get(entity_id)
        if current is None:
            return None
        updated = self._apply_changes(current, changes)
        if updated.slug != current.slug:
            clash = await self.get_by_slug(kind, updated.slug)
            if clash is not None:
                raise DuplicateSlugError(kind, updated.slug)
        self._entities[kind][entity_id] = updated
        return updated.model_copy(deep=True)

    async def delete(self, kind: EntityKind, entity_id: str) -> bool:
        return self._entities[kind].pop(entity_id, None) is not None

    async def increment_views(self, kind: EntityKind, entity_id: str) -> bool:
        entity = self._entities[kind].get(entity_id)
        if entity is None:
            return False
        entity.views += 1
        return True

    async def get_all_active(
        self, kind: EntityKind, limit: int = 100, skip: int = 0
    ) -> list[BaseEntity]:
        active = sorted(
            (e for e in self._entities[kind].values() if e.is_active),
            key=self._sort_key,
        )
        return [e.model_copy(deep=True) for e in active[skip : skip + limit]]

    async def count(self, kind: EntityKind, generated_only: bool = False) -> int:
        return sum(
            1
            for e in self._entities[kind].values()
            if not generated_only or (e.source == "generated" and e.is_active)
        )

    async def total_views(self, kind: EntityKind) -> int:
        return sum(e.views for e in self._entities[kind].values())

    async def find_cached_result(
        self, fingerprint: str, result_kind: QuizKind | None = None
    ) -> CachedResult | None:
        matches = [
            r
            for r in self._results
            if r.fingerprint == fingerprint and (result_kind is None or r.result_kind == result_kind)
        ]
        if not matches:
            return None
        return min(matches, key=lambda r: r.created_at).model_copy(deep=True)

    async def create_cached_result(self, record: CachedResult) -> CachedResult:
        self._results.append(record.model_copy(deep=True))
        return record

    async def count_by_kind(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for record in self._results:
            counts[record.result_kind] = counts.get(record.result_kind, 0) + 1
        return counts
