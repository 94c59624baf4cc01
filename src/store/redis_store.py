# src/store/redis_store.py - v3
"""Redis-based store (STORE_BACKEND=redis).

Requires 'redis' package: pip install redis.
Suitable for multi-instance deployments: slug uniqueness relies on HSETNX and
view counters on HINCRBY, so both hold across processes.

Key layout:
    pathwise:<kind>:entity:<id>       entity JSON
    pathwise:<kind>:slugs             hash slug -> id
    pathwise:<kind>:views             hash id -> view count
    pathwise:results:<fp>:<kind>      list of cached result JSON, oldest first
    pathwise:results:counts           hash kind -> number of cached results
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from pathwise.cache.models import CachedResult
from pathwise.core.errors import DuplicateSlugError, PersistenceFailure
from pathwise.core.models import BaseEntity, EntityKind, QuizKind, entity_from_dict
from pathwise.store.base_store import BaseContentStore

logger = logging.getLogger(__name__)

_PREFIX = "pathwise"
_QUIZ_KINDS: tuple[QuizKind, ...] = ("quick", "long")


class RedisContentStore(BaseContentStore):
    """Redis-backed store for distributed deployments."""

    def __init__(self, redis_url: str, client: Any = None) -> None:
        try:
            import redis
        except ImportError as e:
            raise ImportError("redis package required: pip install redis") from e

        self._errors: tuple[type[Exception], ...] = (redis.RedisError,)
        self._client = client or redis.Redis.from_url(redis_url, decode_responses=True)

    # --- Entities ---

    async def get_by_slug(self, kind: EntityKind, slug: str) -> BaseEntity | None:
        entity_id = self._call("hget", f"{_PREFIX}:{kind}:slugs", slug)
        if entity_id is None:
            return None
        return await self.get_by_id(kind, entity_id)

    async def get_by_id(self, kind: EntityKind, entity_id: str) -> BaseEntity | None:
        data = self._call("get", self._entity_key(kind, entity_id))
        if data is None:
            return None
        views = self._call("hget", f"{_PREFIX}:{kind}:views", entity_id)
        return self._decode_entity(data, views)

    async def create(self, entity: BaseEntity) -> BaseEntity:
        slugs_key = f"{_PREFIX}:{entity.kind}:slugs"
        claimed = self._call("hsetnx", slugs_key, entity.slug, entity.id)
        if not claimed:
            raise DuplicateSlugError(entity.kind, entity.slug)
        try:
            self._call("set", self._entity_key(entity.kind, entity.id), entity.model_dump_json())
            self._call("hset", f"{_PREFIX}:{entity.kind}:views", entity.id, entity.views)
        except PersistenceFailure:
            self._release_slug(entity)
            raise
        return entity

    async def update(
        self, kind: EntityKind, entity_id: str, changes: dict[str, Any]
    ) -> BaseEntity | None:
        current = await self.get_by_id(kind, entity_id)
        if current is None:
            return None
        updated = self._apply_changes(current, changes)
        slugs_key = f"{_PREFIX}:{kind}:slugs"
        if updated.slug != current.slug:
            if not self._call("hsetnx", slugs_key, updated.slug, entity_id):
                raise DuplicateSlugError(kind, updated.slug)
            self._call("hdel", slugs_key, current.slug)
        self._call("set", self._entity_key(kind, entity_id), updated.model_dump_json())
        if "views" in changes:
            self._call("hset", f"{_PREFIX}:{kind}:views", entity_id, updated.views)
        return updated

    async def delete(self, kind: EntityKind, entity_id: str) -> bool:
        current = await self.get_by_id(kind, entity_id)
        if current is None:
            return False
        self._call("delete", self._entity_key(kind, entity_id))
        self._call("hdel", f"{_PREFIX}:{kind}:slugs", current.slug)
        self._call("hdel", f"{_PREFIX}:{kind}:views", entity_id)
        return True

    async def increment_views(self, kind: EntityKind, entity_id: str) -> bool:
        if not self._call("exists", self._entity_key(kind, entity_id)):
            return False
        self._call("hincrby", f"{_PREFIX}:{kind}:views", entity_id, 1)
        return True

    async def get_all_active(
        self, kind: EntityKind, limit: int = 100, skip: int = 0
    ) -> list[BaseEntity]:
        active = sorted(
            (e for e in self._all_entities(kind) if e.is_active), key=self._sort_key
        )
        return active[skip : skip + limit]

    async def count(self, kind: EntityKind, generated_only: bool = False) -> int:
        if not generated_only:
            return int(self._call("hlen", f"{_PREFIX}:{kind}:slugs"))
        return sum(
            1 for e in self._all_entities(kind) if e.source == "generated" and e.is_active
        )

    async def total_views(self, kind: EntityKind) -> int:
        values = self._call("hvals", f"{_PREFIX}:{kind}:views") or []
        return sum(int(v) for v in values)

    # --- Cached results ---

    async def find_cached_result(
        self, fingerprint: str, result_kind: QuizKind | None = None
    ) -> CachedResult | None:
        kinds = (result_kind,) if result_kind else _QUIZ_KINDS
        found: list[CachedResult] = []
        for kind in kinds:
            data = self._call("lindex", f"{_PREFIX}:results:{fingerprint}:{kind}", 0)
            if data is None:
                continue
            try:
                found.append(CachedResult.model_validate_json(data))
            except ValidationError as e:
                logger.warning("Failed to deserialize cached result %s: %s", fingerprint, e)
        return min(found, key=lambda r: r.created_at) if found else None

    async def create_cached_result(self, record: CachedResult) -> CachedResult:
        key = f"{_PREFIX}:results:{record.fingerprint}:{record.result_kind}"
        self._call("rpush", key, record.model_dump_json())
        self._call("hincrby", f"{_PREFIX}:results:counts", record.result_kind, 1)
        return record

    async def count_by_kind(self) -> dict[str, int]:
        raw = self._call("hgetall", f"{_PREFIX}:results:counts") or {}
        return {k: int(v) for k, v in raw.items()}

    # --- Internals ---

    @staticmethod
    def _entity_key(kind: str, entity_id: str) -> str:
        return f"{_PREFIX}:{kind}:entity:{entity_id}"

    def _all_entities(self, kind: str) -> list[BaseEntity]:
        ids = self._call("hvals", f"{_PREFIX}:{kind}:slugs") or []
        if not ids:
            return []
        payloads = self._call("mget", [self._entity_key(kind, i) for i in ids])
        views = self._call("hmget", f"{_PREFIX}:{kind}:views", ids)
        entities: list[BaseEntity] = []
        for data, count in zip(payloads, views):
            if data is None:
                continue
            entity = self._decode_entity(data, count)
            if entity is not None:
                entities.append(entity)
        return entities

    def _release_slug(self, entity: BaseEntity) -> None:
        """Undo a slug claim whose entity write failed, if the claim is still ours."""
        slugs_key = f"{_PREFIX}:{entity.kind}:slugs"
        try:
            self._call("delete", self._entity_key(entity.kind, entity.id))
            if self._call("hget", slugs_key, entity.slug) == entity.id:
                self._call("hdel", slugs_key, entity.slug)
        except PersistenceFailure as e:
            logger.error("Could not release slug %s/%s after failed create: %s", entity.kind, entity.slug, e)

    @staticmethod
    def _decode_entity(data: str, views: Any) -> BaseEntity | None:
        try:
            payload = json.loads(data)
            if views is not None:
                payload["views"] = int(views)
            return entity_from_dict(payload)
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning("Failed to deserialize entity: %s", e)
            return None

    def _call(self, method: str, *args: Any) -> Any:
        try:
            return getattr(self._client, method)(*args)
        except self._errors as e:
            raise PersistenceFailure(f"Redis {method} failed: {e}") from e
