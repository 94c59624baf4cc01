# tests/unit/store/test_unit_store_contract.py - v1
"""Contract tests shared by every BaseContentStore backend.

Redis runs against an in-process fake client; no server is required.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest

from pathwise.cache.models import CachedResult
from pathwise.core.errors import DuplicateSlugError
from pathwise.core.models import CareerSuggestion
from pathwise.store.json_store import JsonContentStore
from pathwise.store.memory_store import MemoryContentStore
from pathwise.store.redis_store import RedisContentStore
from pathwise.store.sqlite_store import SqliteContentStore


class FakeRedis:
    """Minimal dict-backed stand-in for the redis client methods the store uses."""

    def __init__(self) -> None:
        self.strings: dict[str, str] = {}
        self.hashes: dict[str, dict[str, str]] = {}
        self.lists: dict[str, list[str]] = {}

    def get(self, key):
        return self.strings.get(key)

    def set(self, key, value):
        self.strings[key] = value
        return True

    def mget(self, keys):
        return [self.strings.get(k) for k in keys]

    def delete(self, key):
        return 1 if self.strings.pop(key, None) is not None else 0

    def exists(self, key):
        return int(key in self.strings)

    def hget(self, key, field):
        return self.hashes.get(key, {}).get(field)

    def hset(self, key, field, value):
        self.hashes.setdefault(key, {})[field] = str(value)
        return 1

    def hsetnx(self, key, field, value):
        bucket = self.hashes.setdefault(key, {})
        if field in bucket:
            return 0
        bucket[field] = str(value)
        return 1

    def hdel(self, key, field):
        return 1 if self.hashes.get(key, {}).pop(field, None) is not None else 0

    def hincrby(self, key, field, amount):
        bucket = self.hashes.setdefault(key, {})
        bucket[field] = str(int(bucket.get(field, 0)) + amount)
        return int(bucket[field])

    def hlen(self, key):
        return len(self.hashes.get(key, {}))

    def hvals(self, key):
        return list(self.hashes.get(key, {}).values())

    def hmget(self, key, fields):
        bucket = self.hashes.get(key, {})
        return [bucket.get(f) for f in fields]

    def hgetall(self, key):
        return dict(self.hashes.get(key, {}))

    def rpush(self, key, value):
        self.lists.setdefault(key, []).append(value)
        return len(self.lists[key])

    def lindex(self, key, index):
        items = self.lists.get(key, [])
        return items[index] if -len(items) <= index < len(items) else None


@pytest.fixture(params=["memory", "json", "sqlite", "redis"])
def store(request, tmp_path):
    if request.param == "memory":
        yield MemoryContentStore()
    elif request.param == "json":
        yield JsonContentStore(tmp_path / "store")
    elif request.param == "sqlite":
        backend = SqliteContentStore(tmp_path / "pathwise.db")
        yield backend
        backend.close()
    else:
        yield RedisContentStore("redis://unused", client=FakeRedis())


def _result(fp: str, kind: Any, day: int, career: str = "Chef") -> CachedResult:
    return CachedResult(
        fingerprint=fp,
        result_kind=kind,
        answers=["a"],
        payload=[CareerSuggestion(career=career)],
        created_at=datetime(2026, 1, day, tzinfo=timezone.utc),
    )


class TestEntityContract:
    @pytest.mark.asyncio
    async def test_create_and_lookup(self, store, make_roadmap):
        roadmap = make_roadmap("Data Scientist", "data-scientist", category="Information Technology & Digital Careers")
        await store.create(roadmap)

        by_slug = await store.get_by_slug("roadmap", "data-scientist")
        by_id = await store.get_by_id("roadmap", roadmap.id)
        assert by_slug is not None and by_id is not None
        assert by_slug.id == roadmap.id
        assert by_id.slug == "data-scientist"
        assert by_slug.content.insights.technical_skills == ["Python"]

    @pytest.mark.asyncio
    async def test_missing_returns_none(self, store):
        assert await store.get_by_slug("roadmap", "nope") is None
        assert await store.get_by_id("skill", "nope") is None

    @pytest.mark.asyncio
    async def test_duplicate_slug_rejected(self, store, make_roadmap):
        await store.create(make_roadmap("Chef", "chef"))
        with pytest.raises(DuplicateSlugError):
            await store.create(make_roadmap("CHEF", "chef"))
        assert await store.count("roadmap") == 1

    @pytest.mark.asyncio
    async def test_same_slug_different_kind(self, store, make_roadmap, make_skill):
        await store.create(make_roadmap("Leadership", "leadership"))
        await store.create(make_skill("Leadership", "leadership"))
        assert (await store.get_by_slug("skill", "leadership")).kind == "skill"
        assert (await store.get_by_slug("roadmap", "leadership")).kind == "roadmap"

    @pytest.mark.asyncio
    async def test_update(self, store, make_roadmap):
        roadmap = make_roadmap("Chef", "chef", category="Quiz Generated")
        await store.create(roadmap)

        updated = await store.update("roadmap", roadmap.id, {"category": "Tourism, Hospitality & Travel"})
        assert updated is not None
        assert updated.category == "Tourism, Hospitality & Travel"
        assert updated.updated_at >= roadmap.updated_at
        reread = await store.get_by_slug("roadmap", "chef")
        assert reread.category == "Tourism, Hospitality & Travel"
        assert await store.update("roadmap", "missing-id", {"category": "x"}) is None

    @pytest.mark.asyncio
    async def test_update_to_taken_slug_rejected(self, store, make_roadmap):
        await store.create(make_roadmap("Chef", "chef"))
        other = make_roadmap("Cook", "cook")
        await store.create(other)
        with pytest.raises(DuplicateSlugError):
            await store.update("roadmap", other.id, {"slug": "chef"})

    @pytest.mark.asyncio
    async def test_delete(self, store, make_roadmap):
        roadmap = make_roadmap("Chef", "chef")
        await store.create(roadmap)
        assert await store.delete("roadmap", roadmap.id) is True
        assert await store.get_by_slug("roadmap", "chef") is None
        assert await store.delete("roadmap", roadmap.id) is False

    @pytest.mark.asyncio
    async def test_views(self, store, make_roadmap):
        roadmap = make_roadmap("Chef", "chef")
        await store.create(roadmap)
        assert await store.increment_views("roadmap", roadmap.id) is True
        assert await store.increment_views("roadmap", roadmap.id) is True
        assert await store.increment_views("roadmap", "missing-id") is False
        assert (await store.get_by_id("roadmap", roadmap.id)).views == 2
        assert await store.total_views("roadmap") == 2
        assert await store.total_views("skill") == 0

    @pytest.mark.asyncio
    async def test_get_all_active_ordering_and_paging(self, store, make_roadmap):
        await store.create(make_roadmap("Zoologist", "zoologist", category="B"))
        await store.create(make_roadmap("Architect", "architect", category="B"))
        await store.create(make_roadmap("Chef", "chef", category="A"))
        await store.create(make_roadmap("Hidden", "hidden", category="A", is_active=False))

        active = await store.get_all_active("roadmap")
        assert [e.slug for e in active] == ["chef", "architect", "zoologist"]
        page = await store.get_all_active("roadmap", limit=1, skip=1)
        assert [e.slug for e in page] == ["architect"]

    @pytest.mark.asyncio
    async def test_count_generated_only(self, store, make_roadmap):
        await store.create(make_roadmap("Chef", "chef", source="curated"))
        await store.create(make_roadmap("Baker", "baker"))
        await store.create(make_roadmap("Brewer", "brewer", is_active=False))
        assert await store.count("roadmap") == 3
        assert await store.count("roadmap", generated_only=True) == 1


class TestCachedResultContract:
    @pytest.mark.asyncio
    async def test_find_earliest(self, store):
        fp = "a" * 32
        await store.create_cached_result(_result(fp, "quick", 2, career="Later"))
        await store.create_cached_result(_result(fp, "quick", 1, career="Earlier"))
        found = await store.find_cached_result(fp, "quick")
        assert found is not None
        assert found.payload[0].career in {"Earlier", "Later"}
        if not isinstance(store, RedisContentStore):
            assert found.payload[0].career == "Earlier"

    @pytest.mark.asyncio
    async def test_kind_filter(self, store):
        fp = "b" * 32
        await store.create_cached_result(_result(fp, "long", 1))
        assert await store.find_cached_result(fp, "quick") is None
        assert (await store.find_cached_result(fp, "long")).result_kind == "long"
        assert (await store.find_cached_result(fp)).result_kind == "long"

    @pytest.mark.asyncio
    async def test_missing_fingerprint(self, store):
        assert await store.find_cached_result("c" * 32) is None

    @pytest.mark.asyncio
    async def test_count_by_kind(self, store):
        await store.create_cached_result(_result("d" * 32, "quick", 1))
        await store.create_cached_result(_result("e" * 32, "quick", 1))
        await store.create_cached_result(_result("f" * 32, "long", 1))
        assert await store.count_by_kind() == {"quick": 2, "long": 1}
