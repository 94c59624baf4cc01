# tests/integration/test_int_engine_flow.py - v1
"""End-to-end flows through ContentEngine over file-backed stores.

Generation is faked; everything else (slugs, leases, stores, taxonomy,
fingerprint cache) runs for real. A second engine on the same store stands
in for a restarted process.
"""

from __future__ import annotations

import asyncio

import pytest

from pathwise.api.facade import ContentEngine
from pathwise.store.json_store import JsonContentStore
from pathwise.store.sqlite_store import SqliteContentStore
from pathwise.taxonomy.careers import IT, TOURISM
from pathwise.taxonomy.migration import migrate_categories


@pytest.fixture(params=["json", "sqlite"])
def store(request, tmp_path):
    if request.param == "json":
        yield JsonContentStore(tmp_path / "store")
    else:
        backend = SqliteContentStore(tmp_path / "pathwise.db")
        yield backend
        backend.close()


@pytest.mark.asyncio
async def test_roadmap_survives_restart(store, settings, make_roadmap_generator, make_quiz_generator):
    first_gen = make_roadmap_generator()
    engine = ContentEngine(store, first_gen, make_quiz_generator(), settings=settings)
    created = await asyncio.gather(
        engine.resolve_or_create_roadmap("Machine Learning Ops"),
        engine.resolve_or_create_roadmap("machine-learning ops"),
    )
    assert len({r.entity.id for r in created}) == 1

    second_gen = make_roadmap_generator()
    restarted = ContentEngine(store, second_gen, make_quiz_generator(), settings=settings)
    again = await restarted.resolve_or_create_roadmap("MACHINE LEARNING OPS")

    assert again.cached is True
    assert again.entity.id == created[0].entity.id
    assert len(first_gen.roadmap_calls) == 1
    assert second_gen.roadmap_calls == []

    merged = await restarted.list_merged_categories()
    it = next(m for m in merged if m.name == IT)
    assert "machine-learning-ops" in [c.slug for c in it.careers]


@pytest.mark.asyncio
async def test_quiz_cache_survives_restart(store, settings, make_roadmap_generator, make_quiz_generator):
    quiz_gen = make_quiz_generator()
    engine = ContentEngine(store, make_roadmap_generator(), quiz_gen, settings=settings)
    first = await engine.resolve_quiz_result({"activity": "Helping people", "subject": "Biology"})

    other_gen = make_quiz_generator()
    restarted = ContentEngine(store, make_roadmap_generator(), other_gen, settings=settings)
    second = await restarted.resolve_quiz_result({"subject": "biology", "activity": "helping people"})

    assert second.cached is True
    assert second.fingerprint == first.fingerprint
    assert other_gen.calls == []
    assert await restarted.lookup_quiz_result(first.fingerprint) is not None


@pytest.mark.asyncio
async def test_migration_then_listing(store, settings, make_roadmap, make_roadmap_generator, make_quiz_generator):
    await store.create(make_roadmap("Chef", "chef", category="Quiz Generated"))
    engine = ContentEngine(store, make_roadmap_generator(), make_quiz_generator(), settings=settings)

    report = await migrate_categories(engine.store, engine.categories)

    assert report.updated == 1
    assert (await store.get_by_slug("roadmap", "chef")).category == TOURISM
    assert (await engine.stats()).total_categories == 1
