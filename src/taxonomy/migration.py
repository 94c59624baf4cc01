# src/taxonomy/migration.py - v2
"""One-off repair of stored roadmap categories.

Roadmaps whose stored category is missing or a legacy label get the
category found by slug lookup, name lookup or the explicit variation map.
Listings re-infer categories anyway; this persists the result so that
stored data agrees with what users see.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from pathwise.core.errors import PersistenceFailure
from pathwise.core.models import BaseEntity
from pathwise.core.outcome import attempt
from pathwise.store.base_store import BaseContentStore
from pathwise.taxonomy.careers import CATEGORY_VARIATIONS
from pathwise.taxonomy.category_resolver import CategoryResolutionEngine

logger = logging.getLogger(__name__)

_PAGE_SIZE = 500


@dataclass(frozen=True)
class CategoryChange:
    slug: str
    name: str
    old_category: str | None
    new_category: str
    source: str


@dataclass
class MigrationReport:
    scanned: int = 0
    dry_run: bool = False
    changes: list[CategoryChange] = field(default_factory=list)
    unmatched: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def updated(self) -> int:
        return 0 if self.dry_run else len(self.changes) - len(self.failed)


async def migrate_categories(
    store: BaseContentStore,
    engine: CategoryResolutionEngine,
    variations: Mapping[str, str] | None = None,
    dry_run: bool = False,
) -> MigrationReport:
    """Persist better categories for uncategorized or legacy-labelled roadmaps."""
    variations = CATEGORY_VARIATIONS if variations is None else variations
    report = MigrationReport(dry_run=dry_run)

    for roadmap in await _all_active_roadmaps(store):
        report.scanned += 1
        current = roadmap.category
        if current and not engine.taxonomy.is_legacy(current):
            continue

        change = _propose(roadmap, engine, variations)
        if change is None:
            report.unmatched.append(roadmap.slug)
            logger.info("No category match for %r (slug: %s)", roadmap.name, roadmap.slug)
            continue
        if change.new_category == current:
            continue

        report.changes.append(change)
        if dry_run:
            continue
        outcome = await attempt(
            store.update("roadmap", roadmap.id, {"category": change.new_category}),
            PersistenceFailure,
        )
        outcome.log_if_failed(logger, "Could not update category of %s", roadmap.slug)
        if not outcome.ok:
            report.failed.append(roadmap.slug)
        elif outcome.value is None:
            logger.warning("Roadmap %s disappeared before its category could be updated", roadmap.slug)
            report.failed.append(roadmap.slug)
        else:
            logger.info(
                "Updated %r from %r to %r via %s",
                roadmap.name, current, change.new_category, change.source,
            )

    logger.info(
        "Category migration complete: scanned=%d changed=%d unmatched=%d dry_run=%s",
        report.scanned, len(report.changes), len(report.unmatched), dry_run,
    )
    return report


def _propose(
    roadmap: BaseEntity,
    engine: CategoryResolutionEngine,
    variations: Mapping[str, str],
) -> CategoryChange | None:
    found = engine.lookup(roadmap.slug, roadmap.name)
    if found is not None:
        category, source = found.category, found.stage
    else:
        category = variations.get(roadmap.name.lower())
        source = "variation"
        if category is None:
            return None
    return CategoryChange(
        slug=roadmap.slug,
        name=roadmap.name,
        old_category=roadmap.category,
        new_category=category,
        source=source,
    )


async def _all_active_roadmaps(store: BaseContentStore) -> list[BaseEntity]:
    roadmaps: list[BaseEntity] = []
    skip = 0
    while True:
        page = await store.get_all_active("roadmap", limit=_PAGE_SIZE, skip=skip)
        roadmaps.extend(page)
        if len(page) < _PAGE_SIZE:
            return roadmaps
        skip += _PAGE_SIZE
