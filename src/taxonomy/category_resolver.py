# src/taxonomy/category_resolver.py - v1
"""Merge the curated taxonomy with generated entities into one listing.

Each active entity is placed by the first stage that succeeds:
  explicit  stored category is a taxonomy name and not a legacy label
  slug      slug of a curated career
  name      lowercased display name (or one side of an "A / B" name)
  keyword   ordered keyword table, substring match on the lowercased name
  fallback  the fallback category, created on demand

Resolution is pure: it reads the entities it is given and writes nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from pathwise.core.models import BaseEntity, CareerRef, CategoryTaxonomy, MergedCategory

logger = logging.getLogger(__name__)

Stage = Literal["explicit", "slug", "name", "keyword", "fallback"]


@dataclass(frozen=True)
class Classification:
    category: str
    stage: Stage


class CategoryResolutionEngine:
    """Classifies entities against an immutable CategoryTaxonomy."""

    def __init__(self, taxonomy: CategoryTaxonomy) -> None:
        self._taxonomy = taxonomy
        self._by_slug: dict[str, str] = {}
        self._by_name: dict[str, str] = {}
        for category in taxonomy.categories:
            for career in category.careers:
                if career.slug:
                    self._by_slug[career.slug] = category.name
                self._by_name[career.name.lower()] = category.name
                if "/" in career.name:
                    for part in career.name.split("/"):
                        part = part.strip().lower()
                        if part:
                            self._by_name[part] = category.name

    @property
    def taxonomy(self) -> CategoryTaxonomy:
        return self._taxonomy

    @property
    def known_categories(self) -> list[str]:
        return self._taxonomy.category_names

    def creation_category(self, candidate: str | None) -> str:
        """Category to store for a new entity: candidate if curated, else fallback."""
        if self._taxonomy.has_category(candidate):
            return candidate  # type: ignore[return-value]
        return self._taxonomy.fallback_name

    def lookup(self, slug: str | None, name: str | None) -> Classification | None:
        """Slug then name lookup against curated careers."""
        if slug and slug in self._by_slug:
            return Classification(self._by_slug[slug], "slug")
        lowered = (name or "").lower()
        if lowered in self._by_name:
            return Classification(self._by_name[lowered], "name")
        return None

    def classify(self, entity: BaseEntity) -> Classification:
        return self.classify_fields(entity.category, entity.slug, entity.name)

    def classify_fields(
        self, category: str | None, slug: str | None, name: str | None
    ) -> Classification:
        taxonomy = self._taxonomy
        if category and taxonomy.has_category(category) and not taxonomy.is_legacy(category):
            return Classification(category, "explicit")

        found = self.lookup(slug, name)
        if found is not None:
            return found

        lowered = (name or "").lower()
        for category_name, keywords in taxonomy.keywords:
            if taxonomy.has_category(category_name) and any(k in lowered for k in keywords):
                return Classification(category_name, "keyword")

        return Classification(taxonomy.fallback_name, "fallback")

    def resolve(self, entities: Iterable[BaseEntity]) -> list[MergedCategory]:
        """Build the merged listing: taxonomy order, then fallback categories."""
        merged: dict[str, MergedCategory] = {
            c.name: MergedCategory(name=c.name, icon=c.icon, careers=list(c.careers))
            for c in self._taxonomy.categories
        }

        for entity in entities:
            if not entity.is_active:
                continue
            placed = self.classify(entity)
            target = merged.get(placed.category)
            if target is None:
                target = MergedCategory(name=placed.category, icon=self._taxonomy.fallback_icon)
                merged[placed.category] = target

            if any(c.slug == entity.slug or c.name == entity.name for c in target.careers):
                target.deduplicated += 1
                continue
            target.careers.append(CareerRef(name=entity.name, slug=entity.slug))

        skipped = sum(m.deduplicated for m in merged.values())
        if skipped:
            logger.debug("Category merge skipped %d duplicate entries", skipped)
        return list(merged.values())
