# src/store/json_store.py - v2
"""JSON file-based store (default STORE_BACKEND=json).

Layout under STORE_ROOT:
    entities/<kind>/<slug>.json          one file per entity
    results/<fingerprint>/<kind>__<created>__<id>.json

Entity files are created exclusively, so the file system enforces slug
uniqueness per kind.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from pathwise.cache.models import CachedResult
from pathwise.core.errors import DuplicateSlugError, PersistenceFailure
from pathwise.core.models import BaseEntity, EntityKind, QuizKind, entity_from_dict
from pathwise.store.base_store import BaseContentStore

logger = logging.getLogger(__name__)


class JsonContentStore(BaseContentStore):
    """File-based store using one JSON document per record."""

    def __init__(self, store_root: Path | str) -> None:
        self._root = Path(store_root).expanduser()
        try:
            for kind in ("roadmap", "skill"):
                (self._root / "entities" / kind).mkdir(parents=True, exist_ok=True)
            (self._root / "results").mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceFailure(f"Cannot initialise store at {self._root}: {e}") from e

    # --- Entities ---

    async def get_by_slug(self, kind: EntityKind, slug: str) -> BaseEntity | None:
        path = self._entity_path(kind, slug)
        if not path.exists():
            return None
        return self._read_entity(path)

    async def get_by_id(self, kind: EntityKind, entity_id: str) -> BaseEntity | None:
        for entity in self._iter_entities(kind):
            if entity.id == entity_id:
                return entity
        return None

    async def create(self, entity: BaseEntity) -> BaseEntity:
        path = self._entity_path(entity.kind, entity.slug)
        try:
            with path.open("x", encoding="utf-8") as handle:
                handle.write(entity.model_dump_json(indent=2))
        except FileExistsError as e:
            raise DuplicateSlugError(entity.kind, entity.slug) from e
        except OSError as e:
            raise PersistenceFailure(f"Failed to write {path}: {e}") from e
        return entity

    async def update(
        self, kind: EntityKind, entity_id: str, changes: dict[str, Any]
    ) -> BaseEntity | None:
        current = await self.get_by_id(kind, entity_id)
        if current is None:
            return None
        updated = self._apply_changes(current, changes)
        old_path = self._entity_path(kind, current.slug)
        new_path = self._entity_path(kind, updated.slug)
        if new_path != old_path and new_path.exists():
            raise DuplicateSlugError(kind, updated.slug)
        self._write(new_path, updated.model_dump_json(indent=2))
        if new_path != old_path:
            old_path.unlink(missing_ok=True)
        return updated

    async def delete(self, kind: EntityKind, entity_id: str) -> bool:
        entity = await self.get_by_id(kind, entity_id)
        if entity is None:
            return False
        self._entity_path(kind, entity.slug).unlink(missing_ok=True)
        return True

    async def increment_views(self, kind: EntityKind, entity_id: str) -> bool:
        entity = await self.get_by_id(kind, entity_id)
        if entity is None:
            return False
        entity.views += 1
        self._write(self._entity_path(kind, entity.slug), entity.model_dump_json(indent=2))
        return True

    async def get_all_active(
        self, kind: EntityKind, limit: int = 100, skip: int = 0
    ) -> list[BaseEntity]:
        active = sorted(
            (e for e in self._iter_entities(kind) if e.is_active), key=self._sort_key
        )
        return active[skip : skip + limit]

    async def count(self, kind: EntityKind, generated_only: bool = False) -> int:
        return sum(
            1
            for e in self._iter_entities(kind)
            if not generated_only or (e.source == "generated" and e.is_active)
        )

    async def total_views(self, kind: EntityKind) -> int:
        return sum(e.views for e in self._iter_entities(kind))

    # --- Cached results ---

    async def find_cached_result(
        self, fingerprint: str, result_kind: QuizKind | None = None
    ) -> CachedResult | None:
        directory = self._root / "results" / fingerprint
        if not directory.is_dir():
            return None
        pattern = f"{result_kind}__*.json" if result_kind else "*.json"
        for path in sorted(directory.glob(pattern), key=lambda p: p.name.split("__")[1]):
            try:
                return CachedResult.model_validate_json(path.read_text(encoding="utf-8"))
            except (OSError, ValidationError) as e:
                logger.warning("Failed to read cached result %s: %s", path, e)
        return None

    async def create_cached_result(self, record: CachedResult) -> CachedResult:
        stamp = record.created_at.strftime("%Y%m%dT%H%M%S%f")
        path = (
            self._root
            / "results"
            / record.fingerprint
            / f"{record.result_kind}__{stamp}__{record.id}.json"
        )
        self._write(path, record.model_dump_json(indent=2))
        return record

    async def count_by_kind(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for path in (self._root / "results").glob("*/*.json"):
            kind = path.name.split("__", 1)[0]
            counts[kind] = counts.get(kind, 0) + 1
        return counts

    # --- Internals ---

    def _entity_path(self, kind: str, slug: str) -> Path:
        safe_slug = slug.replace("/", "_").replace("\\", "_")
        return self._root / "entities" / kind / f"{safe_slug}.json"

    def _iter_entities(self, kind: str) -> list[BaseEntity]:
        entities: list[BaseEntity] = []
        for path in (self._root / "entities" / kind).glob("*.json"):
            entity = self._read_entity(path)
            if entity is not None:
                entities.append(entity)
        return entities

    @staticmethod
    def _read_entity(path: Path) -> BaseEntity | None:
        try:
            return entity_from_dict(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, json.JSONDecodeError, ValidationError, ValueError) as e:
            logger.warning("Failed to read entity %s: %s", path, e)
            return None

    @staticmethod
    def _write(path: Path, payload: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = path.parent / f"{path.name}.tmp"
            tmp_path.write_text(payload, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            raise PersistenceFailure(f"Failed to write {path}: {e}") from e
