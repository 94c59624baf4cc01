# src/store/sqlite_store.py - v2
"""SQLite-based store (STORE_BACKEND=sqlite).

Uses stdlib sqlite3, no external dependency. The UNIQUE(kind, slug)
constraint enforces at-most-one entity per slug.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from pathwise.cache.models import CachedResult
from pathwise.core.errors import DuplicateSlugError, PersistenceFailure
from pathwise.core.models import BaseEntity, EntityKind, QuizKind, entity_from_dict
from pathwise.store.base_store import BaseContentStore

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS entities (
    id TEXT PRIMARY KEY,
    kind TEXT NOT NULL,
    slug TEXT NOT NULL,
    name TEXT NOT NULL,
    category TEXT,
    source TEXT NOT NULL,
    is_active INTEGER NOT NULL DEFAULT 1,
    views INTEGER NOT NULL DEFAULT 0,
    data TEXT NOT NULL,
    UNIQUE (kind, slug)
);
CREATE TABLE IF NOT EXISTS cached_results (
    id TEXT PRIMARY KEY,
    fingerprint TEXT NOT NULL,
    result_kind TEXT NOT NULL,
    data TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_results_fp ON cached_results(fingerprint, result_kind);
"""


class SqliteContentStore(BaseContentStore):
    """SQLite-backed store. The views column is authoritative for counters."""

    def __init__(self, db_path: Path | str) -> None:
        self._db_path = Path(db_path).expanduser()
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self._db_path))
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.executescript(_SCHEMA)
        except (OSError, sqlite3.Error) as e:
            raise PersistenceFailure(f"Cannot open store {self._db_path}: {e}") from e

    # --- Entities ---

    async def get_by_slug(self, kind: EntityKind, slug: str) -> BaseEntity | None:
        row = self._fetchone(
            "SELECT data, views FROM entities WHERE kind = ? AND slug = ?", (kind, slug)
        )
        return self._row_to_entity(row)

    async def get_by_id(self, kind: EntityKind, entity_id: str) -> BaseEntity | None:
        row = self._fetchone(
            "SELECT data, views FROM entities WHERE kind = ? AND id = ?", (kind, entity_id)
        )
        return self._row_to_entity(row)

    async def create(self, entity: BaseEntity) -> BaseEntity:
        try:
            self._conn.execute(
                """INSERT INTO entities
                   (id, kind, slug, name, category, source, is_active, views, data)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                self._entity_row(entity),
            )
            self._conn.commit()
        except sqlite3.IntegrityError as e:
            self._conn.rollback()
            raise DuplicateSlugError(entity.kind, entity.slug) from e
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Failed to insert {entity.kind} {entity.slug}: {e}") from e
        return entity

    async def update(
        self, kind: EntityKind, entity_id: str, changes: dict[str, Any]
    ) -> BaseEntity | None:
        current = await self.get_by_id(kind, entity_id)
        if current is None:
            return None
        updated = self._apply_changes(current, changes)
        try:
            self._conn.execute(
                """UPDATE entities SET slug = ?, name = ?, category = ?, source = ?,
                   is_active = ?, views = ?, data = ? WHERE kind = ? AND id = ?""",
                (
                    updated.slug,
                    updated.name,
                    updated.category,
                    updated.source,
                    int(updated.is_active),
                    updated.views,
                    updated.model_dump_json(),
                    kind,
                    entity_id,
                ),
            )
            self._conn.commit()
        except sqlite3.IntegrityError as e:
            self._conn.rollback()
            raise DuplicateSlugError(kind, updated.slug) from e
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Failed to update {kind} {entity_id}: {e}") from e
        return updated

    async def delete(self, kind: EntityKind, entity_id: str) -> bool:
        cursor = self._execute(
            "DELETE FROM entities WHERE kind = ? AND id = ?", (kind, entity_id)
        )
        return cursor.rowcount > 0

    async def increment_views(self, kind: EntityKind, entity_id: str) -> bool:
        cursor = self._execute(
            "UPDATE entities SET views = views + 1 WHERE kind = ? AND id = ?",
            (kind, entity_id),
        )
        return cursor.rowcount > 0

    async def get_all_active(
        self, kind: EntityKind, limit: int = 100, skip: int = 0
    ) -> list[BaseEntity]:
        rows = self._fetchall(
            """SELECT data, views FROM entities WHERE kind = ? AND is_active = 1
               ORDER BY COALESCE(category, ''), name LIMIT ? OFFSET ?""",
            (kind, limit, skip),
        )
        return [e for e in (self._row_to_entity(r) for r in rows) if e is not None]

    async def count(self, kind: EntityKind, generated_only: bool = False) -> int:
        query = "SELECT COUNT(*) FROM entities WHERE kind = ?"
        if generated_only:
            query += " AND source = 'generated' AND is_active = 1"
        row = self._fetchone(query, (kind,))
        return int(row[0]) if row else 0

    async def total_views(self, kind: EntityKind) -> int:
        row = self._fetchone("SELECT COALESCE(SUM(views), 0) FROM entities WHERE kind = ?", (kind,))
        return int(row[0]) if row else 0

    # --- Cached results ---

    async def find_cached_result(
        self, fingerprint: str, result_kind: QuizKind | None = None
    ) -> CachedResult | None:
        if result_kind is None:
            row = self._fetchone(
                "SELECT data FROM cached_results WHERE fingerprint = ? ORDER BY created_at LIMIT 1",
                (fingerprint,),
            )
        else:
            row = self._fetchone(
                """SELECT data FROM cached_results WHERE fingerprint = ? AND result_kind = ?
                   ORDER BY created_at LIMIT 1""",
                (fingerprint, result_kind),
            )
        if row is None:
            return None
        try:
            return CachedResult.model_validate_json(row[0])
        except ValidationError as e:
            logger.warning("Failed to deserialize cached result %s: %s", fingerprint, e)
            return None

    async def create_cached_result(self, record: CachedResult) -> CachedResult:
        self._execute(
            """INSERT INTO cached_results (id, fingerprint, result_kind, data, created_at)
               VALUES (?, ?, ?, ?, ?)""",
            (
                record.id,
                record.fingerprint,
                record.result_kind,
                record.model_dump_json(),
                record.created_at.isoformat(),
            ),
        )
        return record

    async def count_by_kind(self) -> dict[str, int]:
        rows = self._fetchall(
            "SELECT result_kind, COUNT(*) FROM cached_results GROUP BY result_kind", ()
        )
        return {kind: int(n) for kind, n in rows}

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    # --- Internals ---

    @staticmethod
    def _entity_row(entity: BaseEntity) -> tuple[Any, ...]:
        return (
            entity.id,
            entity.kind,
            entity.slug,
            entity.name,
            entity.category,
            entity.source,
            int(entity.is_active),
            entity.views,
            entity.model_dump_json(),
        )

    @staticmethod
    def _row_to_entity(row: tuple[Any, ...] | None) -> BaseEntity | None:
        if row is None:
            return None
        try:
            data = json.loads(row[0])
            data["views"] = int(row[1])
            return entity_from_dict(data)
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning("Failed to deserialize entity row: %s", e)
            return None

    def _execute(self, query: str, params: tuple[Any, ...]) -> sqlite3.Cursor:
        try:
            cursor = self._conn.execute(query, params)
            self._conn.commit()
            return cursor
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Store write failed: {e}") from e

    def _fetchone(self, query: str, params: tuple[Any, ...]) -> tuple[Any, ...] | None:
        try:
            return self._conn.execute(query, params).fetchone()
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Store read failed: {e}") from e

    def _fetchall(self, query: str, params: tuple[Any, ...]) -> list[tuple[Any, ...]]:
        try:
            return self._conn.execute(query, params).fetchall()
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Store read failed: {e}") from e
