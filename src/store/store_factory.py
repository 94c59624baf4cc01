# src/store/store_factory.py - v1
"""Factory for content store instantiation."""

from __future__ import annotations

from pathwise.config.settings import Settings
from pathwise.store.base_store import BaseContentStore


def create_content_store(settings: Settings | None = None) -> BaseContentStore:
    """Instantiate the configured store backend.

    Args:
        settings: Application settings. Defaults to an in-memory store.

    Returns:
        Configured BaseContentStore implementation.
    """
    backend = "memory" if settings is None else settings.store_backend

    if backend == "memory":
        from pathwise.store.memory_store import MemoryContentStore
        return MemoryContentStore()

    if backend == "json":
        from pathwise.store.json_store import JsonContentStore
        return JsonContentStore(store_root=settings.store_root)

    if backend == "sqlite":
        from pathwise.store.sqlite_store import SqliteContentStore
        return SqliteContentStore(db_path=settings.store_root / "pathwise.db")

    if backend == "redis":
        from pathwise.store.redis_store import RedisContentStore
        if not settings.store_redis_url:
            raise ValueError("STORE_REDIS_URL must be set when STORE_BACKEND=redis")
        return RedisContentStore(redis_url=settings.store_redis_url)

    raise ValueError(f"Unsupported store backend: {backend!r}")
