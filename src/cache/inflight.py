# src/cache/inflight.py - v1
"""In-process leases that collapse concurrent work on the same key.

The first caller for a key holds the lease; later callers wait for it to be
released (bounded by lease_timeout_s) and then re-check the store before
doing the work themselves. On timeout the waiter proceeds with a fresh
attempt. Leases do not span processes.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)

DEFAULT_LEASE_TIMEOUT_S = 30.0


class InflightRegistry:
    """Keyed lease registry for a single event loop."""

    def __init__(self, lease_timeout_s: float = DEFAULT_LEASE_TIMEOUT_S) -> None:
        if lease_timeout_s <= 0:
            raise ValueError("lease_timeout_s must be > 0")
        self._timeout = lease_timeout_s
        self._leases: dict[str, asyncio.Event] = {}

    def is_held(self, key: str) -> bool:
        return key in self._leases

    @asynccontextmanager
    async def lease(self, key: str) -> AsyncIterator[bool]:
        """Hold the lease for key while the body runs.

        Yields True if the caller had to wait for another holder first, which
        means the store should be re-checked before generating.
        """
        waited = False
        while key in self._leases:
            waited = True
            holder = self._leases[key]
            try:
                await asyncio.wait_for(holder.wait(), timeout=self._timeout)
            except asyncio.TimeoutError:
                logger.warning(
                    "Lease for %s expired after %.1fs, proceeding", key, self._timeout
                )
                break

        own = asyncio.Event()
        self._leases[key] = own
        try:
            yield waited
        finally:
            own.set()
            if self._leases.get(key) is own:
                del self._leases[key]
