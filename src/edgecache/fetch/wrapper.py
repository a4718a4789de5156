"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Cache-aware fetch wrapper with stale-while-revalidate headers.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from ..metrics import CacheMetrics, NoOpCacheMetrics
from ..store import CacheStore, create_cache_store
from .coalescing import RequestCoalescer
from .contracts import CacheConfig, CacheEnvelope

logger = logging.getLogger("edgecache.fetch")

T = TypeVar("T")

_MISSING = object()


class CachedFetcher:
    """
    Wrap async producers with cache-check, cache-populate and response headers.

    Concurrent misses on the same key share one computation when `coalesce`
    is enabled: the caller that started it gets `X-Cache: MISS`, callers that
    joined it get `X-Cache: HIT`. Failures are never cached.
    """

    def __init__(
        self,
        store: CacheStore | str | None = None,
        *,
        coalesce: bool = True,
        metrics: CacheMetrics | None = None,
    ) -> None:
        self._store = create_cache_store(store)
        # Separate maps: each API populates the store with its own TTL policy.
        self._coalescer: RequestCoalescer[Any] | None = (
            RequestCoalescer() if coalesce else None
        )
        self._plain_coalescer: RequestCoalescer[Any] | None = (
            RequestCoalescer() if coalesce else None
        )
        self._metrics = metrics or NoOpCacheMetrics()

    @property
    def store(self) -> CacheStore:
        return self._store

    async def with_cache(
        self,
        key: str,
        compute: Callable[[], Awaitable[T]],
        config: CacheConfig | None = None,
    ) -> CacheEnvelope[T]:
        """Return cached data for `key`, or run `compute` and cache its result."""
        cfg = config or CacheConfig()
        cache_control = cfg.resolve_cache_control()

        cached = self._store.get(key, _MISSING)
        if cached is not _MISSING:
            self._record("HIT")
            return CacheEnvelope.hit(cached, cache_control=cache_control)

        async def populate() -> T:
            if cfg.timeout_s is None:
                value = await compute()
            else:
                value = await asyncio.wait_for(compute(), timeout=cfg.timeout_s)
            self._store.set(key, value, cfg.store_ttl_s)
            return value

        try:
            if self._coalescer is None:
                value, started = await populate(), True
            else:
                value, started = await self._coalescer.run(key, populate)
        except Exception as exc:
            logger.warning("Cache compute failed for key %s: %s", key, exc)
            self._record("ERROR")
            return CacheEnvelope.failure(exc)

        if started:
            self._record("MISS")
            return CacheEnvelope.miss(value, cache_control=cache_control)
        self._record("HIT")
        return CacheEnvelope.hit(value, cache_control=cache_control)

    async def get_or_compute(
        self,
        key: str,
        compute: Callable[[], Awaitable[T]],
        ttl_s: float | None = None,
    ) -> T:
        """Return the cached value or compute, store and return it. Errors propagate."""
        cached = self._store.get(key, _MISSING)
        if cached is not _MISSING:
            return cached

        async def populate() -> T:
            value = await compute()
            self._store.set(key, value, ttl_s)
            return value

        if self._plain_coalescer is None:
            return await populate()
        value, _ = await self._plain_coalescer.run(key, populate)
        return value

    def invalidate_prefix(self, prefix: str) -> int:
        """Delete every key starting with `prefix` and return how many went."""
        removed = 0
        for key in self._store.get_keys():
            if key.startswith(prefix) and self._store.delete(key):
                removed += 1
        if removed:
            self._metrics.incr("cache_invalidations_total", removed)
            logger.info("Invalidated %d cache keys with prefix %r", removed, prefix)
        return removed

    def _record(self, status: str) -> None:
        self._metrics.incr("cache_requests_total", tags={"result": status.lower()})
