"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module-level helpers bound to the process-wide default store.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from threading import Lock
from typing import TypeVar

from .contracts import CacheConfig, CacheEnvelope
from .wrapper import CachedFetcher

T = TypeVar("T")

_DEFAULT: CachedFetcher | None = None
_LOCK = Lock()


def default_fetcher() -> CachedFetcher:
    """Return the fetcher bound to the default store, creating it once."""
    global _DEFAULT
    with _LOCK:
        if _DEFAULT is None:
            _DEFAULT = CachedFetcher()
        return _DEFAULT


async def with_cache(
    key: str,
    compute: Callable[[], Awaitable[T]],
    config: CacheConfig | None = None,
) -> CacheEnvelope[T]:
    return await default_fetcher().with_cache(key, compute, config)


def invalidate_cache_by_prefix(prefix: str) -> int:
    return default_fetcher().invalidate_prefix(prefix)
