"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

In-process TTL caching for edge request handlers.

Quick start::

    from edgecache import CacheConfig, CachedFetcher, TTLCacheStore, generate_cache_key

    store = TTLCacheStore()
    fetcher = CachedFetcher(store)

    key = generate_cache_key("dashboardStats", {"org": "acme", "range": "30d"})
    envelope = await fetcher.with_cache(key, load_stats, CacheConfig(ttl_s=60))
    envelope.headers["X-Cache"]  # "MISS" first, "HIT" afterwards

    store.close()
"""

from .config import CacheSettings
from .fetch import (
    CacheConfig,
    CachedFetcher,
    CacheEnvelope,
    default_fetcher,
    generate_cache_key,
    invalidate_cache_by_prefix,
    with_cache,
)
from .http import combine_headers, get_cors_headers, validate_params
from .metrics import CacheMetrics, NoOpCacheMetrics, PrometheusCacheMetrics
from .presets import CACHE_KEYS, TTL
from .store import (
    CacheStats,
    CacheStore,
    CacheStoreError,
    CloningCacheStore,
    TTLCacheStore,
    create_cache_store,
)

__all__ = [
    "CacheSettings",
    "CacheConfig",
    "CachedFetcher",
    "CacheEnvelope",
    "default_fetcher",
    "generate_cache_key",
    "invalidate_cache_by_prefix",
    "with_cache",
    "combine_headers",
    "get_cors_headers",
    "validate_params",
    "CacheMetrics",
    "NoOpCacheMetrics",
    "PrometheusCacheMetrics",
    "CACHE_KEYS",
    "TTL",
    "CacheStats",
    "CacheStore",
    "CacheStoreError",
    "CloningCacheStore",
    "TTLCacheStore",
    "create_cache_store",
]
