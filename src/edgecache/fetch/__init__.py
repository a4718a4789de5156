"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: fetch/__init__.py.
"""

from .coalescing import RequestCoalescer
from .contracts import (
    CACHE_CONTROL_HEADER,
    NO_STORE,
    X_CACHE_HEADER,
    CacheConfig,
    CacheEnvelope,
    CacheStatus,
)
from .defaults import default_fetcher, invalidate_cache_by_prefix, with_cache
from .keys import canonical_json, generate_cache_key
from .wrapper import CachedFetcher

__all__ = [
    "CachedFetcher",
    "CacheConfig",
    "CacheEnvelope",
    "CacheStatus",
    "CACHE_CONTROL_HEADER",
    "X_CACHE_HEADER",
    "NO_STORE",
    "RequestCoalescer",
    "canonical_json",
    "generate_cache_key",
    "default_fetcher",
    "with_cache",
    "invalidate_cache_by_prefix",
]
