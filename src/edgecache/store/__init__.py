"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: store/__init__.py.
"""

from .base import CacheEntry, CacheStats, CacheStore
from .cloning import CloningCacheStore
from .inmemory import TTLCacheStore
from .registry import (
    DEFAULT_STORE_NAME,
    CacheStoreError,
    create_cache_store,
    list_cache_stores,
    register_cache_store,
    unregister_cache_store,
)

__all__ = [
    "CacheEntry",
    "CacheStats",
    "CacheStore",
    "TTLCacheStore",
    "CloningCacheStore",
    "DEFAULT_STORE_NAME",
    "CacheStoreError",
    "register_cache_store",
    "unregister_cache_store",
    "create_cache_store",
    "list_cache_stores",
]
