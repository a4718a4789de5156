"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: store/registry.py.
"""

from __future__ import annotations

from threading import Lock

from ..config import CacheSettings
from .base import CacheStore
from .inmemory import TTLCacheStore

DEFAULT_STORE_NAME = "default"

_REGISTRY: dict[str, CacheStore] = {}
_LOCK = Lock()


class CacheStoreError(RuntimeError):
    """Raised when cache store resolution fails."""


def _normalize(name: str) -> str:
    key = name.strip().lower()
    if not key:
        raise CacheStoreError("Cache store name must be non-empty")
    return key


def register_cache_store(
    name: str,
    store: CacheStore,
    *,
    overwrite: bool = False,
) -> None:
    """Register one cache store under `name`."""
    key = _normalize(name)
    with _LOCK:
        if key in _REGISTRY and not overwrite:
            raise CacheStoreError(f"Cache store already registered: {key}")
        _REGISTRY[key] = store


def unregister_cache_store(name: str) -> CacheStore | None:
    """Remove a registered store and return it, closing nothing."""
    with _LOCK:
        return _REGISTRY.pop(_normalize(name), None)


def create_cache_store(
    name: str | CacheStore | None = None,
    *,
    settings: CacheSettings | None = None,
) -> CacheStore:
    """
    Resolve a cache store from name/instance/default.

    `None` resolves the process-wide default store, creating it from
    `settings` (or `CacheSettings.from_env()`) on first access.
    """
    if name is None:
        with _LOCK:
            existing = _REGISTRY.get(DEFAULT_STORE_NAME)
            if existing is not None:
                return existing
            store = TTLCacheStore.from_settings(settings or CacheSettings.from_env())
            _REGISTRY[DEFAULT_STORE_NAME] = store
            return store

    if not isinstance(name, str):
        return name

    key = _normalize(name)
    with _LOCK:
        resolved = _REGISTRY.get(key)
    if resolved is None:
        raise CacheStoreError(f"Unknown cache store '{name}'")
    return resolved


def list_cache_stores() -> list[str]:
    """List registered cache store names."""
    with _LOCK:
        return sorted(_REGISTRY.keys())
