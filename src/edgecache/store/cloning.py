"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: store/cloning.py.
"""

from __future__ import annotations

import copy
from typing import Any

from .base import CacheStats, CacheStore


class CloningCacheStore(CacheStore):
    """Opt-in wrapper that deep-copies values going in and coming out."""

    def __init__(self, inner: CacheStore) -> None:
        self._inner = inner

    @property
    def inner(self) -> CacheStore:
        return self._inner

    def get(self, key: str, default: Any = None) -> Any:
        marker = object()
        value = self._inner.get(key, marker)
        if value is marker:
            return default
        return copy.deepcopy(value)

    def set(self, key: str, value: Any, ttl_s: float | None = None) -> bool:
        return self._inner.set(key, copy.deepcopy(value), ttl_s)

    def delete(self, key: str) -> bool:
        return self._inner.delete(key)

    def has(self, key: str) -> bool:
        return self._inner.has(key)

    def clear(self) -> None:
        self._inner.clear()

    def get_stats(self) -> CacheStats:
        return self._inner.get_stats()

    def get_keys(self) -> list[str]:
        return self._inner.get_keys()

    def get_ttl(self, key: str) -> float | None:
        return self._inner.get_ttl(key)

    def set_ttl(self, key: str, ttl_s: float) -> bool:
        return self._inner.set_ttl(key, ttl_s)
