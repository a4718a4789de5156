"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: store/base.py.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(slots=True)
class CacheEntry:
    """One cached value with expiration metadata."""

    value: Any
    expires_at_s: float

    def is_expired(self, now_s: float) -> bool:
        return now_s >= self.expires_at_s


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Cumulative hit/miss counters plus the live key count."""

    hits: int = 0
    misses: int = 0
    keys: int = 0


def expiry_for(now_s: float, ttl_s: float) -> float:
    """Absolute expiry for a TTL; zero means the entry never expires."""
    if ttl_s < 0:
        raise ValueError(f"TTL must be >= 0, got {ttl_s}")
    if ttl_s == 0:
        return math.inf
    return now_s + ttl_s


class CacheStore(Protocol):
    """Protocol implemented by synchronous key/value stores with expiration."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any, ttl_s: float | None = None) -> bool: ...

    def delete(self, key: str) -> bool: ...

    def has(self, key: str) -> bool: ...

    def clear(self) -> None: ...

    def get_stats(self) -> CacheStats: ...

    def get_keys(self) -> list[str]: ...

    def get_ttl(self, key: str) -> float | None: ...

    def set_ttl(self, key: str, ttl_s: float) -> bool: ...
