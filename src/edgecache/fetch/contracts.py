"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Typed config and response envelope for cache-aware fetches.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Literal, TypeVar

from ..presets import TTL

T = TypeVar("T")

CacheStatus = Literal["HIT", "MISS", "ERROR"]

CACHE_CONTROL_HEADER = "Cache-Control"
X_CACHE_HEADER = "X-Cache"
NO_STORE = "no-store"


def _fmt_seconds(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True, slots=True)
class CacheConfig:
    """
    Per-call cache controls.

    Attributes:
        ttl_s: Seconds the value is considered fresh.
        stale_while_revalidate_s: Window, counted from population, during
            which a value past `ttl_s` is still served from cache. The stored
            entry lives `max(ttl_s, stale_while_revalidate_s)`; nothing is
            refetched in the background.
        cache_control: Explicit `Cache-Control` header overriding the default.
        timeout_s: Optional bound on the compute call.
    """

    ttl_s: float = TTL.MEDIUM
    stale_while_revalidate_s: float = TTL.LONG
    cache_control: str | None = None
    timeout_s: float | None = None

    def __post_init__(self) -> None:
        if self.ttl_s < 0:
            raise ValueError(f"ttl_s must be >= 0, got {self.ttl_s}")
        if self.stale_while_revalidate_s < 0:
            raise ValueError(
                f"stale_while_revalidate_s must be >= 0, got {self.stale_while_revalidate_s}"
            )

    @property
    def store_ttl_s(self) -> float:
        return max(self.ttl_s, self.stale_while_revalidate_s)

    def resolve_cache_control(self) -> str:
        if self.cache_control is not None:
            return self.cache_control
        return (
            f"public, max-age={_fmt_seconds(self.ttl_s)}, "
            f"stale-while-revalidate={_fmt_seconds(self.stale_while_revalidate_s)}"
        )


@dataclass(slots=True)
class CacheEnvelope(Generic[T]):
    """Uniform result of one cache-aware fetch."""

    data: T | None
    error: BaseException | None = None
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def cache_status(self) -> CacheStatus | None:
        return self.headers.get(X_CACHE_HEADER)  # type: ignore[return-value]

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def hit(cls, data: T, *, cache_control: str) -> "CacheEnvelope[T]":
        return cls(
            data=data,
            headers={CACHE_CONTROL_HEADER: cache_control, X_CACHE_HEADER: "HIT"},
        )

    @classmethod
    def miss(cls, data: T, *, cache_control: str) -> "CacheEnvelope[T]":
        return cls(
            data=data,
            headers={CACHE_CONTROL_HEADER: cache_control, X_CACHE_HEADER: "MISS"},
        )

    @classmethod
    def failure(cls, error: BaseException) -> "CacheEnvelope[T]":
        return cls(
            data=None,
            error=error,
            headers={CACHE_CONTROL_HEADER: NO_STORE, X_CACHE_HEADER: "ERROR"},
        )
