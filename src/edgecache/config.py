"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Cache settings and explicit config loading.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _env_first(*names: str, default: str | None = None) -> str | None:
    """
    Return the first non-empty environment variable in `names`.

    Args:
        *names: Environment variable names to check in order.
        default: Value returned if no non-empty variable is found.
    """
    for name in names:
        raw = os.getenv(name)
        if raw is None:
            continue
        value = raw.strip()
        if value:
            return value
    return default


@dataclass(frozen=True, slots=True)
class CacheSettings:
    """Explicit settings used by cache stores and the fetch wrapper."""

    default_ttl_s: float = 300.0
    sweep_interval_s: float = 120.0
    stale_while_revalidate_s: float = 3600.0
    cors_origin: str = "*"

    @staticmethod
    def from_env() -> "CacheSettings":
        """Load settings from `EDGECACHE_*` environment variables."""
        return CacheSettings(
            default_ttl_s=float(_env_first("EDGECACHE_DEFAULT_TTL_S", default="300") or "300"),
            sweep_interval_s=float(
                _env_first("EDGECACHE_SWEEP_INTERVAL_S", default="120") or "120"
            ),
            stale_while_revalidate_s=float(
                _env_first("EDGECACHE_STALE_WHILE_REVALIDATE_S", default="3600") or "3600"
            ),
            cors_origin=_env_first("EDGECACHE_CORS_ORIGIN", default="*") or "*",
        )
