"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Metrics adapters for cache observability.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

# name -> (help text, label names)
CACHE_COUNTERS: dict[str, tuple[str, tuple[str, ...]]] = {
    "cache_requests_total": ("Cache-aware fetches by X-Cache result", ("result",)),
    "cache_invalidations_total": ("Keys removed by prefix invalidation", ()),
}


class CacheMetrics(Protocol):
    """Minimal metrics interface for cache instrumentation."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        """Increment a counter metric."""


class NoOpCacheMetrics:
    """Default metrics sink when no metrics backend is provided."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        _ = name
        _ = value
        _ = tags


class PrometheusCacheMetrics(CacheMetrics):
    """
    Prometheus counters for the cache metrics in `CACHE_COUNTERS`.

    Requires `prometheus_client` package. Counters are registered up front so
    scrapes see zero-valued series before the first fetch. Pass a dedicated
    `registry` in tests to avoid duplicate-collector errors on the global one.
    """

    def __init__(self, *, namespace: str = "edgecache", registry=None) -> None:
        try:
            from prometheus_client import REGISTRY, Counter
        except ModuleNotFoundError as exc:  # pragma: no cover
            raise RuntimeError(
                "PrometheusCacheMetrics requires `prometheus_client` to be installed."
            ) from exc

        target = registry if registry is not None else REGISTRY
        self._counters = {
            name: (
                Counter(
                    name=name,
                    documentation=documentation,
                    namespace=namespace,
                    labelnames=label_names,
                    registry=target,
                ),
                label_names,
            )
            for name, (documentation, label_names) in CACHE_COUNTERS.items()
        }

    def incr(self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None) -> None:
        entry = self._counters.get(name)
        if entry is None:
            raise ValueError(f"Unknown cache metric '{name}'")
        counter, label_names = entry
        if label_names:
            labels = tags or {}
            counter.labels(*(str(labels.get(label, "")) for label in label_names)).inc(value)
        else:
            counter.inc(value)
