"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: store/inmemory.py.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections.abc import Callable
from typing import Any

from ..config import CacheSettings
from .base import CacheEntry, CacheStats, CacheStore, expiry_for

logger = logging.getLogger("edgecache.store")


class TTLCacheStore(CacheStore):
    """
    Process-local key/value store with per-entry expiration.

    Values are stored and returned by reference. Callers that mutate a value
    returned by ``get`` change what every later reader of that key sees; wrap
    the store in ``CloningCacheStore`` when isolation is needed.

    Expired entries are dropped lazily on access and proactively by a
    background sweeper thread started on construction. Call ``close()`` to
    stop the sweeper.
    """

    def __init__(
        self,
        *,
        default_ttl_s: float = 300.0,
        sweep_interval_s: float | None = 120.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if default_ttl_s < 0:
            raise ValueError(f"default_ttl_s must be >= 0, got {default_ttl_s}")
        self._default_ttl_s = default_ttl_s
        self._clock = clock
        self._rows: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._stop = threading.Event()
        self._sweeper: threading.Thread | None = None
        if sweep_interval_s is not None and sweep_interval_s > 0:
            self._sweeper = threading.Thread(
                target=self._sweep_loop,
                args=(sweep_interval_s,),
                name="edgecache-sweeper",
                daemon=True,
            )
            self._sweeper.start()

    @classmethod
    def from_settings(cls, settings: CacheSettings) -> "TTLCacheStore":
        """Build a store from explicit settings."""
        return cls(
            default_ttl_s=settings.default_ttl_s,
            sweep_interval_s=settings.sweep_interval_s,
        )

    @property
    def default_ttl_s(self) -> float:
        return self._default_ttl_s

    @property
    def sweeping(self) -> bool:
        """Whether the background sweeper thread is alive."""
        return self._sweeper is not None and self._sweeper.is_alive()

    def get(self, key: str, default: Any = None) -> Any:
        """Return the live value for `key`, or `default` when absent/expired."""
        with self._lock:
            row = self._live_row(key)
            if row is None:
                self._misses += 1
                return default
            self._hits += 1
            return row.value

    def set(self, key: str, value: Any, ttl_s: float | None = None) -> bool:
        ttl = self._default_ttl_s if ttl_s is None else ttl_s
        with self._lock:
            self._rows[key] = CacheEntry(
                value=value, expires_at_s=expiry_for(self._clock(), ttl)
            )
        return True

    def delete(self, key: str) -> bool:
        with self._lock:
            row = self._rows.pop(key, None)
            return row is not None and not row.is_expired(self._clock())

    def has(self, key: str) -> bool:
        with self._lock:
            return self._live_row(key) is not None

    def clear(self) -> None:
        """Drop every entry. Hit/miss counters are cumulative and kept."""
        with self._lock:
            self._rows.clear()

    def reset_stats(self) -> None:
        with self._lock:
            self._hits = 0
            self._misses = 0

    def get_stats(self) -> CacheStats:
        with self._lock:
            now = self._clock()
            live = sum(1 for row in self._rows.values() if not row.is_expired(now))
            return CacheStats(hits=self._hits, misses=self._misses, keys=live)

    def get_keys(self) -> list[str]:
        with self._lock:
            now = self._clock()
            return [key for key, row in self._rows.items() if not row.is_expired(now)]

    def get_ttl(self, key: str) -> float | None:
        """
        Remaining seconds until `key` expires.

        Returns `0.0` for entries that never expire and `None` when the key
        is absent or already expired.
        """
        with self._lock:
            row = self._live_row(key)
            if row is None:
                return None
            if math.isinf(row.expires_at_s):
                return 0.0
            return max(0.0, row.expires_at_s - self._clock())

    def set_ttl(self, key: str, ttl_s: float) -> bool:
        with self._lock:
            row = self._live_row(key)
            if row is None:
                return False
            row.expires_at_s = expiry_for(self._clock(), ttl_s)
            return True

    def sweep(self) -> int:
        """Evict every expired entry now and return how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [key for key, row in self._rows.items() if row.is_expired(now)]
            for key in expired:
                del self._rows[key]
        return len(expired)

    def close(self) -> None:
        """Stop the background sweeper. Entries stay readable."""
        self._stop.set()
        sweeper = self._sweeper
        if sweeper is not None and sweeper is not threading.current_thread():
            sweeper.join()
        self._sweeper = None

    def __enter__(self) -> "TTLCacheStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def _live_row(self, key: str) -> CacheEntry | None:
        # Caller holds self._lock.
        row = self._rows.get(key)
        if row is None:
            return None
        if row.is_expired(self._clock()):
            del self._rows[key]
            return None
        return row

    def _sweep_loop(self, interval_s: float) -> None:
        while not self._stop.wait(interval_s):
            try:
                evicted = self.sweep()
            except Exception:  # noqa: BLE001
                logger.exception("Cache sweep failed")
                continue
            if evicted:
                logger.debug("Swept %d expired cache entries", evicted)
