from __future__ import annotations

"""
Time bounded caching for discovery results.

Infrastructure APIs behind the providers are slow and rate limited, so a
provider result is kept for a fixed TTL and replayed to every scrape inside
that window. Expiry is enforced when an entry is read; the periodic sweep only
reclaims memory and never decides liveness.
"""

import builtins
import logging
import threading
import time
from collections.abc import Callable
from typing import Any

from ..models import DiscoveryResult
from .base import ClusterProvider

logger = logging.getLogger(__name__)


class CacheEntry:
    """Cache entry holding one value with its insertion time and TTL."""

    def __init__(self, value: Any, ttl: float, created_at: float):
        self.value = value
        self.ttl = ttl
        self.created_at = created_at

    def is_expired(self, now: float) -> bool:
        """Check if cache entry is expired."""
        return now - self.created_at >= self.ttl


class TTLCache:
    """Thread safe in-memory cache with per-entry TTL checked on read."""

    def __init__(
        self,
        default_ttl: float,
        sweep_interval: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if default_ttl <= 0:
            raise ValueError("default_ttl must be positive")
        if sweep_interval is None:
            sweep_interval = default_ttl * 2
        if sweep_interval <= default_ttl:
            raise ValueError(
                f"sweep_interval ({sweep_interval}s) must be greater than default_ttl ({default_ttl}s)"
            )

        self.default_ttl = default_ttl
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._entries: builtins.dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()
        self._stats = {"hits": 0, "misses": 0, "sets": 0, "evictions": 0}

    def get(self, key: str) -> Any | None:
        """Return the live value stored under key, or None."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._stats["misses"] += 1
                return None

            if entry.is_expired(self._clock()):
                del self._entries[key]
                self._stats["misses"] += 1
                self._stats["evictions"] += 1
                return None

            self._stats["hits"] += 1
            return entry.value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store value under key, replacing any previous entry wholesale."""
        ttl = self.default_ttl if ttl is None else ttl
        if ttl >= self.sweep_interval:
            raise ValueError("entry ttl must be shorter than the sweep interval")

        with self._lock:
            now = self._clock()
            if now - self._last_sweep >= self.sweep_interval:
                self._sweep(now)
            self._entries[key] = CacheEntry(value, ttl, now)
            self._stats["sets"] += 1

    def _sweep(self, now: float) -> None:
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        self._stats["evictions"] += len(expired)
        self._last_sweep = now

    def get_stats(self) -> builtins.dict[str, float | int]:
        """Get cache statistics."""
        with self._lock:
            total_requests = self._stats["hits"] + self._stats["misses"]
            hit_rate = self._stats["hits"] / total_requests if total_requests > 0 else 0.0
            return {
                **self._stats,
                "total_requests": total_requests,
                "hit_rate": hit_rate,
                "cache_size": len(self._entries),
            }


class CachedClusterProvider(ClusterProvider):
    """Read-through cache in front of a single provider."""

    CACHE_KEY = "clusters"

    def __init__(
        self,
        provider: ClusterProvider,
        ttl: float,
        sweep_interval: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.provider = provider
        self.ttl = ttl
        self.cache = TTLCache(ttl, sweep_interval=sweep_interval, clock=clock)

    @property
    def source(self) -> str:
        return f"cached({self.provider.source})"

    async def provide(self) -> DiscoveryResult:
        cached = self.cache.get(self.CACHE_KEY)
        if cached is not None:
            logger.debug("Serving %d clusters for %s from cache", len(cached), self.provider.source)
            return dict(cached)

        # Failures propagate uncached so the next scrape asks the provider again.
        clusters = await self.provider.provide()
        self.cache.set(self.CACHE_KEY, dict(clusters), self.ttl)

        logger.info(
            "Refreshed %s: %d clusters cached for %.0fs",
            self.provider.source,
            len(clusters),
            self.ttl,
        )
        return clusters
