"""Bounded, time-expiring cache of resolved spike definitions.

Eviction is by insertion time, not recency: a full cache drops the entry that
was inserted earliest, and reads never re-stamp an entry.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from spike_studio.config.constants import Limits
from spike_studio.config.logging import get_logger
from spike_studio.spikes.models import SpikeSpec

logger = get_logger(__name__)


@dataclass
class CacheEntry:
    spec: SpikeSpec
    inserted_at: float


class SpikeCache:
    """Per-engine spike cache with an injectable clock.

    Usage:
        cache = SpikeCache(max_size=50, ttl=300)
        spec = cache.get("strike-react-hook-typed-ts")
        if spec is None:
            spec = resolve_somehow()
            cache.put(spec.id, spec)
    """

    def __init__(
        self,
        max_size: int = Limits.CACHE_MAX_SIZE,
        ttl: float = Limits.CACHE_TTL_SECONDS,
        time_fn: Callable[[], float] = time.monotonic,
    ):
        if max_size < 1:
            raise ValueError("Cache max_size must be at least 1")
        self.max_size = max_size
        self.ttl = ttl
        self._time_fn = time_fn
        self._entries: dict[str, CacheEntry] = {}
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, spike_id: object) -> bool:
        return spike_id in self._entries

    def _expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.inserted_at > self.ttl

    def get(self, spike_id: str) -> SpikeSpec | None:
        """Return the cached spec, dropping it if older than the TTL."""
        entry = self._entries.get(spike_id)
        if entry is None:
            self.misses += 1
            return None
        if self._expired(entry, self._time_fn()):
            del self._entries[spike_id]
            self.misses += 1
            logger.debug("Cache entry expired: %s", spike_id)
            return None
        self.hits += 1
        return entry.spec

    def peek(self, spike_id: str) -> SpikeSpec | None:
        """Like ``get`` but without counting a hit or miss or dropping stale entries."""
        entry = self._entries.get(spike_id)
        if entry is None or self._expired(entry, self._time_fn()):
            return None
        return entry.spec

    def put(self, spike_id: str, spec: SpikeSpec) -> None:
        """Insert or replace an entry, evicting the oldest insertion when full."""
        now = self._time_fn()
        self._entries.pop(spike_id, None)
        if len(self._entries) >= self.max_size:
            self._purge_expired(now)
        while len(self._entries) >= self.max_size:
            oldest = min(self._entries, key=lambda k: self._entries[k].inserted_at)
            del self._entries[oldest]
            logger.debug("Evicted cache entry: %s", oldest)
        self._entries[spike_id] = CacheEntry(spec=spec, inserted_at=now)

    def _purge_expired(self, now: float) -> None:
        for key in [k for k, e in self._entries.items() if self._expired(e, now)]:
            del self._entries[key]

    def invalidate(self, spike_id: str) -> bool:
        return self._entries.pop(spike_id, None) is not None

    def clear(self) -> None:
        self._entries = {}

    def get_stats(self) -> dict[str, int]:
        """Get cache statistics."""
        return {
            "entry_count": len(self._entries),
            "max_size": self.max_size,
            "hits": self.hits,
            "misses": self.misses,
        }
