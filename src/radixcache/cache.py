"""Bounded prefix cache on top of the radix tree: exact and best-prefix lookups, LRU eviction, Prometheus metrics."""

import threading
from pathlib import Path
from typing import Any

from prometheus_client import Counter, Gauge

from radixcache.config import CacheConfig, load_config
from radixcache.tree import BestMatch, RadixTree

# --- Prometheus metrics ---
LOOKUP_COUNT = Counter(
    "radixcache_lookups_total",
    "Cache lookups",
    ["kind", "hit"],
)
EVICTION_COUNT = Counter(
    "radixcache_evictions_total",
    "Entries evicted from the cache",
)
ENTRIES = Gauge(
    "radixcache_entries",
    "Entries currently stored in the cache",
    ["name"],
)


class PrefixCache:
    """Cache values keyed by text. lookup() reuses the entry for the longest cached prefix of a query."""

    def __init__(self, max_entries: int = 0, normalize: bool = True, name: str = "default") -> None:
        if max_entries < 0:
            raise ValueError(f"max_entries must be >= 0, got {max_entries}")
        self.max_entries = max_entries
        self.normalize = normalize
        self.name = name
        self._entries = ENTRIES.labels(name=name)
        self._tree = RadixTree()
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, config: CacheConfig | str | Path | None = None, name: str = "default") -> "PrefixCache":
        if not isinstance(config, CacheConfig):
            config = load_config(config)
        return cls(max_entries=config.max_entries, normalize=config.normalize, name=name)

    def _key(self, prefix: str) -> str:
        return prefix.strip().lower() if self.normalize else prefix

    def get(self, prefix: str, default: Any = None) -> Any:
        """Return the value cached for exactly prefix, or default on a miss."""
        key = self._key(prefix)
        with self._lock:
            hit = key in self._tree
            value = self._tree.get(key, default)
        LOOKUP_COUNT.labels(kind="exact", hit=str(hit).lower()).inc()
        return value

    def lookup(self, query: str) -> BestMatch | None:
        """Return the entry for the longest cached prefix of query, or None."""
        with self._lock:
            match = self._tree.get_best_match(self._key(query))
        LOOKUP_COUNT.labels(kind="prefix", hit=str(match is not None).lower()).inc()
        return match

    def set(self, prefix: str, value: Any) -> None:
        """Cache value for prefix, evicting least recently used entries beyond max_entries."""
        key = self._key(prefix)
        if not key:
            raise ValueError("cache key must be non-empty")
        with self._lock:
            self._tree.put(key, value)
            while self.max_entries and len(self._tree) > self.max_entries:
                if not self._evict_one():
                    break
            self._entries.set(len(self._tree))

    def delete(self, prefix: str) -> bool:
        """Invalidate the entry for a prefix."""
        with self._lock:
            removed = self._tree.delete(self._key(prefix))
            self._entries.set(len(self._tree))
        return removed

    def evict(self) -> bool:
        """Drop the least recently used entry. Returns False if the cache is empty."""
        with self._lock:
            evicted = self._evict_one()
            self._entries.set(len(self._tree))
        return evicted

    def _evict_one(self) -> bool:
        if not self._tree.evict_lru():
            return False
        EVICTION_COUNT.inc()
        return True

    def clear(self) -> None:
        with self._lock:
            self._tree.clear()
            self._entries.set(0)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tree)

    def __contains__(self, prefix: object) -> bool:
        if not isinstance(prefix, str):
            return False
        with self._lock:
            return self._key(prefix) in self._tree
