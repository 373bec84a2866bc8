"""
In-process TTL cache for resolved pools.

Each ``ResolutionCache`` is an explicitly constructed object with its own
clock and TTL. Nothing is shared between instances and nothing is persisted.
Keys are expected to be normalised (lower-cased) addresses; the caller is
responsible for normalising before lookup.
"""

import logging
import time
from collections import OrderedDict
from typing import Any, Callable, Hashable, NamedTuple, Optional

log = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 5 * 60


class CacheEntry(NamedTuple):
    value: Any
    inserted_at: float


class ResolutionCache:
    """TTL cache with an optional least-recently-used size bound.

    Parameters
    ----------
    ttl_seconds : float, default 300
        Maximum age of an entry. Older entries are treated as absent.
    clock : callable, default time.monotonic
        Returns the current time in seconds.
    max_entries : int | None, default None
        When set, the least recently used entry is evicted once the cache
        grows past this many entries. ``None`` or ``0`` means unbounded.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        max_entries: Optional[int] = None,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        if max_entries is not None and max_entries < 0:
            raise ValueError(f"max_entries must be >= 0, got {max_entries}")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries or None
        self._clock = clock
        self._entries: "OrderedDict[Hashable, CacheEntry]" = OrderedDict()

    def _is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.inserted_at < self.ttl_seconds

    def get(self, key: Hashable) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not self._is_fresh(entry, self._clock()):
            # expired entries are never served
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return entry.value

    def put(self, key: Hashable, value: Any) -> None:
        # last write wins
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(value, self._clock())
        if self.max_entries is not None:
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                log.debug(f"Evicted {evicted} (cache bound {self.max_entries})")

    def invalidate(self, key: Hashable) -> None:
        self._entries.pop(key, None)

    def sweep(self) -> int:
        """Physically drop expired entries. Returns how many were removed."""
        now = self._clock()
        stale = [k for k, entry in self._entries.items() if not self._is_fresh(entry, now)]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: Hashable) -> bool:
        entry = self._entries.get(key)
        return entry is not None and self._is_fresh(entry, self._clock())

    def __len__(self) -> int:
        return len(self._entries)
