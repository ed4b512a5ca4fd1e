"""
Process-local cache of parsed birdc results.

Keys are the exact command strings sent to the daemon. Each stored
payload is stamped with `cached_at` and an absolute `ttl`; expiry is
checked lazily on read and stale entries stay in the map until the
same command is stored again.

Usage:
    from bird.cache import QueryCache

    cache = QueryCache(ttl_minutes=5)
    cache.store("protocols all", parsed)
    entry, found = cache.lookup("protocols all")
"""

import copy
import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from bird.locks import ReadWriteLock
from bird.timestamps import now

logger = logging.getLogger(__name__)

DEFAULT_TTL_MINUTES = 5


class QueryCache:
    """
    Command string -> parsed result, guarded by one reader/writer lock.

    Callers always receive deep copies; the stored entries are owned
    by the cache.
    """

    def __init__(self, ttl_minutes: int = DEFAULT_TTL_MINUTES, clock: Callable[[], datetime] = now):
        # Non-positive lifetimes would expire entries on store
        if ttl_minutes <= 0:
            ttl_minutes = DEFAULT_TTL_MINUTES
        self.ttl = timedelta(minutes=ttl_minutes)
        self._clock = clock
        self._entries: dict[str, dict] = {}
        self._lock = ReadWriteLock()
        self._stats = {"hits": 0, "misses": 0, "stores": 0}
        self._stats_lock = threading.Lock()

    def lookup(self, key: str) -> tuple[Optional[dict], bool]:
        """
        Get a live entry for a command.

        Returns:
            (entry, True) while the entry's ttl lies in the future,
            (None, False) when absent, expired or carrying a malformed ttl.
        """
        with self._lock.read_locked():
            entry = self._entries.get(key)
            if entry is not None:
                entry = copy.deepcopy(entry)

        if entry is None:
            self._count("misses")
            logger.debug(f"Cache MISS: {key}")
            return None, False

        ttl = entry.get("ttl")
        if not isinstance(ttl, datetime) or ttl <= self._clock():
            self._count("misses")
            logger.debug(f"Cache EXPIRED: {key}")
            return None, False

        self._count("hits")
        logger.debug(f"Cache HIT: {key}")
        return entry, True

    def store(self, key: str, value: dict) -> dict:
        """
        Stamp `value` with cached_at/ttl and insert or overwrite it.

        The two bookkeeping fields are added to `value` itself.
        """
        cached_at = self._clock()
        value["cached_at"] = cached_at
        value["ttl"] = cached_at + self.ttl

        with self._lock.write_locked():
            self._entries[key] = copy.deepcopy(value)
        self._count("stores")

        logger.debug(f"Cache SET: {key} (TTL: {self.ttl})")
        return value

    def _count(self, name: str):
        with self._stats_lock:
            self._stats[name] += 1

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._entries)

    def stats(self) -> dict:
        """Entry count and hit/miss counters."""
        with self._stats_lock:
            counters = dict(self._stats)
        return {
            "entries": len(self),
            "ttl_minutes": int(self.ttl.total_seconds() // 60),
            **counters,
        }
