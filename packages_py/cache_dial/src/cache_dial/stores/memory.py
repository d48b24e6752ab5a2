"""
In-memory lookup store implementation
"""
import logging
import time
from typing import Callable, Optional, Sequence

from ..rwlock import ReadWriteLock
from ..types import LookupEntry

logger = logging.getLogger(__name__)

LOG_PREFIX = f"[CACHE_DIAL:{__file__}]"


class LookupStore:
    """
    Bounded, TTL-aware map from hostname to resolved addresses.

    Expired entries are never swept: reads skip them and the next write for
    the same host overwrites them. When a write pushes the size past
    max_items, one entry is evicted. The victim is whichever key iteration
    yields first; there is no recency or frequency tracking.

    Safe to share between threads: reads hold a shared lock, writes an
    exclusive one.

    Example:
        store = LookupStore(ttl_seconds=10.0, max_items=1024)
        store.set("example.com", ["93.184.216.34"])
        store.get("example.com")  # ("93.184.216.34",)
        store.set("missing.invalid", [])
        store.get("missing.invalid")  # () -- cached not-found
        store.get("other.com")  # None -- miss
    """

    def __init__(
        self,
        ttl_seconds: float,
        max_items: int,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._ttl_seconds = ttl_seconds
        self._max_items = max_items
        self._clock = clock or time.monotonic
        self._entries: dict[str, LookupEntry] = {}
        self._lock = ReadWriteLock()
        self._evictions = 0

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    @property
    def max_items(self) -> int:
        return self._max_items

    @property
    def evictions(self) -> int:
        """Number of capacity evictions so far"""
        return self._evictions

    def get(self, key: str) -> Optional[tuple[str, ...]]:
        """
        Get the cached addresses for key.

        Returns None when nothing usable is cached (absent or expired) and
        an empty tuple for a cached not-found result.
        """
        now = self._clock()

        with self._lock.read_locked():
            entry = self._entries.get(key)

        if entry is None or now >= entry.expires_at:
            return None
        return entry.addresses

    def set(self, key: str, addresses: Sequence[str]) -> None:
        """Insert or replace the entry for key, evicting one entry if over capacity"""
        entry = LookupEntry(
            addresses=tuple(addresses),
            expires_at=self._clock() + self._ttl_seconds,
        )

        with self._lock.write_locked():
            self._entries[key] = entry

            if len(self._entries) > self._max_items:
                victim = next(iter(self._entries))
                del self._entries[victim]
                self._evictions += 1
                logger.debug(f"{LOG_PREFIX} set: evicted '{victim}' (max_items={self._max_items})")

    def delete(self, key: str) -> bool:
        """Delete the entry for key"""
        with self._lock.write_locked():
            return self._entries.pop(key, None) is not None

    def keys(self) -> list[str]:
        """Get all held keys, expired ones included"""
        with self._lock.read_locked():
            return list(self._entries)

    def size(self) -> int:
        """Get the number of held entries, expired ones included"""
        with self._lock.read_locked():
            return len(self._entries)

    def clear(self) -> None:
        """Remove all entries"""
        with self._lock.write_locked():
            self._entries.clear()

    def prune_expired(self, now: Optional[float] = None) -> int:
        """Remove all expired entries. Only runs when called."""
        if now is None:
            now = self._clock()

        with self._lock.write_locked():
            expired = [
                key for key, entry in self._entries.items()
                if now >= entry.expires_at
            ]
            for key in expired:
                del self._entries[key]

        return len(expired)


def create_lookup_store(
    ttl_seconds: float,
    max_items: int,
    clock: Optional[Callable[[], float]] = None,
) -> LookupStore:
    """Create a lookup store instance"""
    return LookupStore(ttl_seconds, max_items, clock)
