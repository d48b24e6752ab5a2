"""
Caching Dialer - Main implementation
"""
import asyncio
import logging
import random
import socket
import threading
import time
from typing import Any, Callable, Optional

from .address import is_ip_literal, join_host_port, select_address, split_host_port
from .config import (
    DEFAULT_MAX_ITEMS,
    DEFAULT_TTL_SECONDS,
    is_caching_enabled,
    merge_config,
    merge_sync_config,
)
from .errors import HostNotFoundError, is_host_not_found
from .stores.memory import LookupStore
from .types import DialCacheConfig, DialCacheStats

logger = logging.getLogger(__name__)

LOG_PREFIX = f"[CACHE_DIAL:{__file__}]"


class _DialCacheBase:
    """Cache bookkeeping shared by the asyncio and blocking dialers"""

    def __init__(
        self,
        config: DialCacheConfig,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._config = config
        self._caching = is_caching_enabled(config)
        self._store = LookupStore(config.ttl_seconds, config.max_items, clock)
        self._rng = rng if rng is not None else random.Random()

        self._stats_lock = threading.Lock()
        self._cache_hits = 0
        self._cache_misses = 0
        self._negative_hits = 0
        self._resolver_calls = 0

    @property
    def config(self) -> DialCacheConfig:
        return self._config

    @property
    def caching_enabled(self) -> bool:
        return self._caching

    def _count(self, counter: str) -> None:
        with self._stats_lock:
            setattr(self, counter, getattr(self, counter) + 1)

    def _from_cache(self, host: str) -> Optional[list[str]]:
        """
        Answer a lookup without the resolver if possible.

        Returns None on a miss that needs the resolver. Raises
        HostNotFoundError for a cached not-found entry.
        """
        addresses = self._store.get(host)

        if addresses is not None:
            if not addresses:
                self._count("_negative_hits")
                logger.debug(f"{LOG_PREFIX} lookup: negative cache hit for '{host}'")
                raise HostNotFoundError(host)
            self._count("_cache_hits")
            return list(addresses)

        self._count("_cache_misses")

        if is_ip_literal(host):
            self._store.set(host, [host])
            return [host]

        logger.debug(f"{LOG_PREFIX} lookup: cache miss for '{host}'")
        return None

    def _remember(self, host: str, addresses: list[str]) -> list[str]:
        """Cache a resolver answer; no addresses is cached as not-found"""
        if not addresses:
            self._store.set(host, [])
            logger.debug(f"{LOG_PREFIX} lookup: '{host}' resolved to no addresses")
            raise HostNotFoundError(host)

        self._store.set(host, addresses)
        return list(addresses)

    def _not_found_error(self, host: str, exc: Exception) -> Optional[HostNotFoundError]:
        """
        Turn a resolver failure into a cached HostNotFoundError.

        Returns None for failures that are not "no such host"; those are not
        cached and the caller re-raises them unchanged.
        """
        if not is_host_not_found(exc):
            logger.debug(f"{LOG_PREFIX} lookup: resolver failed for '{host}': {exc!r}")
            return None

        self._store.set(host, [])
        logger.debug(f"{LOG_PREFIX} lookup: '{host}' not found, caching negative result")
        return HostNotFoundError(host)

    def pick_address(self, host: str, addresses: list[str]) -> str:
        """Choose the address to dial for host from its lookup result"""
        if not addresses:
            raise HostNotFoundError(host)
        return select_address(addresses, self._rng)

    def invalidate(self, host: str) -> bool:
        """Drop the cached entry for host"""
        return self._store.delete(host)

    def clear(self) -> None:
        """Drop all cached entries"""
        self._store.clear()

    def get_stats(self) -> DialCacheStats:
        """Get cache statistics"""
        with self._stats_lock:
            hits = self._cache_hits
            misses = self._cache_misses
            negative_hits = self._negative_hits
            resolver_calls = self._resolver_calls

        total_requests = hits + negative_hits + misses

        return DialCacheStats(
            total_entries=self._store.size(),
            cache_hits=hits,
            cache_misses=misses,
            negative_hits=negative_hits,
            evictions=self._store.evictions,
            resolver_calls=resolver_calls,
            hit_ratio=(hits + negative_hits) / total_requests if total_requests > 0 else 0,
        )


class CachingDialer(_DialCacheBase):
    """
    Caching Dialer

    Dials hosts by name through a resolver and a connector, with:
    - Lookups cached for ttl_seconds, up to max_items hosts
    - Not-found results cached and raised as HostNotFoundError
    - A fresh random address choice on every dial of a multi-address host
    - IP literals dialed without consulting the resolver

    Example:
        dialer = CachingDialer(DialCacheConfig(ttl_seconds=30.0))

        reader, writer = await dialer.dial("tcp", "example.com:80")
        conn = await dialer.dial_context("tcp", "example.com:80", timeout_seconds=5.0)
    """

    def __init__(
        self,
        config: Optional[DialCacheConfig] = None,
        *,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        super().__init__(merge_config(config or DialCacheConfig()), rng, clock)

    async def lookup(self, host: str) -> list[str]:
        """
        Resolve host to its addresses, using the cache when enabled

        Raises:
            HostNotFoundError: host has no addresses (fresh or cached)
            Exception: any other resolver failure, unchanged and not cached
        """
        resolver = self._config.resolver

        if not self._caching:
            self._count("_resolver_calls")
            return await resolver.lookup_host(host)

        cached = self._from_cache(host)
        if cached is not None:
            return cached

        self._count("_resolver_calls")
        try:
            addresses = await resolver.lookup_host(host)
        except Exception as exc:
            not_found = self._not_found_error(host, exc)
            if not_found is None:
                raise
            raise not_found from exc

        return self._remember(host, addresses)

    async def dial(self, network: str, address: str) -> Any:
        """Connect to address ("host" or "host:port") on the named network"""
        host, port = split_host_port(address)
        addresses = await self.lookup(host)
        target = join_host_port(self.pick_address(host, addresses), port)
        return await self._config.connector.dial(network, target)

    async def dial_context(
        self,
        network: str,
        address: str,
        *,
        timeout_seconds: Optional[float] = None,
    ) -> Any:
        """
        Connect like dial, bounded by timeout_seconds.

        The deadline covers both the lookup and the connect. Cancelling the
        calling task cancels whichever collaborator is running.

        Raises:
            asyncio.TimeoutError: the deadline passed
        """
        if timeout_seconds is None:
            return await self.dial(network, address)
        return await asyncio.wait_for(self.dial(network, address), timeout_seconds)


class SyncCachingDialer(_DialCacheBase):
    """
    Blocking variant of CachingDialer for thread-based callers.

    The cache may be shared by any number of threads.

    Example:
        dialer = SyncCachingDialer(DialCacheConfig(ttl_seconds=30.0))
        sock = dialer.dial_context("tcp", "example.com:80", timeout_seconds=5.0)
    """

    def __init__(
        self,
        config: Optional[DialCacheConfig] = None,
        *,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        super().__init__(merge_sync_config(config or DialCacheConfig()), rng, clock)

    def lookup(self, host: str) -> list[str]:
        """Resolve host to its addresses, using the cache when enabled"""
        resolver = self._config.resolver

        if not self._caching:
            self._count("_resolver_calls")
            return resolver.lookup_host(host)

        cached = self._from_cache(host)
        if cached is not None:
            return cached

        self._count("_resolver_calls")
        try:
            addresses = resolver.lookup_host(host)
        except Exception as exc:
            not_found = self._not_found_error(host, exc)
            if not_found is None:
                raise
            raise not_found from exc

        return self._remember(host, addresses)

    def dial(self, network: str, address: str) -> Any:
        """Connect to address ("host" or "host:port") on the named network"""
        return self.dial_context(network, address)

    def dial_context(
        self,
        network: str,
        address: str,
        *,
        timeout_seconds: Optional[float] = None,
    ) -> Any:
        """
        Connect like dial, bounded by timeout_seconds.

        A blocking lookup cannot be interrupted; the time it used is taken
        off the budget handed to the connector.

        Raises:
            socket.timeout: the deadline passed
        """
        deadline = None if timeout_seconds is None else time.monotonic() + timeout_seconds

        host, port = split_host_port(address)
        addresses = self.lookup(host)
        target = join_host_port(self.pick_address(host, addresses), port)

        remaining = None
        if deadline is not None:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise socket.timeout(f"dial {network} {address}: timed out")

        return self._config.connector.dial(network, target, remaining)


def create_caching_dialer(
    *,
    ttl_seconds: float = DEFAULT_TTL_SECONDS,
    max_items: int = DEFAULT_MAX_ITEMS,
    resolver: Optional[Any] = None,
    connector: Optional[Any] = None,
    rng: Optional[random.Random] = None,
) -> CachingDialer:
    """Factory function to create an asyncio caching dialer"""
    config = DialCacheConfig(
        ttl_seconds=ttl_seconds,
        max_items=max_items,
        resolver=resolver,
        connector=connector,
    )
    return CachingDialer(config, rng=rng)


def create_sync_caching_dialer(
    *,
    ttl_seconds: float = DEFAULT_TTL_SECONDS,
    max_items: int = DEFAULT_MAX_ITEMS,
    resolver: Optional[Any] = None,
    connector: Optional[Any] = None,
    rng: Optional[random.Random] = None,
) -> SyncCachingDialer:
    """Factory function to create a blocking caching dialer"""
    config = DialCacheConfig(
        ttl_seconds=ttl_seconds,
        max_items=max_items,
        resolver=resolver,
        connector=connector,
    )
    return SyncCachingDialer(config, rng=rng)
