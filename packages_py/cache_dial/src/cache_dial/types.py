"""
Type definitions for cache_dial
"""
from dataclasses import dataclass
from typing import Any, Optional, Union
from abc import ABC, abstractmethod


@dataclass(frozen=True)
class LookupEntry:
    """A cached lookup result"""

    addresses: tuple[str, ...]
    """Resolved addresses in resolver order. Empty means the host does not exist."""

    expires_at: float
    """Monotonic timestamp after which the entry is treated as absent"""


class Resolver(ABC):
    """Looks up the addresses of a host"""

    @abstractmethod
    async def lookup_host(self, host: str) -> list[str]:
        """Return the textual IP addresses of host"""
        pass


class Connector(ABC):
    """Dials a single, already resolved address"""

    @abstractmethod
    async def dial(self, network: str, address: str) -> Any:
        """Connect to address on the named network"""
        pass


class SyncResolver(ABC):
    """Blocking variant of Resolver"""

    @abstractmethod
    def lookup_host(self, host: str) -> list[str]:
        pass


class SyncConnector(ABC):
    """Blocking variant of Connector"""

    @abstractmethod
    def dial(
        self,
        network: str,
        address: str,
        timeout_seconds: Optional[float] = None,
    ) -> Any:
        pass


@dataclass(frozen=True)
class DialCacheConfig:
    """Configuration for a caching dialer"""

    ttl_seconds: float = 10.0
    """How long lookups are cached (seconds). 0 disables caching. Default: 10.0"""

    max_items: int = 1024
    """Maximum number of cached hosts. 0 disables caching. Default: 1024"""

    resolver: Optional[Union[Resolver, SyncResolver]] = None
    """Resolver collaborator. Default: the system resolver"""

    connector: Optional[Union[Connector, SyncConnector]] = None
    """Connector collaborator. Default: the system dialer"""


@dataclass
class DialCacheStats:
    """Statistics from a caching dialer"""

    total_entries: int
    """Entries currently held, including expired ones not yet overwritten"""

    cache_hits: int
    """Lookups answered from cache with addresses"""

    cache_misses: int
    """Lookups that were not answered from cache"""

    negative_hits: int
    """Lookups answered from a cached not-found entry"""

    evictions: int
    """Entries removed to stay within max_items"""

    resolver_calls: int
    """Calls made to the resolver collaborator"""

    hit_ratio: float
    """(cache_hits + negative_hits) / all cached-path lookups (0-1)"""
