"""
Caching dialer transport wrapper for httpx's compose pattern.
"""
from cache_dial import (
    CachingDialer,
    SyncCachingDialer,
    DialCacheConfig,
    DialCacheStats,
    HostNotFoundError,
)
from .transport import CachingDialTransport, SyncCachingDialTransport
from .factory import (
    compose_transport,
    compose_sync_transport,
    create_dial_cached_client,
    create_dial_cached_sync_client,
)


__all__ = [
    # Re-exported from base package
    "CachingDialer",
    "SyncCachingDialer",
    "DialCacheConfig",
    "DialCacheStats",
    "HostNotFoundError",
    # Transport wrappers
    "CachingDialTransport",
    "SyncCachingDialTransport",
    # Factory functions
    "compose_transport",
    "compose_sync_transport",
    "create_dial_cached_client",
    "create_dial_cached_sync_client",
]

__version__ = "1.0.0"
