"""
Caching network dialer: remembers host lookups (including not-found) for a TTL,
bounds the cache size, and spreads dials across all resolved addresses.
"""
from .types import (
    LookupEntry,
    Resolver,
    Connector,
    SyncResolver,
    SyncConnector,
    DialCacheConfig,
    DialCacheStats,
)
from .errors import (
    NO_SUCH_HOST,
    DialCacheError,
    HostNotFoundError,
    is_host_not_found,
)
from .address import (
    is_ip_literal,
    split_host_port,
    join_host_port,
    select_address,
)
from .config import (
    DEFAULT_TTL_SECONDS,
    DEFAULT_MAX_ITEMS,
    DEFAULT_DIAL_CACHE_CONFIG,
    validate_config,
    merge_config,
    merge_sync_config,
    is_caching_enabled,
)
from .rwlock import ReadWriteLock
from .stores import LookupStore, create_lookup_store
from .system import (
    SystemResolver,
    SystemConnector,
    SyncSystemResolver,
    SyncSystemConnector,
)
from .dialer import (
    CachingDialer,
    SyncCachingDialer,
    create_caching_dialer,
    create_sync_caching_dialer,
)


__all__ = [
    # Types
    "LookupEntry",
    "Resolver",
    "Connector",
    "SyncResolver",
    "SyncConnector",
    "DialCacheConfig",
    "DialCacheStats",
    # Errors
    "NO_SUCH_HOST",
    "DialCacheError",
    "HostNotFoundError",
    "is_host_not_found",
    # Addresses
    "is_ip_literal",
    "split_host_port",
    "join_host_port",
    "select_address",
    # Config
    "DEFAULT_TTL_SECONDS",
    "DEFAULT_MAX_ITEMS",
    "DEFAULT_DIAL_CACHE_CONFIG",
    "validate_config",
    "merge_config",
    "merge_sync_config",
    "is_caching_enabled",
    # Stores
    "ReadWriteLock",
    "LookupStore",
    "create_lookup_store",
    # System collaborators
    "SystemResolver",
    "SystemConnector",
    "SyncSystemResolver",
    "SyncSystemConnector",
    # Dialers
    "CachingDialer",
    "SyncCachingDialer",
    "create_caching_dialer",
    "create_sync_caching_dialer",
]


__version__ = "1.0.0"
