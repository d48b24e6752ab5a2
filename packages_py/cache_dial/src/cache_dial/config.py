"""
Configuration utilities for cache_dial
"""
import dataclasses

from .types import DialCacheConfig
from .system import (
    SystemConnector,
    SystemResolver,
    SyncSystemConnector,
    SyncSystemResolver,
)


# Default configuration
DEFAULT_TTL_SECONDS = 10.0
DEFAULT_MAX_ITEMS = 1024

DEFAULT_DIAL_CACHE_CONFIG = DialCacheConfig(
    ttl_seconds=DEFAULT_TTL_SECONDS,
    max_items=DEFAULT_MAX_ITEMS,
)


def validate_config(config: DialCacheConfig) -> DialCacheConfig:
    """Reject settings that cannot describe a cache"""
    if config.ttl_seconds < 0:
        raise ValueError(f"ttl_seconds must be >= 0, got {config.ttl_seconds}")
    if config.max_items < 0:
        raise ValueError(f"max_items must be >= 0, got {config.max_items}")
    return config


def merge_config(config: DialCacheConfig) -> DialCacheConfig:
    """Fill in the asyncio system collaborators where none were given"""
    validate_config(config)
    return dataclasses.replace(
        config,
        resolver=config.resolver if config.resolver is not None else SystemResolver(),
        connector=config.connector if config.connector is not None else SystemConnector(),
    )


def merge_sync_config(config: DialCacheConfig) -> DialCacheConfig:
    """Fill in the blocking system collaborators where none were given"""
    validate_config(config)
    return dataclasses.replace(
        config,
        resolver=config.resolver if config.resolver is not None else SyncSystemResolver(),
        connector=config.connector if config.connector is not None else SyncSystemConnector(),
    )


def is_caching_enabled(config: DialCacheConfig) -> bool:
    """Caching is off when either ttl_seconds or max_items is 0"""
    return config.ttl_seconds > 0 and config.max_items > 0
