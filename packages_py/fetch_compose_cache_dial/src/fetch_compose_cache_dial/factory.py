"""
Factory functions for caching dialer transports
"""
from typing import Any, Callable, Optional

import httpx

from .transport import CachingDialTransport, SyncCachingDialTransport


def compose_transport(
    base: httpx.AsyncBaseTransport,
    *wrappers: Callable[[httpx.AsyncBaseTransport], httpx.AsyncBaseTransport],
) -> httpx.AsyncBaseTransport:
    """
    Compose multiple transport wrappers.

    Example:
        base = httpx.AsyncHTTPTransport()
        transport = compose_transport(
            base,
            lambda inner: CachingDialTransport(inner, ttl_seconds=30.0),
        )
        client = httpx.AsyncClient(transport=transport)
    """
    transport = base
    for wrapper in wrappers:
        transport = wrapper(transport)
    return transport


def compose_sync_transport(
    base: httpx.BaseTransport,
    *wrappers: Callable[[httpx.BaseTransport], httpx.BaseTransport],
) -> httpx.BaseTransport:
    """
    Compose multiple sync transport wrappers.
    """
    transport = base
    for wrapper in wrappers:
        transport = wrapper(transport)
    return transport


def create_dial_cached_client(
    *,
    ttl_seconds: float = 10.0,
    max_items: int = 1024,
    hosts: Optional[list[str]] = None,
    exclude_hosts: Optional[list[str]] = None,
    base_url: str = "",
    **client_kwargs: Any,
) -> httpx.AsyncClient:
    """
    Create an async client whose host lookups are cached.

    Example:
        client = create_dial_cached_client(ttl_seconds=30.0)
        response = await client.get('https://api.example.com/data')
    """
    transport = CachingDialTransport(
        httpx.AsyncHTTPTransport(),
        ttl_seconds=ttl_seconds,
        max_items=max_items,
        hosts=hosts,
        exclude_hosts=exclude_hosts,
    )
    return httpx.AsyncClient(
        transport=transport,
        base_url=base_url,
        **client_kwargs,
    )


def create_dial_cached_sync_client(
    *,
    ttl_seconds: float = 10.0,
    max_items: int = 1024,
    hosts: Optional[list[str]] = None,
    exclude_hosts: Optional[list[str]] = None,
    base_url: str = "",
    **client_kwargs: Any,
) -> httpx.Client:
    """
    Create a sync client whose host lookups are cached.
    """
    transport = SyncCachingDialTransport(
        httpx.HTTPTransport(),
        ttl_seconds=ttl_seconds,
        max_items=max_items,
        hosts=hosts,
        exclude_hosts=exclude_hosts,
    )
    return httpx.Client(
        transport=transport,
        base_url=base_url,
        **client_kwargs,
    )
