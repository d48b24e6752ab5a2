"""
Caching dialer transport wrapper for httpx
"""
import fnmatch
import logging
from typing import Optional

import httpx

from cache_dial import (
    CachingDialer,
    DialCacheConfig,
    HostNotFoundError,
    SyncCachingDialer,
    is_ip_literal,
)

logger = logging.getLogger(__name__)

LOG_PREFIX = f"[FETCH_COMPOSE_CACHE_DIAL:{__file__}]"


def _host_matches(host: str, pattern: str) -> bool:
    """Check if a hostname matches a pattern"""
    # Exact match
    if host == pattern:
        return True

    # Wildcard match (e.g., *.example.com)
    if pattern.startswith("*."):
        suffix = pattern[1:]  # .example.com
        return host.endswith(suffix) or host == pattern[2:]

    return fnmatch.fnmatch(host, pattern)


def _should_cache_host(
    host: str,
    hosts: Optional[list[str]],
    exclude_hosts: Optional[list[str]],
) -> bool:
    """Check if lookups for this host should go through the cache"""
    if not host or is_ip_literal(host):
        return False

    if exclude_hosts:
        for pattern in exclude_hosts:
            if _host_matches(host, pattern):
                return False

    if hosts:
        for pattern in hosts:
            if _host_matches(host, pattern):
                return True
        return False

    return True


def _rewrite_request(request: httpx.Request, address: str) -> httpx.Request:
    """Point request at address while keeping the original Host and SNI name"""
    host = request.url.host
    port = request.url.port

    headers = httpx.Headers(request.headers)
    if "host" not in headers:
        headers["host"] = f"{host}:{port}" if port else host

    extensions = dict(request.extensions)
    if request.url.scheme == "https":
        extensions.setdefault("sni_hostname", host)

    return httpx.Request(
        method=request.method,
        url=request.url.copy_with(host=address),
        headers=headers,
        stream=request.stream,
        extensions=extensions,
    )


class CachingDialTransport(httpx.AsyncBaseTransport):
    """
    Caching dialer transport wrapper for httpx.

    Wraps another transport and sends each request to one of the cached
    addresses of its host, chosen at random per request.

    Example:
        base = httpx.AsyncHTTPTransport()
        transport = CachingDialTransport(base, ttl_seconds=30.0)
        client = httpx.AsyncClient(transport=transport)
    """

    def __init__(
        self,
        inner: httpx.AsyncBaseTransport,
        *,
        ttl_seconds: float = 10.0,
        max_items: int = 1024,
        config: Optional[DialCacheConfig] = None,
        dialer: Optional[CachingDialer] = None,
        methods: Optional[list[str]] = None,
        hosts: Optional[list[str]] = None,
        exclude_hosts: Optional[list[str]] = None,
    ) -> None:
        """
        Create a new CachingDialTransport.

        Args:
            inner: The wrapped transport to delegate requests to
            ttl_seconds: How long lookups are cached. Default: 10.0
            max_items: Maximum number of cached hosts. Default: 1024
            config: Full dialer config (alternative to the simple options)
            dialer: Existing dialer whose cache should be shared
            methods: HTTP methods to apply caching to. Default: all
            hosts: Hosts to apply caching to. Default: all
            exclude_hosts: Hosts to exclude from caching
        """
        self._inner = inner
        self._methods = methods
        self._hosts = hosts
        self._exclude_hosts = exclude_hosts

        if dialer is None:
            dialer = CachingDialer(
                config or DialCacheConfig(ttl_seconds=ttl_seconds, max_items=max_items)
            )
        self._dialer = dialer

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Handle an async HTTP request using cached lookups"""
        if self._methods and request.method not in self._methods:
            return await self._inner.handle_async_request(request)

        host = request.url.host
        if not _should_cache_host(host, self._hosts, self._exclude_hosts):
            return await self._inner.handle_async_request(request)

        try:
            addresses = await self._dialer.lookup(host)
            address = self._dialer.pick_address(host, addresses)
        except (HostNotFoundError, OSError) as exc:
            logger.debug(f"{LOG_PREFIX} handle_async_request: lookup failed for '{host}': {exc!r}")
            raise httpx.ConnectError(str(exc), request=request) from exc

        return await self._inner.handle_async_request(_rewrite_request(request, address))

    @property
    def dialer(self) -> CachingDialer:
        """Get the underlying caching dialer"""
        return self._dialer

    async def aclose(self) -> None:
        """Close the transport"""
        self._dialer.clear()
        await self._inner.aclose()


class SyncCachingDialTransport(httpx.BaseTransport):
    """
    Synchronous caching dialer transport wrapper for httpx.

    The cache is thread-safe, so one transport may serve a threaded client.
    """

    def __init__(
        self,
        inner: httpx.BaseTransport,
        *,
        ttl_seconds: float = 10.0,
        max_items: int = 1024,
        config: Optional[DialCacheConfig] = None,
        dialer: Optional[SyncCachingDialer] = None,
        methods: Optional[list[str]] = None,
        hosts: Optional[list[str]] = None,
        exclude_hosts: Optional[list[str]] = None,
    ) -> None:
        self._inner = inner
        self._methods = methods
        self._hosts = hosts
        self._exclude_hosts = exclude_hosts

        if dialer is None:
            dialer = SyncCachingDialer(
                config or DialCacheConfig(ttl_seconds=ttl_seconds, max_items=max_items)
            )
        self._dialer = dialer

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        """Handle a sync HTTP request using cached lookups"""
        if self._methods and request.method not in self._methods:
            return self._inner.handle_request(request)

        host = request.url.host
        if not _should_cache_host(host, self._hosts, self._exclude_hosts):
            return self._inner.handle_request(request)

        try:
            addresses = self._dialer.lookup(host)
            address = self._dialer.pick_address(host, addresses)
        except (HostNotFoundError, OSError) as exc:
            logger.debug(f"{LOG_PREFIX} handle_request: lookup failed for '{host}': {exc!r}")
            raise httpx.ConnectError(str(exc), request=request) from exc

        return self._inner.handle_request(_rewrite_request(request, address))

    @property
    def dialer(self) -> SyncCachingDialer:
        """Get the underlying caching dialer"""
        return self._dialer

    def close(self) -> None:
        """Close the transport"""
        self._dialer.clear()
        self._inner.close()
