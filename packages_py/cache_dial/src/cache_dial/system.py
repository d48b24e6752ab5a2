"""
Default resolver and connector backed by the operating system
"""
import asyncio
import socket
from typing import Any, Optional

from .address import split_host_port
from .types import Connector, Resolver, SyncConnector, SyncResolver


_TCP_NETWORKS = {
    "tcp": socket.AF_UNSPEC,
    "tcp4": socket.AF_INET,
    "tcp6": socket.AF_INET6,
}

_UDP_NETWORKS = {
    "udp": socket.AF_UNSPEC,
    "udp4": socket.AF_INET,
    "udp6": socket.AF_INET6,
}


def _unique_addresses(infos: list) -> list[str]:
    addresses: list[str] = []
    seen: set[str] = set()

    for family, socktype, proto, canonname, sockaddr in infos:
        # sockaddr is (host, port) for IPv4, (host, port, flow, scope) for IPv6
        addr = sockaddr[0]
        if addr not in seen:
            seen.add(addr)
            addresses.append(addr)

    return addresses


def _require_port(network: str, address: str) -> tuple[str, int]:
    host, port = split_host_port(address)
    if port is None:
        raise ValueError(f"dial {network} {address}: missing port in address")
    return host, port


def _network_family(network: str) -> tuple[bool, int]:
    """Return (is_tcp, family) for a network name"""
    if network in _TCP_NETWORKS:
        return True, _TCP_NETWORKS[network]
    if network in _UDP_NETWORKS:
        return False, _UDP_NETWORKS[network]
    raise ValueError(f"unsupported network {network!r}")


class SystemResolver(Resolver):
    """Resolve hosts with the event loop's getaddrinfo"""

    async def lookup_host(self, host: str) -> list[str]:
        loop = asyncio.get_running_loop()
        infos = await loop.getaddrinfo(host, None, type=socket.SOCK_STREAM)
        return _unique_addresses(infos)


class SystemConnector(Connector):
    """
    Dial with asyncio.

    tcp networks return a (StreamReader, StreamWriter) pair, udp networks
    return the connected DatagramTransport.
    """

    async def dial(self, network: str, address: str) -> Any:
        is_tcp, family = _network_family(network)
        host, port = _require_port(network, address)

        if is_tcp:
            return await asyncio.open_connection(host, port, family=family)

        loop = asyncio.get_running_loop()
        transport, _ = await loop.create_datagram_endpoint(
            asyncio.DatagramProtocol,
            remote_addr=(host, port),
            family=family,
        )
        return transport


class SyncSystemResolver(SyncResolver):
    """Resolve hosts with socket.getaddrinfo"""

    def lookup_host(self, host: str) -> list[str]:
        infos = socket.getaddrinfo(host, None, type=socket.SOCK_STREAM)
        return _unique_addresses(infos)


class SyncSystemConnector(SyncConnector):
    """Dial with blocking sockets"""

    def dial(
        self,
        network: str,
        address: str,
        timeout_seconds: Optional[float] = None,
    ) -> socket.socket:
        is_tcp, family = _network_family(network)
        host, port = _require_port(network, address)

        if is_tcp:
            return socket.create_connection((host, port), timeout=timeout_seconds)

        if family == socket.AF_UNSPEC:
            family = socket.AF_INET6 if ":" in host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_DGRAM)
        try:
            sock.settimeout(timeout_seconds)
            sock.connect((host, port))
        except OSError:
            sock.close()
            raise
        return sock
