"""
Address helpers for cache_dial
"""
import ipaddress
import random
from typing import Optional, Sequence


def is_ip_literal(host: str) -> bool:
    """Check if host is already an IPv4 or IPv6 address"""
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def split_host_port(address: str) -> tuple[str, Optional[int]]:
    """
    Split an address into host and optional port.

    Accepts "host", "host:port", "[v6]:port", "[v6]" and bare IPv6 literals.

    Example:
        split_host_port("example.com:443")  # ("example.com", 443)
        split_host_port("[::1]:80")         # ("::1", 80)
        split_host_port("::1")              # ("::1", None)
    """
    if address.startswith("["):
        end = address.find("]")
        if end < 0:
            raise ValueError(f"missing ']' in address {address!r}")
        host = address[1:end]
        rest = address[end + 1:]
        if not rest:
            return host, None
        if not rest.startswith(":"):
            raise ValueError(f"unexpected text after ']' in address {address!r}")
        return host, _parse_port(rest[1:], address)

    if address.count(":") > 1:
        # Unbracketed IPv6 literal, no port
        return address, None

    host, sep, port = address.partition(":")
    if not sep:
        return address, None
    return host, _parse_port(port, address)


def _parse_port(port: str, address: str) -> int:
    try:
        value = int(port)
    except ValueError:
        raise ValueError(f"invalid port in address {address!r}") from None
    if not 0 <= value <= 65535:
        raise ValueError(f"port out of range in address {address!r}")
    return value


def join_host_port(host: str, port: Optional[int]) -> str:
    """Join host and port, bracketing IPv6 literals"""
    if port is None:
        return host
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def select_address(addresses: Sequence[str], rng: random.Random) -> str:
    """
    Pick one address to dial.

    A single address is returned without consuming randomness. With several,
    a fresh uniform choice is made on every call so that a cached entry does
    not pin every dial to the same address for its whole TTL.
    """
    if not addresses:
        raise ValueError("no addresses to select from")
    if len(addresses) == 1:
        return addresses[0]
    return addresses[rng.randrange(len(addresses))]
