"""
Errors raised by cache_dial
"""
import socket


NO_SUCH_HOST = "no such host"

# Messages used by resolvers that do not raise a classifiable error.
_NOT_FOUND_MESSAGES = (
    NO_SUCH_HOST,
    "Name or service not known",
    "nodename nor servname provided",
)

_NOT_FOUND_CODES = frozenset(
    code
    for code in (
        getattr(socket, "EAI_NONAME", None),
        getattr(socket, "EAI_NODATA", None),
    )
    if code is not None
)


class DialCacheError(Exception):
    """Base class for cache_dial errors"""


class HostNotFoundError(DialCacheError):
    """The host has no addresses, either freshly resolved or from cache"""

    def __init__(self, host: str) -> None:
        super().__init__(f"lookup {host}: {NO_SUCH_HOST}")
        self.host = host


def is_host_not_found(exc: BaseException) -> bool:
    """
    Classify a resolver failure as "host does not exist".

    Structured error kinds are checked first; message inspection is only a
    fallback for resolvers that expose nothing better.
    """
    if isinstance(exc, HostNotFoundError):
        return True

    if isinstance(exc, socket.gaierror):
        if exc.errno in _NOT_FOUND_CODES:
            return True

    message = str(exc)
    return any(text in message for text in _NOT_FOUND_MESSAGES)
