"""Exceptions raised by the buffers, pools and engine helpers."""

from __future__ import annotations


class Error(Exception):
    """Base class of every error this package raises."""

    default_message = "elasticbuf error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(self.default_message if message is None else message)


class EmptyEngineError(Error):
    """Raised when trying to do something with an empty engine."""

    default_message = "the internal engine is empty"


class EngineShutdownError(Error):
    """Raised when the server is closing."""

    default_message = "server is going to be shutdown"


class EngineInShutdownError(Error):
    """Raised when shutting the server down more than once."""

    default_message = "server is already in shutdown"


class AcceptSocketError(Error):
    """Raised when the acceptor fails to accept a new connection."""

    default_message = "accept a new connection error"


class TooManyEventLoopThreadsError(Error):
    """Raised when too many event loops are pinned to OS threads."""

    default_message = "too many event-loops under LockOSThread mode"


class UnsupportedProtocolError(Error):
    """Raised for a network protocol that is not supported."""

    default_message = "only unix, tcp/tcp4/tcp6, udp/udp4/udp6 are supported"


class UnsupportedTCPProtocolError(Error):
    """Raised for an unsupported TCP protocol."""

    default_message = "only tcp/tcp4/tcp6 are supported"


class UnsupportedUDPProtocolError(Error):
    """Raised for an unsupported UDP protocol."""

    default_message = "only udp/udp4/udp6 are supported"


class UnsupportedUDSProtocolError(Error):
    """Raised for an unsupported Unix-domain protocol."""

    default_message = "only unix is supported"


class UnsupportedPlatformError(Error):
    """Raised when running on an unsupported platform."""

    default_message = "unsupported platform in gnet"


class UnsupportedOpError(Error):
    """Raised for an operation that is not supported."""

    default_message = "unsupported operation"


class NegativeSizeError(Error, ValueError):
    """Raised when a buffer is given a size that is not positive."""

    default_message = "negative size is invalid"


class NoIPv4AddressOnInterfaceError(Error):
    """Raised when an interface has no IPv4 address for multicast."""

    default_message = "no IPv4 address on interface"