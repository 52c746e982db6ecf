r"""Thread-safe snapshots of arbitrary exceptions.

This module provides the ``ErrorSnapshot`` value object used by the error
taxonomy to carry the essentials of an underlying exception (description,
code, domain) without keeping the exception object itself alive, and the
classification of httpx transport failures into ``TransportErrorCode``.
"""

from __future__ import annotations

__all__ = ["ErrorSnapshot", "TransportErrorCode", "classify_transport_error"]

from dataclasses import dataclass
from enum import Enum

import httpx

# Fragments of OS / resolver messages that signal a DNS failure
_HOST_NOT_FOUND_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "temporary failure in name resolution",
    "no address associated with hostname",
)

# Fragments of OS messages that signal the network itself is down
_NOT_CONNECTED_MARKERS = (
    "network is unreachable",
    "no route to host",
)


class TransportErrorCode(Enum):
    """Classification of transport-level failures.

    Attributes:
        TIMED_OUT: The request timed out (connect, read, write or pool).
        CANNOT_FIND_HOST: The host name could not be resolved.
        CANNOT_CONNECT_TO_HOST: The host refused or failed the connection.
        NETWORK_CONNECTION_LOST: The connection dropped mid-exchange.
        NOT_CONNECTED_TO_INTERNET: The network is unreachable.
        UNKNOWN: Any other failure.
    """

    TIMED_OUT = "timed_out"
    CANNOT_FIND_HOST = "cannot_find_host"
    CANNOT_CONNECT_TO_HOST = "cannot_connect_to_host"
    NETWORK_CONNECTION_LOST = "network_connection_lost"
    NOT_CONNECTED_TO_INTERNET = "not_connected_to_internet"
    UNKNOWN = "unknown"


def classify_transport_error(exc: BaseException) -> TransportErrorCode:
    """Classify an exception raised by the transport.

    Args:
        exc: The exception raised while sending a request.

    Returns:
        The matching transport error code, ``TransportErrorCode.UNKNOWN``
        if the exception is not a recognized httpx failure.

    Example:
        ```pycon
        >>> import httpx
        >>> from netlayer.utils.error_snapshot import classify_transport_error
        >>> classify_transport_error(httpx.ReadTimeout("slow"))
        <TransportErrorCode.TIMED_OUT: 'timed_out'>
        >>> classify_transport_error(httpx.ConnectError("[Errno 111] Connection refused"))
        <TransportErrorCode.CANNOT_CONNECT_TO_HOST: 'cannot_connect_to_host'>

        ```
    """
    if isinstance(exc, httpx.TimeoutException):
        return TransportErrorCode.TIMED_OUT
    if isinstance(exc, httpx.ConnectError):
        message = str(exc).lower()
        if any(marker in message for marker in _HOST_NOT_FOUND_MARKERS):
            return TransportErrorCode.CANNOT_FIND_HOST
        if any(marker in message for marker in _NOT_CONNECTED_MARKERS):
            return TransportErrorCode.NOT_CONNECTED_TO_INTERNET
        return TransportErrorCode.CANNOT_CONNECT_TO_HOST
    if isinstance(
        exc, (httpx.RemoteProtocolError, httpx.ReadError, httpx.WriteError, httpx.CloseError)
    ):
        return TransportErrorCode.NETWORK_CONNECTION_LOST
    return TransportErrorCode.UNKNOWN


@dataclass(frozen=True)
class ErrorSnapshot:
    """Immutable description of an underlying exception.

    Attributes:
        description: Human-readable message of the exception.
        code: Classification of the failure.
        domain: Module defining the exception class (e.g. ``"httpx"``).
        error_type: Name of the exception class.
    """

    description: str
    code: TransportErrorCode = TransportErrorCode.UNKNOWN
    domain: str = ""
    error_type: str = ""

    @classmethod
    def from_exception(cls, exc: BaseException) -> ErrorSnapshot:
        """Build a snapshot from an exception.

        Args:
            exc: The exception to capture.

        Returns:
            The snapshot of ``exc``.

        Example:
            ```pycon
            >>> import httpx
            >>> from netlayer.utils.error_snapshot import ErrorSnapshot
            >>> snapshot = ErrorSnapshot.from_exception(httpx.ConnectTimeout("timed out"))
            >>> snapshot.description, snapshot.code.value, snapshot.domain
            ('timed out', 'timed_out', 'httpx')

            ```
        """
        exc_type = type(exc)
        return cls(
            description=str(exc) or exc_type.__name__,
            code=classify_transport_error(exc),
            domain=exc_type.__module__.split(".")[0],
            error_type=exc_type.__name__,
        )

    def __str__(self) -> str:
        return self.description
