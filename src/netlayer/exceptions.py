r"""Error taxonomy of the network layer.

Failures are organized in three independent families, one per layer:

- ``NetworkError``: transport execution and response validation
- ``RequestBuilderError``: construction of the wire request
- ``ResponseParserError``: decoding of the response payload

``APIClientError`` is the top-level family raised by ``APIClient``. Each of
its subclasses wraps exactly one lower-level error (or, for unclassified
failures, an ``ErrorSnapshot``) and is raised ``from`` it, so the original
cause stays reachable. ``str()`` of every error renders the wrapped cause
recursively.

Example:
    ```pycon
    >>> from netlayer.exceptions import (
    ...     AllRetriesFailedError,
    ...     ClientNetworkError,
    ...     UnexpectedStatusCodeError,
    ... )
    >>> error = ClientNetworkError(
    ...     AllRetriesFailedError(UnexpectedStatusCodeError(503, b"busy"), total_attempts=3)
    ... )
    >>> print(error)
    Network error: All 3 retry attempts failed. Last error: Server returned an unexpected status code: 503. Body: "busy"

    ```
"""

from __future__ import annotations

__all__ = [
    "APIClientError",
    "AllRetriesFailedError",
    "BodyEncodingError",
    "ClientNetworkError",
    "ClientRequestBuilderError",
    "ClientResponseParseError",
    "ClientUnexpectedError",
    "ComponentsCreationError",
    "DecodingError",
    "FinalURLCreationError",
    "InvalidBaseURLError",
    "InvalidResponseError",
    "InvalidURLError",
    "MissingTokenError",
    "NetworkError",
    "NoDataError",
    "RequestBuilderError",
    "RequestFailedError",
    "ResponseParserError",
    "UnauthorizedError",
    "UnexpectedStatusCodeError",
]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from netlayer.utils.error_snapshot import ErrorSnapshot


def _describe_body(body: bytes | None) -> str:
    if not body:
        return ""
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError:
        return f" Body: ({len(body)} non-UTF8 bytes)"
    return f' Body: "{text}"'


####################
#     Network      #
####################


class NetworkError(Exception):
    """Base class of failures raised while executing a wire request."""


class InvalidURLError(NetworkError):
    """Raised when the wire request does not carry a usable URL."""

    def __init__(self) -> None:
        super().__init__("The provided URL is invalid.")


class InvalidResponseError(NetworkError):
    """Raised when the transport returned a non-HTTP or malformed
    response."""

    def __init__(self) -> None:
        super().__init__("Received an invalid response from the server.")


class UnauthorizedError(NetworkError):
    """Raised when the server answered with status 401.

    Args:
        body: The response body, ``b""`` when the response had none.
    """

    status_code = 401

    def __init__(self, body: bytes = b"") -> None:
        self.body = body
        super().__init__("Unauthorized. Please check your credentials.")


class UnexpectedStatusCodeError(NetworkError):
    """Raised when the server answered with a non-2xx status other than
    401.

    Args:
        status_code: The HTTP status code.
        body: The response body, ``b""`` when the response had none.
    """

    def __init__(self, status_code: int, body: bytes = b"") -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"Server returned an unexpected status code: {status_code}.{_describe_body(body)}"
        )


class RequestFailedError(NetworkError):
    """Raised when the transport failed before a response was received.

    Args:
        error: Snapshot of the underlying transport exception.
    """

    def __init__(self, error: ErrorSnapshot) -> None:
        self.error = error
        super().__init__(f"Request failed: {error.description}")


class AllRetriesFailedError(NetworkError):
    """Raised when every attempt of a retry sequence failed.

    Args:
        last_error: The error observed on the final attempt.
        total_attempts: The number of attempts made.
    """

    def __init__(self, last_error: NetworkError, total_attempts: int) -> None:
        self.last_error = last_error
        self.total_attempts = total_attempts
        super().__init__(
            f"All {total_attempts} retry attempts failed. Last error: {last_error}"
        )


##########################
#     Request builder    #
##########################


class RequestBuilderError(Exception):
    """Base class of failures raised while building a wire request."""


class InvalidBaseURLError(RequestBuilderError):
    """Raised when the base URL cannot be parsed."""

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url
        super().__init__(f"The provided base URL string is invalid: {base_url}")


class ComponentsCreationError(RequestBuilderError):
    """Raised when a joined URL cannot be split into components."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(
            f"Failed to create URL components from a valid URL: {url}. This is unexpected."
        )


class FinalURLCreationError(RequestBuilderError):
    """Raised when the final URL cannot be assembled from its
    components."""

    def __init__(self, components: dict[str, object]) -> None:
        self.components = components
        super().__init__(
            f"Failed to construct the final URL from URL components. Components: {components}."
        )


class BodyEncodingError(RequestBuilderError):
    """Raised when the request body cannot be produced."""

    def __init__(self, error: ErrorSnapshot) -> None:
        self.error = error
        super().__init__(
            f"Failed to encode the request body. Underlying error: {error.description}"
        )


class MissingTokenError(RequestBuilderError):
    """Raised when authorization is required but no token is
    available."""

    def __init__(self) -> None:
        super().__init__(
            "The request requires authorization, but the token provider was not "
            "provided or it returned an empty token."
        )


##########################
#     Response parser    #
##########################


class ResponseParserError(Exception):
    """Base class of failures raised while decoding a response."""


class NoDataError(ResponseParserError):
    """Raised when a data-expecting response shape receives no bytes."""

    def __init__(self) -> None:
        super().__init__("Data for a non-empty response type is empty")


class DecodingError(ResponseParserError):
    """Raised when the payload cannot be decoded into the response
    shape."""

    def __init__(self, error: ErrorSnapshot) -> None:
        self.error = error
        super().__init__(f"Failed to decode data: {error.description}")


#####################
#     API client    #
#####################


class APIClientError(Exception):
    """Base class of failures raised by ``APIClient``.

    Args:
        error: The wrapped lower-level error.
    """

    prefix = "API client error"

    def __init__(self, error: Exception | ErrorSnapshot) -> None:
        self.error = error
        super().__init__(f"{self.prefix}: {error}")


class ClientNetworkError(APIClientError):
    """Wraps a ``NetworkError``."""

    prefix = "Network error"
    error: NetworkError


class ClientRequestBuilderError(APIClientError):
    """Wraps a ``RequestBuilderError``."""

    prefix = "Request building error"
    error: RequestBuilderError


class ClientResponseParseError(APIClientError):
    """Wraps a ``ResponseParserError``."""

    prefix = "Response parsing error"
    error: ResponseParserError


class ClientUnexpectedError(APIClientError):
    """Wraps a snapshot of a failure outside the known families."""

    prefix = "Unexpected error"
    error: ErrorSnapshot
