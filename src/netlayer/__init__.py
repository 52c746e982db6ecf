r"""netlayer - Typed request orchestration on top of httpx.

This package turns declarative request descriptors into HTTP exchanges:
it builds the wire request (URL, headers, query, authorization, body),
sends it with optional retries and exponential backoff, and decodes the
response into a typed value with pydantic.

Key Features:
    - Declarative request descriptors (``APIRequest``, ``JSONRequest``)
    - Bearer token and query API key authorization
    - Retry policies with exponential backoff and a custom retry predicate
    - Awaitable and callback forms sharing one implementation
    - Cancellation of in-flight requests and pending backoff waits
    - Layered error taxonomy preserving the original cause
    - Request/response logging with cURL rendering

Example:
    ```pycon
    >>> from dataclasses import dataclass
    >>> from netlayer import APIClient, APIRequest, ClientConfig, RetryPolicy
    >>> @dataclass
    ... class User:
    ...     id: int
    ...     name: str
    ...
    >>> class GetUser(APIRequest):
    ...     response_type = User
    ...
    ...     def __init__(self, user_id: int) -> None:
    ...         self.endpoint = f"/users/{user_id}"
    ...
    >>> config = ClientConfig(
    ...     base_url="https://api.example.com", default_retry_policy=RetryPolicy(max_retries=2)
    ... )
    >>> async def main():  # doctest: +SKIP
    ...     async with APIClient.from_config(config) as client:
    ...         return await client.execute(GetUser(42))
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "APIClient",
    "APIClientError",
    "APIRequest",
    "AllRetriesFailedError",
    "BearerTokenAuth",
    "Cancellable",
    "CancellationHandle",
    "ClientConfig",
    "ClientNetworkError",
    "ClientRequestBuilderError",
    "ClientResponseParseError",
    "ClientUnexpectedError",
    "DefaultNetworkLogger",
    "EmptyResponse",
    "ErrorSnapshot",
    "Failure",
    "HTTPMethod",
    "JSONRequest",
    "NetworkClient",
    "NetworkError",
    "NetworkLogger",
    "NoAuth",
    "QueryAPIKeyAuth",
    "RequestBuilder",
    "RequestBuilderError",
    "ResponseParser",
    "ResponseParserError",
    "RetryPolicy",
    "RetryingNetworkClient",
    "StaticTokenProvider",
    "Success",
    "TokenProvider",
    "__version__",
]

from importlib.metadata import PackageNotFoundError, version

from netlayer.auth import (
    BearerTokenAuth,
    NoAuth,
    QueryAPIKeyAuth,
    StaticTokenProvider,
    TokenProvider,
)
from netlayer.builder import RequestBuilder
from netlayer.cancellation import Cancellable, CancellationHandle
from netlayer.client import APIClient
from netlayer.core.config import ClientConfig
from netlayer.exceptions import (
    AllRetriesFailedError,
    APIClientError,
    ClientNetworkError,
    ClientRequestBuilderError,
    ClientResponseParseError,
    ClientUnexpectedError,
    NetworkError,
    RequestBuilderError,
    ResponseParserError,
)
from netlayer.network.client import NetworkClient
from netlayer.network_logger import DefaultNetworkLogger, NetworkLogger
from netlayer.parser import ResponseParser
from netlayer.request import APIRequest, EmptyResponse, HTTPMethod, JSONRequest
from netlayer.result import Failure, Success
from netlayer.retry.client import RetryingNetworkClient
from netlayer.retry.policy import RetryPolicy
from netlayer.utils.error_snapshot import ErrorSnapshot

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
