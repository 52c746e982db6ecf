r"""Typed API client.

This module provides ``APIClient``, the single entry point executing
request descriptors: it builds the wire request, sends it through a
(usually retrying) network client and decodes the response into the
shape the descriptor declares. Every failure is reported as an
``APIClientError`` wrapping the error of the layer it originates from.
"""

from __future__ import annotations

__all__ = ["APIClient"]

import logging
from typing import TYPE_CHECKING, Any

import httpx

from netlayer.builder import RequestBuilder
from netlayer.cancellation import schedule_with_callback
from netlayer.exceptions import (
    ClientNetworkError,
    ClientRequestBuilderError,
    ClientResponseParseError,
    ClientUnexpectedError,
    NetworkError,
    RequestBuilderError,
    ResponseParserError,
)
from netlayer.network.client import NetworkClient
from netlayer.network_logger import DefaultNetworkLogger
from netlayer.parser import ResponseParser
from netlayer.result import Failure
from netlayer.retry.client import RetryingNetworkClient
from netlayer.utils.error_snapshot import ErrorSnapshot

if TYPE_CHECKING:
    import asyncio
    from collections.abc import Callable
    from types import TracebackType
    from typing import Self

    from netlayer.auth import TokenProvider
    from netlayer.builder import BaseRequestBuilder
    from netlayer.cancellation import Cancellable
    from netlayer.core.config import ClientConfig
    from netlayer.exceptions import APIClientError
    from netlayer.network.base import BaseNetworkClient
    from netlayer.network_logger import NetworkLogger
    from netlayer.parser import BaseResponseParser
    from netlayer.request import APIRequest
    from netlayer.result import Result
    from netlayer.retry.policy import RetryPolicy

logger: logging.Logger = logging.getLogger(__name__)


def _wrap_error(error: BaseException) -> APIClientError:
    if isinstance(error, NetworkError):
        return ClientNetworkError(error)
    if isinstance(error, RequestBuilderError):
        return ClientRequestBuilderError(error)
    if isinstance(error, ResponseParserError):
        return ClientResponseParseError(error)
    logger.debug(f"Unclassified failure {type(error).__name__}: {error}")
    return ClientUnexpectedError(ErrorSnapshot.from_exception(error))


class APIClient:
    r"""Client executing typed API requests.

    Args:
        base_url: The base URL every endpoint is joined to.
        network_client: The network client sending wire requests. Use a
            ``RetryingNetworkClient`` to honor retry policies.
        request_builder: The request builder. Defaults to
            ``RequestBuilder()``.
        response_parser: The response parser. Defaults to
            ``ResponseParser()``.
        token_provider: Optional source of access tokens.
        default_retry_policy: Retry policy of requests that do not
            declare their own.

    Example:
        ```pycon
        >>> import asyncio
        >>> from netlayer import APIClient, APIRequest, ClientConfig, RetryPolicy
        >>> class GetUser(APIRequest):
        ...     response_type = dict
        ...
        ...     def __init__(self, user_id: int) -> None:
        ...         self.endpoint = f"/users/{user_id}"
        ...
        >>> async def main():  # doctest: +SKIP
        ...     config = ClientConfig(
        ...         base_url="https://api.example.com",
        ...         default_retry_policy=RetryPolicy(max_retries=3),
        ...     )
        ...     async with APIClient.from_config(config) as client:
        ...         return await client.execute(GetUser(42))
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        base_url: str,
        network_client: BaseNetworkClient,
        request_builder: BaseRequestBuilder | None = None,
        response_parser: BaseResponseParser | None = None,
        token_provider: TokenProvider | None = None,
        default_retry_policy: RetryPolicy | None = None,
    ) -> None:
        self._base_url = base_url
        self._network_client = network_client
        self._request_builder = request_builder if request_builder is not None else RequestBuilder()
        self._response_parser = (
            response_parser if response_parser is not None else ResponseParser()
        )
        self._token_provider = token_provider
        self._default_retry_policy = default_retry_policy
        # httpx client created by from_config and closed with the client
        self._owned_http_client: httpx.AsyncClient | None = None

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
        token_provider: TokenProvider | None = None,
        network_logger: NetworkLogger | None = None,
        response_parser: BaseResponseParser | None = None,
    ) -> APIClient:
        """Create a client with the default network stack.

        The stack is ``RetryingNetworkClient(NetworkClient(http_client))``.
        When ``http_client`` is not given, an ``httpx.AsyncClient`` is
        created from the configuration and closed by ``aclose`` (or when
        leaving the ``async with`` block).

        Args:
            config: The client configuration.
            http_client: Optional httpx client, owned by the caller.
            token_provider: Optional source of access tokens.
            network_logger: Optional network logger. Defaults to
                ``DefaultNetworkLogger()`` if ``config.enable_logging`` is
                set.
            response_parser: Optional response parser.

        Returns:
            The configured client.
        """
        owned = http_client is None
        if http_client is None:
            http_client = httpx.AsyncClient(timeout=config.timeout, headers=config.headers)
        if network_logger is None and config.enable_logging:
            network_logger = DefaultNetworkLogger()

        client = cls(
            base_url=config.base_url,
            network_client=RetryingNetworkClient(NetworkClient(http_client, network_logger)),
            response_parser=response_parser,
            token_provider=token_provider,
            default_retry_policy=config.default_retry_policy,
        )
        if owned:
            client._owned_http_client = http_client
        return client

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(base_url={self._base_url!r}, "
            f"network_client={self._network_client!r})"
        )

    @property
    def base_url(self) -> str:
        """The base URL every endpoint is joined to."""
        return self._base_url

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the httpx client created by ``from_config``, if any."""
        if self._owned_http_client is not None:
            await self._owned_http_client.aclose()
            self._owned_http_client = None

    def resolve_retry_policy(self, api_request: APIRequest) -> RetryPolicy | None:
        """Return the retry policy applying to a request.

        The policy declared by the request wins over the client default.

        Args:
            api_request: The request descriptor.

        Returns:
            The effective retry policy, ``None`` to disable retries.
        """
        if api_request.retry_policy is not None:
            return api_request.retry_policy
        return self._default_retry_policy

    async def execute(self, api_request: APIRequest) -> Any:
        """Execute a request and decode its response.

        Args:
            api_request: The request descriptor.

        Returns:
            The response decoded into ``api_request.response_type``.

        Raises:
            ClientRequestBuilderError: If the wire request cannot be built.
                Nothing is sent in this case.
            ClientNetworkError: If the request failed, after retries.
            ClientResponseParseError: If the response cannot be decoded.
            ClientUnexpectedError: For any other failure.
            asyncio.CancelledError: If the surrounding task is cancelled.
        """
        try:
            wire_request = self._build(api_request)
        except Exception as exc:
            raise _wrap_error(exc) from exc
        return await self._perform(api_request, wire_request)

    def execute_with_callback(
        self,
        api_request: APIRequest,
        completion: Callable[[Result[Any, APIClientError]], None],
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> Cancellable | None:
        """Execute a request and report the outcome to a callback.

        The request is built synchronously. If building fails,
        ``completion`` is invoked right away with the failure and no
        handle is returned. Otherwise the request runs in the background
        on ``loop`` (default: the running loop) and ``completion`` receives
        ``Success(value)`` or ``Failure(error)`` exactly once, unless the
        returned handle is cancelled first.

        Args:
            api_request: The request descriptor.
            completion: The callback receiving the outcome.
            loop: Optional event loop to run the request on.

        Returns:
            The handle cancelling the request, ``None`` if building failed.
        """
        try:
            wire_request = self._build(api_request)
        except Exception as exc:
            completion(Failure(_wrap_error(exc)))
            return None
        return schedule_with_callback(
            self._perform(api_request, wire_request), completion, loop=loop
        )

    def _build(self, api_request: APIRequest) -> httpx.Request:
        return self._request_builder.build_request(
            api_request, self._base_url, self._token_provider
        )

    async def _perform(self, api_request: APIRequest, wire_request: httpx.Request) -> Any:
        policy = self.resolve_retry_policy(api_request)
        try:
            data = await self._network_client.send(wire_request, policy)
            return self._response_parser.parse(api_request.response_type, data)
        except Exception as exc:
            raise _wrap_error(exc) from exc
