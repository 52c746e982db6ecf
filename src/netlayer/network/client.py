r"""Transport network client on top of httpx.

``NetworkClient`` sends one wire request through an ``httpx.AsyncClient``,
validates the status line and classifies every failure into a
``NetworkError``. It reports the request and its outcome to an optional
``NetworkLogger``.
"""

from __future__ import annotations

__all__ = ["NetworkClient", "validate_response"]

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import httpx

from netlayer.exceptions import (
    InvalidResponseError,
    InvalidURLError,
    NetworkError,
    RequestFailedError,
    UnauthorizedError,
    UnexpectedStatusCodeError,
)
from netlayer.network.base import BaseNetworkClient
from netlayer.utils.error_snapshot import ErrorSnapshot

if TYPE_CHECKING:
    from netlayer.network_logger import NetworkLogger
    from netlayer.retry.policy import RetryPolicy

logger: logging.Logger = logging.getLogger(__name__)


def _response_body(response: httpx.Response) -> bytes:
    try:
        return response.content or b""
    except httpx.ResponseNotRead:
        return b""


def validate_response(response: Any) -> bytes:
    """Validate the status line of a response.

    Args:
        response: The object returned by the transport.

    Returns:
        The body of a 2xx response, ``b""`` when absent.

    Raises:
        InvalidResponseError: If ``response`` is not an HTTP response or
            its status code is not a valid HTTP status.
        UnauthorizedError: If the status is 401.
        UnexpectedStatusCodeError: If the status is not 2xx.

    Example:
        ```pycon
        >>> import httpx
        >>> from netlayer.network.client import validate_response
        >>> validate_response(httpx.Response(200, content=b"ok"))
        b'ok'
        >>> validate_response(httpx.Response(204))
        b''

        ```
    """
    if not isinstance(response, httpx.Response) or not 100 <= response.status_code <= 599:
        raise InvalidResponseError
    body = _response_body(response)
    if response.status_code == 401:
        raise UnauthorizedError(body)
    if not 200 <= response.status_code <= 299:
        raise UnexpectedStatusCodeError(response.status_code, body)
    return body


class NetworkClient(BaseNetworkClient):
    """Network client executing wire requests with httpx.

    The retry policy argument of ``send`` is ignored: wrap this client
    in a ``RetryingNetworkClient`` to retry failed requests.

    Args:
        client: The httpx client performing the I/O. Its lifecycle is
            owned by the caller.
        logger: Optional sink receiving request and response snapshots.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from netlayer.network import NetworkClient
        >>> async def main():
        ...     transport = httpx.MockTransport(lambda request: httpx.Response(200, text="pong"))
        ...     async with httpx.AsyncClient(transport=transport) as http_client:
        ...         client = NetworkClient(http_client)
        ...         return await client.send(httpx.Request("GET", "https://api.example.com/ping"))
        ...
        >>> asyncio.run(main())
        b'pong'

        ```
    """

    def __init__(self, client: httpx.AsyncClient, logger: NetworkLogger | None = None) -> None:
        self._client = client
        self._logger = logger

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(logger={self._logger!r})"

    async def send(
        self,
        request: httpx.Request,
        retry_policy: RetryPolicy | None = None,  # noqa: ARG002
    ) -> bytes:
        if self._logger is not None:
            self._logger.log_request(request)

        if not request.url.is_absolute_url:
            error = InvalidURLError()
            self._log_response(None, None, error, request)
            raise error

        try:
            response = await self._client.send(request)
        except asyncio.CancelledError:
            # a cancelled request is sent but never answered
            logger.debug(f"{request.method} request to {request.url} was cancelled")
            raise
        except Exception as exc:
            error = RequestFailedError(ErrorSnapshot.from_exception(exc))
            logger.debug(
                f"{request.method} request to {request.url} failed with "
                f"{type(exc).__name__}: {exc}"
            )
            self._log_response(None, None, error, request)
            raise error from exc

        body = _response_body(response) if isinstance(response, httpx.Response) else None
        try:
            data = validate_response(response)
        except NetworkError as error:
            self._log_response(response, body, error, request)
            raise
        self._log_response(response, data, None, request)
        return data

    def _log_response(
        self,
        response: httpx.Response | None,
        data: bytes | None,
        error: NetworkError | None,
        request: httpx.Request,
    ) -> None:
        if self._logger is not None:
            self._logger.log_response(response, data, error, request)
