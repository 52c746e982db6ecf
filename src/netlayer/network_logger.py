r"""Logging of network requests and responses.

The network client reports every outgoing request and every received
response (or classified failure) to a ``NetworkLogger``. The default
implementation, ``DefaultNetworkLogger``, writes human-readable blocks
through the standard ``logging`` module and attaches structured fields
(``url``, ``method``, ``status_code``, ``curl``) for JSON handlers such as
``StructuredFormatter``.

Example:
    ```python
    import logging

    from netlayer.network_logger import DefaultNetworkLogger
    from netlayer.utils.structured_logging import StructuredFormatter

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logging.getLogger("netlayer").addHandler(handler)
    logging.getLogger("netlayer").setLevel(logging.DEBUG)

    network_logger = DefaultNetworkLogger()
    ```
"""

from __future__ import annotations

__all__ = ["DefaultNetworkLogger", "NetworkLogger", "curl_command"]

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import httpx

from netlayer.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from collections.abc import Mapping


def _escape(value: str) -> str:
    return value.replace("'", "'\\''")


def _describe_bytes(data: bytes | None) -> str:
    if not data:
        return "None"
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return f"({len(data)} bytes of non-UTF8 data)"


def _content(request: httpx.Request) -> bytes:
    try:
        return request.content
    except httpx.RequestNotRead:
        return b""


def _format_headers(headers: Mapping[str, str]) -> str:
    return str(dict(headers.items()))


def curl_command(request: httpx.Request) -> str:
    """Render a request as an equivalent cURL command.

    Args:
        request: The request to render.

    Returns:
        The cURL command line.

    Example:
        ```pycon
        >>> import httpx
        >>> from netlayer.network_logger import curl_command
        >>> request = httpx.Request(
        ...     "GET", "https://api.example.com/users", headers={"Accept": "application/json"}
        ... )
        >>> print(curl_command(request))
        curl 'https://api.example.com/users' -H 'accept: application/json'

        ```
    """
    command = f"curl '{request.url}'"
    if request.method != "GET":
        command += f" -X {request.method}"
    for name, value in request.headers.items():
        # host is derived from the URL by curl
        if name.lower() == "host":
            continue
        command += f" -H '{name}: {_escape(value)}'"
    body = _content(request)
    if body:
        try:
            command += f" -d '{_escape(body.decode('utf-8'))}'"
        except UnicodeDecodeError:
            command += f" --data-binary '({len(body)} bytes of non-UTF8 data)'"
    return command


class NetworkLogger(ABC):
    """Sink for request and response snapshots.

    Implementations are shared by concurrent requests and must never
    raise.
    """

    @abstractmethod
    def log_request(self, request: httpx.Request) -> None:
        """Log an outgoing request.

        Args:
            request: The request about to be sent.
        """

    @abstractmethod
    def log_response(
        self,
        response: httpx.Response | None,
        data: bytes | None,
        error: BaseException | None,
        request: httpx.Request,
    ) -> None:
        """Log the outcome of a request.

        Args:
            response: The received response, ``None`` if the transport
                failed or returned something that is not an HTTP response.
            data: The response body, if any.
            error: The classified error, if the request failed.
            request: The originating request.
        """


class DefaultNetworkLogger(NetworkLogger):
    """Network logger writing through the standard ``logging`` module.

    Args:
        logger: The logger to write to. Defaults to the logger of this
            module.
        level: The level of request and successful response records.
            Failures are logged at ``ERROR``, non-HTTP responses at
            ``WARNING``.
    """

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.DEBUG) -> None:
        self._logger = logger if logger is not None else logging.getLogger(__name__)
        self._level = level

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(logger={self._logger.name!r}, level={self._level})"

    def log_request(self, request: httpx.Request) -> None:
        if not self._logger.isEnabledFor(self._level):
            return
        try:
            curl = curl_command(request)
            message = (
                "\n--- [Request] --->\n"
                f"URL: {request.url}\n"
                f"Method: {request.method}\n"
                f"Headers: {_format_headers(request.headers)}\n"
                f"Body: {_describe_bytes(_content(request))}\n"
                f"cURL: {curl}\n"
                "-------------------->"
            )
            log_structured(
                self._logger,
                self._level,
                message,
                event="request",
                url=str(request.url),
                method=request.method,
                curl=curl,
            )
        except Exception:  # noqa: BLE001
            self._logger.warning("Failed to log request", exc_info=True)

    def log_response(
        self,
        response: httpx.Response | None,
        data: bytes | None,
        error: BaseException | None,
        request: httpx.Request,
    ) -> None:
        try:
            self._log_response(response, data, error, request)
        except Exception:  # noqa: BLE001
            self._logger.warning("Failed to log response", exc_info=True)

    def _log_response(
        self,
        response: httpx.Response | None,
        data: bytes | None,
        error: BaseException | None,
        request: httpx.Request,
    ) -> None:
        url = str(request.url)
        if not isinstance(response, httpx.Response):
            if error is not None:
                log_structured(
                    self._logger,
                    logging.ERROR,
                    f"\n<--- [Response] ---\nRequest URL: {url}\nError: {error}\n"
                    "<--------------------",
                    event="response",
                    url=url,
                    method=request.method,
                    error=str(error),
                )
            else:
                log_structured(
                    self._logger,
                    logging.WARNING,
                    f"\n<--- [Response] ---\nRequest URL: {url}\n"
                    "Warning: Received a non-HTTP response.\n<--------------------",
                    event="response",
                    url=url,
                    method=request.method,
                )
            return

        level = logging.ERROR if error is not None else self._level
        if not self._logger.isEnabledFor(level):
            return
        message = (
            "\n<--- [Response] ---\n"
            f"Request URL: {url}\n"
            f"Status Code: {response.status_code}\n"
            f"Headers: {_format_headers(response.headers)}\n"
            f"Body: {_describe_bytes(data)}\n"
        )
        if error is not None:
            message += f"Error: {error}\n"
        message += "<--------------------"
        log_structured(
            self._logger,
            level,
            message,
            event="response",
            url=url,
            method=request.method,
            status_code=response.status_code,
        )
