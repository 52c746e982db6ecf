r"""Network client decorator adding automatic retries.

This module provides the ``RetryingNetworkClient`` class that wraps any
``BaseNetworkClient`` and retries failed requests according to a
``RetryPolicy``, waiting with exponential backoff between attempts.
"""

from __future__ import annotations

__all__ = ["RetryingNetworkClient", "all_retries_failed_fallback"]

import asyncio
import logging
from typing import TYPE_CHECKING

from netlayer.exceptions import AllRetriesFailedError, NetworkError, RequestFailedError
from netlayer.network.base import BaseNetworkClient
from netlayer.utils.error_snapshot import ErrorSnapshot

if TYPE_CHECKING:
    import httpx

    from netlayer.retry.policy import RetryPolicy

logger: logging.Logger = logging.getLogger(__name__)


def all_retries_failed_fallback() -> RequestFailedError:
    """Create the error reported when a retry sequence ends without any
    recorded error.

    The retry loop always records the error of a retried attempt, so this
    error signals a logic error rather than a real network condition.

    Returns:
        A ``RequestFailedError`` describing the situation.
    """
    return RequestFailedError(
        ErrorSnapshot(
            description="All retry attempts failed, but no specific error was captured.",
            domain="netlayer",
            error_type="RetryingNetworkClient",
        )
    )


class RetryingNetworkClient(BaseNetworkClient):
    """Network client decorator that retries failed requests.

    Without policy, or with ``max_retries == 0``, requests are delegated
    to the wrapped client as-is. Otherwise up to ``max_retries + 1``
    attempts are made, strictly one after another:

    - a successful attempt returns immediately
    - a failure that is not a ``NetworkError``, or that the policy
      predicate declares non-retryable, is raised immediately
    - a retryable failure is recorded and, if the budget allows, the next
      attempt starts after the current delay; the delay is then
      multiplied by ``backoff_factor``

    When every attempt failed, ``AllRetriesFailedError`` is raised with the
    last error and the number of attempts.

    Cancelling the surrounding task during an attempt or during a backoff
    wait aborts the whole sequence with ``asyncio.CancelledError``.

    Args:
        client: The network client to decorate.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from netlayer.network import NetworkClient
        >>> from netlayer.retry import RetryingNetworkClient, RetryPolicy
        >>> async def main():
        ...     responses = iter([httpx.Response(503), httpx.Response(200, text="ok")])
        ...     transport = httpx.MockTransport(lambda request: next(responses))
        ...     async with httpx.AsyncClient(transport=transport) as http_client:
        ...         client = RetryingNetworkClient(NetworkClient(http_client))
        ...         return await client.send(
        ...             httpx.Request("GET", "https://api.example.com/data"),
        ...             RetryPolicy(max_retries=2, initial_delay=0.01),
        ...         )
        ...
        >>> asyncio.run(main())
        b'ok'

        ```
    """

    def __init__(self, client: BaseNetworkClient) -> None:
        self._client = client

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(client={self._client!r})"

    @property
    def client(self) -> BaseNetworkClient:
        """The decorated network client."""
        return self._client

    async def send(
        self, request: httpx.Request, retry_policy: RetryPolicy | None = None
    ) -> bytes:
        if retry_policy is None or retry_policy.max_retries == 0:
            return await self._client.send(request)

        method, url = request.method, request.url
        total_attempts = retry_policy.max_retries + 1
        last_error: NetworkError | None = None
        delay = retry_policy.initial_delay

        for attempt in range(total_attempts):
            try:
                return await self._client.send(request)
            except NetworkError as exc:
                if not retry_policy.should_retry(exc):
                    logger.debug(
                        f"{method} request to {url} failed with a non-retryable error on "
                        f"attempt {attempt + 1}/{total_attempts}: {exc}"
                    )
                    raise
                last_error = exc

            if attempt < retry_policy.max_retries:
                logger.debug(
                    f"{method} request to {url} failed on attempt {attempt + 1}/{total_attempts}, "
                    f"retrying in {delay:.2f}s: {last_error}"
                )
                await asyncio.sleep(delay)
                delay *= retry_policy.backoff_factor

        if last_error is None:  # pragma: no cover
            logger.error(f"{method} request to {url}: retry sequence ended without recorded error")
            last_error = all_retries_failed_fallback()
        logger.debug(f"{method} request to {url} failed after {total_attempts} attempts")
        raise AllRetriesFailedError(last_error, total_attempts) from last_error
