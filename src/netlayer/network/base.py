r"""Abstract network client.

``BaseNetworkClient`` is the single executor interface of the network
layer. Both the transport client and the retry decorator implement it, so
executors can be stacked freely.
"""

from __future__ import annotations

__all__ = ["BaseNetworkClient"]

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from netlayer.cancellation import schedule_with_callback

if TYPE_CHECKING:
    import asyncio
    from collections.abc import Callable

    import httpx

    from netlayer.cancellation import Cancellable
    from netlayer.exceptions import NetworkError
    from netlayer.result import Result
    from netlayer.retry.policy import RetryPolicy


class BaseNetworkClient(ABC):
    """Executor of wire requests.

    Subclasses implement the awaitable ``send``. The callback form
    ``send_with_callback`` runs the very same coroutine in the background,
    so both forms share one implementation and identical semantics.
    """

    @abstractmethod
    async def send(
        self, request: httpx.Request, retry_policy: RetryPolicy | None = None
    ) -> bytes:
        """Execute a wire request.

        Args:
            request: The request to send.
            retry_policy: Optional retry policy. Executors without retry
                support ignore it.

        Returns:
            The response body, ``b""`` if the response had none.

        Raises:
            NetworkError: If the request failed.
            asyncio.CancelledError: If the operation was cancelled.
        """

    def send_with_callback(
        self,
        request: httpx.Request,
        completion: Callable[[Result[bytes, NetworkError]], None],
        retry_policy: RetryPolicy | None = None,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> Cancellable | None:
        """Execute a wire request and report the outcome to a callback.

        Args:
            request: The request to send.
            completion: Callback receiving ``Success(body)`` or
                ``Failure(error)``. It is never invoked once the returned
                handle was cancelled.
            retry_policy: Optional retry policy.
            loop: Optional event loop to run the request on. Defaults to
                the running loop.

        Returns:
            The handle cancelling the request.
        """
        return schedule_with_callback(self.send(request, retry_policy), completion, loop=loop)
