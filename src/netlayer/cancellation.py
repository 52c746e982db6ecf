r"""Cancellation handles for callback-style operations.

A callback-style ``send``/``execute`` returns a ``Cancellable`` that the
caller owns. ``CancellationHandle`` is the handle handed out by the network
layer: it records that the operation was cancelled and forwards the
cancellation to whatever sub-operation is currently in flight (a network
attempt or a pending backoff wait).
"""

from __future__ import annotations

__all__ = [
    "Cancellable",
    "CancellationHandle",
    "TaskCancellable",
    "schedule_with_callback",
]

import asyncio
import concurrent.futures
import logging
import threading
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, TypeVar

from netlayer.result import Failure, Success

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

    from netlayer.result import Result

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)

# Strong references to scheduled tasks until they complete
_background_tasks: set[asyncio.Task[Any]] = set()


class Cancellable(ABC):
    """Anything that can be cancelled."""

    @abstractmethod
    def cancel(self) -> None:
        """Cancel the operation.

        Calling this method more than once must be harmless.
        """


class TaskCancellable(Cancellable):
    """Adapt an ``asyncio`` task or future to ``Cancellable``.

    The task is cancelled directly when ``cancel`` is called from the thread
    running its event loop, and through ``call_soon_threadsafe`` otherwise.

    Args:
        task: The task to cancel.
        loop: The event loop running ``task``.
    """

    def __init__(self, task: asyncio.Future[Any], loop: asyncio.AbstractEventLoop) -> None:
        self.task = task
        self.loop = loop

    def cancel(self) -> None:
        if _current_loop() is self.loop:
            self.task.cancel()
        elif not self.loop.is_closed():
            self.loop.call_soon_threadsafe(self.task.cancel)


class CancellationHandle(Cancellable):
    """Thread-safe cancellation token of one logical operation.

    The handle keeps a reference to the sub-operation currently in flight
    and cancels it when ``cancel`` is called. A sub-operation registered
    after cancellation is cancelled immediately. Once ``finish`` succeeded,
    the operation is complete and ``cancel`` is a no-op.

    Example:
        ```pycon
        >>> from netlayer.cancellation import CancellationHandle
        >>> handle = CancellationHandle()
        >>> handle.is_cancelled
        False
        >>> handle.cancel()
        >>> handle.is_cancelled
        True
        >>> handle.finish()  # a cancelled operation never completes
        False

        ```
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cancelled = False
        self._finished = False
        self._current: Cancellable | None = None

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(cancelled={self.is_cancelled}, "
            f"finished={self.is_finished})"
        )

    @property
    def is_cancelled(self) -> bool:
        """Indicate whether the operation was cancelled."""
        with self._lock:
            return self._cancelled

    @property
    def is_finished(self) -> bool:
        """Indicate whether the operation completed naturally."""
        with self._lock:
            return self._finished

    def cancel(self) -> None:
        with self._lock:
            if self._cancelled or self._finished:
                return
            self._cancelled = True
            current = self._current
            self._current = None
        logger.debug("Operation cancelled")
        if current is not None:
            current.cancel()

    def update(self, operation: Cancellable | None) -> None:
        """Register the sub-operation currently in flight.

        Args:
            operation: The new in-flight sub-operation. It is cancelled
                right away if the handle is already cancelled.
        """
        with self._lock:
            if not self._cancelled:
                self._current = operation
                return
        if operation is not None:
            operation.cancel()

    def finish(self) -> bool:
        """Mark the operation as completed.

        Returns:
            ``True`` if the completion may be delivered, ``False`` if the
                operation was cancelled first.
        """
        with self._lock:
            if self._cancelled:
                return False
            self._finished = True
            self._current = None
            return True


def _current_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class _FutureCancellable(Cancellable):
    """Adapt a ``concurrent.futures.Future`` to ``Cancellable``."""

    def __init__(self, future: concurrent.futures.Future[Any]) -> None:
        self.future = future

    def cancel(self) -> None:
        self.future.cancel()


def schedule_with_callback(
    coro: Coroutine[Any, Any, T],
    completion: Callable[[Result[T, BaseException]], None],
    *,
    loop: asyncio.AbstractEventLoop | None = None,
) -> CancellationHandle:
    """Run a coroutine in the background and report its outcome to a
    callback.

    The coroutine is scheduled on ``loop`` (thread-safely if ``loop`` is
    not the running loop of the calling thread) or on the running loop.
    ``completion`` receives ``Success(value)`` or ``Failure(error)`` exactly
    once, unless the returned handle is cancelled first, in which case it
    is never invoked.

    Args:
        coro: The coroutine to run.
        completion: The callback receiving the outcome.
        loop: Optional event loop to run the coroutine on.

    Returns:
        The handle cancelling the operation.

    Raises:
        RuntimeError: If no loop is given and no loop is running.
    """
    running = _current_loop()
    target = loop if loop is not None else running
    if target is None:
        coro.close()
        msg = "a running event loop or an explicit loop is required to schedule a callback"
        raise RuntimeError(msg)

    handle = CancellationHandle()

    def _on_done(future: asyncio.Future[T] | concurrent.futures.Future[T]) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if not handle.finish():
            logger.debug("Completion suppressed because the operation was cancelled")
            return
        if error is None:
            completion(Success(future.result()))
        else:
            completion(Failure(error))

    if target is running:
        task = target.create_task(coro)
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)
        task.add_done_callback(_on_done)
        handle.update(TaskCancellable(task, target))
    else:
        future = asyncio.run_coroutine_threadsafe(coro, target)
        future.add_done_callback(_on_done)
        handle.update(_FutureCancellable(future))
    return handle
