r"""Retry policy value object.

This module provides the ``RetryPolicy`` dataclass describing how many
times a failed request is retried, how long to wait between attempts, and
which network errors are worth retrying.
"""

from __future__ import annotations

__all__ = ["RETRYABLE_TRANSPORT_CODES", "RetryPolicy", "default_should_retry"]

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from netlayer.core.config import (
    DEFAULT_BACKOFF_FACTOR,
    DEFAULT_INITIAL_DELAY,
    DEFAULT_MAX_RETRIES,
    RETRYABLE_STATUS_RANGE,
)
from netlayer.core.validation import validate_retry_params
from netlayer.exceptions import RequestFailedError, UnexpectedStatusCodeError
from netlayer.utils.error_snapshot import TransportErrorCode

if TYPE_CHECKING:
    from collections.abc import Callable

    from netlayer.exceptions import NetworkError

# Transport failures considered transient by the default predicate
RETRYABLE_TRANSPORT_CODES = frozenset(
    {
        TransportErrorCode.TIMED_OUT,
        TransportErrorCode.CANNOT_FIND_HOST,
        TransportErrorCode.CANNOT_CONNECT_TO_HOST,
        TransportErrorCode.NETWORK_CONNECTION_LOST,
        TransportErrorCode.NOT_CONNECTED_TO_INTERNET,
    }
)


def default_should_retry(error: NetworkError) -> bool:
    """Decide whether a network error is transient.

    Server errors (status 500-599) and common connectivity failures
    (timeout, unresolved host, unreachable host, lost connection, no
    network) are retried. Everything else is terminal.

    Args:
        error: The classified network error.

    Returns:
        ``True`` if the request should be retried.

    Example:
        ```pycon
        >>> from netlayer.exceptions import UnauthorizedError, UnexpectedStatusCodeError
        >>> from netlayer.retry.policy import default_should_retry
        >>> default_should_retry(UnexpectedStatusCodeError(503))
        True
        >>> default_should_retry(UnexpectedStatusCodeError(404))
        False
        >>> default_should_retry(UnauthorizedError())
        False

        ```
    """
    if isinstance(error, UnexpectedStatusCodeError):
        return error.status_code in RETRYABLE_STATUS_RANGE
    if isinstance(error, RequestFailedError):
        return error.error.code in RETRYABLE_TRANSPORT_CODES
    return False


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for automatic retries of failed requests.

    The total number of attempts is ``max_retries + 1``. The delay before
    attempt ``k`` (``k >= 1``) is ``initial_delay * backoff_factor ** (k - 1)``.

    Args:
        max_retries: Maximum number of retry attempts, excluding the
            initial request. ``0`` means a single attempt.
        initial_delay: Delay in seconds before the first retry.
        backoff_factor: Multiplier applied to the delay after each
            retried attempt.
        should_retry: Predicate deciding whether a network error is
            retryable.

    Raises:
        ValueError: If any numeric parameter is negative.

    Example:
        ```pycon
        >>> from netlayer.retry import RetryPolicy
        >>> policy = RetryPolicy(max_retries=3, initial_delay=0.5, backoff_factor=2.0)
        >>> policy.total_attempts
        4
        >>> [policy.delay_for(k) for k in range(1, 4)]
        [0.5, 1.0, 2.0]

        ```
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    initial_delay: float = DEFAULT_INITIAL_DELAY
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR
    should_retry: Callable[[NetworkError], bool] = field(
        default=default_should_retry, compare=False
    )

    def __post_init__(self) -> None:
        validate_retry_params(
            max_retries=self.max_retries,
            initial_delay=self.initial_delay,
            backoff_factor=self.backoff_factor,
        )

    @property
    def total_attempts(self) -> int:
        """The number of attempts including the initial request."""
        return self.max_retries + 1

    def delay_for(self, attempt: int) -> float:
        """Compute the delay before a retry attempt.

        Args:
            attempt: The attempt number (1-indexed retry, ``1`` is the
                first retry).

        Returns:
            The delay in seconds.

        Raises:
            ValueError: If ``attempt`` is lower than 1.
        """
        if attempt < 1:
            msg = f"attempt must be >= 1, got {attempt}"
            raise ValueError(msg)
        return self.initial_delay * self.backoff_factor ** (attempt - 1)
