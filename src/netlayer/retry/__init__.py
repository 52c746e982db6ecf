r"""Retry package.

Public API:
    - RetryPolicy: Configuration of retries and backoff
    - default_should_retry: Default retryability predicate
    - RetryingNetworkClient: Network client decorator retrying failed requests
"""

from __future__ import annotations

__all__ = [
    "RETRYABLE_TRANSPORT_CODES",
    "RetryPolicy",
    "RetryingNetworkClient",
    "default_should_retry",
]

from netlayer.retry.client import RetryingNetworkClient
from netlayer.retry.policy import RETRYABLE_TRANSPORT_CODES, RetryPolicy, default_should_retry
