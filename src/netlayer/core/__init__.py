r"""Configuration and validation shared by the network layer."""

from __future__ import annotations

__all__ = [
    "DEFAULT_BACKOFF_FACTOR",
    "DEFAULT_INITIAL_DELAY",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_TIMEOUT",
    "RETRYABLE_STATUS_RANGE",
    "ClientConfig",
    "validate_base_url",
    "validate_retry_params",
    "validate_timeout",
]

from netlayer.core.config import (
    DEFAULT_BACKOFF_FACTOR,
    DEFAULT_INITIAL_DELAY,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
    RETRYABLE_STATUS_RANGE,
    ClientConfig,
)
from netlayer.core.validation import validate_base_url, validate_retry_params, validate_timeout
