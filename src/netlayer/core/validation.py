r"""Parameter validation utilities for the network layer.

This module provides validation functions for client and retry
parameters to ensure they meet the required constraints before being
used.
"""

from __future__ import annotations

__all__ = ["validate_base_url", "validate_retry_params", "validate_timeout"]

import httpx


def validate_timeout(timeout: float | httpx.Timeout) -> None:
    """Validate timeout parameter.

    Args:
        timeout: Maximum seconds to wait for server responses.
            Must be > 0 if provided as a numeric value.

    Raises:
        ValueError: If timeout is a numeric value <= 0.

    Example:
        ```pycon
        >>> from netlayer.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if isinstance(timeout, (int, float)) and timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_retry_params(
    max_retries: int,
    initial_delay: float = 0.0,
    backoff_factor: float = 1.0,
) -> None:
    """Validate retry parameters.

    Args:
        max_retries: Maximum number of retry attempts for failed requests.
            Must be >= 0. A value of 0 means no retries (only the initial attempt).
        initial_delay: Delay in seconds before the first retry. Must be >= 0.
        backoff_factor: Multiplier applied to the delay after each retried
            attempt. Must be >= 0.

    Raises:
        ValueError: If any parameter is negative.

    Example:
        ```pycon
        >>> from netlayer.core.validation import validate_retry_params
        >>> validate_retry_params(max_retries=3)
        >>> validate_retry_params(max_retries=3, initial_delay=0.5, backoff_factor=2.0)
        >>> validate_retry_params(max_retries=-1)  # doctest: +SKIP

        ```
    """
    if max_retries < 0:
        msg = f"max_retries must be >= 0, got {max_retries}"
        raise ValueError(msg)
    if initial_delay < 0:
        msg = f"initial_delay must be >= 0, got {initial_delay}"
        raise ValueError(msg)
    if backoff_factor < 0:
        msg = f"backoff_factor must be >= 0, got {backoff_factor}"
        raise ValueError(msg)


def validate_base_url(base_url: str) -> None:
    """Validate that a base URL is absolute.

    Args:
        base_url: The base URL of an API.

    Raises:
        ValueError: If the URL cannot be parsed or has no scheme or host.

    Example:
        ```pycon
        >>> from netlayer.core.validation import validate_base_url
        >>> validate_base_url("https://api.example.com")
        >>> validate_base_url("not a url")  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: base_url must be an absolute http(s) URL, got 'not a url'

        ```
    """
    try:
        url = httpx.URL(base_url)
    except (httpx.InvalidURL, TypeError) as exc:
        msg = f"base_url must be an absolute http(s) URL, got {base_url!r}"
        raise ValueError(msg) from exc
    if url.scheme not in {"http", "https"} or not url.host:
        msg = f"base_url must be an absolute http(s) URL, got {base_url!r}"
        raise ValueError(msg)
