r"""Configuration dataclass and defaults for APIClient.

This module provides configuration constants and a dataclass-based
configuration object used to assemble an ``APIClient`` with its
default collaborators.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_BACKOFF_FACTOR",
    "DEFAULT_INITIAL_DELAY",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_TIMEOUT",
    "RETRYABLE_STATUS_RANGE",
    "ClientConfig",
]

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from netlayer.core.validation import validate_base_url, validate_timeout

if TYPE_CHECKING:
    import httpx

    from netlayer.retry.policy import RetryPolicy


# Default timeout in seconds for HTTP requests
DEFAULT_TIMEOUT = 10.0

# Default maximum number of retry attempts
# Total attempts = max_retries + 1 (initial attempt)
DEFAULT_MAX_RETRIES = 3

# Default delay in seconds before the first retry
DEFAULT_INITIAL_DELAY = 1.0

# Default multiplier of the delay between retries
# With 1.0 and 2.0: 1st retry waits 1s, 2nd waits 2s, 3rd waits 4s
DEFAULT_BACKOFF_FACTOR = 2.0

# Server errors retried by the default retry predicate
RETRYABLE_STATUS_RANGE = range(500, 600)


@dataclass
class ClientConfig:
    """Configuration for APIClient.

    Args:
        base_url: Base URL every request endpoint is joined to.
        timeout: Timeout of the underlying ``httpx.AsyncClient``. Must be > 0.
        default_retry_policy: Retry policy used by requests that do not
            declare their own. ``None`` disables retries by default.
        enable_logging: Whether to install ``DefaultNetworkLogger``.
        headers: Default headers of the underlying ``httpx.AsyncClient``.

    Example:
        ```pycon
        >>> from netlayer.core.config import ClientConfig
        >>> config = ClientConfig(base_url="https://api.example.com")
        >>> config.timeout
        10.0
        >>> merged = config.merge(timeout=30.0)
        >>> merged.timeout
        30.0
        >>> config.timeout  # Original unchanged
        10.0

        ```
    """

    base_url: str
    timeout: float | httpx.Timeout = DEFAULT_TIMEOUT
    default_retry_policy: RetryPolicy | None = None
    enable_logging: bool = False
    headers: dict[str, str] | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters after initialization.

        Raises:
            ValueError: If any parameter fails validation.
        """
        validate_base_url(self.base_url)
        validate_timeout(self.timeout)

    def merge(self, **overrides: Any) -> ClientConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new ClientConfig instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary format.

        Returns:
            Dictionary with the configuration parameters.

        Example:
            ```pycon
            >>> from netlayer.core.config import ClientConfig
            >>> ClientConfig(base_url="https://api.example.com").to_dict()["base_url"]
            'https://api.example.com'

            ```
        """
        return {
            "base_url": self.base_url,
            "timeout": self.timeout,
            "default_retry_policy": self.default_retry_policy,
            "enable_logging": self.enable_logging,
            "headers": self.headers,
        }
