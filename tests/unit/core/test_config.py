r"""Unit tests for ClientConfig dataclass.

This file contains tests for the ClientConfig dataclass in
core/config.py.
"""

from __future__ import annotations

import httpx
import pytest
from coola.equality import objects_are_equal

from netlayer.core import DEFAULT_TIMEOUT, ClientConfig
from netlayer.retry import RetryPolicy

##################################
#     Tests for ClientConfig     #
##################################


def test_client_config_defaults() -> None:
    """Test that ClientConfig uses correct default values."""
    config = ClientConfig(base_url="https://api.example.com")

    assert config.base_url == "https://api.example.com"
    assert config.timeout == DEFAULT_TIMEOUT
    assert config.default_retry_policy is None
    assert config.enable_logging is False
    assert config.headers is None


def test_client_config_custom_values() -> None:
    policy = RetryPolicy(max_retries=5)
    config = ClientConfig(
        base_url="http://localhost:8080/v1",
        timeout=30.0,
        default_retry_policy=policy,
        enable_logging=True,
        headers={"User-Agent": "netlayer"},
    )

    assert config.timeout == 30.0
    assert config.default_retry_policy is policy
    assert config.enable_logging is True
    assert config.headers == {"User-Agent": "netlayer"}


def test_client_config_accepts_httpx_timeout() -> None:
    timeout = httpx.Timeout(5.0, connect=1.0)
    assert ClientConfig(base_url="https://api.example.com", timeout=timeout).timeout is timeout


@pytest.mark.parametrize("base_url", ["", "api.example.com", "ftp://files.example.com", "/v1"])
def test_client_config_invalid_base_url(base_url: str) -> None:
    """Test that ClientConfig rejects relative or non-HTTP base URLs."""
    with pytest.raises(ValueError, match="base_url must be an absolute http"):
        ClientConfig(base_url=base_url)


@pytest.mark.parametrize("timeout", [0, -1.0])
def test_client_config_invalid_timeout(timeout: float) -> None:
    with pytest.raises(ValueError, match="timeout must be > 0"):
        ClientConfig(base_url="https://api.example.com", timeout=timeout)


def test_client_config_merge() -> None:
    """Test that merge only applies non-None overrides."""
    config = ClientConfig(base_url="https://api.example.com", enable_logging=True)
    merged = config.merge(timeout=30.0, headers=None)

    assert merged is not config
    assert merged.timeout == 30.0
    assert merged.enable_logging is True
    assert merged.headers is None
    assert config.timeout == DEFAULT_TIMEOUT


def test_client_config_merge_validates() -> None:
    config = ClientConfig(base_url="https://api.example.com")
    with pytest.raises(ValueError, match="timeout must be > 0"):
        config.merge(timeout=-5.0)


def test_client_config_to_dict() -> None:
    policy = RetryPolicy(max_retries=1)
    config = ClientConfig(base_url="https://api.example.com", default_retry_policy=policy)
    assert objects_are_equal(
        config.to_dict(),
        {
            "base_url": "https://api.example.com",
            "timeout": 10.0,
            "default_retry_policy": policy,
            "enable_logging": False,
            "headers": None,
        },
    )
