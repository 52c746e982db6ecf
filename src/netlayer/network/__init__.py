r"""Executors of wire requests.

Public API:
    - BaseNetworkClient: Abstract executor with awaitable and callback forms
    - NetworkClient: Executor sending requests through httpx
"""

from __future__ import annotations

__all__ = ["BaseNetworkClient", "NetworkClient", "validate_response"]

from netlayer.network.base import BaseNetworkClient
from netlayer.network.client import NetworkClient, validate_response
