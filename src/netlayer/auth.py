r"""Authorization modes and token providers.

An ``APIRequest`` declares how it must be authorized through its
``auth_type`` attribute, which is one of the closed set of variants
``NoAuth``, ``BearerTokenAuth`` and ``QueryAPIKeyAuth``. The token itself is
supplied by a ``TokenProvider`` injected into the ``APIClient``.
"""

from __future__ import annotations

__all__ = [
    "AuthorizationType",
    "BearerTokenAuth",
    "NoAuth",
    "QueryAPIKeyAuth",
    "StaticTokenProvider",
    "TokenProvider",
]

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class NoAuth:
    """No authentication required for the request."""


@dataclass(frozen=True)
class BearerTokenAuth:
    """Send the token in an ``Authorization: Bearer <token>`` header."""


@dataclass(frozen=True)
class QueryAPIKeyAuth:
    """Send the token as a query parameter.

    Attributes:
        key_name: The name of the query parameter (e.g. ``"appid"``,
            ``"api_key"``).
    """

    key_name: str


AuthorizationType = Union[NoAuth, BearerTokenAuth, QueryAPIKeyAuth]


class TokenProvider(ABC):
    """Source of access tokens.

    Implementations are long-lived and shared by concurrent requests, so
    ``get_access_token`` must be safe to call from several tasks.
    """

    @abstractmethod
    def get_access_token(self) -> str | None:
        """Return the current access token.

        Returns:
            The token, or ``None`` if no token is available.
        """


class StaticTokenProvider(TokenProvider):
    """Token provider returning a fixed token.

    Args:
        token: The token to return, ``None`` to simulate a missing token.

    Example:
        ```pycon
        >>> from netlayer.auth import StaticTokenProvider
        >>> StaticTokenProvider("secret").get_access_token()
        'secret'

        ```
    """

    def __init__(self, token: str | None) -> None:
        self._token = token

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(token={'***' if self._token else None})"

    def get_access_token(self) -> str | None:
        return self._token
