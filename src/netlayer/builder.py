r"""Construction of wire requests from request descriptors.

``RequestBuilder`` turns an ``APIRequest`` into an ``httpx.Request``: it
joins the endpoint to the base URL, applies the authorization mode, adds
the query parameters and encodes the body. Building is pure: it never
touches the network.
"""

from __future__ import annotations

__all__ = ["BaseRequestBuilder", "RequestBuilder"]

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING
from urllib.parse import quote, urlencode

import httpx

from netlayer.auth import BearerTokenAuth, NoAuth, QueryAPIKeyAuth
from netlayer.exceptions import (
    BodyEncodingError,
    ComponentsCreationError,
    FinalURLCreationError,
    InvalidBaseURLError,
    MissingTokenError,
)
from netlayer.utils.error_snapshot import ErrorSnapshot

if TYPE_CHECKING:
    from netlayer.auth import TokenProvider
    from netlayer.request import APIRequest

logger: logging.Logger = logging.getLogger(__name__)

AUTHORIZATION_HEADER = "Authorization"
BEARER_SCHEME = "Bearer"


class BaseRequestBuilder(ABC):
    """Builder of wire requests."""

    @abstractmethod
    def build_request(
        self,
        api_request: APIRequest,
        base_url: str,
        token_provider: TokenProvider | None = None,
    ) -> httpx.Request:
        """Build the wire request of a request descriptor.

        Args:
            api_request: The request descriptor.
            base_url: The base URL the endpoint is joined to.
            token_provider: Optional source of access tokens.

        Returns:
            The wire request.

        Raises:
            RequestBuilderError: If the request cannot be built.
        """


class RequestBuilder(BaseRequestBuilder):
    """Default request builder.

    Example:
        ```pycon
        >>> from netlayer.auth import BearerTokenAuth, StaticTokenProvider
        >>> from netlayer.builder import RequestBuilder
        >>> from netlayer.request import APIRequest
        >>> class SearchUsers(APIRequest):
        ...     endpoint = "/users"
        ...     parameters = [("q", "ada"), ("page", "2")]
        ...     auth_type = BearerTokenAuth()
        ...
        >>> request = RequestBuilder().build_request(
        ...     SearchUsers(), "https://api.test.com/", StaticTokenProvider("t0k3n")
        ... )
        >>> request.method, str(request.url)
        ('GET', 'https://api.test.com/users?q=ada&page=2')
        >>> request.headers["Authorization"]
        'Bearer t0k3n'

        ```
    """

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}()"

    def build_request(
        self,
        api_request: APIRequest,
        base_url: str,
        token_provider: TokenProvider | None = None,
    ) -> httpx.Request:
        base = self._parse_base_url(base_url)
        joined = self._join(base, api_request.endpoint)

        try:
            components = httpx.URL(joined)
        except (httpx.InvalidURL, TypeError) as exc:
            raise ComponentsCreationError(joined) from exc

        query: list[tuple[str, str]] = list(api_request.parameters or [])
        headers = httpx.Headers()
        for name, value in (api_request.headers or {}).items():
            headers[name] = value

        auth_type = api_request.auth_type
        if isinstance(auth_type, BearerTokenAuth):
            token = self._retrieve_token(token_provider)
            headers[AUTHORIZATION_HEADER] = f"{BEARER_SCHEME} {token}"
        elif isinstance(auth_type, QueryAPIKeyAuth):
            token = self._retrieve_token(token_provider)
            query.append((auth_type.key_name, token))
        elif not isinstance(auth_type, NoAuth):
            msg = f"Unsupported authorization type: {auth_type!r}"
            raise TypeError(msg)

        url = self._assemble(components, query)

        try:
            body = api_request.body()
        except Exception as exc:
            raise BodyEncodingError(ErrorSnapshot.from_exception(exc)) from exc

        logger.debug(f"Built {api_request.method.value} request to {url}")
        return httpx.Request(api_request.method.value, url, headers=headers, content=body)

    @staticmethod
    def _parse_base_url(base_url: str) -> httpx.URL:
        try:
            base = httpx.URL(base_url)
        except (httpx.InvalidURL, TypeError) as exc:
            raise InvalidBaseURLError(base_url) from exc
        if base.scheme not in {"http", "https"} or not base.host:
            raise InvalidBaseURLError(base_url)
        return base

    @staticmethod
    def _join(base: httpx.URL, endpoint: str) -> str:
        # one leading separator is dropped so it is not doubled
        sanitized = endpoint[1:] if endpoint.startswith("/") else endpoint
        base_str = str(base.copy_with(query=None, fragment=None))
        if not sanitized:
            return base_str
        if not base_str.endswith("/"):
            base_str += "/"
        return base_str + sanitized

    @staticmethod
    def _assemble(components: httpx.URL, query: list[tuple[str, str]]) -> httpx.URL:
        try:
            # parameters are encoded pairwise so duplicated names keep their order
            encoded = urlencode(query, quote_via=quote)
            parts = [part for part in (components.query.decode("ascii"), encoded) if part]
            if not parts:
                return components.copy_with(query=None)
            return components.copy_with(query="&".join(parts).encode("ascii"))
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            raise FinalURLCreationError(
                {
                    "scheme": components.scheme,
                    "host": components.host,
                    "port": components.port,
                    "path": components.path,
                    "query": query,
                }
            ) from exc

    @staticmethod
    def _retrieve_token(token_provider: TokenProvider | None) -> str:
        token = token_provider.get_access_token() if token_provider is not None else None
        if not token:
            raise MissingTokenError
        return token
