r"""Declarative request descriptors.

An API operation is described by subclassing ``APIRequest`` and overriding
the class attributes (or properties) it needs. The descriptor also declares
the shape its response is decoded into through ``response_type``.

Example:
    ```pycon
    >>> from dataclasses import dataclass
    >>> from netlayer.request import APIRequest, EmptyResponse, HTTPMethod
    >>> @dataclass
    ... class User:
    ...     id: int
    ...     name: str
    ...
    >>> class GetUser(APIRequest):
    ...     response_type = User
    ...
    ...     def __init__(self, user_id: int) -> None:
    ...         self.endpoint = f"/users/{user_id}"
    ...
    >>> class DeleteUser(APIRequest):
    ...     method = HTTPMethod.DELETE
    ...     response_type = EmptyResponse
    ...
    ...     def __init__(self, user_id: int) -> None:
    ...         self.endpoint = f"/users/{user_id}"
    ...
    >>> GetUser(42).endpoint, GetUser(42).method
    ('/users/42', <HTTPMethod.GET: 'GET'>)

    ```
"""

from __future__ import annotations

__all__ = ["APIRequest", "EmptyResponse", "HTTPMethod", "JSONRequest"]

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

import pydantic_core

from netlayer.auth import NoAuth

if TYPE_CHECKING:
    from netlayer.auth import AuthorizationType
    from netlayer.retry.policy import RetryPolicy

JSON_CONTENT_TYPE = "application/json"


class HTTPMethod(Enum):
    """HTTP methods supported by request descriptors."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


@dataclass(frozen=True)
class EmptyResponse:
    """Marker response shape for operations without meaningful content.

    Requests declaring ``response_type = EmptyResponse`` always decode to
    ``EmptyResponse()``, whatever the response body.
    """


class APIRequest:
    """Base class of request descriptors.

    Attributes:
        endpoint: Path of the operation, relative to the client base URL.
        method: The HTTP method.
        parameters: Ordered query parameters as ``(name, value)`` pairs.
            Duplicated names are allowed.
        headers: Request headers. Names are case-insensitive.
        retry_policy: Retry policy overriding the client default.
        auth_type: How the request must be authorized.
        response_type: Shape the response body is decoded into.
    """

    endpoint: str = ""
    method: HTTPMethod = HTTPMethod.GET
    parameters: list[tuple[str, str]] | None = None
    headers: dict[str, str] | None = None
    retry_policy: RetryPolicy | None = None
    auth_type: AuthorizationType = NoAuth()
    response_type: ClassVar[Any] = EmptyResponse

    def body(self) -> bytes | None:
        """Produce the request body.

        Returns:
            The encoded body, or ``None`` for requests without body.

        Raises:
            Exception: Any failure while encoding the body.
        """
        return None

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(method={self.method.value}, "
            f"endpoint={self.endpoint!r})"
        )


class JSONRequest(APIRequest):
    """Request descriptor sending a JSON-encoded body.

    Subclasses implement ``payload`` to return any value pydantic can
    serialize (dataclasses, pydantic models, dicts, lists, ...).

    Example:
        ```pycon
        >>> from netlayer.request import HTTPMethod, JSONRequest
        >>> class CreateUser(JSONRequest):
        ...     endpoint = "/users"
        ...     method = HTTPMethod.POST
        ...
        ...     def __init__(self, name: str) -> None:
        ...         self.name = name
        ...
        ...     def payload(self) -> dict:
        ...         return {"name": self.name}
        ...
        >>> CreateUser("X").body()
        b'{"name":"X"}'
        >>> CreateUser("X").headers
        {'Content-Type': 'application/json'}

        ```
    """

    headers: dict[str, str] | None = {"Content-Type": JSON_CONTENT_TYPE}  # noqa: RUF012

    def payload(self) -> Any:
        """Return the value to encode as the JSON body."""
        raise NotImplementedError

    def body(self) -> bytes | None:
        return pydantic_core.to_json(self.payload())
