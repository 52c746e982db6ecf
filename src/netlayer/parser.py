r"""Decoding of response payloads.

``ResponseParser`` decodes JSON payloads into the response shape declared
by a request descriptor with a pydantic ``TypeAdapter``. Any shape
supported by pydantic works: dataclasses, ``BaseModel`` subclasses,
``TypedDict``, builtin containers, ...
"""

from __future__ import annotations

__all__ = ["BaseResponseParser", "ResponseParser"]

import threading
from abc import ABC, abstractmethod
from typing import Any

import pydantic

from netlayer.exceptions import DecodingError, NoDataError
from netlayer.request import EmptyResponse
from netlayer.utils.error_snapshot import ErrorSnapshot


class BaseResponseParser(ABC):
    """Decoder of response payloads."""

    @abstractmethod
    def parse(self, response_type: Any, data: bytes) -> Any:
        """Decode a payload into a response shape.

        Args:
            response_type: The shape to decode into.
            data: The response body.

        Returns:
            The decoded value.

        Raises:
            ResponseParserError: If the payload cannot be decoded.
        """


class ResponseParser(BaseResponseParser):
    """JSON response parser backed by pydantic.

    ``EmptyResponse`` always decodes to ``EmptyResponse()`` whatever the
    payload. Other shapes require a non-empty payload.

    Args:
        strict: Whether pydantic validates in strict mode.
        context: Optional validation context passed to pydantic
            untouched.

    Example:
        ```pycon
        >>> from dataclasses import dataclass
        >>> from netlayer.parser import ResponseParser
        >>> from netlayer.request import EmptyResponse
        >>> @dataclass
        ... class User:
        ...     id: int
        ...     name: str
        ...
        >>> parser = ResponseParser()
        >>> parser.parse(User, b'{"id": 42, "name": "X"}')
        User(id=42, name='X')
        >>> parser.parse(EmptyResponse, b"")
        EmptyResponse()

        ```
    """

    def __init__(self, strict: bool | None = None, context: dict[str, Any] | None = None) -> None:
        self._strict = strict
        self._context = context
        self._adapters: dict[Any, pydantic.TypeAdapter[Any]] = {}
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(strict={self._strict})"

    def parse(self, response_type: Any, data: bytes) -> Any:
        if response_type is EmptyResponse:
            return EmptyResponse()
        if not data:
            raise NoDataError
        try:
            adapter = self._get_adapter(response_type)
            return adapter.validate_json(data, strict=self._strict, context=self._context)
        except (pydantic.ValidationError, ValueError, TypeError) as exc:
            raise DecodingError(ErrorSnapshot.from_exception(exc)) from exc

    def _get_adapter(self, response_type: Any) -> pydantic.TypeAdapter[Any]:
        with self._lock:
            adapter = self._adapters.get(response_type)
            if adapter is None:
                adapter = pydantic.TypeAdapter(response_type)
                self._adapters[response_type] = adapter
            return adapter
