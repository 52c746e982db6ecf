r"""Outcome values delivered to completion callbacks."""

from __future__ import annotations

__all__ = ["Failure", "Result", "Success"]

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=BaseException)


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful outcome.

    Attributes:
        value: The produced value.
    """

    value: T

    def get(self) -> T:
        """Return the value."""
        return self.value


@dataclass(frozen=True)
class Failure(Generic[E]):
    """Failed outcome.

    Attributes:
        error: The error that ended the operation.
    """

    error: E

    def get(self) -> NoReturn:
        """Raise the error.

        Raises:
            BaseException: Always raises ``self.error``.
        """
        raise self.error


Result = Union[Success[T], Failure[E]]
