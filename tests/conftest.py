from __future__ import annotations

from typing import TYPE_CHECKING, Any
from unittest.mock import Mock, patch

import httpx
import pytest

if TYPE_CHECKING:
    from collections.abc import Generator


class FakeServer:
    """Scripted httpx handler replaying a sequence of outcomes.

    Each outcome is a status code, a ``(status_code, content)`` pair or an
    exception to raise. The last outcome is repeated once the script is
    exhausted.
    """

    def __init__(self, *outcomes: Any) -> None:
        self._outcomes = list(outcomes) or [200]
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self._outcomes[min(len(self.requests), len(self._outcomes)) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, int):
            return httpx.Response(outcome)
        status_code, content = outcome
        return httpx.Response(status_code, content=content)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def mock_asleep() -> Generator[Mock, None, None]:
    """Patch asyncio.sleep to make tests run faster."""
    with patch("asyncio.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def fake_server() -> type[FakeServer]:
    """Return the factory of scripted httpx handlers."""
    return FakeServer


@pytest.fixture
def mock_callback() -> Mock:
    """Create a mock completion callback."""
    return Mock()
