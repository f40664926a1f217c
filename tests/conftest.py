"""Shared pytest fixtures for deepl-client tests.

Provides mock aiohttp sessions/responses and a configured client.
No test talks to the real DeepL API.
"""

from collections.abc import AsyncIterator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from typer.testing import CliRunner

from deepl_client import DeepLClient

# ============================================================================
# Mock HTTP helpers
# ============================================================================


async def _iter_chunks(chunks: list[bytes]) -> AsyncIterator[bytes]:
    for chunk in chunks:
        yield chunk


def make_response(
    status: int = 200,
    json_data: Any = None,
    text: str = "",
    body: bytes = b"",
) -> AsyncMock:
    """Build a mock aiohttp response.

    Args:
        status: HTTP status code
        json_data: Value returned by ``await response.json()``
        text: Value returned by ``await response.text()``
        body: Raw body returned by ``read()`` and streamed by ``content``
    """
    response = AsyncMock()
    response.status = status
    response.json = AsyncMock(return_value=json_data)
    response.text = AsyncMock(return_value=text)
    response.read = AsyncMock(return_value=body)
    response.content = MagicMock()
    response.content.iter_chunked = MagicMock(
        side_effect=lambda size: _iter_chunks([body[i : i + 4] for i in range(0, len(body), 4)])
    )
    return response


def as_context(response: AsyncMock) -> AsyncMock:
    """Wrap a response so it can be used with ``async with``."""
    return AsyncMock(__aenter__=AsyncMock(return_value=response))


class MockSession:
    """Stand-in for aiohttp.ClientSession that replays queued responses.

    Each call to ``get``/``post`` pops the next response in order and the
    call arguments are recorded on the ``get``/``post`` MagicMocks. A queued
    exception is raised when the request context is entered.
    """

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.closed = False
        self.get = MagicMock(side_effect=self._next)
        self.post = MagicMock(side_effect=self._next)
        self.close = AsyncMock()

    def queue(self, *responses: Any) -> None:
        self.responses.extend(responses)

    def _next(self, *args: Any, **kwargs: Any) -> AsyncMock:
        if not self.responses:
            raise AssertionError("Unexpected request: no response queued")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            return AsyncMock(__aenter__=AsyncMock(side_effect=response))
        return as_context(response)

    @property
    def post_urls(self) -> list[str]:
        return [call.args[0] for call in self.post.call_args_list]


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def mock_session() -> MockSession:
    """Provide an empty mock session; queue responses in the test."""
    return MockSession()


@pytest.fixture
def client(mock_session: MockSession) -> DeepLClient:
    """Provide a free-API client bound to the mock session."""
    return DeepLClient(auth_key="test-key", use_free_api=True, session=mock_session)  # type: ignore[arg-type]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Typer CLI runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate tests from DEEPL_* variables of the developer's environment."""
    import deepl_client.utils.config as config

    for name in (
        "DEEPL_AUTH_KEY",
        "DEEPL_USE_FREE_API",
        "DEEPL_REQUEST_TIMEOUT",
        "DEEPL_POLL_INTERVAL",
        "DEEPL_MAX_POLL_INTERVAL",
        "DEEPL_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "_settings", None)
