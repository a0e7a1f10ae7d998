"""Pytest fixtures for robinpy tests."""
import json
from collections import defaultdict, deque
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, Mock

import pytest

from robinpy.core.api import APIConfig, TransportResult
from robinpy.core.session import Session


NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def json_result(payload, status=200):
    """TransportResult carrying a JSON body."""
    return TransportResult(status=status, body=json.dumps(payload).encode())


def text_result(text, status=200):
    return TransportResult(status=status, body=text.encode())


class FakeStreamResponse:
    """Stands in for StreamResponse."""

    def __init__(self, status, body):
        self.status = status
        self.ok = 200 <= status < 300
        self._body = body

    async def text(self):
        return self._body.decode() if isinstance(self._body, bytes) else self._body

    async def iter_chunks(self, chunk_size=65536):
        data = self._body if isinstance(self._body, bytes) else self._body.encode()
        for i in range(0, len(data), 3):
            yield data[i:i + 3]


class FakeStreamClient:
    """
    Client double for the retriever.

    Responses are queued per URL; every stream() call is recorded in
    ``calls`` so tests can assert the request order.
    """

    def __init__(self, config=None):
        self.config = config or APIConfig()
        self.responses = defaultdict(deque)
        self.calls = []

    def queue(self, url, status, body):
        self.responses[url].append(FakeStreamResponse(status, body))

    def queue_response(self, url, response):
        """Queue a prepared response object, or an exception to raise."""
        self.responses[url].append(response)

    @asynccontextmanager
    async def stream(self, url, *, token=None):
        self.calls.append((url, token))
        item = self.responses[url].popleft()
        if isinstance(item, BaseException):
            raise item
        yield item


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    """Fixed clock returning NOW."""
    return Mock(return_value=NOW)


@pytest.fixture
def api_client():
    """AsyncAPIClient double whose send() is an AsyncMock."""
    client = Mock()
    client.config = APIConfig()
    client.send = AsyncMock()
    return client


@pytest.fixture
def stream_client():
    return FakeStreamClient()


@pytest.fixture
def valid_session():
    """Session that stays valid for a day after the real current time."""
    return Session(
        username='user@example.com',
        token='token-abc123',
        account='5RY12345',
        expires=datetime.now(timezone.utc) + timedelta(days=1)
    )


@pytest.fixture
def token_payload():
    return {
        'access_token': 'token-abc123',
        'expires_in': 86400,
        'token_type': 'Bearer',
        'scope': 'internal',
    }


@pytest.fixture
def account_payload():
    return {
        'next': None,
        'previous': None,
        'results': [{'account_number': '5RY12345', 'buying_power': '100.00'}],
    }


@pytest.fixture
def make_json():
    """Factory for JSON TransportResults."""
    return json_result


@pytest.fixture
def make_text():
    """Factory for plain-text TransportResults."""
    return text_result
