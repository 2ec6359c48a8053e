"""Shared fixtures for unit tests."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from laakhay.salesforce import AuthContext

INSTANCE_URL = "https://example-org.my.salesforce.com"
ACCESS_TOKEN = "FAKE_TOKEN"
API_VERSION = "v57.0"
QUERY_API_PATH = f"/services/data/{API_VERSION}/query"
SOBJECT_API_PATH = f"/services/data/{API_VERSION}/composite/sobjects"


class FakeTransport:
    """Scripted stand-in for RESTTransport.get.

    Each reply is returned (or raised, if it is an exception) by one call, in
    order. Replies honor the cancellation token the same way HTTPClient does.
    """

    def __init__(self, replies: list[Any], delay: float | list[float] = 0.0) -> None:
        self._replies = list(replies)
        self.delay = delay
        self.calls: list[dict[str, Any]] = []

    async def get(self, path, params=None, headers=None, cancel_token=None):
        self.calls.append({"path": path, "params": params, "headers": headers})
        index = len(self.calls) - 1
        reply = self._replies.pop(0)
        delay = self.delay[index] if isinstance(self.delay, list) else self.delay

        async def respond():
            if delay:
                await asyncio.sleep(delay)
            value = reply() if callable(reply) else reply
            if isinstance(value, BaseException):
                raise value
            return value

        if cancel_token is None:
            return await respond()
        return await cancel_token.run(respond())

    async def close(self) -> None:
        pass


@pytest.fixture
def auth() -> AuthContext:
    """Authorization context for the fake org."""
    return AuthContext(instance_url=INSTANCE_URL, access_token=ACCESS_TOKEN, api_version=API_VERSION)


@pytest.fixture
def make_transport():
    """Factory for scripted transports."""

    def factory(replies: list[Any], delay: float | list[float] = 0.0) -> FakeTransport:
        return FakeTransport(replies, delay=delay)

    return factory


@pytest.fixture
def sink():
    """Caller log sink recording info/error calls."""
    from unittest.mock import MagicMock

    return MagicMock(spec=["info", "error"])
