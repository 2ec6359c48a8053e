"""Precise unit tests for HTTPClient.

Tests focus on session management, body decoding, error classification
and cancellation.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from laakhay.salesforce.core import CancellationError, CancellationToken, TransportError
from laakhay.salesforce.runtime.rest import HTTPClient


def _mock_response(status: int = 200, text: str | bytes = '{"data": "test"}'):
    response = AsyncMock()
    response.status = status
    response.charset = None
    raw = text.encode() if isinstance(text, str) else text
    response.read = AsyncMock(return_value=raw)
    response.__aenter__ = AsyncMock(return_value=response)
    response.__aexit__ = AsyncMock(return_value=None)
    return response


def _mock_session(*responses):
    session = MagicMock()
    session.closed = False  # Important: session property checks this
    session.request = MagicMock(side_effect=list(responses))
    return session


class TestHTTPClientSessionManagement:
    """Test HTTPClient session management."""

    def test_init(self):
        """Test HTTPClient initialization."""
        client = HTTPClient(timeout=10.0)
        assert client.timeout.total == 10.0
        assert client._session is None
        assert client.base_url is None

    def test_init_with_base_url(self):
        """Test HTTPClient strips the trailing slash of base_url."""
        client = HTTPClient(base_url="https://api.example.com/", timeout=30.0)
        assert client.base_url == "https://api.example.com"

    @pytest.mark.asyncio
    async def test_session_property_creates_session(self):
        """Test session property creates session when needed."""
        client = HTTPClient()
        session = client.session
        assert isinstance(session, aiohttp.ClientSession)
        assert client._session is session
        await client.close()

    @pytest.mark.asyncio
    async def test_session_property_recreates_closed_session(self):
        """Test session property recreates closed session."""
        client = HTTPClient()
        session1 = client.session
        await session1.close()

        session2 = client.session
        assert session1 is not session2
        assert not session2.closed
        await client.close()

    @pytest.mark.asyncio
    async def test_close_idempotent(self):
        """Test close() can be called multiple times."""
        client = HTTPClient()
        await client.close()
        await client.close()

    @pytest.mark.asyncio
    async def test_context_manager(self):
        """Test HTTPClient as async context manager."""
        async with HTTPClient() as client:
            assert client.session is not None

        assert client._session is None or client._session.closed


class TestHTTPClientRequests:
    """Test request building and body decoding."""

    @pytest.mark.asyncio
    async def test_get_returns_decoded_json(self):
        """Test get() decodes a JSON body."""
        client = HTTPClient()
        client._session = _mock_session(_mock_response(text='{"done": true, "records": []}'))

        result = await client.get("https://api.example.com/q", headers={"Accept": "application/json"})

        assert result == {"done": True, "records": []}
        call = client._session.request.call_args
        assert call.args == ("GET", "https://api.example.com/q")
        assert call.kwargs["headers"] == {"Accept": "application/json"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "null"])
    async def test_empty_or_null_body_returns_none(self, text):
        """Test an empty or JSON null body decodes to None."""
        client = HTTPClient()
        client._session = _mock_session(_mock_response(text=text))
        assert await client.get("https://api.example.com/q") is None

    @pytest.mark.asyncio
    async def test_non_json_body_returned_raw(self):
        """Test a non-JSON body is returned as text."""
        client = HTTPClient()
        client._session = _mock_session(_mock_response(text="<html>maintenance</html>"))
        assert await client.get("https://api.example.com/q") == "<html>maintenance</html>"

    @pytest.mark.asyncio
    async def test_undecodable_body_returned_as_bytes(self):
        """Test a body that is not valid UTF-8 is returned raw instead of raising."""
        client = HTTPClient()
        client._session = _mock_session(_mock_response(text=b'\xff\xfe{"bad"'))
        assert await client.get("https://api.example.com/q") == b'\xff\xfe{"bad"'

    @pytest.mark.asyncio
    async def test_declared_charset_used(self):
        """Test the response charset drives decoding."""
        client = HTTPClient()
        response = _mock_response(text='{"Name": "Café"}'.encode("latin-1"))
        response.charset = "latin-1"
        client._session = _mock_session(response)
        assert await client.get("https://api.example.com/q") == {"Name": "Café"}

    @pytest.mark.asyncio
    async def test_get_with_base_url(self):
        """Test get() combines base_url with relative path."""
        client = HTTPClient(base_url="https://api.example.com")
        client._session = _mock_session(_mock_response())

        await client.get("/test")

        assert client._session.request.call_args.args[1] == "https://api.example.com/test"

    @pytest.mark.asyncio
    async def test_get_with_absolute_url(self):
        """Test get() doesn't combine base_url with absolute URL."""
        client = HTTPClient(base_url="https://api.example.com")
        client._session = _mock_session(_mock_response())

        await client.get("https://other.com/test")

        assert client._session.request.call_args.args[1] == "https://other.com/test"

    @pytest.mark.asyncio
    async def test_post_sends_form_and_json(self):
        """Test post() forwards json and form data."""
        client = HTTPClient()
        client._session = _mock_session(_mock_response(), _mock_response())

        await client.post("https://api.example.com/a", json={"k": "v"})
        await client.post("https://api.example.com/b", data={"grant_type": "password"})

        first, second = client._session.request.call_args_list
        assert first.args[0] == "POST"
        assert first.kwargs["json"] == {"k": "v"}
        assert second.kwargs["data"] == {"grant_type": "password"}

    @pytest.mark.asyncio
    async def test_patch_and_delete_methods(self):
        """Test patch() and delete() use the right verbs."""
        client = HTTPClient()
        client._session = _mock_session(_mock_response(), _mock_response())

        await client.patch("https://api.example.com/a", json={"records": []})
        await client.delete("https://api.example.com/a", params={"ids": "1,2"})

        first, second = client._session.request.call_args_list
        assert first.args[0] == "PATCH"
        assert second.args[0] == "DELETE"
        assert second.kwargs["params"] == {"ids": "1,2"}


class TestHTTPClientErrors:
    """Test failure classification."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 401, 404, 500, 503])
    async def test_non_2xx_raises_transport_error(self, status):
        """Test non-2xx responses raise TransportError with status and body."""
        client = HTTPClient()
        client._session = _mock_session(
            _mock_response(status=status, text='[{"errorCode": "INVALID_TYPE"}]')
        )

        with pytest.raises(TransportError) as exc_info:
            await client.get("https://api.example.com/q")

        assert exc_info.value.status_code == status
        assert exc_info.value.body == [{"errorCode": "INVALID_TYPE"}]
        assert exc_info.value.url == "https://api.example.com/q"
        assert str(exc_info.value) == f"Request failed with status code {status}"

    @pytest.mark.asyncio
    async def test_network_error_raises_transport_error(self):
        """Test aiohttp client errors are wrapped."""
        client = HTTPClient()
        session = MagicMock()
        session.closed = False
        session.request = MagicMock(side_effect=aiohttp.ClientConnectionError("reset"))
        client._session = session

        with pytest.raises(TransportError) as exc_info:
            await client.get("https://api.example.com/q")

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, aiohttp.ClientConnectionError)

    @pytest.mark.asyncio
    async def test_timeout_raises_transport_error(self):
        """Test request timeouts are wrapped."""
        client = HTTPClient()
        response = _mock_response()
        response.read = AsyncMock(side_effect=asyncio.TimeoutError())
        client._session = _mock_session(response)

        with pytest.raises(TransportError, match="timed out"):
            await client.get("https://api.example.com/q")


class TestHTTPClientCancellation:
    """Test cancellation token handling."""

    @pytest.mark.asyncio
    async def test_cancelled_token_skips_request(self):
        """Test a fired token prevents the request."""
        client = HTTPClient()
        client._session = _mock_session(_mock_response())
        token = CancellationToken()
        token.cancel()

        with pytest.raises(CancellationError):
            await client.get("https://api.example.com/q", cancel_token=token)

        client._session.request.assert_not_called()

    @pytest.mark.asyncio
    async def test_token_aborts_in_flight_request(self):
        """Test a token firing mid-request aborts it."""
        client = HTTPClient()

        async def slow_read():
            await asyncio.sleep(5)
            return b"{}"

        response = _mock_response()
        response.read = AsyncMock(side_effect=slow_read)
        client._session = _mock_session(response)
        token = CancellationToken()
        asyncio.get_running_loop().call_later(0.01, token.cancel)

        with pytest.raises(CancellationError):
            await asyncio.wait_for(
                client.get("https://api.example.com/q", cancel_token=token), timeout=1.0
            )

        response.__aexit__.assert_awaited()

    @pytest.mark.asyncio
    async def test_unfired_token_passes_result(self):
        """Test an idle token does not affect the response."""
        client = HTTPClient()
        client._session = _mock_session(_mock_response(text='{"ok": true}'))

        result = await client.get("https://api.example.com/q", cancel_token=CancellationToken())

        assert result == {"ok": True}
