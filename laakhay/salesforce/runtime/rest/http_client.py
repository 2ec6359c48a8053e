"""HTTP client helper."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Mapping
from typing import Any

import aiohttp

from ...config import DEFAULT_HTTP_TIMEOUT
from ...core.cancellation import CancellationToken
from ...core.exceptions import TransportError


class HTTPClient:
    """Async HTTP client wrapper.

    Owns a lazily created aiohttp session. Every failure (non-2xx status,
    connection error, timeout) is raised as TransportError; a fired
    cancellation token aborts the in-flight request with CancellationError.
    """

    def __init__(self, base_url: str | None = None, timeout: float = DEFAULT_HTTP_TIMEOUT) -> None:
        self.base_url = base_url.rstrip("/") if base_url else None
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        json: Any = None,
        data: Any = None,
        cancel_token: CancellationToken | None = None,
    ) -> Any:
        """Send one request and return the decoded body.

        Returns:
            Decoded JSON body, the raw text if the body is not JSON, the raw
            bytes if it cannot be decoded, or None for an empty body

        Raises:
            TransportError: Non-2xx status or network failure
            CancellationError: ``cancel_token`` fired before or during the request
        """
        # If base_url is set and url is relative, combine them
        if self.base_url and not url.startswith("http"):
            url = f"{self.base_url}{url}"

        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        send = self._send(method, url, params=params, headers=headers, json=json, data=data)
        if cancel_token is None:
            return await send
        return await cancel_token.run(send)

    async def _send(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, Any] | None,
        headers: Mapping[str, str] | None,
        json: Any,
        data: Any,
    ) -> Any:
        try:
            async with self.session.request(
                method, url, params=params, headers=headers, json=json, data=data
            ) as response:
                body = await self._read_body(response)
                if not 200 <= response.status < 300:
                    raise TransportError(
                        f"Request failed with status code {response.status}",
                        status_code=response.status,
                        body=body,
                        url=url,
                    )
                return body
        except aiohttp.ClientError as e:
            raise TransportError(f"Request failed: {e}", url=url) from e
        except asyncio.TimeoutError as e:
            raise TransportError("Request timed out", url=url) from e

    @staticmethod
    async def _read_body(response: aiohttp.ClientResponse) -> Any:
        raw = await response.read()
        if not raw or not raw.strip():
            return None
        try:
            text = raw.decode(response.charset or "utf-8")
        except (UnicodeDecodeError, LookupError):
            # Undecodable body: return the raw bytes
            return raw
        try:
            return json.loads(text)
        except ValueError:
            return text

    async def get(
        self,
        url: str,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> Any:
        """GET request."""
        return await self.request(
            "GET", url, params=params, headers=headers, cancel_token=cancel_token
        )

    async def post(
        self,
        url: str,
        json: Any = None,
        data: Any = None,
        headers: Mapping[str, str] | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> Any:
        """POST request."""
        return await self.request(
            "POST", url, json=json, data=data, headers=headers, cancel_token=cancel_token
        )

    async def patch(
        self,
        url: str,
        json: Any = None,
        headers: Mapping[str, str] | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> Any:
        """PATCH request."""
        return await self.request(
            "PATCH", url, json=json, headers=headers, cancel_token=cancel_token
        )

    async def delete(
        self,
        url: str,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> Any:
        """DELETE request."""
        return await self.request(
            "DELETE", url, params=params, headers=headers, cancel_token=cancel_token
        )

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
