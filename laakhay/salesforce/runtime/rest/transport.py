"""REST transport wrapping HTTPClient."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ...config import DEFAULT_HTTP_TIMEOUT
from ...core.cancellation import CancellationToken
from .http_client import HTTPClient


class RESTTransport:
    """Thin request layer shared by the query engine and the collection calls."""

    def __init__(self, base_url: str | None = None, timeout: float = DEFAULT_HTTP_TIMEOUT) -> None:
        self._http = HTTPClient(base_url=base_url, timeout=timeout)

    async def get(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> Any:
        return await self._http.get(path, params=params, headers=headers, cancel_token=cancel_token)

    async def post(
        self,
        path: str,
        json_body: Any = None,
        form: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> Any:
        return await self._http.post(
            path, json=json_body, data=form, headers=headers, cancel_token=cancel_token
        )

    async def patch(
        self,
        path: str,
        json_body: Any = None,
        headers: Mapping[str, str] | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> Any:
        return await self._http.patch(
            path, json=json_body, headers=headers, cancel_token=cancel_token
        )

    async def delete(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> Any:
        return await self._http.delete(
            path, params=params, headers=headers, cancel_token=cancel_token
        )

    async def close(self) -> None:
        await self._http.close()
