"""Salesforce REST client facade.

This client bundles one transport, one authorization context and an
optional log sink, and exposes the query engine and the sObject
collection calls behind a single object.

Architecture:
    The client owns a RESTTransport and shares it between the pagination
    engine, the deadline guard and the collection calls. Authorization is
    either supplied up front or obtained with ``authorize()``.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from ..config import DEFAULT_API_VERSION, DEFAULT_HTTP_TIMEOUT
from ..core.cancellation import CancellationToken
from ..core.exceptions import ValidationError
from ..core.log_sink import LogSink
from ..models import AuthContext, SalesforceCredentials, SaveOptions, SaveResult
from ..runtime.pagination import DeadlineGuard, PaginationEngine, PaginationPolicy, RecordStream
from ..runtime.rest import RESTTransport
from .oauth import get_authorization
from .sobjects import SObject, delete_records, insert_records, update_records


class SalesforceClient:
    """Async Salesforce REST client.

    Usage:
        async with SalesforceClient() as client:
            await client.authorize(credentials)
            async for record in client.query("SELECT Id FROM Account"):
                ...
    """

    def __init__(
        self,
        auth: AuthContext | None = None,
        *,
        sink: LogSink | None = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        transport: RESTTransport | None = None,
    ) -> None:
        """Initialize client.

        Args:
            auth: Authorization context, if already obtained
            sink: Optional caller log sink receiving library events
            timeout: Per-request HTTP timeout in seconds
            transport: Transport to use instead of creating one
        """
        self._auth = auth
        self._sink = sink
        self._transport = transport or RESTTransport(timeout=timeout)
        self._engine = PaginationEngine(self._transport, sink=sink)
        self._guard = DeadlineGuard(self._engine)

    @property
    def auth(self) -> AuthContext:
        if self._auth is None:
            raise ValidationError("Client is not authorized; call authorize() first")
        return self._auth

    async def authorize(
        self,
        credentials: SalesforceCredentials,
        *,
        api_version: str = DEFAULT_API_VERSION,
        cancel_token: CancellationToken | None = None,
    ) -> AuthContext:
        """Run the password grant and keep the resulting context."""
        self._auth = await get_authorization(
            credentials,
            transport=self._transport,
            api_version=api_version,
            sink=self._sink,
            cancel_token=cancel_token,
        )
        return self._auth

    def query(
        self,
        soql: str,
        *,
        allow_partial: bool = False,
        cancel_token: CancellationToken | None = None,
    ) -> RecordStream:
        """Stream the records of a SOQL query.

        Pages are fetched when the stream is first consumed.
        """
        return self._engine.run(
            soql,
            self.auth,
            PaginationPolicy(allow_partial=allow_partial, cancel_token=cancel_token),
        )

    async def query_with_timeout(
        self,
        soql: str,
        *,
        allow_partial: bool = False,
        timeout: float | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> list[Any]:
        """Run a SOQL query to completion under an optional timeout (seconds)."""
        return await self._guard.run(
            soql,
            self.auth,
            allow_partial=allow_partial,
            timeout=timeout,
            cancel_token=cancel_token,
        )

    async def insert(
        self,
        records: SObject | Iterable[SObject],
        options: SaveOptions | None = None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> list[SaveResult] | None:
        return await insert_records(
            self._transport,
            self.auth,
            records,
            options,
            sink=self._sink,
            cancel_token=cancel_token,
        )

    async def update(
        self,
        records: SObject | Iterable[SObject],
        options: SaveOptions | None = None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> list[SaveResult] | None:
        return await update_records(
            self._transport,
            self.auth,
            records,
            options,
            sink=self._sink,
            cancel_token=cancel_token,
        )

    async def delete(
        self,
        ids: Iterable[str],
        options: SaveOptions | None = None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> list[SaveResult]:
        return await delete_records(
            self._transport,
            self.auth,
            ids,
            options,
            sink=self._sink,
            cancel_token=cancel_token,
        )

    async def close(self) -> None:
        """Close underlying resources."""
        await self._transport.close()

    async def __aenter__(self) -> SalesforceClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
