"""Deadline and external-cancel wrapper around the pagination engine."""

from __future__ import annotations

import asyncio
from typing import Any

from ...core.cancellation import CancellationToken
from ...models import AuthContext
from .definitions import PaginationPolicy
from .engine import PaginationEngine
from .telemetry import log_deadline_elapsed


class DeadlineGuard:
    """Runs a query to completion under an optional wall-clock timeout.

    When a timeout is configured a fresh token is armed that fires on the
    caller's token or when the timer elapses, whichever comes first. The
    same token reaches the transport, so an in-flight request is aborted.
    The timer and the link to the caller's token are released on every exit
    path.
    """

    def __init__(self, engine: PaginationEngine) -> None:
        self._engine = engine

    async def run(
        self,
        query: str,
        auth: AuthContext,
        *,
        allow_partial: bool = False,
        timeout: float | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> list[Any]:
        """Run ``query`` and materialize its records.

        Args:
            query: SOQL text
            auth: Instance URL and bearer credential
            allow_partial: Return collected records on timeout, cancellation or
                later-page failure instead of raising
            timeout: Seconds before the run is cancelled; None or <= 0 disables it
            cancel_token: External cancel signal

        Returns:
            Records in page order, possibly truncated when ``allow_partial``

        Raises:
            CancellationError: Timed out or cancelled with ``allow_partial=False``
            TransportError: First page failed, or any page with ``allow_partial=False``
            ValidationError: Query rejected before any request
        """
        token = cancel_token
        timer: asyncio.TimerHandle | None = None
        if timeout is not None and timeout > 0:
            token = CancellationToken.link(cancel_token)
            timer = token.cancel_after(timeout)

        try:
            stream = self._engine.run(
                query, auth, PaginationPolicy(allow_partial=allow_partial, cancel_token=token)
            )
            return await stream.to_list()
        finally:
            if timer is not None:
                timer.cancel()
            if token is not None and token is not cancel_token:
                token.detach()
                if token.cancelled and not (cancel_token is not None and cancel_token.cancelled):
                    log_deadline_elapsed(timeout=timeout, sink=self._engine.sink)
