"""Pagination engine for SOQL queries.

Architecture:
    The engine drives PageFetcher and the continuation tracker in a strictly
    sequential loop: page N+1 is never requested before page N's outcome is
    known. Records are accumulated in a RunState owned by one invocation and
    handed to the caller through a RecordStream once the loop terminates.

Design Decisions:
    - Fetch-all-then-yield: network activity is per page, never per record
    - Lazy start: no request is sent until the stream is first consumed
    - Partial policy keyed on records accumulated so far, not on page index:
      a failure before any record arrived is treated as a bad query
    - No retries: the caller decides whether to re-issue the whole query

See Also:
    - DeadlineGuard: Adds a timeout and materializes the stream
    - PageFetcher: One request per page, classified outcome
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterator
from typing import Any

from ...core.exceptions import CancellationError, ValidationError
from ...core.log_sink import LogSink
from ...models import AuthContext
from ..rest import RESTTransport
from .definitions import (
    FetchCancelled,
    FetchSuccess,
    PaginationPolicy,
    RunState,
    TerminationReason,
)
from .fetcher import PageFetcher
from .query import build_query_address, normalize_query
from .telemetry import (
    log_failure_tolerated,
    log_query_completed,
    log_query_failed,
    log_query_started,
)
from .tracker import next_step


class RecordStream:
    """Finite, single-pass async iterator over the records of one query run.

    The first ``__anext__`` (or ``load()``) runs the pagination loop; records
    are then served from the fetched list. A stream cannot be restarted; call
    ``PaginationEngine.run`` again to re-fetch.
    """

    def __init__(self, loader: Callable[[], Awaitable[RunState]]) -> None:
        self._loader: Callable[[], Awaitable[RunState]] | None = loader
        self._records: Iterator[Any] | None = None
        self._loading: asyncio.Future[RunState] | None = None
        self._iterated = False
        self.termination_reason: TerminationReason | None = None
        self.total_size: int | None = None
        self.pages_fetched = 0
        self.record_count = 0

    @property
    def is_loaded(self) -> bool:
        return self._records is not None

    @property
    def is_partial(self) -> bool:
        """True if the run was cut short by cancellation or a tolerated failure."""
        return self.termination_reason is not None and self.termination_reason.is_partial

    async def load(self) -> None:
        """Run the pagination loop if it has not run yet.

        Concurrent callers share the same in-flight run.
        """
        if self._records is not None:
            return
        if self._loading is None:
            if self._loader is None:
                raise RuntimeError("Query run already failed; start a new run to re-fetch")
            loader, self._loader = self._loader, None
            self._loading = asyncio.ensure_future(loader())

        loading = self._loading
        try:
            state = await loading
        except BaseException:
            if loading.done():
                self._loading = None
            raise
        if self._records is not None:
            return
        self.termination_reason = state.termination_reason
        self.total_size = state.total_size
        self.pages_fetched = state.pages_fetched
        self.record_count = len(state.accumulated)
        self._records = iter(state.accumulated)

    def __aiter__(self) -> RecordStream:
        if self._iterated:
            raise RuntimeError("RecordStream can only be iterated once")
        self._iterated = True
        return self

    async def __anext__(self) -> Any:
        await self.load()
        assert self._records is not None
        try:
            return next(self._records)
        except StopIteration:
            raise StopAsyncIteration from None

    async def to_list(self) -> list[Any]:
        """Consume the stream into a list."""
        return [record async for record in self]


class PaginationEngine:
    """Runs SOQL queries across continuation pages."""

    def __init__(
        self,
        transport: RESTTransport,
        *,
        sink: LogSink | None = None,
        fetcher: PageFetcher | None = None,
    ) -> None:
        self.sink = sink
        self._fetcher = fetcher or PageFetcher(transport, sink=sink)

    def run(
        self,
        query: str,
        auth: AuthContext,
        policy: PaginationPolicy | None = None,
    ) -> RecordStream:
        """Start a query run.

        Args:
            query: SOQL text, normalized before use
            auth: Instance URL and bearer credential
            policy: Partial-result and cancellation policy (default: strict)

        Returns:
            RecordStream that fetches all pages on first consumption

        Raises:
            ValidationError: If the normalized query is empty
        """
        if query is not None and not isinstance(query, str):
            raise ValidationError(f"query must be a string, got {type(query).__name__}")
        normalized = normalize_query(query)
        if not normalized:
            raise ValidationError("query is empty")

        resolved = policy or PaginationPolicy()
        return RecordStream(lambda: self._collect(normalized, auth, resolved))

    async def _collect(self, query: str, auth: AuthContext, policy: PaginationPolicy) -> RunState:
        state = RunState(next_address=build_query_address(auth, query))
        log_query_started(
            url=state.next_address, query=query, allow_partial=policy.allow_partial, sink=self.sink
        )

        while not state.terminated:
            outcome = await self._fetcher.fetch(
                state.next_address,
                auth,
                cancel_token=policy.cancel_token,
                page_index=state.pages_fetched,
            )

            if isinstance(outcome, FetchSuccess):
                state.append(outcome.page)
                step = next_step(outcome.page, auth.instance_url)
                if step.has_more and step.address:
                    state.next_address = step.address
                else:
                    state.terminate(TerminationReason.EXHAUSTED)

            elif isinstance(outcome, FetchCancelled):
                state.terminate(TerminationReason.CANCELLED)
                if not policy.allow_partial:
                    error = CancellationError()
                    log_query_failed(query=query, error=error, state=state, sink=self.sink)
                    raise error

            else:
                if policy.allow_partial and state.accumulated:
                    state.terminate(TerminationReason.ERROR_TOLERATED)
                    log_failure_tolerated(
                        query=query, error=outcome.error, state=state, sink=self.sink
                    )
                else:
                    state.terminate(TerminationReason.ERROR_ABORT)
                    log_query_failed(query=query, error=outcome.error, state=state, sink=self.sink)
                    raise outcome.error

        log_query_completed(query=query, state=state, sink=self.sink)
        return state
