"""Single page fetch with classified outcome."""

from __future__ import annotations

from time import perf_counter

from ...core.cancellation import CancellationToken
from ...core.exceptions import CancellationError, TransportError
from ...core.log_sink import LogSink
from ...models import AuthContext, Page
from ..rest import RESTTransport
from .definitions import FetchCancelled, FetchFailed, FetchOutcome, FetchSuccess
from .telemetry import log_page_cancelled, log_page_fetched, log_page_failed, log_page_request


class PageFetcher:
    """Performs exactly one request for one page address.

    Transport failures are returned as FetchFailed rather than raised so the
    engine can apply its partial-result policy; cancellation is reported as
    its own outcome because callers react to it differently.
    """

    def __init__(self, transport: RESTTransport, sink: LogSink | None = None) -> None:
        self._transport = transport
        self._sink = sink

    async def fetch(
        self,
        address: str,
        auth: AuthContext,
        *,
        cancel_token: CancellationToken | None = None,
        page_index: int = 0,
    ) -> FetchOutcome:
        """Fetch and parse the page at ``address``.

        Args:
            address: Absolute first-page or continuation URL
            auth: Bearer credential for the request
            cancel_token: Checked before sending and raced against the request
            page_index: Position of the page in the run, for telemetry

        Returns:
            FetchSuccess with the parsed page (empty terminal page for a null
            body), FetchCancelled, or FetchFailed carrying the TransportError
        """
        if cancel_token is not None and cancel_token.cancelled:
            log_page_cancelled(url=address, page_index=page_index, in_flight=False, sink=self._sink)
            return FetchCancelled()

        log_page_request(url=address, page_index=page_index, sink=self._sink)
        start = perf_counter()
        try:
            body = await self._transport.get(
                address,
                headers={
                    "Authorization": auth.authorization_header,
                    "Accept": "application/json",
                },
                cancel_token=cancel_token,
            )
        except CancellationError:
            log_page_cancelled(url=address, page_index=page_index, in_flight=True, sink=self._sink)
            return FetchCancelled()
        except TransportError as e:
            log_page_failed(
                url=address,
                page_index=page_index,
                error=e,
                status_code=e.status_code,
                sink=self._sink,
            )
            return FetchFailed(e)

        page = Page.from_payload(body)
        log_page_fetched(
            url=address,
            page_index=page_index,
            records=len(page.records),
            is_final=page.is_final,
            latency_ms=(perf_counter() - start) * 1000.0,
            sink=self._sink,
        )
        return FetchSuccess(page)
