"""Structured logging for query pagination.

This module emits one structured log record per pagination event through
stdlib logging and forwards the same event to the caller's optional log
sink. Access tokens are never part of the payload.
"""

from __future__ import annotations

import logging

from ...core.exceptions import SalesforceError
from ...core.log_sink import LogSink, sink_error, sink_info
from .definitions import RunState, TerminationReason

logger = logging.getLogger(__name__)

QUERY_TAG = "salesforce.query"


def log_query_started(
    *,
    url: str,
    query: str,
    allow_partial: bool,
    sink: LogSink | None = None,
) -> None:
    """Log the start of a query run.

    Args:
        url: First-page address
        query: Normalized SOQL text
        allow_partial: Whether truncated results are accepted
        sink: Optional caller log sink
    """
    extra = {"url": url, "query": query, "allow_partial": allow_partial}
    logger.info("query_started", extra=extra)
    sink_info(sink, QUERY_TAG, "start", extra)


def log_page_request(
    *,
    url: str,
    page_index: int,
    sink: LogSink | None = None,
) -> None:
    """Log a page request about to be sent."""
    extra = {"url": url, "page_index": page_index}
    logger.info("page_request_started", extra=extra)
    sink_info(sink, QUERY_TAG, "page-request", extra)


def log_page_fetched(
    *,
    url: str,
    page_index: int,
    records: int,
    is_final: bool,
    latency_ms: float,
    sink: LogSink | None = None,
) -> None:
    """Log a successfully fetched page.

    Args:
        url: Page address
        page_index: Zero-based index of the page in the run
        records: Number of records on the page
        is_final: Whether the service marked the page as the last one
        latency_ms: Round-trip latency in milliseconds
        sink: Optional caller log sink
    """
    extra = {
        "url": url,
        "page_index": page_index,
        "records": records,
        "is_final": is_final,
        "latency_ms": latency_ms,
    }
    logger.info("page_fetched", extra=extra)
    sink_info(sink, QUERY_TAG, "page-fetched", extra)


def log_page_failed(
    *,
    url: str,
    page_index: int,
    error: SalesforceError,
    status_code: int | None,
    sink: LogSink | None = None,
) -> None:
    """Log a page request that failed at the transport level."""
    extra = {
        "url": url,
        "page_index": page_index,
        "error_type": type(error).__name__,
        "error_message": str(error),
        "status_code": status_code,
    }
    logger.warning("page_fetch_failed", extra=extra)
    sink_info(sink, QUERY_TAG, "page-failed", extra)


def log_page_cancelled(
    *,
    url: str,
    page_index: int,
    in_flight: bool,
    sink: LogSink | None = None,
) -> None:
    """Log a page request skipped or aborted by the cancellation token."""
    extra = {"url": url, "page_index": page_index, "in_flight": in_flight}
    logger.info("page_fetch_cancelled", extra=extra)
    sink_info(sink, QUERY_TAG, "cancelled", extra)


def log_failure_tolerated(
    *,
    query: str,
    error: SalesforceError,
    state: RunState,
    sink: LogSink | None = None,
) -> None:
    """Log a later-page failure downgraded to a truncated result."""
    extra = {
        "query": query,
        "url": state.next_address,
        "pages_fetched": state.pages_fetched,
        "records_kept": len(state.accumulated),
        "status_code": getattr(error, "status_code", None),
        "response_body": getattr(error, "body", None),
    }
    logger.warning("page_failure_tolerated", extra=extra)
    sink_error(sink, QUERY_TAG, error, {**extra, "allow_partial": True})


def log_query_completed(
    *,
    query: str,
    state: RunState,
    sink: LogSink | None = None,
) -> None:
    """Log the end of a run that delivers records."""
    extra = {
        "query": query,
        "pages_fetched": state.pages_fetched,
        "records": len(state.accumulated),
        "total_size": state.total_size,
        "termination_reason": state.termination_reason.value
        if state.termination_reason
        else None,
    }
    logger.info("query_completed", extra=extra)
    sink_info(sink, QUERY_TAG, "done", extra)


def log_query_failed(
    *,
    query: str,
    error: SalesforceError,
    state: RunState,
    sink: LogSink | None = None,
) -> None:
    """Log a run that fails without delivering records.

    A cancellation is reported at info level; any other failure is an error.
    """
    extra = {
        "query": query,
        "url": state.next_address,
        "pages_fetched": state.pages_fetched,
        "error_type": type(error).__name__,
        "status_code": getattr(error, "status_code", None),
        "response_body": getattr(error, "body", None),
    }
    if state.termination_reason is TerminationReason.CANCELLED:
        logger.info("query_cancelled", extra=extra)
        sink_info(sink, QUERY_TAG, "cancelled", extra)
        return
    logger.error("query_failed", extra=extra)
    sink_error(sink, QUERY_TAG, error, extra)


def log_deadline_elapsed(
    *,
    timeout: float,
    sink: LogSink | None = None,
) -> None:
    """Log a deadline timer firing its cancellation token."""
    extra = {"timeout_s": timeout}
    logger.info("query_deadline_elapsed", extra=extra)
    sink_info(sink, QUERY_TAG, "timeout", extra)
