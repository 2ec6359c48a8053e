"""Cursor-based pagination for SOQL queries.

This module turns one SOQL query into a finite stream of records by
following the service's continuation cursors until the result set is
exhausted, under a configurable partial-result and cancellation policy.

Architecture:
    The pagination layer consists of:
    - query.py: Query normalization and first-page address
    - fetcher.py: One request per page, classified outcome
    - tracker.py: Continuation decision from a page
    - engine.py: Sequential page loop, RunState, RecordStream
    - deadline.py: Timeout/cancel wrapper that materializes records
    - telemetry.py: Structured logging
"""

from __future__ import annotations

from .deadline import DeadlineGuard
from .definitions import (
    ContinuationStep,
    FetchCancelled,
    FetchFailed,
    FetchOutcome,
    FetchSuccess,
    PaginationPolicy,
    RunState,
    TerminationReason,
)
from .engine import PaginationEngine, RecordStream
from .fetcher import PageFetcher
from .query import build_query_address, normalize_query
from .tracker import next_step

__all__ = [
    "ContinuationStep",
    "DeadlineGuard",
    "FetchCancelled",
    "FetchFailed",
    "FetchOutcome",
    "FetchSuccess",
    "PageFetcher",
    "PaginationEngine",
    "PaginationPolicy",
    "RecordStream",
    "RunState",
    "TerminationReason",
    "build_query_address",
    "next_step",
    "normalize_query",
]
