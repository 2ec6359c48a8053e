"""Pagination state and outcome definitions.

This module defines the data structures shared by the page fetcher, the
continuation tracker and the pagination engine: fetch outcomes, the
per-invocation run state and the partial-result policy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from ...core.cancellation import CancellationToken
from ...core.exceptions import TransportError
from ...models import Page


class TerminationReason(str, Enum):
    """Why a query run stopped issuing page requests."""

    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"
    ERROR_ABORT = "error_abort"
    ERROR_TOLERATED = "error_tolerated"

    @property
    def is_partial(self) -> bool:
        """True when the delivered records may be a truncated result."""
        return self in (TerminationReason.CANCELLED, TerminationReason.ERROR_TOLERATED)


@dataclass(frozen=True)
class FetchSuccess:
    page: Page


@dataclass(frozen=True)
class FetchCancelled:
    pass


@dataclass(frozen=True)
class FetchFailed:
    error: TransportError


FetchOutcome = Union[FetchSuccess, FetchCancelled, FetchFailed]


@dataclass(frozen=True)
class ContinuationStep:
    """Decision taken from one page: stop, or fetch ``address`` next."""

    has_more: bool
    address: str | None = None


@dataclass(frozen=True)
class PaginationPolicy:
    """Failure policy for one query run.

    Attributes:
        allow_partial: Return what was collected when the run is cancelled or a
            later page fails, instead of raising
        cancel_token: Token checked before every page request and passed to the
            transport so an in-flight request is aborted
    """

    allow_partial: bool = False
    cancel_token: CancellationToken | None = None


@dataclass
class RunState:
    """Mutable state of a single query invocation.

    ``accumulated`` only grows, in page order then record order. Once
    ``terminated`` is set no further page is requested.
    """

    next_address: str
    accumulated: list[Any] = field(default_factory=list)
    terminated: bool = False
    termination_reason: TerminationReason | None = None
    pages_fetched: int = 0
    total_size: int | None = None

    def append(self, page: Page) -> None:
        if self.terminated:
            raise RuntimeError("Cannot append records to a terminated run")
        self.accumulated.extend(page.records)
        self.pages_fetched += 1
        if self.total_size is None:
            self.total_size = page.total_size

    def terminate(self, reason: TerminationReason) -> None:
        if self.terminated:
            raise RuntimeError(f"Run already terminated ({self.termination_reason})")
        self.terminated = True
        self.termination_reason = reason
