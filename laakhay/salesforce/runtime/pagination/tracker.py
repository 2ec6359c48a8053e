"""Continuation tracking between result pages."""

from __future__ import annotations

from ...models import Page
from .definitions import ContinuationStep


def next_step(page: Page, base_url: str) -> ContinuationStep:
    """Decide from ``page`` whether another page must be fetched.

    Pagination stops when the page is final or carries no continuation
    token. Otherwise the token, a server-relative path, is appended verbatim
    to ``base_url``.
    """
    if page.is_final or not page.continuation_token:
        return ContinuationStep(has_more=False)
    return ContinuationStep(
        has_more=True,
        address=f"{base_url.rstrip('/')}{page.continuation_token}",
    )
