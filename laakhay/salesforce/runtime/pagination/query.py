"""SOQL text normalization and first-page address building."""

from __future__ import annotations

from urllib.parse import quote

from ...config import query_api_path
from ...models import AuthContext


def normalize_query(query: str | None) -> str:
    """Collapse whitespace runs to single spaces and trim both ends.

    Examples:
        >>> normalize_query("  SELECT Id\\n\\tFROM Account  ")
        'SELECT Id FROM Account'
    """
    if not query:
        return ""
    return " ".join(query.split())


def build_query_address(auth: AuthContext, normalized_query: str) -> str:
    """Absolute URL of the first result page for an already normalized query."""
    path = query_api_path(auth.api_version)
    return f"{auth.instance_url}{path}?q={quote(normalized_query, safe='')}"
