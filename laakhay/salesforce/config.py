"""Shared Salesforce REST constants.

This module centralizes API versions, paths and limits used by the query
engine and the sObject collection clients so the client facade can stay
small and focused.
"""

from __future__ import annotations

DEFAULT_API_VERSION = "v57.0"

OAUTH_API_PATH = "/services/oauth2/token"

# Composite sObject collections accept at most 200 ids per DELETE
MAX_DELETE_IDS = 200

# Total time allowed for a single HTTP round trip, in seconds
DEFAULT_HTTP_TIMEOUT = 30.0


def query_api_path(api_version: str = DEFAULT_API_VERSION) -> str:
    """Get the SOQL query resource path.

    Examples:
        >>> query_api_path("v57.0")
        '/services/data/v57.0/query'
    """
    return f"/services/data/{api_version}/query"


def sobjects_api_path(api_version: str = DEFAULT_API_VERSION) -> str:
    """Get the composite sObject collections resource path.

    Examples:
        >>> sobjects_api_path("v57.0")
        '/services/data/v57.0/composite/sobjects'
    """
    return f"/services/data/{api_version}/composite/sobjects"
