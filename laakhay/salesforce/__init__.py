"""Laakhay Salesforce - async Salesforce REST client with cursor-based query pagination."""

from .clients import (
    SalesforceClient,
    delete_records,
    get_authorization,
    insert_records,
    update_records,
)
from .config import DEFAULT_API_VERSION, MAX_DELETE_IDS
from .core import (
    AuthorizationError,
    CancellationError,
    CancellationToken,
    LogSink,
    SalesforceError,
    TransportError,
    ValidationError,
)
from .models import (
    AuthContext,
    Page,
    SalesforceCredentials,
    SaveError,
    SaveOptions,
    SaveResult,
)
from .runtime.pagination import (
    DeadlineGuard,
    PageFetcher,
    PaginationEngine,
    PaginationPolicy,
    RecordStream,
    TerminationReason,
    normalize_query,
)
from .runtime.rest import HTTPClient, RESTTransport

__version__ = "0.1.0"

__all__ = [
    # Clients
    "SalesforceClient",
    "get_authorization",
    "insert_records",
    "update_records",
    "delete_records",
    # Pagination
    "PaginationEngine",
    "PaginationPolicy",
    "PageFetcher",
    "RecordStream",
    "DeadlineGuard",
    "TerminationReason",
    "normalize_query",
    # Transport
    "HTTPClient",
    "RESTTransport",
    # Models
    "AuthContext",
    "SalesforceCredentials",
    "Page",
    "SaveError",
    "SaveOptions",
    "SaveResult",
    # Core
    "CancellationToken",
    "LogSink",
    "SalesforceError",
    "CancellationError",
    "TransportError",
    "ValidationError",
    "AuthorizationError",
    # Config
    "DEFAULT_API_VERSION",
    "MAX_DELETE_IDS",
]
