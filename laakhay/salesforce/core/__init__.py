"""Core components."""

from .cancellation import CancellationToken
from .exceptions import (
    AuthorizationError,
    CancellationError,
    SalesforceError,
    TransportError,
    ValidationError,
)
from .log_sink import LogSink, sink_error, sink_info

__all__ = [
    "CancellationToken",
    "SalesforceError",
    "CancellationError",
    "TransportError",
    "ValidationError",
    "AuthorizationError",
    "LogSink",
    "sink_info",
    "sink_error",
]
