"""Custom exception hierarchy."""

from __future__ import annotations

from typing import Any


class SalesforceError(Exception):
    """Base exception for all library errors."""

    pass


class CancellationError(SalesforceError):
    """Operation stopped by a cancellation signal or an elapsed deadline."""

    def __init__(self, message: str = "operation cancelled") -> None:
        super().__init__(message)


class TransportError(SalesforceError):
    """Non-2xx response or network failure.

    Carries whatever diagnostics were available when the request failed. A
    network-level failure has no status code and no body.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: Any = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.url = url


class ValidationError(SalesforceError):
    """Malformed input rejected before any request is made."""

    pass


class AuthorizationError(SalesforceError):
    """Credential exchange with the OAuth endpoint failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
