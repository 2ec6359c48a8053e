"""Data models."""

from .auth import AuthContext, SalesforceCredentials
from .page import Page
from .sobject import SaveError, SaveOptions, SaveResult

__all__ = [
    "AuthContext",
    "SalesforceCredentials",
    "Page",
    "SaveError",
    "SaveOptions",
    "SaveResult",
]
