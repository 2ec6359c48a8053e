"""Client-facing calls: authorization, sObject collections and the facade."""

from .oauth import get_authorization
from .salesforce_client import SalesforceClient
from .sobjects import delete_records, insert_records, update_records

__all__ = [
    "SalesforceClient",
    "get_authorization",
    "insert_records",
    "update_records",
    "delete_records",
]
