"""Shared fixtures for integration tests."""

import os

import pytest

from laakhay.salesforce import SalesforceCredentials

# Skip all integration tests unless RUN_SALESFORCE_NETWORK_TESTS=1
pytestmark = pytest.mark.skipif(
    os.environ.get("RUN_SALESFORCE_NETWORK_TESTS") != "1",
    reason="Requires network access. Set RUN_SALESFORCE_NETWORK_TESTS=1 to run",
)

CREDENTIAL_ENV = {
    "url": "SALESFORCE_URL",
    "client_id": "SALESFORCE_CLIENT_ID",
    "client_secret": "SALESFORCE_CLIENT_SECRET",
    "username": "SALESFORCE_USERNAME",
    "password": "SALESFORCE_PASSWORD",
    "token": "SALESFORCE_TOKEN",
}


@pytest.fixture
def credentials() -> SalesforceCredentials:
    """Connected-app credentials read from the environment."""
    values = {field: os.environ.get(name, "") for field, name in CREDENTIAL_ENV.items()}
    missing = [CREDENTIAL_ENV[f] for f, v in values.items() if not v and f != "token"]
    if missing:
        pytest.skip(f"Missing environment variables: {', '.join(missing)}")
    return SalesforceCredentials(**values)
