"""OAuth 2.0 username/password grant."""

from __future__ import annotations

import logging

from pydantic import ValidationError as PydanticValidationError

from ..config import DEFAULT_API_VERSION, OAUTH_API_PATH
from ..core.cancellation import CancellationToken
from ..core.exceptions import AuthorizationError, TransportError
from ..core.log_sink import LogSink, sink_error, sink_info
from ..models import AuthContext, SalesforceCredentials
from ..runtime.rest import RESTTransport

logger = logging.getLogger(__name__)

AUTH_TAG = "salesforce.getAuthorization"


async def get_authorization(
    credentials: SalesforceCredentials,
    *,
    transport: RESTTransport | None = None,
    api_version: str = DEFAULT_API_VERSION,
    sink: LogSink | None = None,
    cancel_token: CancellationToken | None = None,
) -> AuthContext:
    """Exchange connected-app secrets for an access token.

    The security token is appended to the password, as the password grant
    requires for callers outside trusted IP ranges.

    Args:
        credentials: Login URL, client id/secret, username, password, token
        transport: Transport to reuse; a temporary one is created and closed
            when omitted
        api_version: REST API version recorded on the returned context
        sink: Optional caller log sink
        cancel_token: Optional cancellation token for the token request

    Returns:
        AuthContext for the instance the user belongs to

    Raises:
        AuthorizationError: Token request failed or returned an unusable body
    """
    url = f"{credentials.url}{OAUTH_API_PATH}"
    form = {
        "grant_type": "password",
        "client_id": credentials.client_id,
        "client_secret": credentials.client_secret.get_secret_value(),
        "username": credentials.username,
        "password": credentials.password.get_secret_value()
        + credentials.token.get_secret_value(),
    }
    metadata = {"url": url, "client_id": credentials.client_id, "username": credentials.username}
    logger.info("oauth_token_requested", extra=metadata)
    sink_info(sink, AUTH_TAG, "Requesting OAuth token", metadata)

    owns_transport = transport is None
    active = transport or RESTTransport()
    try:
        payload = await active.post(
            url,
            form=form,
            headers={"Accept": "application/json"},
            cancel_token=cancel_token,
        )
        return AuthContext(
            instance_url=payload["instance_url"],
            access_token=payload["access_token"],
            token_type=payload.get("token_type") or "Bearer",
            api_version=api_version,
        )
    except (TransportError, KeyError, TypeError, AttributeError, PydanticValidationError) as e:
        status_code = getattr(e, "status_code", None)
        failure = {
            **metadata,
            "error_type": type(e).__name__,
            "error_message": str(e),
            "status_code": status_code,
            "response_body": getattr(e, "body", None),
        }
        logger.error("oauth_token_failed", extra=failure)
        sink_error(sink, AUTH_TAG, "Failed to obtain OAuth authorization", failure)
        raise AuthorizationError(
            "Failed to obtain OAuth authorization.", status_code=status_code
        ) from e
    finally:
        if owns_transport:
            await active.close()
