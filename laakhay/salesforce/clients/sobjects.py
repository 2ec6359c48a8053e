"""sObject collection calls: insert, update and delete.

Each call validates its whole batch before issuing exactly one request to
the composite sObject collections resource.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..config import MAX_DELETE_IDS, sobjects_api_path
from ..core.cancellation import CancellationToken
from ..core.exceptions import TransportError, ValidationError
from ..core.log_sink import LogSink, sink_error, sink_info
from ..models import AuthContext, SaveOptions, SaveResult
from ..runtime.rest import RESTTransport

logger = logging.getLogger(__name__)

SObject = Mapping[str, Any]


def record_type(record: SObject) -> str | None:
    attributes = record.get("attributes")
    if isinstance(attributes, Mapping):
        return attributes.get("type") or None
    return None


def record_id(record: SObject) -> str | None:
    return record.get("Id") or record.get("id") or None


def prepare_records(
    records: SObject | Iterable[SObject],
    options: SaveOptions,
    *,
    id_required: bool,
) -> list[dict[str, Any]]:
    """Validate a batch and return request-ready copies of its records.

    Args:
        records: One record or an iterable of records
        options: ``type`` replaces each record's ``attributes`` when set
        id_required: True for update (id mandatory), False for insert (id forbidden)

    Raises:
        ValidationError: A record is not a mapping, has no type, or breaks the id rule
    """
    items = [records] if isinstance(records, Mapping) else list(records)
    prepared: list[dict[str, Any]] = []
    for record in items:
        if not isinstance(record, Mapping):
            raise ValidationError(f"sobject must be a mapping, got {type(record).__name__}")
        copy = dict(record)
        if options.type:
            copy["attributes"] = {"type": options.type}
        elif not record_type(copy):
            raise ValidationError("sobject type missing")

        has_id = record_id(copy) is not None
        if id_required and not has_id:
            raise ValidationError("sobject id missing")
        if not id_required and has_id:
            raise ValidationError("sobject id not allowed")
        prepared.append(copy)
    return prepared


def parse_results(payload: Any, *, url: str) -> list[SaveResult] | None:
    if payload is None:
        return None
    if not isinstance(payload, list):
        raise TransportError("Unexpected collection response body", body=payload, url=url)
    try:
        return [SaveResult.model_validate(item) for item in payload]
    except PydanticValidationError as e:
        raise TransportError("Malformed collection response body", body=payload, url=url) from e


def _headers(auth: AuthContext) -> dict[str, str]:
    return {"Authorization": auth.authorization_header, "Accept": "application/json"}


async def insert_records(
    transport: RESTTransport,
    auth: AuthContext,
    records: SObject | Iterable[SObject],
    options: SaveOptions | None = None,
    *,
    sink: LogSink | None = None,
    cancel_token: CancellationToken | None = None,
) -> list[SaveResult] | None:
    """Create records.

    Returns:
        One SaveResult per record, None if the service returned a null body,
        or an empty list (without a request) for an empty batch
    """
    tag = "salesforce.insert"
    options = options or SaveOptions()
    prepared = prepare_records(records, options, id_required=False)
    if not prepared:
        return []

    url = f"{auth.instance_url}{sobjects_api_path(auth.api_version)}"
    metadata = {"url": url, "records": len(prepared), "all_or_none": options.all_or_none}
    logger.info("sobject_insert_started", extra=metadata)
    sink_info(sink, tag, "start", metadata)
    try:
        payload = await transport.post(
            url,
            json_body={"allOrNone": options.all_or_none, "records": prepared},
            headers=_headers(auth),
            cancel_token=cancel_token,
        )
        results = parse_results(payload, url=url)
    except TransportError as e:
        _log_failure(tag, "sobject_insert_failed", e, metadata, sink)
        raise

    logger.info("sobject_insert_completed", extra=metadata)
    sink_info(sink, tag, "done", {**metadata, "results": payload})
    return results


async def update_records(
    transport: RESTTransport,
    auth: AuthContext,
    records: SObject | Iterable[SObject],
    options: SaveOptions | None = None,
    *,
    sink: LogSink | None = None,
    cancel_token: CancellationToken | None = None,
) -> list[SaveResult] | None:
    """Update records identified by ``Id``/``id``.

    Returns:
        One SaveResult per record, None if the service returned a null body,
        or an empty list (without a request) for an empty batch
    """
    tag = "salesforce.update"
    options = options or SaveOptions()
    prepared = prepare_records(records, options, id_required=True)
    if not prepared:
        return []

    url = f"{auth.instance_url}{sobjects_api_path(auth.api_version)}"
    metadata = {"url": url, "records": len(prepared), "all_or_none": options.all_or_none}
    logger.info("sobject_update_started", extra=metadata)
    sink_info(sink, tag, "start", metadata)
    try:
        payload = await transport.patch(
            url,
            json_body={"allOrNone": options.all_or_none, "records": prepared},
            headers=_headers(auth),
            cancel_token=cancel_token,
        )
        results = parse_results(payload, url=url)
    except TransportError as e:
        _log_failure(tag, "sobject_update_failed", e, metadata, sink)
        raise

    logger.info("sobject_update_completed", extra=metadata)
    sink_info(sink, tag, "done", {**metadata, "results": payload})
    return results


async def delete_records(
    transport: RESTTransport,
    auth: AuthContext,
    ids: Iterable[str],
    options: SaveOptions | None = None,
    *,
    sink: LogSink | None = None,
    cancel_token: CancellationToken | None = None,
) -> list[SaveResult]:
    """Delete up to 200 records by id.

    Raises:
        ValidationError: More than 200 ids, or an id that is not a non-empty string
    """
    tag = "salesforce.delete"
    options = options or SaveOptions()
    if isinstance(ids, (str, bytes)):
        raise ValidationError("ids must be a collection of sobject ids, not a single string")
    id_list = list(ids)
    if not id_list:
        return []
    if len(id_list) > MAX_DELETE_IDS:
        raise ValidationError(f"Cannot delete more than {MAX_DELETE_IDS} records at a time")
    for value in id_list:
        if not isinstance(value, str) or not value:
            raise ValidationError(f"Invalid sobject id: {value!r}")

    url = f"{auth.instance_url}{sobjects_api_path(auth.api_version)}"
    params = {"ids": ",".join(id_list), "allOrNone": "true" if options.all_or_none else "false"}
    metadata = {"url": url, "records": len(id_list), "all_or_none": options.all_or_none}
    logger.info("sobject_delete_started", extra=metadata)
    sink_info(sink, tag, "start", {**metadata, "ids": id_list})
    try:
        payload = await transport.delete(
            url, params=params, headers=_headers(auth), cancel_token=cancel_token
        )
        results = parse_results(payload, url=url)
    except TransportError as e:
        _log_failure(tag, "sobject_delete_failed", e, metadata, sink)
        raise

    logger.info("sobject_delete_completed", extra=metadata)
    sink_info(sink, tag, "done", {**metadata, "results": payload})
    return results or []


def _log_failure(
    tag: str,
    event: str,
    error: TransportError,
    metadata: dict[str, Any],
    sink: LogSink | None,
) -> None:
    failure = {**metadata, "status_code": error.status_code, "response_body": error.body}
    logger.error(event, extra=failure)
    sink_error(sink, tag, error, failure)
