"""Query result page model."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic import field_validator

logger = logging.getLogger(__name__)


class Page(BaseModel):
    """One page of a SOQL query result.

    Built from the service's JSON envelope. A page is the last one when
    ``is_final`` is set or when it carries no continuation token.
    """

    is_final: bool = Field(default=False, alias="done")
    continuation_token: str | None = Field(default=None, alias="nextRecordsUrl")
    records: list[Any] = Field(default_factory=list)
    total_size: int | None = Field(default=None, alias="totalSize")

    @field_validator("records", mode="before")
    @classmethod
    def null_records_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("is_final", mode="before")
    @classmethod
    def null_done_to_false(cls, v: Any) -> Any:
        return False if v is None else v

    @field_validator("total_size", mode="before")
    @classmethod
    def unusable_total_to_none(cls, v: Any) -> Any:
        if v is None or isinstance(v, bool):
            return None
        try:
            return int(v)
        except (TypeError, ValueError, OverflowError):
            return None

    @field_validator("continuation_token", mode="before")
    @classmethod
    def blank_token_to_none(cls, v: Any) -> Any:
        return v or None

    @classmethod
    def terminal(cls) -> Page:
        """Empty page that ends pagination."""
        return cls(is_final=True)

    @classmethod
    def from_payload(cls, payload: Any) -> Page:
        """Parse a decoded response body.

        A null, non-object or malformed body becomes the empty terminal page.
        """
        if not isinstance(payload, dict) or not payload:
            return cls.terminal()
        try:
            return cls.model_validate(payload)
        except PydanticValidationError as e:
            logger.warning(
                "page_payload_malformed",
                extra={"error_count": e.error_count(), "keys": sorted(payload)},
            )
            return cls.terminal()

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")
