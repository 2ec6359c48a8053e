"""sObject collection request and result models."""

from pydantic import BaseModel, ConfigDict, Field


class SaveError(BaseModel):
    """Per-record error reported by a collection call."""

    status_code: str | None = Field(default=None, alias="statusCode")
    message: str | None = None
    fields: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class SaveResult(BaseModel):
    """Per-record outcome of an insert, update or delete."""

    id: str | None = None
    success: bool = False
    errors: list[SaveError] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class SaveOptions(BaseModel):
    """Options shared by the collection calls.

    Attributes:
        all_or_none: Roll back the whole batch when any record fails
        type: sObject type applied to every record, overriding ``attributes.type``
    """

    all_or_none: bool = False
    type: str | None = None

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)
