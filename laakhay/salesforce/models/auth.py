"""Authorization models."""

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from ..config import DEFAULT_API_VERSION


class SalesforceCredentials(BaseModel):
    """Connected-app secrets for the OAuth username/password grant."""

    url: str = Field(..., min_length=1)
    client_id: str = Field(..., min_length=1)
    client_secret: SecretStr
    username: str = Field(..., min_length=1)
    password: SecretStr
    token: SecretStr = SecretStr("")

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)


class AuthContext(BaseModel):
    """Instance address and bearer credential for an authorized session."""

    instance_url: str = Field(..., min_length=1)
    access_token: str = Field(..., min_length=1, repr=False)
    token_type: str = "Bearer"
    api_version: str = DEFAULT_API_VERSION

    @field_validator("instance_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def authorization_header(self) -> str:
        return f"Bearer {self.access_token}"

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)
