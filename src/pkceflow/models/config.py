"""Configuration models for the PKCE authenticator.

Contains the static authenticator configuration, the OpenID Connect
discovery document and the endpoints resolved from either of them.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class AuthConfig(BaseModel):
    """Static configuration for a PKCE authenticator.

    Accepts either field names or the backend-style keys used in site
    configuration files (``app_id``, ``auth_token_endpoint`` and so on).
    Values are trimmed and normalized at construction.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    client_id: str = Field(validation_alias=AliasChoices("client_id", "app_id"))
    base_url: str
    use_oidc: bool = False
    auth_endpoint: str = ""
    token_endpoint: str = Field(
        default="",
        validation_alias=AliasChoices("token_endpoint", "auth_token_endpoint"),
    )
    token_content_type: str = Field(
        default=FORM_CONTENT_TYPE,
        validation_alias=AliasChoices(
            "token_content_type", "auth_token_endpoint_content_type"
        ),
    )
    timeout: float = 30.0

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v:
            raise ValueError("base_url is required")
        return v

    @field_validator("auth_endpoint", "token_endpoint")
    @classmethod
    def strip_slashes(cls, v: str) -> str:
        return v.strip().strip("/")

    @field_validator("token_content_type")
    @classmethod
    def default_content_type(cls, v: str) -> str:
        return v.strip() or FORM_CONTENT_TYPE

    @property
    def discovery_url(self) -> str:
        return f"{self.base_url}/.well-known/openid-configuration"


class OpenIDConfiguration(BaseModel):
    """OpenID Connect discovery document.

    Only the endpoints needed for the authorization code flow are required;
    everything else the provider publishes is kept as extra fields.
    """

    model_config = ConfigDict(extra="allow")

    authorization_endpoint: str = Field(min_length=1)
    token_endpoint: str = Field(min_length=1)
    issuer: str | None = None
    code_challenge_methods_supported: list[str] | None = None


@dataclass(frozen=True)
class ResolvedEndpoints:
    """Absolute authorization and token endpoint URLs."""

    authorization_url: str
    token_url: str
