"""Token exchange models.

Contains the token request sent to the provider and the typed result
handed back to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping


@dataclass(frozen=True)
class TokenRequest:
    """Authorization code token request (RFC 6749 Section 4.1.3).

    Includes the PKCE code_verifier (RFC 7636).
    """

    token_endpoint: str
    code: str
    redirect_uri: str
    client_id: str
    code_verifier: str
    grant_type: str = "authorization_code"

    def to_body(self) -> dict[str, str]:
        """Convert to request body fields, shared by form and JSON encodings."""
        return {
            "client_id": self.client_id,
            "code": self.code,
            "grant_type": self.grant_type,
            "redirect_uri": self.redirect_uri,
            "code_verifier": self.code_verifier,
        }


@dataclass(frozen=True)
class TokenResult:
    """Token endpoint response with a named access token field.

    ``fields`` holds the complete provider response, including
    ``access_token`` and any provider-specific extras.
    """

    access_token: str
    fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @classmethod
    def from_response(cls, data: Mapping[str, Any]) -> TokenResult:
        return cls(access_token=data["access_token"], fields=data)

    def as_dict(self) -> dict[str, Any]:
        """Flatten to ``{"token": access_token, **fields}``."""
        return {"token": self.access_token, **self.fields}
