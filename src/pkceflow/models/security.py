"""Security-related models for the PKCE flow.

Contains PKCE parameters and the state token that carries the CSRF nonce.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from pkceflow.models.errors import ParseError

AUTH_TYPE_PKCE = "pkce"


@dataclass(frozen=True)
class PKCEParameters:
    """PKCE (Proof Key for Code Exchange) parameters (RFC 7636).

    Immutable parameters generated for each authorization attempt.
    """

    code_verifier: str = field()
    code_challenge: str = field()
    code_challenge_method: str = field(default="S256")

    def __post_init__(self) -> None:
        """Validate PKCE parameters meet RFC 7636 requirements."""
        if not (43 <= len(self.code_verifier) <= 128):
            raise ValueError("code_verifier must be 43-128 characters")
        if len(self.code_challenge) != 43:
            raise ValueError("code_challenge must be 43 characters")
        if self.code_challenge_method != "S256":
            raise ValueError("Only S256 code challenge method is supported")


@dataclass(frozen=True)
class AuthState:
    """Value sent as the ``state`` parameter of the authorization request."""

    nonce: str | None
    auth_type: str = AUTH_TYPE_PKCE

    def encode(self) -> str:
        return json.dumps({"auth_type": self.auth_type, "nonce": self.nonce})

    @classmethod
    def decode(cls, raw: str | None) -> AuthState:
        """Decode a state parameter returned by the provider.

        Some providers hand back the state with its quotes escaped, so a
        failed parse is retried once after unescaping ``\\"``.

        Raises:
            ParseError: If state is missing or undecodable in both forms
        """
        if raw is None:
            raise ParseError("Missing state parameter")

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            try:
                payload = json.loads(raw.replace('\\"', '"'))
            except json.JSONDecodeError as e:
                raise ParseError(f"Failed to parse state parameter: {e}") from e

        if not isinstance(payload, dict):
            return cls(nonce=None)

        nonce = payload.get("nonce")
        return cls(
            nonce=nonce if isinstance(nonce, str) else None,
            auth_type=payload.get("auth_type", AUTH_TYPE_PKCE),
        )
