"""Authorization flow models.

Contains models for authorization requests, callback parsing and the
result reported when a flow terminates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable
from urllib.parse import parse_qsl, unquote_plus, urlencode, urlsplit, urlunsplit

from pkceflow.models.errors import OAuth2Error
from pkceflow.models.tokens import TokenResult

CALLBACK_PARAMS = frozenset(
    {"code", "state", "error", "error_description", "error_uri"}
)


@dataclass(frozen=True)
class AuthorizationRequest:
    """Authorization request parameters for the PKCE flow."""

    authorization_endpoint: str
    client_id: str
    redirect_uri: str
    scope: str | None
    state: str
    code_challenge: str
    code_challenge_method: str = "S256"

    def build_authorization_url(self) -> str:
        """Build the complete authorization URL.

        Query parameters already present on the endpoint are preserved.
        """
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "state": self.state,
            "code_challenge_method": self.code_challenge_method,
            "code_challenge": self.code_challenge,
        }
        if self.scope:
            params["scope"] = self.scope

        parts = urlsplit(self.authorization_endpoint)
        query = [(k, v) for k, v in parse_qsl(parts.query) if k not in params]
        query.extend(params.items())
        return urlunsplit(parts._replace(query=urlencode(query)))


@dataclass(frozen=True)
class AuthorizationResponse:
    code: str | None = None
    state: str | None = None
    error: str | None = None
    error_description: str | None = None
    error_uri: str | None = None

    @classmethod
    def from_url(cls, url: str) -> AuthorizationResponse:
        """Parse the callback parameters out of a redirect URL."""
        params: dict[str, str] = {}
        for key, value in parse_qsl(urlsplit(url).query, keep_blank_values=True):
            # First occurrence wins
            params.setdefault(key, value)

        return cls(
            code=params.get("code"),
            state=params.get("state"),
            error=params.get("error"),
            error_description=params.get("error_description"),
            error_uri=params.get("error_uri"),
        )

    def is_callback(self) -> bool:
        return self.code is not None or self.error is not None

    def is_error(self) -> bool:
        return self.error is not None


def strip_callback_params(url: str) -> str:
    """Remove OAuth callback parameters from a URL, keeping everything else."""
    parts = urlsplit(url)
    kept = [
        pair
        for pair in parts.query.split("&")
        if pair and unquote_plus(pair.partition("=")[0]) not in CALLBACK_PARAMS
    ]
    return urlunsplit(parts._replace(query="&".join(kept)))


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a terminated flow: exactly one of error or token is set."""

    error: OAuth2Error | None = None
    token: TokenResult | None = None

    def __post_init__(self) -> None:
        if (self.error is None) == (self.token is None):
            raise ValueError("AuthResult requires exactly one of error or token")

    @classmethod
    def failure(cls, error: OAuth2Error) -> AuthResult:
        return cls(error=error)

    @classmethod
    def success(cls, token: TokenResult) -> AuthResult:
        return cls(token=token)

    @property
    def ok(self) -> bool:
        return self.error is None


ReportCallback = Callable[[OAuth2Error | None, TokenResult | None], None]


def deliver(result: AuthResult, report: ReportCallback | None) -> AuthResult:
    """Hand a terminal result to an optional report callback."""
    if report is not None:
        report(result.error, result.token)
    return result
