"""Exception hierarchy for the PKCE authorization code flow.

Each failure mode of the flow has its own type so callers can branch on the
kind of failure carried by an ``AuthResult``.
"""

from __future__ import annotations


class OAuth2Error(Exception):
    """Base exception for all OAuth 2.0 related errors."""

    pass


class InsecureTransportError(OAuth2Error):
    """Raised when the flow is attempted from a non-secure origin."""

    pass


class ConfigError(OAuth2Error):
    """Raised when endpoints cannot be resolved.

    Covers OIDC discovery network failures, bad responses, unparseable
    documents and documents missing endpoint fields.
    """

    pass


class AuthorizationError(OAuth2Error):
    """Raised when user authorization fails."""

    pass


class ProviderError(AuthorizationError):
    """Raised when the provider redirects back with an error code."""

    def __init__(self, error: str, error_description: str | None = None):
        self.error = error
        self.error_description = error_description
        message = f"{error}: {error_description}" if error_description else error
        super().__init__(message)


class AuthorizationCallbackError(OAuth2Error):
    """Raised when callback data from the provider is malformed or invalid."""

    pass


class ParseError(AuthorizationCallbackError):
    """Raised when the state parameter cannot be decoded."""

    pass


class StateValidationError(AuthorizationCallbackError):
    """Raised when OAuth state parameter validation fails."""

    pass


class NonceMismatchError(StateValidationError):
    """Raised when the nonce carried in state was never issued or was replayed.

    This signals a possible CSRF attack or a reused callback URL.
    """

    def __init__(self, message: str = "Invalid nonce"):
        super().__init__(message)


class TokenError(OAuth2Error):
    """Raised when token operations fail."""

    pass


class TokenExchangeError(TokenError):
    """Raised when authorization code to token exchange fails."""

    pass


class PKCEError(OAuth2Error):
    """Raised when PKCE parameter generation fails."""

    pass
