"""Inbound leg of the PKCE authorization flow.

Handles the provider's redirect back: parses the callback, validates the
state nonce and exchanges the authorization code for a token.
"""

from __future__ import annotations

import logging

from pkceflow.models.config import AuthConfig
from pkceflow.models.errors import (
    InsecureTransportError,
    NonceMismatchError,
    OAuth2Error,
    ParseError,
    ProviderError,
    TokenExchangeError,
)
from pkceflow.models.flow import (
    AuthorizationResponse,
    AuthResult,
    ReportCallback,
    deliver,
    strip_callback_params,
)
from pkceflow.models.security import AuthState
from pkceflow.models.tokens import TokenRequest, TokenResult
from pkceflow.primitives.browser import (
    BrowserContext,
    is_insecure_location,
    redirect_uri_for,
)
from pkceflow.primitives.nonce import NonceManager
from pkceflow.primitives.pkce import PKCEManager
from pkceflow.services.config import ConfigResolver
from pkceflow.services.tokens import OAuth2TokenManager

logger = logging.getLogger(__name__)


class CallbackCompleter:
    """Completes an authorization attempt on the page the provider returns to.

    Each call handles one page load. The pending nonce and verifier are
    consumed whenever a callback is processed, whatever the outcome.
    """

    def __init__(
        self,
        config: AuthConfig,
        resolver: ConfigResolver,
        pkce_manager: PKCEManager,
        nonce_manager: NonceManager,
        token_manager: OAuth2TokenManager,
        browser: BrowserContext,
    ):
        self.config = config
        self._resolver = resolver
        self._pkce_manager = pkce_manager
        self._nonce_manager = nonce_manager
        self._token_manager = token_manager
        self._browser = browser

    async def complete_auth(self, report: ReportCallback | None = None) -> AuthResult | None:
        """Complete authentication if the provider redirected back here.

        Args:
            report: Optional callback invoked exactly once with
                ``(error, None)`` or ``(None, token)`` when a callback is
                processed

        Returns:
            None when the page carries no callback parameters, otherwise the
            AuthResult of the attempt
        """
        location = self._browser.location

        # Keep the code out of history and away from a reprocessing refresh
        self._browser.replace_location(strip_callback_params(location))

        auth_response = AuthorizationResponse.from_url(location)
        if not auth_response.is_callback():
            return None

        try:
            token = await self._handle_callback(auth_response, location)
        except OAuth2Error as e:
            logger.warning(f"Authorization failed: {e}")
            return deliver(AuthResult.failure(e), report)

        logger.info("Authorization completed")
        return deliver(AuthResult.success(token), report)

    async def _handle_callback(
        self, auth_response: AuthorizationResponse, location: str
    ) -> TokenResult:
        if auth_response.is_error():
            self._discard_pending()
            raise ProviderError(auth_response.error, auth_response.error_description)

        try:
            state = AuthState.decode(auth_response.state)
        except ParseError:
            self._discard_pending()
            raise

        if not self._nonce_manager.validate_nonce(state.nonce):
            self._pkce_manager.clear_verifier()
            raise NonceMismatchError()

        code_verifier = self._pkce_manager.pop_verifier()

        if is_insecure_location(location):
            raise InsecureTransportError("Cannot exchange code over insecure protocol!")

        endpoints = await self._resolver.resolve()

        if not code_verifier:
            raise TokenExchangeError("No pending code verifier for this session")

        token_request = TokenRequest(
            token_endpoint=endpoints.token_url,
            code=auth_response.code,
            redirect_uri=redirect_uri_for(location),
            client_id=self.config.client_id,
            code_verifier=code_verifier,
        )
        return await self._token_manager.exchange_code_for_token(token_request)

    def _discard_pending(self) -> None:
        self._nonce_manager.discard()
        self._pkce_manager.clear_verifier()
