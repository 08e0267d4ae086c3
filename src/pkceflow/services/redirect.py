"""Outbound leg of the PKCE authorization flow.

Builds the authorization URL and sends the browser to the provider.
"""

from __future__ import annotations

import logging

from pkceflow.models.config import AuthConfig
from pkceflow.models.errors import InsecureTransportError, OAuth2Error
from pkceflow.models.flow import (
    AuthorizationRequest,
    AuthResult,
    ReportCallback,
    deliver,
)
from pkceflow.models.security import AuthState
from pkceflow.primitives.browser import (
    BrowserContext,
    is_insecure_location,
    redirect_uri_for,
)
from pkceflow.primitives.nonce import NonceManager
from pkceflow.primitives.pkce import PKCEManager
from pkceflow.services.config import ConfigResolver

logger = logging.getLogger(__name__)


class RedirectAuthenticator:
    """Starts an authorization attempt by navigating to the provider.

    Creating the verifier and nonce overwrites any attempt still pending in
    the session.
    """

    def __init__(
        self,
        config: AuthConfig,
        resolver: ConfigResolver,
        pkce_manager: PKCEManager,
        nonce_manager: NonceManager,
        browser: BrowserContext,
    ):
        self.config = config
        self._resolver = resolver
        self._pkce_manager = pkce_manager
        self._nonce_manager = nonce_manager
        self._browser = browser

    async def authenticate(
        self, scope: str | None = None, report: ReportCallback | None = None
    ) -> AuthResult | None:
        """Navigate the browser to the provider's authorization endpoint.

        Args:
            scope: Scope to request from the provider
            report: Optional callback invoked with ``(error, None)`` on failure

        Returns:
            None once navigation has been issued, or an AuthResult carrying
            the error that prevented it
        """
        try:
            authorization_url = await self.build_authorization_url(scope)
        except OAuth2Error as e:
            logger.warning(f"Authorization could not start: {e}")
            return deliver(AuthResult.failure(e), report)

        logger.info(f"Redirecting to authorization endpoint for client {self.config.client_id}")
        self._browser.assign(authorization_url)
        return None

    async def build_authorization_url(self, scope: str | None = None) -> str:
        """Prepare a new attempt and return the URL to navigate to.

        Raises:
            InsecureTransportError: If the page is not served securely
            ConfigError: If endpoint resolution fails
            PKCEError: If parameter generation fails
        """
        location = self._browser.location
        if is_insecure_location(location):
            raise InsecureTransportError("Cannot authenticate over insecure protocol!")

        endpoints = await self._resolver.resolve()

        state = AuthState(nonce=self._nonce_manager.create_nonce())
        pkce_params = self._pkce_manager.create_parameters()

        auth_request = AuthorizationRequest(
            authorization_endpoint=endpoints.authorization_url,
            client_id=self.config.client_id,
            redirect_uri=redirect_uri_for(location),
            scope=scope,
            state=state.encode(),
            code_challenge=pkce_params.code_challenge,
            code_challenge_method=pkce_params.code_challenge_method,
        )
        return auth_request.build_authorization_url()
