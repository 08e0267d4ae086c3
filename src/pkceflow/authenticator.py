"""PKCE authenticator for browser-hosted applications.

Coordinates endpoint resolution, PKCE, nonce handling and token exchange
across the two page loads of an authorization code flow.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from pkceflow.models.config import AuthConfig
from pkceflow.models.flow import AuthResult, ReportCallback
from pkceflow.primitives.browser import BrowserContext
from pkceflow.primitives.discovery import OIDCDiscovery
from pkceflow.primitives.nonce import NonceManager
from pkceflow.primitives.pkce import PKCEManager
from pkceflow.primitives.storage import InMemorySessionStore, SessionStore
from pkceflow.services.callback import CallbackCompleter
from pkceflow.services.config import ConfigResolver
from pkceflow.services.redirect import RedirectAuthenticator
from pkceflow.services.tokens import OAuth2TokenManager

logger = logging.getLogger(__name__)


class PkceAuthenticator:
    """OAuth 2.0 authorization code + PKCE client.

    ``authenticate()`` runs on the page that starts the login and ends by
    navigating away. ``complete_auth()`` runs on the page the provider
    redirects back to. Both must share the same session store.
    """

    def __init__(
        self,
        config: AuthConfig | Mapping[str, Any],
        browser: BrowserContext,
        store: SessionStore | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the authenticator.

        Args:
            config: AuthConfig or a mapping of configuration keys
            browser: Access to the hosting page's location
            store: Session storage for the pending attempt
            http_client: HTTP client to use; one is created when omitted
        """
        if not isinstance(config, AuthConfig):
            config = AuthConfig.model_validate(config)
        self.config = config
        self.store = store if store is not None else InMemorySessionStore()

        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=config.timeout)

        self.pkce_manager = PKCEManager(self.store)
        self.nonce_manager = NonceManager(self.store)
        self.resolver = ConfigResolver(config, OIDCDiscovery(self._http_client))
        self.token_manager = OAuth2TokenManager(
            self._http_client, config.token_content_type
        )

        self._redirect = RedirectAuthenticator(
            config, self.resolver, self.pkce_manager, self.nonce_manager, browser
        )
        self._callback = CallbackCompleter(
            config,
            self.resolver,
            self.pkce_manager,
            self.nonce_manager,
            self.token_manager,
            browser,
        )

    async def authenticate(
        self, scope: str | None = None, report: ReportCallback | None = None
    ) -> AuthResult | None:
        """Send the user to the provider to authorize this client."""
        logger.debug(f"Starting authorization for client {self.config.client_id}")
        return await self._redirect.authenticate(scope, report)

    async def complete_auth(
        self, report: ReportCallback | None = None
    ) -> AuthResult | None:
        """Finish authorization if the current page is a provider callback."""
        return await self._callback.complete_auth(report)

    async def close(self) -> None:
        """Close the HTTP client if this authenticator created it."""
        if self._owns_http_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> PkceAuthenticator:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
