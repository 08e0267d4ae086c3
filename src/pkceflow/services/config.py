"""Endpoint resolution service.

Turns an ``AuthConfig`` into absolute authorization and token endpoint URLs,
either directly from static configuration or lazily through OpenID Connect
discovery.
"""

from __future__ import annotations

import logging

from pkceflow.models.config import AuthConfig, ResolvedEndpoints
from pkceflow.primitives.discovery import OIDCDiscovery

logger = logging.getLogger(__name__)


class ConfigResolver:
    """Resolves the endpoints an authenticator talks to.

    In static mode the endpoints are known at construction. In OIDC mode the
    first ``resolve()`` performs discovery and later calls reuse the result.
    A failed discovery is not cached, so a later flow tries again.
    """

    def __init__(self, config: AuthConfig, discovery: OIDCDiscovery):
        self.config = config
        self._discovery = discovery
        self._endpoints: ResolvedEndpoints | None = None

        if not config.use_oidc:
            self._endpoints = ResolvedEndpoints(
                authorization_url=f"{config.base_url}/{config.auth_endpoint}",
                token_url=f"{config.base_url}/{config.token_endpoint}",
            )

    @property
    def endpoints(self) -> ResolvedEndpoints | None:
        return self._endpoints

    async def resolve(self) -> ResolvedEndpoints:
        """Return the resolved endpoints, discovering them if needed.

        Raises:
            ConfigError: If OIDC discovery fails
        """
        if self._endpoints is not None:
            return self._endpoints

        configuration = await self._discovery.fetch_configuration(
            self.config.discovery_url
        )
        self._endpoints = ResolvedEndpoints(
            authorization_url=configuration.authorization_endpoint,
            token_url=configuration.token_endpoint,
        )

        logger.info(f"Resolved OIDC endpoints for {self.config.base_url}")
        return self._endpoints
