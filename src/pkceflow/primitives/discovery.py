"""OpenID Connect discovery primitive.

Fetches a provider's ``/.well-known/openid-configuration`` document to find
its authorization and token endpoints.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from pkceflow.models.config import OpenIDConfiguration
from pkceflow.models.errors import ConfigError

logger = logging.getLogger(__name__)


class OIDCDiscovery:
    """Handles OpenID Connect provider discovery."""

    def __init__(self, http_client: httpx.AsyncClient):
        self._http_client = http_client

    async def fetch_configuration(self, discovery_url: str) -> OpenIDConfiguration:
        """Fetch and validate a discovery document.

        Args:
            discovery_url: Full URL of the openid-configuration document

        Returns:
            OpenIDConfiguration: Parsed discovery document

        Raises:
            ConfigError: If the request fails, the response is not successful,
                the body is not JSON or endpoint fields are missing
        """
        logger.debug(f"Fetching OIDC configuration from: {discovery_url}")

        try:
            response = await self._http_client.get(discovery_url)
        except httpx.HTTPError as e:
            raise ConfigError(f"Failed to load OIDC configuration: {e}") from e

        if not response.is_success:
            raise ConfigError(
                "Bad response while getting OIDC configuration: "
                f"{response.status_code}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ConfigError(f"Failed to parse OIDC configuration JSON: {e}") from e

        try:
            configuration = OpenIDConfiguration.model_validate(payload)
        except ValidationError as e:
            raise ConfigError(f"OIDC configuration missing endpoint fields: {e}") from e

        methods = configuration.code_challenge_methods_supported
        if methods is not None and "S256" not in methods:
            logger.warning(
                f"Provider does not advertise S256 PKCE support: {methods}"
            )

        logger.debug(
            f"Discovered authorization endpoint {configuration.authorization_endpoint}"
            f" and token endpoint {configuration.token_endpoint}"
        )
        return configuration
