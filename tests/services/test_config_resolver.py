from unittest.mock import AsyncMock

import pytest

from pkceflow.models.config import AuthConfig, OpenIDConfiguration
from pkceflow.models.errors import ConfigError
from pkceflow.services.config import ConfigResolver


class TestConfigResolver:
    async def test_static_endpoints_need_no_discovery(self):
        # Arrange
        discovery = AsyncMock()
        config = AuthConfig(
            client_id="app",
            base_url="https://gitlab.example.com/",
            auth_endpoint="/oauth/authorize",
            token_endpoint="oauth/token",
        )
        resolver = ConfigResolver(config, discovery)

        # Act
        endpoints = await resolver.resolve()

        # Assert
        assert endpoints.authorization_url == "https://gitlab.example.com/oauth/authorize"
        assert endpoints.token_url == "https://gitlab.example.com/oauth/token"
        discovery.fetch_configuration.assert_not_called()

    async def test_oidc_endpoints_resolved_once(self):
        # Arrange
        discovery = AsyncMock()
        discovery.fetch_configuration.return_value = OpenIDConfiguration(
            authorization_endpoint="https://idp/auth", token_endpoint="https://idp/token"
        )
        config = AuthConfig(client_id="app", base_url="https://idp", use_oidc=True)
        resolver = ConfigResolver(config, discovery)
        assert resolver.endpoints is None

        # Act
        first = await resolver.resolve()
        second = await resolver.resolve()

        # Assert
        assert first is second
        assert first.authorization_url == "https://idp/auth"
        discovery.fetch_configuration.assert_awaited_once_with(
            "https://idp/.well-known/openid-configuration"
        )

    async def test_failed_discovery_is_retried_on_next_resolve(self):
        # Arrange
        discovery = AsyncMock()
        discovery.fetch_configuration.side_effect = [
            ConfigError("Bad response while getting OIDC configuration: 500"),
            OpenIDConfiguration(
                authorization_endpoint="https://idp/auth", token_endpoint="https://idp/token"
            ),
        ]
        config = AuthConfig(client_id="app", base_url="https://idp", use_oidc=True)
        resolver = ConfigResolver(config, discovery)

        # Act & Assert
        with pytest.raises(ConfigError):
            await resolver.resolve()
        endpoints = await resolver.resolve()
        assert endpoints.token_url == "https://idp/token"
