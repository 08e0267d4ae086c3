import logging
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from pkceflow.models.errors import ConfigError
from pkceflow.primitives.discovery import OIDCDiscovery

DISCOVERY_URL = "https://idp.example.com/.well-known/openid-configuration"


class TestOIDCDiscovery:
    def setup_method(self):
        self.http_client = AsyncMock()
        self.discovery = OIDCDiscovery(self.http_client)

    def _response(self, status_code=200, payload=None, json_error=None):
        response = MagicMock()
        response.status_code = status_code
        response.is_success = 200 <= status_code < 300
        if json_error:
            response.json.side_effect = json_error
        else:
            response.json.return_value = payload
        return response

    async def test_successful_discovery(self):
        # Arrange
        self.http_client.get.return_value = self._response(
            payload={
                "issuer": "https://idp.example.com",
                "authorization_endpoint": "https://idp/auth",
                "token_endpoint": "https://idp/token",
            }
        )

        # Act
        configuration = await self.discovery.fetch_configuration(DISCOVERY_URL)

        # Assert
        assert configuration.authorization_endpoint == "https://idp/auth"
        assert configuration.token_endpoint == "https://idp/token"
        self.http_client.get.assert_awaited_once_with(DISCOVERY_URL)

    async def test_network_error_raises_config_error(self):
        self.http_client.get.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(ConfigError, match="Failed to load OIDC configuration"):
            await self.discovery.fetch_configuration(DISCOVERY_URL)

    async def test_bad_status_raises_config_error(self):
        self.http_client.get.return_value = self._response(status_code=503)

        with pytest.raises(ConfigError, match="Bad response"):
            await self.discovery.fetch_configuration(DISCOVERY_URL)

    async def test_unparseable_body_raises_config_error(self):
        self.http_client.get.return_value = self._response(
            json_error=ValueError("Expecting value")
        )

        with pytest.raises(ConfigError, match="Failed to parse"):
            await self.discovery.fetch_configuration(DISCOVERY_URL)

    async def test_missing_endpoint_raises_config_error(self):
        self.http_client.get.return_value = self._response(
            payload={"authorization_endpoint": "https://idp/auth"}
        )

        with pytest.raises(ConfigError, match="missing endpoint fields"):
            await self.discovery.fetch_configuration(DISCOVERY_URL)

    async def test_missing_s256_support_logs_warning(self, caplog):
        # Arrange
        self.http_client.get.return_value = self._response(
            payload={
                "authorization_endpoint": "https://idp/auth",
                "token_endpoint": "https://idp/token",
                "code_challenge_methods_supported": ["plain"],
            }
        )

        # Act
        with caplog.at_level(logging.WARNING, logger="pkceflow.primitives.discovery"):
            configuration = await self.discovery.fetch_configuration(DISCOVERY_URL)

        # Assert
        assert configuration.token_endpoint == "https://idp/token"
        assert "S256" in caplog.text

    async def test_advertised_s256_logs_nothing(self, caplog):
        self.http_client.get.return_value = self._response(
            payload={
                "authorization_endpoint": "https://idp/auth",
                "token_endpoint": "https://idp/token",
                "code_challenge_methods_supported": ["plain", "S256"],
            }
        )

        with caplog.at_level(logging.WARNING, logger="pkceflow.primitives.discovery"):
            await self.discovery.fetch_configuration(DISCOVERY_URL)

        assert caplog.records == []
