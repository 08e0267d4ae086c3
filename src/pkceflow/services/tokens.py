"""Token exchange service.

Implements the RFC 6749 authorization code token request with the PKCE
code_verifier (RFC 7636).
"""

from __future__ import annotations

import logging

import httpx

from pkceflow.models.config import FORM_CONTENT_TYPE
from pkceflow.models.errors import TokenExchangeError
from pkceflow.models.tokens import TokenRequest, TokenResult

logger = logging.getLogger(__name__)


class OAuth2TokenManager:
    """Exchanges authorization codes for access tokens.

    The body is form-encoded or JSON depending on the content type the
    provider expects. Non-success responses are treated as failures.
    """

    def __init__(self, http_client: httpx.AsyncClient, content_type: str):
        self._http_client = http_client
        self.content_type = content_type

    @property
    def uses_form_encoding(self) -> bool:
        return self.content_type.startswith(FORM_CONTENT_TYPE)

    async def exchange_code_for_token(self, token_request: TokenRequest) -> TokenResult:
        """Exchange an authorization code for an access token.

        Args:
            token_request: Token exchange request parameters

        Returns:
            TokenResult: Access token and the full provider response

        Raises:
            TokenExchangeError: On network errors, non-success responses,
                unparseable bodies or a missing access_token
        """
        logger.debug(f"Exchanging authorization code at {token_request.token_endpoint}")

        headers = {
            "Content-Type": self.content_type,
            "Accept": "application/json",
        }
        body = token_request.to_body()

        logger.debug(
            f"Token request: grant_type={body['grant_type']}, "
            f"client_id={body['client_id']}, "
            f"encoding={'form' if self.uses_form_encoding else 'json'}"
        )

        try:
            if self.uses_form_encoding:
                response = await self._http_client.post(
                    token_request.token_endpoint, data=body, headers=headers
                )
            else:
                response = await self._http_client.post(
                    token_request.token_endpoint, json=body, headers=headers
                )
        except httpx.HTTPError as e:
            raise TokenExchangeError(f"HTTP error during token exchange: {e}") from e

        return self._parse_token_response(response)

    def _parse_token_response(self, response: httpx.Response) -> TokenResult:
        """Parse a token endpoint response (RFC 6749 Section 5).

        Raises:
            TokenExchangeError: If the response is an error or malformed
        """
        try:
            response_data = response.json()
        except ValueError as e:
            raise TokenExchangeError(
                f"Invalid token response format ({response.status_code}): {e}"
            ) from e

        if not response.is_success:
            error_code = "unknown_error"
            error_description = "No description provided"
            if isinstance(response_data, dict):
                error_code = response_data.get("error", error_code)
                error_description = response_data.get(
                    "error_description", error_description
                )

            logger.warning(
                f"Token exchange failed with {response.status_code}: "
                f"{error_code} - {error_description}"
            )
            raise TokenExchangeError(
                f"Token exchange failed with {response.status_code}: "
                f"{error_code}: {error_description}"
            )

        if not isinstance(response_data, dict) or not response_data.get("access_token"):
            raise TokenExchangeError("Token response missing required access_token")

        logger.info("Token exchange successful")
        return TokenResult.from_response(response_data)
