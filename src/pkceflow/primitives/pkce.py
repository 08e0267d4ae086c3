"""PKCE (Proof Key for Code Exchange) primitives.

Implements RFC 7636 code verifier generation and S256 challenge derivation
to prevent authorization code interception attacks.
"""

from __future__ import annotations

import base64
import hashlib
import secrets
import string

from pkceflow.models.errors import PKCEError
from pkceflow.models.security import PKCEParameters
from pkceflow.primitives.storage import VERIFIER_STORAGE_KEY, SessionStore

# "_" and "~" are left out so the alphabet length divides 256 and every
# random byte maps onto it without bias.
VERIFIER_ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits + "-."
VERIFIER_LENGTH = 128


class PKCEManager:
    """Generates PKCE parameters and holds the pending verifier.

    Only one authorization attempt is in flight per session, so the verifier
    lives in a single slot of the session store and each new attempt
    overwrites it.
    """

    def __init__(self, store: SessionStore):
        self._store = store

    def create_parameters(self) -> PKCEParameters:
        """Generate a new verifier, store it and derive its challenge.

        Returns:
            PKCEParameters: Parameters for the authorization request

        Raises:
            PKCEError: If parameter generation fails
        """
        try:
            code_verifier = self.generate_verifier()
            self._store.set(VERIFIER_STORAGE_KEY, code_verifier)

            return PKCEParameters(
                code_verifier=code_verifier,
                code_challenge=self.challenge(code_verifier),
                code_challenge_method="S256",
            )

        except Exception as e:
            raise PKCEError(f"Failed to generate PKCE parameters: {e}") from e

    def get_verifier(self) -> str | None:
        return self._store.get(VERIFIER_STORAGE_KEY)

    def clear_verifier(self) -> None:
        self._store.delete(VERIFIER_STORAGE_KEY)

    def pop_verifier(self) -> str | None:
        """Read the pending verifier and clear it."""
        verifier = self.get_verifier()
        self.clear_verifier()
        return verifier

    @staticmethod
    def generate_verifier() -> str:
        """Generate a cryptographically secure code verifier.

        RFC 7636 Section 4.1: 43-128 characters from the unreserved set.
        Each of 128 random bytes selects one character.

        Returns:
            A 128-character code verifier
        """
        return "".join(
            VERIFIER_ALPHABET[b % len(VERIFIER_ALPHABET)]
            for b in secrets.token_bytes(VERIFIER_LENGTH)
        )

    @staticmethod
    def challenge(code_verifier: str) -> str:
        """Derive the S256 code challenge.

        RFC 7636 Section 4.2: BASE64URL-ENCODE(SHA256(ASCII(code_verifier)))

        Args:
            code_verifier: The code verifier to hash

        Returns:
            Unpadded base64url SHA256 digest (always 43 characters)
        """
        digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
        return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")
