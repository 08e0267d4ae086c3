"""Single-use nonce carried in the OAuth state parameter.

The two legs of a redirect flow share no session cookie, so this nonce is
the only CSRF defense. It validates at most once.
"""

from __future__ import annotations

import logging
import secrets
import uuid

from pkceflow.primitives.storage import NONCE_STORAGE_KEY, SessionStore

logger = logging.getLogger(__name__)


class NonceManager:
    """Issues and validates the pending nonce for one session."""

    def __init__(self, store: SessionStore):
        self._store = store

    def create_nonce(self) -> str:
        """Issue a new nonce, replacing any pending one."""
        nonce = str(uuid.uuid4())
        self._store.set(NONCE_STORAGE_KEY, nonce)
        return nonce

    def validate_nonce(self, candidate: str | None) -> bool:
        """Check a candidate against the pending nonce.

        The pending nonce is cleared on every call, so a second check with
        the same candidate fails even if the first succeeded.
        """
        expected = self._store.get(NONCE_STORAGE_KEY)
        self._store.delete(NONCE_STORAGE_KEY)

        if expected is None or candidate is None:
            logger.warning("Nonce validation failed: no pending nonce or no candidate")
            return False

        return secrets.compare_digest(expected.encode(), candidate.encode())

    def discard(self) -> None:
        self._store.delete(NONCE_STORAGE_KEY)
