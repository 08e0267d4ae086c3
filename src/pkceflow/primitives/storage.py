"""Session-scoped storage for the pending authorization attempt."""

from __future__ import annotations

from typing import Protocol

VERIFIER_STORAGE_KEY = "pkceflow-pkce-verifier-code"
NONCE_STORAGE_KEY = "pkceflow-auth"


class SessionStore(Protocol):
    """Key/value storage scoped to one user session.

    Holds the pending code verifier and nonce between the outbound redirect
    and the provider's redirect back.
    """

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemorySessionStore:
    """Dictionary-backed session store for a single process."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._values
