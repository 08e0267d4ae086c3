from pkceflow.primitives.nonce import NonceManager
from pkceflow.primitives.storage import NONCE_STORAGE_KEY, InMemorySessionStore


class TestNonceManager:
    def setup_method(self):
        self.store = InMemorySessionStore()
        self.nonce_manager = NonceManager(self.store)

    def test_nonce_validates_exactly_once(self) -> None:
        # Arrange
        nonce = self.nonce_manager.create_nonce()

        # Act & Assert
        assert self.nonce_manager.validate_nonce(nonce) is True
        assert self.nonce_manager.validate_nonce(nonce) is False

    def test_mismatch_still_invalidates_pending_nonce(self) -> None:
        # Arrange
        nonce = self.nonce_manager.create_nonce()

        # Act
        assert self.nonce_manager.validate_nonce("forged") is False

        # Assert - the genuine nonce is no longer accepted
        assert self.nonce_manager.validate_nonce(nonce) is False
        assert NONCE_STORAGE_KEY not in self.store

    def test_new_nonce_replaces_pending_one(self) -> None:
        first = self.nonce_manager.create_nonce()
        second = self.nonce_manager.create_nonce()

        assert first != second
        assert self.nonce_manager.validate_nonce(first) is False

    def test_nothing_pending_fails(self) -> None:
        assert self.nonce_manager.validate_nonce("anything") is False
        assert self.nonce_manager.validate_nonce(None) is False

    def test_non_ascii_candidate_fails_cleanly(self) -> None:
        # Arrange
        self.nonce_manager.create_nonce()

        # Act & Assert
        assert self.nonce_manager.validate_nonce("évil") is False
        assert NONCE_STORAGE_KEY not in self.store
