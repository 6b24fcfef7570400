"""Session token persistence.

One opaque token per application identity. Store failures are logged and
swallowed: the in-memory session stays valid for this process and the next
start simply asks the user to sign in again.
"""

import logging
from typing import Protocol

from auth.config import AuthConfig
from clients.vault_client import VaultClient, VaultError

logger = logging.getLogger(__name__)


class TokenStore(Protocol):
    def store_token(self, token: str) -> bool:
        """Persist token, replacing any previous one. Returns False on failure."""
        ...

    def retrieve_token(self) -> str | None:
        ...

    def clear_token(self) -> None:
        ...


class VaultTokenStore:
    """Token kept in Vault KV v2 at '<app prefix>/session', field 'token'."""

    PATH = "session"
    FIELD = "token"

    def __init__(self, vault: VaultClient):
        self._vault = vault

    @classmethod
    def from_config(cls, config: AuthConfig) -> "VaultTokenStore":
        """Connect to Vault (env-configured) under the app's token namespace."""
        return cls(VaultClient(secret_prefix=config.token_namespace))

    def store_token(self, token: str) -> bool:
        try:
            self._vault.write_secret(self.PATH, {self.FIELD: token})
        except VaultError as e:
            logger.error(f"Failed to persist session token: {e}")
            return False
        return True

    def retrieve_token(self) -> str | None:
        try:
            token = self._vault.get_secret(self.PATH, self.FIELD)
        except VaultError as e:
            logger.error(f"Failed to read session token: {e}")
            return None
        return token or None

    def clear_token(self) -> None:
        try:
            self._vault.delete_secret(self.PATH)
        except VaultError as e:
            logger.error(f"Failed to clear session token: {e}")


class MemoryTokenStore:
    """Process-local store. Nothing survives a restart."""

    def __init__(self, token: str | None = None):
        self._token = token

    def store_token(self, token: str) -> bool:
        self._token = token
        return True

    def retrieve_token(self) -> str | None:
        return self._token

    def clear_token(self) -> None:
        self._token = None
