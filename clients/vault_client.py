"""
HashiCorp Vault client for client-side secret storage.

Uses AppRole authentication. Fails fast on missing configuration.
All paths are scoped to the application prefix - no escape to other secrets.
"""

import os
import logging

import hvac
import requests
from hvac.exceptions import Forbidden, InvalidPath, Unauthorized
from hvac.exceptions import VaultError as HvacVaultError

logger = logging.getLogger(__name__)


class VaultError(Exception):
    """Vault read, write, or delete failed."""


class VaultClient:
    """Vault client with AppRole auth, env-based config, and fail-fast init."""

    def __init__(
        self,
        secret_prefix: str,
        vault_addr: str | None = None,
        vault_namespace: str | None = None,
        mount_point: str = "secret",
    ):
        """
        Initialize from arguments, falling back to environment variables.

        Args:
            secret_prefix: Every path is stored under this prefix (the app identity)
            vault_addr: Overrides VAULT_ADDR
            vault_namespace: Overrides VAULT_NAMESPACE
            mount_point: KV v2 mount

        Raises:
            ValueError: Required configuration missing
            PermissionError: AppRole login rejected
        """
        if not secret_prefix:
            raise ValueError("secret_prefix is required")

        self.secret_prefix = secret_prefix.strip("/")
        self.mount_point = mount_point
        self.vault_addr = vault_addr or os.getenv("VAULT_ADDR")
        self.vault_namespace = vault_namespace or os.getenv("VAULT_NAMESPACE")
        self.vault_role_id = os.getenv("VAULT_ROLE_ID")
        self.vault_secret_id = os.getenv("VAULT_SECRET_ID")

        if not self.vault_addr:
            raise ValueError("VAULT_ADDR environment variable is required")

        if not self.vault_role_id or not self.vault_secret_id:
            raise ValueError(
                "VAULT_ROLE_ID and VAULT_SECRET_ID environment variables are required"
            )

        client_kwargs = {"url": self.vault_addr}
        if self.vault_namespace:
            client_kwargs["namespace"] = self.vault_namespace

        self.client = hvac.Client(**client_kwargs)
        self._authenticate_approle()

        if not self.client.is_authenticated():
            raise PermissionError("Vault authentication failed")

        logger.info(f"Vault client initialized: {self.vault_addr}")

    def _authenticate_approle(self) -> None:
        """Authenticate using AppRole credentials."""
        try:
            auth_response = self.client.auth.approle.login(
                role_id=self.vault_role_id,
                secret_id=self.vault_secret_id,
            )
            self.client.token = auth_response["auth"]["client_token"]
            logger.info("AppRole authentication successful")
        except Exception as e:
            logger.error(f"AppRole authentication failed: {e}")
            raise PermissionError(f"AppRole authentication failed: {e}")

    def _full_path(self, path: str) -> str:
        return f"{self.secret_prefix}/{path.strip('/')}"

    def read_secret(self, path: str) -> dict | None:
        """
        Read a KV v2 secret.

        Returns:
            The secret's data dict, or None if nothing is stored at path.

        Raises:
            VaultError: Access denied or Vault unreachable.
        """
        full_path = self._full_path(path)
        try:
            response = self.client.secrets.kv.v2.read_secret_version(
                path=full_path,
                mount_point=self.mount_point,
                raise_on_deleted_version=True,
            )
        except InvalidPath:
            return None
        except (Unauthorized, Forbidden) as e:
            logger.error(f"Access denied to secret {full_path}: {e}")
            raise VaultError(f"Access denied to secret '{full_path}'") from e
        except (HvacVaultError, requests.exceptions.RequestException) as e:
            logger.error(f"Vault read failed for {full_path}: {e}")
            raise VaultError(f"Read failed for '{full_path}'") from e

        return response["data"]["data"]

    def get_secret(self, path: str, field: str) -> str | None:
        """Single field of a secret, or None if the secret or field is absent."""
        data = self.read_secret(path)
        if data is None:
            return None
        return data.get(field)

    def write_secret(self, path: str, data: dict) -> None:
        """
        Create or replace a KV v2 secret.

        Raises:
            VaultError: On any failure.
        """
        full_path = self._full_path(path)
        try:
            self.client.secrets.kv.v2.create_or_update_secret(
                path=full_path,
                secret=data,
                mount_point=self.mount_point,
            )
        except (HvacVaultError, requests.exceptions.RequestException) as e:
            logger.error(f"Vault write failed for {full_path}: {e}")
            raise VaultError(f"Write failed for '{full_path}'") from e

    def delete_secret(self, path: str) -> None:
        """
        Delete every version of a secret. Missing secrets are not an error.

        Raises:
            VaultError: On any other failure.
        """
        full_path = self._full_path(path)
        try:
            self.client.secrets.kv.v2.delete_metadata_and_all_versions(
                path=full_path,
                mount_point=self.mount_point,
            )
        except InvalidPath:
            return
        except (HvacVaultError, requests.exceptions.RequestException) as e:
            logger.error(f"Vault delete failed for {full_path}: {e}")
            raise VaultError(f"Delete failed for '{full_path}'") from e
