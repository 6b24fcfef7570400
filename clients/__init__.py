# Infrastructure clients. AuthApiClient lives in clients.api_client.
from clients.vault_client import VaultClient, VaultError
