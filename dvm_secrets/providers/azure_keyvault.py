# SPDX-License-Identifier: MIT
# Copyright (c) 2025 DevOpsMaestro contributors

"""Azure Key Vault secret provider."""

import json
import os
import threading

from dvm_logging import Logger, create_logger

from ..exceptions import (
    ProviderNotAvailableError,
    SecretNotFoundError,
    SecretProviderError,
)
from ..models import SecretRequest
from ..provider import SecretProvider, check_cancelled

_logger = create_logger(name="dvm_secrets.azurekeyvault")


def resolve_vault_url(vault_url: str | None = None, vault_name: str | None = None) -> str | None:
    """Work out the vault URL from arguments or the environment.

    Precedence: ``vault_url``, ``AZURE_KEY_VAULT_URI``, ``vault_name``,
    ``AZURE_KEY_VAULT_NAME``. Returns None when nothing is configured.
    """
    if vault_url:
        return vault_url

    env_uri = os.getenv("AZURE_KEY_VAULT_URI")
    if env_uri:
        return env_uri

    if vault_name:
        return f"https://{vault_name}.vault.azure.net/"

    env_name = os.getenv("AZURE_KEY_VAULT_NAME")
    if env_name:
        return f"https://{env_name}.vault.azure.net/"

    return None


class AzureKeyVaultSecretProvider(SecretProvider):
    """Secret provider that reads secrets from Azure Key Vault.

    Authentication goes through ``DefaultAzureCredential`` (managed identity,
    ``AZURE_CLIENT_*`` environment variables, or the Azure CLI login). The
    SDK client is created on first use so that registering the provider costs
    nothing when it is never referenced.

    Secret names map directly to Key Vault secret names. When the request has
    a ``key``, the secret value is parsed as a JSON object and that field is
    returned. ``options["version"]`` pins a secret version.

    Requires the ``azure`` extra: ``pip install dvm-secrets[azure]``.

    Args:
        vault_url: Full vault URL (e.g. ``https://my-vault.vault.azure.net/``)
        vault_name: Vault name, used when no URL is given
        logger: Logger for diagnostic events
    """

    def __init__(
        self,
        vault_url: str | None = None,
        vault_name: str | None = None,
        logger: Logger | None = None,
    ):
        self.vault_url = resolve_vault_url(vault_url, vault_name)
        self._client = None
        self._credential = None
        self._client_lock = threading.Lock()
        self._logger = logger if logger is not None else _logger

    @property
    def name(self) -> str:
        return "azure"

    def is_available(self) -> bool:
        if not self.vault_url:
            return False
        try:
            import azure.identity  # noqa: F401
            import azure.keyvault.secrets  # noqa: F401
        except ImportError:
            return False
        return True

    def _get_client(self):
        with self._client_lock:
            if self._client is not None:
                return self._client

            from azure.core.exceptions import AzureError, ClientAuthenticationError
            from azure.identity import DefaultAzureCredential
            from azure.keyvault.secrets import SecretClient

            try:
                self._credential = DefaultAzureCredential()
                self._client = SecretClient(vault_url=self.vault_url, credential=self._credential)
            except ClientAuthenticationError as e:
                raise SecretProviderError(self.name, "authenticate", e) from e
            except ValueError as e:
                raise SecretProviderError(self.name, "connect", e) from e
            except AzureError as e:
                raise SecretProviderError(self.name, "connect", e) from e

            self._logger.info("Initialized Azure Key Vault provider", vault_url=self.vault_url)
            return self._client

    def get_secret(self, request: SecretRequest, cancel: threading.Event | None = None) -> str:
        if not self.is_available():
            raise ProviderNotAvailableError()

        check_cancelled(cancel)

        from azure.core.exceptions import AzureError, ResourceNotFoundError

        client = self._get_client()
        version = request.options.get("version") or None

        try:
            secret = client.get_secret(request.name, version=version)
        except ResourceNotFoundError as e:
            raise SecretNotFoundError() from e
        except AzureError as e:
            raise SecretProviderError(self.name, "get_secret", e) from e

        if secret.value is None:
            raise SecretNotFoundError()

        if not request.key:
            return secret.value

        return self._extract_key(secret.value, request.key)

    def _extract_key(self, raw: str, key: str) -> str:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            # The decode error keeps the raw value in .doc, so it is not chained
            raise SecretProviderError(
                self.name, "extract key", ValueError("secret value is not a JSON object")
            ) from None

        if not isinstance(data, dict) or key not in data:
            raise SecretNotFoundError()

        value = data[key]
        return value if isinstance(value, str) else json.dumps(value)

    def close(self) -> None:
        """Release the SDK client and credential."""
        with self._client_lock:
            for resource in (self._client, self._credential):
                close_method = getattr(resource, "close", None)
                if callable(close_method):
                    close_method()
            self._client = None
            self._credential = None
