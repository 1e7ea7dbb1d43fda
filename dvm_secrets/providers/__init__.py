# SPDX-License-Identifier: MIT
# Copyright (c) 2025 DevOpsMaestro contributors

"""Concrete secret provider implementations."""

from .azure_keyvault import AzureKeyVaultSecretProvider
from .env import DEFAULT_ENV_PREFIX, EnvSecretProvider
from .keychain import (
    DEFAULT_KEYCHAIN_SERVICE,
    DEFAULT_NOT_FOUND_EXIT_CODES,
    DEFAULT_NOT_FOUND_PHRASES,
    KeychainSecretProvider,
)
from .mock import MockCall, MockSecretProvider

__all__ = [
    "AzureKeyVaultSecretProvider",
    "DEFAULT_ENV_PREFIX",
    "DEFAULT_KEYCHAIN_SERVICE",
    "DEFAULT_NOT_FOUND_EXIT_CODES",
    "DEFAULT_NOT_FOUND_PHRASES",
    "EnvSecretProvider",
    "KeychainSecretProvider",
    "MockCall",
    "MockSecretProvider",
]
