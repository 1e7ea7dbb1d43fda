# SPDX-License-Identifier: MIT
# Copyright (c) 2025 DevOpsMaestro contributors

"""Secret resolution for DevOpsMaestro configuration.

Resolves ``${secret:name}`` / ``${secret:name:provider}`` placeholders and
``valueFrom.secretRef`` records against pluggable backends (environment
variables, the macOS Keychain, Azure Key Vault) right before configuration is
applied, so manifests in source control never hold literal secrets.

Example:
    >>> from dvm_secrets import create_resolver
    >>> resolver = create_resolver()
    >>> try:
    ...     manifest = resolver.resolve_inline("token: ${secret:github-token}")
    ... finally:
    ...     resolver.clear_cache()
"""

from .cache import DEFAULT_CACHE_TTL_SECONDS, SecretCache
from .command import CommandFailedError, CommandResult, CommandRunner, SubprocessCommandRunner
from .config import (
    ConfigProvider,
    EnvConfigProvider,
    SecretsConfig,
    StaticConfigProvider,
    load_secrets_config,
)
from .exceptions import (
    InvalidReferenceError,
    NoDefaultProviderError,
    ProviderNotAvailableError,
    ProviderNotFoundError,
    SecretError,
    SecretLookupError,
    SecretNotFoundError,
    SecretOperationCancelledError,
    SecretProviderError,
    SecretReferenceError,
    is_cancelled,
    is_invalid_reference,
    is_no_default_provider,
    is_not_found,
    is_provider_not_available,
    is_provider_not_found,
)
from .factory import create_provider_registry, create_resolver, create_secret_provider
from .models import SecretReference, SecretRequest, ValueSource
from .provider import SecretProvider, check_cancelled
from .providers import (
    DEFAULT_ENV_PREFIX,
    DEFAULT_KEYCHAIN_SERVICE,
    AzureKeyVaultSecretProvider,
    EnvSecretProvider,
    KeychainSecretProvider,
    MockSecretProvider,
)
from .registry import ProviderRegistry
from .resolver import (
    INLINE_PATTERN,
    SecretResolver,
    convert_name_to_env_var,
    extract_secret_references,
    has_secret_references,
)

__all__ = [
    # Providers
    "SecretProvider",
    "EnvSecretProvider",
    "KeychainSecretProvider",
    "AzureKeyVaultSecretProvider",
    "MockSecretProvider",
    "DEFAULT_ENV_PREFIX",
    "DEFAULT_KEYCHAIN_SERVICE",
    "check_cancelled",
    # Command execution
    "CommandRunner",
    "CommandResult",
    "CommandFailedError",
    "SubprocessCommandRunner",
    # Models
    "SecretRequest",
    "SecretReference",
    "ValueSource",
    # Registry, cache, resolver
    "ProviderRegistry",
    "SecretCache",
    "DEFAULT_CACHE_TTL_SECONDS",
    "SecretResolver",
    "INLINE_PATTERN",
    "has_secret_references",
    "extract_secret_references",
    "convert_name_to_env_var",
    # Configuration and factories
    "ConfigProvider",
    "EnvConfigProvider",
    "StaticConfigProvider",
    "SecretsConfig",
    "load_secrets_config",
    "create_secret_provider",
    "create_provider_registry",
    "create_resolver",
    # Errors
    "SecretError",
    "SecretNotFoundError",
    "ProviderNotFoundError",
    "InvalidReferenceError",
    "ProviderNotAvailableError",
    "NoDefaultProviderError",
    "SecretOperationCancelledError",
    "SecretProviderError",
    "SecretLookupError",
    "SecretReferenceError",
    "is_not_found",
    "is_provider_not_found",
    "is_provider_not_available",
    "is_invalid_reference",
    "is_no_default_provider",
    "is_cancelled",
]

__version__ = "0.1.0"
