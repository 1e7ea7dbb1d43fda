# SPDX-License-Identifier: MIT
# Copyright (c) 2025 DevOpsMaestro contributors

"""Factories for secret providers, the provider registry and resolvers."""

from typing import Any, cast

from dvm_logging import Logger

from .cache import SecretCache
from .config import SecretsConfig, load_secrets_config
from .exceptions import SecretProviderError
from .provider import SecretProvider
from .providers import (
    DEFAULT_NOT_FOUND_PHRASES,
    AzureKeyVaultSecretProvider,
    EnvSecretProvider,
    KeychainSecretProvider,
    MockSecretProvider,
)
from .registry import ProviderRegistry
from .resolver import SecretResolver


def create_secret_provider(provider_type: str, **kwargs: Any) -> SecretProvider:
    """Create a secret provider by type.

    Args:
        provider_type: "env", "keychain", "azure" or "mock"
        **kwargs: Provider-specific configuration

    Returns:
        SecretProvider instance

    Raises:
        SecretProviderError: If provider_type is unknown

    Example:
        >>> provider = create_secret_provider("env", prefix="MYAPP_SECRET_")
    """
    providers: dict[str, type] = {
        "env": EnvSecretProvider,
        "keychain": KeychainSecretProvider,
        "azure": AzureKeyVaultSecretProvider,
        "mock": MockSecretProvider,
    }

    if provider_type not in providers:
        raise SecretProviderError(
            provider_type,
            "create",
            ValueError(f"Unknown provider type. Available: {', '.join(providers.keys())}"),
        )

    provider_class = providers[provider_type]
    return cast(SecretProvider, provider_class(**kwargs))


def _provider_kwargs(provider_type: str, config: SecretsConfig) -> dict[str, Any]:
    if provider_type == "env":
        return {"prefix": config.env_prefix}
    if provider_type == "keychain":
        return {
            "service": config.keychain_service,
            "not_found_phrases": DEFAULT_NOT_FOUND_PHRASES + config.keychain_not_found_phrases,
        }
    if provider_type == "azure":
        return {"vault_url": config.azure_vault_url, "vault_name": config.azure_vault_name}
    return {}


def create_provider_registry(
    config: SecretsConfig | None = None,
    logger: Logger | None = None,
) -> ProviderRegistry:
    """Build a registry holding every enabled provider.

    Providers available in this environment are registered first, in
    ``config.enabled_providers`` order, so the first available one becomes the
    default unless ``config.default_provider`` is set. Unavailable providers
    are registered after them so that naming one explicitly reports "not
    available" rather than "not found". The Azure provider is skipped when no
    vault is configured.

    Args:
        config: Settings; loaded from the environment if omitted
        logger: Logger handed to the registry

    Returns:
        Populated ProviderRegistry
    """
    config = config if config is not None else load_secrets_config()
    registry = ProviderRegistry(logger=logger)

    providers = [
        create_secret_provider(provider_type, **_provider_kwargs(provider_type, config))
        for provider_type in config.enabled_providers
        if provider_type != "azure" or config.azure_configured
    ]

    available = [provider for provider in providers if provider.is_available()]
    for provider in available + [p for p in providers if p not in available]:
        registry.register(provider)

    if config.default_provider:
        registry.set_default(config.default_provider)

    return registry


def create_resolver(
    config: SecretsConfig | None = None,
    registry: ProviderRegistry | None = None,
    logger: Logger | None = None,
) -> SecretResolver:
    """Build a resolver with a fresh cache.

    Args:
        config: Settings; loaded from the environment if omitted
        registry: Registry to use; built from ``config`` if omitted
        logger: Logger for the resolver (and the registry when one is built)
    """
    config = config if config is not None else load_secrets_config()
    if registry is None:
        registry = create_provider_registry(config, logger=logger)
    cache = SecretCache(ttl_seconds=config.cache_ttl_seconds)
    return SecretResolver(registry, cache=cache, logger=logger)
