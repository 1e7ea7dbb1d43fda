# SPDX-License-Identifier: MIT
# Copyright (c) 2025 DevOpsMaestro contributors

"""Configuration for building the provider registry and resolver."""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .cache import DEFAULT_CACHE_TTL_SECONDS
from .providers.env import DEFAULT_ENV_PREFIX
from .providers.keychain import DEFAULT_KEYCHAIN_SERVICE

KNOWN_PROVIDERS = ("keychain", "env", "azure")

ENV_DEFAULT_PROVIDER = "DVM_SECRETS_DEFAULT_PROVIDER"
ENV_PROVIDERS = "DVM_SECRETS_PROVIDERS"
ENV_ENV_PREFIX = "DVM_SECRETS_ENV_PREFIX"
ENV_KEYCHAIN_SERVICE = "DVM_SECRETS_KEYCHAIN_SERVICE"
ENV_KEYCHAIN_NOT_FOUND_PHRASES = "DVM_SECRETS_KEYCHAIN_NOT_FOUND_PHRASES"
ENV_CACHE_TTL = "DVM_SECRETS_CACHE_TTL"


class ConfigProvider(ABC):
    """Abstract base class for configuration sources."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        raise NotImplementedError

    @abstractmethod
    def get_int(self, key: str, default: int = 0) -> int:
        """Get an integer configuration value."""
        raise NotImplementedError


class EnvConfigProvider(ConfigProvider):
    """Configuration provider that reads from environment variables."""

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        self._environ = environ if environ is not None else os.environ

    def get(self, key: str, default: Any = None) -> Any:
        return self._environ.get(key, default)

    def get_int(self, key: str, default: int = 0) -> int:
        value = self._environ.get(key)
        if value is None or value == "":
            return default
        try:
            return int(value)
        except ValueError as e:
            raise ValueError(f"{key} must be an integer, got {value!r}") from e


class StaticConfigProvider(ConfigProvider):
    """Configuration provider with static values (useful for tests)."""

    def __init__(self, config: dict[str, Any] | None = None):
        self._config = config if config is not None else {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def get_int(self, key: str, default: int = 0) -> int:
        value = self._config.get(key)
        if value is None:
            return default
        if isinstance(value, int):
            return value
        try:
            return int(value)
        except (ValueError, TypeError) as e:
            raise ValueError(f"{key} must be an integer, got {value!r}") from e

    def set(self, key: str, value: Any) -> None:
        self._config[key] = value


def _split_list(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(item.strip() for item in value.split(",") if item.strip())
    return tuple(str(item).strip() for item in value if str(item).strip())


@dataclass
class SecretsConfig:
    """Settings for the secret resolution subsystem.

    Attributes:
        default_provider: Provider used when a reference names none. None keeps
            the first registered provider.
        enabled_providers: Providers to register, in order
        env_prefix: Prefix for the env provider
        keychain_service: Keychain service namespace
        keychain_not_found_phrases: Extra stderr phrases the keychain provider
            treats as "not found", on top of the built-in ones
        cache_ttl_seconds: Lifetime of cached secret values
        azure_vault_url: Azure Key Vault URL
        azure_vault_name: Azure Key Vault name, used when no URL is set
    """
    default_provider: str | None = None
    enabled_providers: tuple[str, ...] = ("keychain", "env")
    env_prefix: str = DEFAULT_ENV_PREFIX
    keychain_service: str = DEFAULT_KEYCHAIN_SERVICE
    keychain_not_found_phrases: tuple[str, ...] = field(default_factory=tuple)
    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS
    azure_vault_url: str | None = None
    azure_vault_name: str | None = None

    def __post_init__(self) -> None:
        self.validate()

    @property
    def azure_configured(self) -> bool:
        """True if a Key Vault URL or name is set."""
        return bool(self.azure_vault_url or self.azure_vault_name)

    def validate(self) -> None:
        """Raise ValueError if any setting is out of range."""
        unknown = [name for name in self.enabled_providers if name not in KNOWN_PROVIDERS]
        if unknown:
            raise ValueError(
                f"Unknown secret providers: {', '.join(unknown)}. "
                f"Available: {', '.join(KNOWN_PROVIDERS)}"
            )
        if self.default_provider and self.default_provider not in self.enabled_providers:
            raise ValueError(
                f"Default secret provider '{self.default_provider}' is not enabled"
            )
        if self.default_provider == "azure" and not self.azure_configured:
            raise ValueError(
                "Default secret provider 'azure' needs AZURE_KEY_VAULT_URI or AZURE_KEY_VAULT_NAME"
            )
        if self.cache_ttl_seconds <= 0:
            raise ValueError("cache_ttl_seconds must be positive")


def load_secrets_config(provider: ConfigProvider | None = None) -> SecretsConfig:
    """Load ``SecretsConfig`` from a configuration source.

    Args:
        provider: Source of settings; environment variables if omitted

    Returns:
        Validated configuration

    Raises:
        ValueError: If a setting is malformed or inconsistent
    """
    provider = provider if provider is not None else EnvConfigProvider()

    enabled = _split_list(provider.get(ENV_PROVIDERS)) or SecretsConfig.enabled_providers

    return SecretsConfig(
        default_provider=(provider.get(ENV_DEFAULT_PROVIDER) or "").lower() or None,
        enabled_providers=tuple(name.lower() for name in enabled),
        env_prefix=provider.get(ENV_ENV_PREFIX) or DEFAULT_ENV_PREFIX,
        keychain_service=provider.get(ENV_KEYCHAIN_SERVICE) or DEFAULT_KEYCHAIN_SERVICE,
        keychain_not_found_phrases=_split_list(provider.get(ENV_KEYCHAIN_NOT_FOUND_PHRASES)),
        cache_ttl_seconds=provider.get_int(ENV_CACHE_TTL, int(DEFAULT_CACHE_TTL_SECONDS)),
        azure_vault_url=provider.get("AZURE_KEY_VAULT_URI") or None,
        azure_vault_name=provider.get("AZURE_KEY_VAULT_NAME") or None,
    )
