# SPDX-License-Identifier: MIT
# Copyright (c) 2025 DevOpsMaestro contributors

"""Registry of secret providers with default-provider tracking."""

from __future__ import annotations

from dvm_logging import Logger, create_logger

from ._locking import ReadWriteLock
from .exceptions import (
    NoDefaultProviderError,
    ProviderNotAvailableError,
    ProviderNotFoundError,
    SecretProviderError,
)
from .provider import SecretProvider

_logger = create_logger(name="dvm_secrets.registry")


class ProviderRegistry:
    """Holds registered providers by name and tracks the default one.

    Construct one registry at startup, register each provider, and pass the
    registry to every resolver. The first provider registered becomes the
    default unless ``set_default`` says otherwise.

    Availability is checked on every ``get``/``get_default`` call, never cached.
    All operations are safe under concurrent access.
    """

    def __init__(self, logger: Logger | None = None):
        self._providers: dict[str, SecretProvider] = {}
        self._default: str | None = None
        self._lock = ReadWriteLock()
        self._logger = logger if logger is not None else _logger

    def register(self, provider: SecretProvider) -> None:
        """Add a provider, replacing any provider already registered under its name."""
        name = provider.name
        with self._lock.write_lock():
            replaced = name in self._providers
            self._providers[name] = provider
            if self._default is None:
                self._default = name
            is_default = self._default == name
        self._logger.debug(
            "Registered secret provider",
            provider=name,
            replaced=replaced,
            default=is_default,
        )

    def unregister(self, name: str) -> None:
        """Remove a provider. Clears the default if it pointed at ``name``."""
        with self._lock.write_lock():
            self._providers.pop(name, None)
            if self._default == name:
                self._default = None
        self._logger.debug("Unregistered secret provider", provider=name)

    def _usable(self, name: str, operation: str) -> SecretProvider:
        provider = self._providers.get(name)
        if provider is None:
            raise SecretProviderError(name, operation, ProviderNotFoundError())
        if not provider.is_available():
            raise SecretProviderError(name, operation, ProviderNotAvailableError())
        return provider

    def get(self, name: str) -> SecretProvider:
        """Return a registered, currently available provider.

        Raises:
            SecretProviderError: wrapping ProviderNotFoundError or ProviderNotAvailableError
        """
        with self._lock.read_lock():
            return self._usable(name, "get")

    def get_default(self) -> SecretProvider:
        """Return the default provider.

        Raises:
            NoDefaultProviderError: If no default is set
            SecretProviderError: wrapping ProviderNotFoundError or ProviderNotAvailableError
        """
        with self._lock.read_lock():
            if self._default is None:
                raise NoDefaultProviderError()
            return self._usable(self._default, "get default")

    def set_default(self, name: str) -> None:
        """Make ``name`` the default provider.

        Raises:
            SecretProviderError: wrapping ProviderNotFoundError if ``name`` is not registered
        """
        with self._lock.write_lock():
            if name not in self._providers:
                raise SecretProviderError(name, "set default", ProviderNotFoundError())
            self._default = name
        self._logger.debug("Set default secret provider", provider=name)

    @property
    def default_name(self) -> str | None:
        """Name of the default provider, or None if unset."""
        with self._lock.read_lock():
            return self._default

    def list(self) -> list[str]:
        """Names of all registered providers, in registration order."""
        with self._lock.read_lock():
            return list(self._providers)

    def list_available(self) -> list[str]:
        """Names of registered providers that are available right now."""
        with self._lock.read_lock():
            return [name for name, provider in self._providers.items() if provider.is_available()]

    def __contains__(self, name: object) -> bool:
        with self._lock.read_lock():
            return name in self._providers

    def __len__(self) -> int:
        with self._lock.read_lock():
            return len(self._providers)
