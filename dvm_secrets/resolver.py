# SPDX-License-Identifier: MIT
# Copyright (c) 2025 DevOpsMaestro contributors

"""Substitution of secret references in configuration content.

Two reference forms are supported:

- Inline: ``${secret:<name>}`` or ``${secret:<name>:<provider>}``. The name
  may not contain ``:`` or ``}``; the provider may not contain ``}``.
- Structured: a ``SecretReference`` (``valueFrom.secretRef`` in YAML).

Example:
    >>> registry = ProviderRegistry()
    >>> registry.register(EnvSecretProvider())
    >>> resolver = SecretResolver(registry)
    >>> try:
    ...     manifest = resolver.resolve_inline(text)
    ... finally:
    ...     resolver.clear_cache()
"""

import re
import threading

from dvm_logging import Logger, create_logger

from .cache import SecretCache
from .exceptions import (
    InvalidReferenceError,
    SecretError,
    SecretLookupError,
    SecretReferenceError,
)
from .models import SecretReference, SecretRequest, ValueSource
from .provider import check_cancelled
from .registry import ProviderRegistry

_logger = create_logger(name="dvm_secrets.resolver")

# Group 1: secret name. Group 2: optional provider.
INLINE_PATTERN = re.compile(r"\$\{secret:([^:}]+)(?::([^}]+))?\}")


class SecretResolver:
    """Resolves secret references against a provider registry.

    Resolved values are cached per ``(provider, name, key)`` so a document that
    mentions the same secret several times costs one backend round-trip.
    Construct one resolver per logical operation and call ``clear_cache()``
    when it finishes.

    Args:
        registry: Registry used to look up providers
        cache: Cache to use; a new ``SecretCache`` with the default TTL if omitted
        logger: Logger for diagnostic events (never receives secret values)
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        cache: SecretCache | None = None,
        logger: Logger | None = None,
    ):
        self.registry = registry
        self.cache = cache if cache is not None else SecretCache()
        self._logger = logger if logger is not None else _logger

    def resolve_inline(self, content: str, cancel: threading.Event | None = None) -> str:
        """Replace every inline reference in ``content`` with its value.

        References are resolved left to right. If any one fails nothing is
        returned: the caller gets fully substituted content or an exception.

        Raises:
            SecretReferenceError: wrapping the first failure
        """
        pieces: list[str] = []
        position = 0
        count = 0

        for match in INLINE_PATTERN.finditer(content):
            name, provider = match.group(1), match.group(2)
            try:
                check_cancelled(cancel)
                value = self._resolve(name, provider, None, {}, cancel)
            except SecretError as e:
                self._logger.debug(
                    "Inline secret reference failed",
                    secret=name,
                    provider=provider or self.registry.default_name,
                )
                raise SecretReferenceError(e) from e

            pieces.append(content[position:match.start()])
            pieces.append(value)
            position = match.end()
            count += 1

        if count == 0:
            return content

        pieces.append(content[position:])
        self._logger.debug("Resolved inline secret references", count=count)
        return "".join(pieces)

    def resolve_reference(
        self,
        reference: SecretReference,
        cancel: threading.Event | None = None,
    ) -> str:
        """Resolve a single structured reference.

        Uses ``reference.provider`` when set, otherwise the registry default.

        Raises:
            SecretLookupError: wrapping InvalidReferenceError when the name is empty,
                or the provider failure
            SecretProviderError: If the provider is unknown or unavailable
            NoDefaultProviderError: If no provider is named and no default is set
        """
        if not reference.name:
            raise SecretLookupError("(empty)", "resolve reference", InvalidReferenceError())

        check_cancelled(cancel)
        return self._resolve(
            reference.name,
            reference.provider,
            reference.key,
            reference.options,
            cancel,
        )

    def resolve_value_source(
        self,
        source: ValueSource,
        cancel: threading.Event | None = None,
    ) -> str:
        """Resolve a ``valueFrom`` source."""
        if source.secret_ref is None:
            raise SecretLookupError(
                "(none)",
                "resolve value source",
                InvalidReferenceError("valueFrom has no secretRef"),
            )
        return self.resolve_reference(source.secret_ref, cancel)

    def validate_secret_references(
        self,
        content: str,
        cancel: threading.Event | None = None,
    ) -> None:
        """Check that every inline reference in ``content`` resolves.

        Values are discarded. Stops at the first failure, which is raised.
        """
        for reference in extract_secret_references(content):
            self.resolve_reference(reference, cancel)

    def clear_cache(self) -> None:
        """Drop every cached value held by this resolver."""
        self.cache.clear()

    def _resolve(
        self,
        name: str,
        provider_name: str | None,
        key: str | None,
        options,
        cancel: threading.Event | None,
    ) -> str:
        if provider_name:
            provider = self.registry.get(provider_name)
        else:
            provider = self.registry.get_default()
            provider_name = provider.name

        # Options can point the same name at a different backend item, and the
        # cache key does not carry them.
        cacheable = not options

        if cacheable:
            cached = self.cache.get(provider_name, name, key)
            if cached is not None:
                self._logger.debug("Secret cache hit", provider=provider_name, secret=name)
                return cached

        request = SecretRequest(name=name, key=key, options=dict(options or {}))
        try:
            value = provider.get_secret(request, cancel)
        except SecretError as e:
            raise SecretLookupError(name, "get", e) from e

        if cacheable:
            self.cache.set(provider_name, name, key, value)
        self._logger.debug("Resolved secret", provider=provider_name, secret=name)
        return value


def has_secret_references(content: str) -> bool:
    """Return True if ``content`` contains at least one inline reference."""
    return INLINE_PATTERN.search(content) is not None


def extract_secret_references(content: str) -> list[SecretReference]:
    """Return a ``SecretReference`` for each inline reference, in order."""
    return [
        SecretReference(name=match.group(1), provider=match.group(2) or None)
        for match in INLINE_PATTERN.finditer(content)
    ]


def convert_name_to_env_var(name: str) -> str:
    """Convert a secret name to environment-variable form (``api.key`` -> ``API_KEY``)."""
    return name.replace("-", "_").replace(".", "_").upper()
