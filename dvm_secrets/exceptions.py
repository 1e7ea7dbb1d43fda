# SPDX-License-Identifier: MIT
# Copyright (c) 2025 DevOpsMaestro contributors

"""Exceptions for secret resolution.

Two families live here. Kind errors (``SecretNotFoundError`` and friends)
say *what* went wrong. Context wrappers (``SecretProviderError``,
``SecretLookupError``, ``SecretReferenceError``) say *where*: which provider,
which secret, which operation. Wrappers keep the underlying error in
``cause`` and the ``is_*`` predicates look through any number of them.

No message built here ever contains a resolved secret value.
"""


class SecretError(Exception):
    """Base exception for secret management errors."""

    default_message = "secret error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class SecretNotFoundError(SecretError):
    """Raised when a requested secret (or key within it) does not exist."""

    default_message = "secret not found"


class ProviderNotFoundError(SecretError):
    """Raised when the requested provider is not registered."""

    default_message = "secret provider not found"


class InvalidReferenceError(SecretError):
    """Raised when a secret reference is malformed or has an empty name."""

    default_message = "invalid secret reference"


class ProviderNotAvailableError(SecretError):
    """Raised when a provider is registered but unusable in this environment."""

    default_message = "secret provider not available in this environment"


class NoDefaultProviderError(SecretError):
    """Raised when no default provider has been configured."""

    default_message = "no default secret provider configured"


class SecretOperationCancelledError(SecretError):
    """Raised when the caller's cancellation token was set."""

    default_message = "secret operation cancelled"


KIND_ERRORS = (
    SecretNotFoundError,
    ProviderNotFoundError,
    InvalidReferenceError,
    ProviderNotAvailableError,
    NoDefaultProviderError,
    SecretOperationCancelledError,
)


class _ContextError(SecretError):
    """Base for errors that wrap another error with operation context."""

    def __init__(self, message: str, cause: BaseException):
        super().__init__(message)
        self.cause = cause

    @property
    def kind(self) -> type[SecretError] | None:
        """The innermost kind error class, or None for an unclassified failure."""
        error = _kind_of(self)
        return type(error) if error is not None else None


class SecretProviderError(_ContextError):
    """Raised when a provider fails, with the provider name and operation."""

    def __init__(self, provider: str, operation: str, cause: BaseException):
        super().__init__(f'secret provider "{provider}" {operation}: {cause}', cause)
        self.provider = provider
        self.operation = operation


class SecretLookupError(_ContextError):
    """Raised when resolving a named secret fails."""

    def __init__(self, name: str, operation: str, cause: BaseException):
        super().__init__(f'secret "{name}" {operation}: {cause}', cause)
        self.name = name
        self.operation = operation


class SecretReferenceError(_ContextError):
    """Raised when an inline ``${secret:...}`` reference cannot be resolved.

    The matched pattern text is deliberately not stored.
    """

    def __init__(self, cause: BaseException):
        super().__init__(f"failed to resolve secret reference: {cause}", cause)


def _kind_of(error: BaseException | None) -> BaseException | None:
    seen: set[int] = set()
    while error is not None and id(error) not in seen:
        seen.add(id(error))
        if isinstance(error, KIND_ERRORS):
            return error
        error = getattr(error, "cause", None) or error.__cause__
    return None


def _is_kind(error: BaseException | None, kind: type[SecretError]) -> bool:
    return isinstance(_kind_of(error), kind)


def is_not_found(error: BaseException | None) -> bool:
    """Return True if the error indicates a secret was not found."""
    return _is_kind(error, SecretNotFoundError)


def is_provider_not_found(error: BaseException | None) -> bool:
    """Return True if the error indicates a provider was not registered."""
    return _is_kind(error, ProviderNotFoundError)


def is_provider_not_available(error: BaseException | None) -> bool:
    """Return True if the error indicates a provider is not available."""
    return _is_kind(error, ProviderNotAvailableError)


def is_invalid_reference(error: BaseException | None) -> bool:
    return _is_kind(error, InvalidReferenceError)


def is_no_default_provider(error: BaseException | None) -> bool:
    return _is_kind(error, NoDefaultProviderError)


def is_cancelled(error: BaseException | None) -> bool:
    return _is_kind(error, SecretOperationCancelledError)
