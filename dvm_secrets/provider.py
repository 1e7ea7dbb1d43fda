# SPDX-License-Identifier: MIT
# Copyright (c) 2025 DevOpsMaestro contributors

"""Base secret provider interface."""

import threading
from abc import ABC, abstractmethod

from .exceptions import SecretOperationCancelledError
from .models import SecretRequest


def check_cancelled(cancel: threading.Event | None) -> None:
    """Raise if the cancellation token has been set.

    Args:
        cancel: Optional cancellation token

    Raises:
        SecretOperationCancelledError: If ``cancel`` is set
    """
    if cancel is not None and cancel.is_set():
        raise SecretOperationCancelledError()


class SecretProvider(ABC):
    """Abstract base class for secret providers.

    Implementations retrieve named secrets from one backend (environment
    variables, the macOS Keychain, a cloud vault, ...) and report whether that
    backend can be used in the current environment.

    Implementations must be safe for concurrent use: a single instance is
    shared by every resolver in the process.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Stable identifier used as registry key and in ``${secret:name:provider}``."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check whether this provider can operate in the current environment."""
        pass

    @abstractmethod
    def get_secret(self, request: SecretRequest, cancel: threading.Event | None = None) -> str:
        """Retrieve a secret.

        Implementations must call ``check_cancelled(cancel)`` before doing
        expensive work and must never include the secret value in an error.

        Args:
            request: What to fetch
            cancel: Optional cancellation token

        Returns:
            Secret value as a string

        Raises:
            SecretNotFoundError: If the secret (or requested key) does not exist
            SecretOperationCancelledError: If ``cancel`` was set
            SecretProviderError: If retrieval fails for any other reason
        """
        pass
