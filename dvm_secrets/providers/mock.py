# SPDX-License-Identifier: MIT
# Copyright (c) 2025 DevOpsMaestro contributors

"""In-memory secret provider for tests."""

import threading
from dataclasses import dataclass, field
from typing import Mapping

from ..exceptions import SecretNotFoundError
from ..models import SecretRequest
from ..provider import SecretProvider, check_cancelled


@dataclass(frozen=True)
class MockCall:
    """One recorded ``get_secret`` call."""
    name: str
    key: str | None = None
    options: Mapping[str, str] = field(default_factory=dict)


class MockSecretProvider(SecretProvider):
    """Provider backed by a dictionary, recording every call.

    Secrets and errors are keyed by ``"name"`` or, for structured secrets,
    ``"name:key"``.

    Example:
        >>> provider = MockSecretProvider(secrets={"github-token": "ghp_test123"})
        >>> provider.get_secret(SecretRequest(name="github-token"))
        'ghp_test123'
        >>> len(provider.calls)
        1
    """

    def __init__(
        self,
        name: str = "mock",
        available: bool = True,
        secrets: Mapping[str, str] | None = None,
    ):
        self._name = name
        self._available = available
        self._secrets: dict[str, str] = dict(secrets or {})
        self._errors: dict[str, BaseException] = {}
        self._calls: list[MockCall] = []
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    def is_available(self) -> bool:
        with self._lock:
            return self._available

    def get_secret(self, request: SecretRequest, cancel: threading.Event | None = None) -> str:
        check_cancelled(cancel)

        with self._lock:
            self._calls.append(MockCall(
                name=request.name,
                key=request.key,
                options=dict(request.options),
            ))

            lookup = f"{request.name}:{request.key}" if request.key else request.name

            if lookup in self._errors:
                raise self._errors[lookup]
            if request.key and request.name in self._errors:
                raise self._errors[request.name]

            if lookup in self._secrets:
                return self._secrets[lookup]

        raise SecretNotFoundError()

    def set_secret(self, name: str, value: str) -> None:
        """Configure a secret. Use ``"name:key"`` for a field of a structured secret."""
        with self._lock:
            self._secrets[name] = value

    def set_error(self, name: str, error: BaseException) -> None:
        """Make lookups of ``name`` (or ``"name:key"``) raise ``error``."""
        with self._lock:
            self._errors[name] = error

    def set_available(self, available: bool) -> None:
        with self._lock:
            self._available = available

    @property
    def calls(self) -> list[MockCall]:
        """A copy of the recorded calls."""
        with self._lock:
            return list(self._calls)

    def clear_calls(self) -> None:
        with self._lock:
            self._calls = []

    def reset(self) -> None:
        """Forget all secrets, errors and calls."""
        with self._lock:
            self._secrets = {}
            self._errors = {}
            self._calls = []
