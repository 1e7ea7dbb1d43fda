# SPDX-License-Identifier: MIT
# Copyright (c) 2025 DevOpsMaestro contributors

"""Shared fixtures for the dvm_secrets test suite."""

from __future__ import annotations

import sys
import threading
from dataclasses import dataclass, field
from unittest.mock import MagicMock

import pytest

from dvm_logging import SilentLogger
from dvm_secrets import (
    CommandResult,
    CommandRunner,
    MockSecretProvider,
    ProviderRegistry,
    SecretCache,
    SecretResolver,
)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class FakeCommandRunner(CommandRunner):
    """Command runner returning a canned result and recording invocations."""

    result: CommandResult = field(default_factory=lambda: CommandResult(0, "", ""))
    error: BaseException | None = None
    calls: list[list[str]] = field(default_factory=list)
    cancel_tokens: list[threading.Event | None] = field(default_factory=list)

    def run(self, args, cancel=None):
        self.calls.append(list(args))
        self.cancel_tokens.append(cancel)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def silent_logger() -> SilentLogger:
    return SilentLogger(level="DEBUG", name="test")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> SecretCache:
    return SecretCache(ttl_seconds=300, clock=clock)


@pytest.fixture
def mock_provider() -> MockSecretProvider:
    return MockSecretProvider(secrets={"github-token": "ghp_test123"})


@pytest.fixture
def registry(mock_provider: MockSecretProvider, silent_logger: SilentLogger) -> ProviderRegistry:
    registry = ProviderRegistry(logger=silent_logger)
    registry.register(mock_provider)
    return registry


@pytest.fixture
def resolver(registry: ProviderRegistry, cache: SecretCache, silent_logger: SilentLogger) -> SecretResolver:
    return SecretResolver(registry, cache=cache, logger=silent_logger)


@pytest.fixture
def command_runner() -> FakeCommandRunner:
    return FakeCommandRunner()


@dataclass(frozen=True)
class AzureSdkMocks:
    """Per-test Azure SDK mocks.

    ``sys.modules`` is patched so the Azure provider can import SDK symbols
    without the ``azure`` extra installed.
    """

    secret_client_cls: MagicMock
    default_credential_cls: MagicMock
    ResourceNotFoundError: type[Exception]
    ClientAuthenticationError: type[Exception]
    AzureError: type[Exception]


@pytest.fixture
def azure_sdk_mocks(monkeypatch: pytest.MonkeyPatch) -> AzureSdkMocks:
    """Provide per-test Azure SDK module mocks via ``sys.modules``."""

    secret_client_cls = MagicMock(name="SecretClient")
    default_credential_cls = MagicMock(name="DefaultAzureCredential")

    azure_error = type("AzureError", (Exception,), {})
    resource_not_found_error = type("ResourceNotFoundError", (azure_error,), {})
    client_auth_error = type("ClientAuthenticationError", (azure_error,), {})

    monkeypatch.setitem(sys.modules, "azure", MagicMock())
    monkeypatch.setitem(sys.modules, "azure.keyvault", MagicMock())
    monkeypatch.setitem(sys.modules, "azure.core", MagicMock())
    monkeypatch.setitem(
        sys.modules,
        "azure.keyvault.secrets",
        MagicMock(SecretClient=secret_client_cls),
    )
    monkeypatch.setitem(
        sys.modules,
        "azure.identity",
        MagicMock(DefaultAzureCredential=default_credential_cls),
    )
    monkeypatch.setitem(
        sys.modules,
        "azure.core.exceptions",
        MagicMock(
            ResourceNotFoundError=resource_not_found_error,
            ClientAuthenticationError=client_auth_error,
            AzureError=azure_error,
        ),
    )

    return AzureSdkMocks(
        secret_client_cls=secret_client_cls,
        default_credential_cls=default_credential_cls,
        ResourceNotFoundError=resource_not_found_error,
        ClientAuthenticationError=client_auth_error,
        AzureError=azure_error,
    )
