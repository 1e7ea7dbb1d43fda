# SPDX-License-Identifier: MIT
# Copyright (c) 2025 DevOpsMaestro contributors

"""macOS Keychain secret provider."""

import subprocess
import sys
import threading
from typing import Iterable

from dvm_logging import Logger, create_logger

from ..command import CommandFailedError, CommandRunner, SubprocessCommandRunner
from ..exceptions import (
    ProviderNotAvailableError,
    SecretNotFoundError,
    SecretProviderError,
)
from ..models import SecretRequest
from ..provider import SecretProvider, check_cancelled

_logger = create_logger(name="dvm_secrets.keychain")

DEFAULT_KEYCHAIN_SERVICE = "devopsmaestro"

# errSecItemNotFound surfaces as exit status 44 from `security`.
DEFAULT_NOT_FOUND_EXIT_CODES = (44,)

# Fallback when the exit status is not conclusive.
DEFAULT_NOT_FOUND_PHRASES = (
    "could not be found",
    "SecKeychainSearchCopyNext",
    "The specified item could not be found",
)


class KeychainSecretProvider(SecretProvider):
    """Secret provider backed by the macOS Keychain.

    Secrets are generic passwords stored with the service (default
    ``devopsmaestro``) and the secret name as the account::

        security add-generic-password -s devopsmaestro -a github-token -w "<token>"

    Lookups run ``security find-generic-password -s <service> -a <name> -w``.
    The service can be overridden per request with ``options["service"]``.

    Args:
        service: Keychain service name
        runner: Command execution port; ``SubprocessCommandRunner`` if omitted
        platform: Platform string to test availability against; ``sys.platform`` if omitted
        not_found_phrases: stderr fragments meaning "item not found"
        not_found_exit_codes: Exit statuses meaning "item not found"
        logger: Logger for diagnostic events
    """

    def __init__(
        self,
        service: str = DEFAULT_KEYCHAIN_SERVICE,
        runner: CommandRunner | None = None,
        platform: str | None = None,
        not_found_phrases: Iterable[str] = DEFAULT_NOT_FOUND_PHRASES,
        not_found_exit_codes: Iterable[int] = DEFAULT_NOT_FOUND_EXIT_CODES,
        logger: Logger | None = None,
    ):
        self._service = service
        self._runner = runner if runner is not None else SubprocessCommandRunner()
        self._platform = platform
        self.not_found_phrases = tuple(not_found_phrases)
        self.not_found_exit_codes = frozenset(not_found_exit_codes)
        self._logger = logger if logger is not None else _logger

    @property
    def name(self) -> str:
        return "keychain"

    @property
    def service(self) -> str:
        return self._service

    def is_available(self) -> bool:
        platform = self._platform if self._platform is not None else sys.platform
        return platform == "darwin"

    def _is_not_found(self, returncode: int, stderr: str) -> bool:
        if returncode in self.not_found_exit_codes:
            return True
        return any(phrase in stderr for phrase in self.not_found_phrases)

    def get_secret(self, request: SecretRequest, cancel: threading.Event | None = None) -> str:
        if not self.is_available():
            raise ProviderNotAvailableError()

        check_cancelled(cancel)

        service = request.options.get("service") or self._service
        args = [
            "security",
            "find-generic-password",
            "-s", service,
            "-a", request.name,
            "-w",
        ]

        try:
            result = self._runner.run(args, cancel)
        except (OSError, subprocess.SubprocessError) as e:
            raise SecretProviderError(self.name, "find-generic-password", e) from e

        if result.returncode != 0:
            if self._is_not_found(result.returncode, result.stderr):
                raise SecretNotFoundError()

            # stdout is deliberately left out
            failure = CommandFailedError(args, result.returncode, result.stderr)
            self._logger.warning(
                "Keychain lookup failed",
                secret=request.name,
                service=service,
                returncode=result.returncode,
            )
            raise SecretProviderError(self.name, "find-generic-password", failure) from failure

        value = result.stdout
        if value.endswith("\n"):
            value = value[:-1]
        return value
