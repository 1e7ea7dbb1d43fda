# SPDX-License-Identifier: MIT
# Copyright (c) 2025 DevOpsMaestro contributors

"""Tests for the macOS Keychain secret provider."""

import subprocess
import sys
import threading

import pytest

from dvm_secrets import (
    CommandFailedError,
    CommandResult,
    DEFAULT_KEYCHAIN_SERVICE,
    SubprocessCommandRunner,
    KeychainSecretProvider,
    ProviderNotAvailableError,
    SecretNotFoundError,
    SecretOperationCancelledError,
    SecretProviderError,
    SecretRequest,
    is_not_found,
)



class HangingSecurityRunner(SubprocessCommandRunner):
    """Runs a process that never finishes in place of the security tool."""

    def run(self, args, cancel=None):
        return super().run([sys.executable, "-c", "import time; time.sleep(30)"], cancel)


@pytest.fixture
def provider(command_runner, silent_logger):
    return KeychainSecretProvider(runner=command_runner, platform="darwin", logger=silent_logger)


class TestKeychainSecretProvider:
    """Test suite for KeychainSecretProvider."""

    def test_name_and_service(self, provider):
        assert provider.name == "keychain"
        assert provider.service == DEFAULT_KEYCHAIN_SERVICE == "devopsmaestro"

    @pytest.mark.parametrize("platform,expected", [
        ("darwin", True),
        ("linux", False),
        ("win32", False),
    ])
    def test_available_only_on_macos(self, command_runner, platform, expected):
        provider = KeychainSecretProvider(runner=command_runner, platform=platform)

        assert provider.is_available() is expected

    def test_unavailable_platform_never_runs_command(self, command_runner):
        provider = KeychainSecretProvider(runner=command_runner, platform="linux")

        with pytest.raises(ProviderNotAvailableError):
            provider.get_secret(SecretRequest(name="github-token"))

        assert command_runner.calls == []

    def test_invokes_security_tool(self, provider, command_runner):
        command_runner.result = CommandResult(0, "ghp_test123\n", "")

        value = provider.get_secret(SecretRequest(name="github-token"))

        assert value == "ghp_test123"
        assert command_runner.calls == [[
            "security", "find-generic-password",
            "-s", "devopsmaestro",
            "-a", "github-token",
            "-w",
        ]]

    def test_strips_only_one_trailing_newline(self, provider, command_runner):
        command_runner.result = CommandResult(0, "  spaced value \n\n", "")

        assert provider.get_secret(SecretRequest(name="x")) == "  spaced value \n"

    def test_service_override_from_options(self, provider, command_runner):
        command_runner.result = CommandResult(0, "work-token\n", "")

        provider.get_secret(SecretRequest(name="github-token", options={"service": "work"}))

        assert command_runner.calls[0][3] == "work"

    def test_empty_service_option_uses_default(self, provider, command_runner):
        command_runner.result = CommandResult(0, "v\n", "")

        provider.get_secret(SecretRequest(name="github-token", options={"service": ""}))

        assert command_runner.calls[0][3] == "devopsmaestro"

    def test_custom_service(self, command_runner):
        command_runner.result = CommandResult(0, "v\n", "")
        provider = KeychainSecretProvider(service="acme", runner=command_runner, platform="darwin")

        provider.get_secret(SecretRequest(name="x"))

        assert command_runner.calls[0][3] == "acme"

    def test_not_found_by_exit_code(self, provider, command_runner):
        """Test that errSecItemNotFound (exit 44) maps to not found."""
        command_runner.result = CommandResult(44, "", "")

        with pytest.raises(SecretNotFoundError):
            provider.get_secret(SecretRequest(name="missing"))

    @pytest.mark.parametrize("stderr", [
        "security: SecKeychainSearchCopyNext: The specified item could not be found in the keychain.",
        "The specified item could not be found in the keychain.",
        "item could not be found",
    ])
    def test_not_found_by_stderr_phrase(self, provider, command_runner, stderr):
        command_runner.result = CommandResult(1, "", stderr)

        with pytest.raises(SecretNotFoundError) as exc_info:
            provider.get_secret(SecretRequest(name="missing"))

        assert is_not_found(exc_info.value)

    def test_extra_not_found_phrases(self, command_runner):
        command_runner.result = CommandResult(1, "", "Objekt nicht gefunden")
        provider = KeychainSecretProvider(
            runner=command_runner,
            platform="darwin",
            not_found_phrases=("nicht gefunden",),
        )

        with pytest.raises(SecretNotFoundError):
            provider.get_secret(SecretRequest(name="missing"))

    def test_other_failure_is_provider_error(self, provider, command_runner, silent_logger):
        """Test that other failures are wrapped without leaking stdout."""
        command_runner.result = CommandResult(51, "partial-secret-output", "User interaction is not allowed.")

        with pytest.raises(SecretProviderError) as exc_info:
            provider.get_secret(SecretRequest(name="github-token"))

        error = exc_info.value
        assert not is_not_found(error)
        assert error.provider == "keychain"
        assert error.operation == "find-generic-password"
        assert isinstance(error.cause, CommandFailedError)
        assert error.cause.returncode == 51
        assert "User interaction is not allowed." in str(error)
        assert "partial-secret-output" not in str(error)
        assert not silent_logger.mentions("partial-secret-output")

    def test_missing_security_binary(self, provider, command_runner):
        command_runner.error = FileNotFoundError(2, "No such file or directory", "security")

        with pytest.raises(SecretProviderError) as exc_info:
            provider.get_secret(SecretRequest(name="github-token"))

        assert isinstance(exc_info.value.cause, FileNotFoundError)

    def test_cancelled_before_invocation(self, provider, command_runner):
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(SecretOperationCancelledError):
            provider.get_secret(SecretRequest(name="github-token"), cancel)

        assert command_runner.calls == []

    def test_cancel_token_passed_to_runner(self, provider, command_runner):
        command_runner.result = CommandResult(0, "v\n", "")
        cancel = threading.Event()

        provider.get_secret(SecretRequest(name="github-token"), cancel)

        assert command_runner.cancel_tokens == [cancel]

    def test_cancellation_during_run_propagates(self, provider, command_runner):
        command_runner.error = SecretOperationCancelledError()

        with pytest.raises(SecretOperationCancelledError):
            provider.get_secret(SecretRequest(name="github-token"), threading.Event())

    def test_runner_timeout_is_provider_error(self, provider, command_runner):
        command_runner.error = subprocess.TimeoutExpired(["security"], 0.3)

        with pytest.raises(SecretProviderError) as exc_info:
            provider.get_secret(SecretRequest(name="github-token"))

        assert exc_info.value.operation == "find-generic-password"
        assert isinstance(exc_info.value.cause, subprocess.TimeoutExpired)

    def test_hung_security_tool_times_out(self):
        """Test that a real runner timeout surfaces as a provider error."""
        provider = KeychainSecretProvider(
            runner=HangingSecurityRunner(poll_interval=0.05, timeout=0.3),
            platform="darwin",
        )

        with pytest.raises(SecretProviderError) as exc_info:
            provider.get_secret(SecretRequest(name="github-token"))

        assert exc_info.value.provider == "keychain"
        assert not is_not_found(exc_info.value)
