# SPDX-License-Identifier: MIT
# Copyright (c) 2025 DevOpsMaestro contributors

"""Command execution port used by providers that shell out to a helper tool."""

import subprocess
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from .exceptions import SecretOperationCancelledError
from .provider import check_cancelled


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a finished command.

    ``stdout`` may hold a secret value. Never log it or put it in an error.
    """
    returncode: int
    stdout: str
    stderr: str


class CommandFailedError(Exception):
    """A helper command exited non-zero. Carries the exit code and stderr only."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str):
        self.command = args[0] if args else ""
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr.strip()}" if stderr.strip() else ""
        super().__init__(f"{self.command} exited with status {returncode}{detail}")


class CommandRunner(ABC):
    """Runs an external command to completion."""

    @abstractmethod
    def run(self, args: Sequence[str], cancel: threading.Event | None = None) -> CommandResult:
        """Run ``args`` and capture its output.

        Raises:
            SecretOperationCancelledError: If ``cancel`` was set before or during the run
            OSError: If the command cannot be started
        """
        pass


class SubprocessCommandRunner(CommandRunner):
    """Runs commands with ``subprocess``, killing them when cancelled.

    Args:
        poll_interval: Seconds between cancellation checks while waiting
        timeout: Optional overall limit in seconds; the process is killed and
            ``subprocess.TimeoutExpired`` raised once it is exceeded
    """

    def __init__(self, poll_interval: float = 0.1, timeout: float | None = None):
        self.poll_interval = poll_interval
        self.timeout = timeout

    def run(self, args: Sequence[str], cancel: threading.Event | None = None) -> CommandResult:
        check_cancelled(cancel)

        process = subprocess.Popen(
            list(args),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
        deadline = None if self.timeout is None else time.monotonic() + self.timeout

        with process:
            while True:
                try:
                    stdout, stderr = process.communicate(timeout=self.poll_interval)
                    break
                except subprocess.TimeoutExpired:
                    if cancel is not None and cancel.is_set():
                        process.kill()
                        process.communicate()
                        raise SecretOperationCancelledError()
                    if deadline is not None and time.monotonic() >= deadline:
                        process.kill()
                        process.communicate()
                        raise subprocess.TimeoutExpired(list(args), self.timeout)

        return CommandResult(returncode=process.returncode, stdout=stdout, stderr=stderr)
