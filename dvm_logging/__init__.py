# SPDX-License-Identifier: MIT
# Copyright (c) 2025 DevOpsMaestro contributors

"""Structured logging adapter for DevOpsMaestro secret resolution.

Loggers emit one JSON object per line. Stream loggers default to stderr so
that resolved configuration written to stdout is never interleaved with log
output.

Example:
    >>> from dvm_logging import create_logger
    >>> logger = create_logger(logger_type="stderr", level="DEBUG", name="dvm_secrets")
    >>> logger.debug("Resolved secret reference", provider="env", secret="github-token")
    >>>
    >>> # Capture log records in memory for tests
    >>> test_logger = create_logger(logger_type="silent")
    >>> test_logger.info("Test message")
    >>> test_logger.has_log("Test")
    True
"""

__version__ = "0.1.0"

from .factory import create_logger
from .logger import Logger
from .silent_logger import SilentLogger
from .stream_logger import StreamLogger

__all__ = [
    "__version__",
    "Logger",
    "SilentLogger",
    "StreamLogger",
    "create_logger",
]
