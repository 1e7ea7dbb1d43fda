# SPDX-License-Identifier: MIT
# Copyright (c) 2025 DevOpsMaestro contributors

"""Logger interface shared by the stream and silent loggers."""

import logging
from abc import ABC, abstractmethod
from typing import Any

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def normalize_level(level: str) -> str:
    """Upper-case ``level`` and check it is one of ``LEVELS``."""
    normalized = level.upper()
    if normalized not in LEVELS:
        raise ValueError(f"Invalid log level: {level}. Must be one of {list(LEVELS)}")
    return normalized


class Logger(ABC):
    """Structured logger.

    Subclasses implement ``log``; the level methods are thin wrappers. Fields
    are keyword arguments and end up under ``extra`` in each record.

    Secret resolution code logs the provider and the secret *name* only.
    Resolved values and raw ``${secret:...}`` matches are never passed in.
    """

    @abstractmethod
    def log(self, level: str, message: str, **fields: Any) -> None:
        """Record ``message`` at ``level`` (one of ``LEVELS``)."""

    def debug(self, message: str, **fields: Any) -> None:
        self.log("DEBUG", message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        self.log("INFO", message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self.log("WARNING", message, **fields)

    def error(self, message: str, **fields: Any) -> None:
        self.log("ERROR", message, **fields)

    def exception(self, message: str, **fields: Any) -> None:
        """Log at ERROR from inside an ``except`` block, with the traceback where supported."""
        fields.setdefault("exc_info", True)
        self.log("ERROR", message, **fields)
