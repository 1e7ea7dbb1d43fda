# SPDX-License-Identifier: MIT
# Copyright (c) 2025 DevOpsMaestro contributors

"""Factory function for creating logger instances."""

import os
from typing import Callable

from .logger import Logger
from .silent_logger import SilentLogger
from .stream_logger import StreamLogger

_LOGGER_TYPES: dict[str, Callable[[str, str], Logger]] = {
    "stderr": lambda level, name: StreamLogger(level=level, name=name, stream="stderr"),
    "stdout": lambda level, name: StreamLogger(level=level, name=name, stream="stdout"),
    "silent": lambda level, name: SilentLogger(level=level, name=name),
}


def create_logger(
    logger_type: str | None = None,
    level: str | None = None,
    name: str | None = None,
) -> Logger:
    """Create a logger, falling back to ``LOG_TYPE``, ``LOG_LEVEL`` and ``LOG_NAME``.

    Args:
        logger_type: "stderr" (default), "stdout" or "silent"
        level: DEBUG, INFO (default), WARNING or ERROR
        name: Logger name (default "dvm"); secrets modules pass their dotted path

    Raises:
        ValueError: If logger_type or level is not recognized
    """
    logger_type = (logger_type or os.getenv("LOG_TYPE") or "stderr").lower()
    level = level or os.getenv("LOG_LEVEL") or "INFO"
    name = name or os.getenv("LOG_NAME") or "dvm"

    if logger_type not in _LOGGER_TYPES:
        raise ValueError(
            f"Unknown logger_type: {logger_type}. Must be one of: {', '.join(_LOGGER_TYPES)}"
        )
    return _LOGGER_TYPES[logger_type](level, name)
