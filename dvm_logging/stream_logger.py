# SPDX-License-Identifier: MIT
# Copyright (c) 2025 DevOpsMaestro contributors

"""Stream logger implementation with structured JSON output."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

from .logger import LEVELS, Logger, normalize_level

STREAMS = ("stderr", "stdout")


class StreamLogger(Logger):
    """Logger that writes one JSON object per line to stderr or stdout.

    Records are also handed to the stdlib logger of the same name so that
    ``caplog`` and any configured handlers see them.

    Args:
        level: Minimum level written (DEBUG, INFO, WARNING, ERROR)
        name: Logger name, also used for the stdlib logger
        stream: "stderr" or "stdout"
    """

    def __init__(self, level: str = "INFO", name: str | None = None, stream: str = "stderr"):
        self.level = normalize_level(level)
        self.name = name or "dvm"
        if stream not in STREAMS:
            raise ValueError(f"Invalid log stream: {stream}. Must be one of {list(STREAMS)}")
        self.stream = stream
        self._stdlib_logger = logging.getLogger(self.name)
        self._stdlib_logger.setLevel(logging.NOTSET)

    def _target(self) -> TextIO:
        # Looked up per call so that patched sys.stdout/sys.stderr are honoured
        return sys.stderr if self.stream == "stderr" else sys.stdout

    def log(self, level: str, message: str, **fields: Any) -> None:
        if LEVELS[level] < LEVELS[self.level]:
            return

        exc_info = fields.pop("exc_info", None)
        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": level,
            "logger": self.name,
            "message": message,
        }
        if fields:
            entry["extra"] = fields

        try:
            line = json.dumps(entry, default=str)
        except (TypeError, ValueError) as e:
            line = f"{level}: {message} (JSON serialization failed: {e})"
        print(line, file=self._target(), flush=True)

        self._stdlib_logger.log(
            LEVELS[level],
            message,
            exc_info=exc_info,
            extra={"extra": fields} if fields else None,
        )
