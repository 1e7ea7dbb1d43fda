# SPDX-License-Identifier: MIT
# Copyright (c) 2025 DevOpsMaestro contributors

"""In-memory logger for tests."""

import threading
from typing import Any

from .logger import Logger, normalize_level


class SilentLogger(Logger):
    """Keeps every record in ``logs`` instead of writing it anywhere.

    Records are kept whatever their level so tests can assert on debug events
    from the registry and resolver. ``mentions`` lets a test check that a
    secret value never reached the log.
    """

    def __init__(self, level: str = "INFO", name: str | None = None):
        self.level = normalize_level(level)
        self.name = name or "dvm"
        self.logs: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    def log(self, level: str, message: str, **fields: Any) -> None:
        fields.pop("exc_info", None)
        record: dict[str, Any] = {"level": level, "message": message}
        if fields:
            record["extra"] = fields
        with self._lock:
            self.logs.append(record)

    def clear_logs(self) -> None:
        with self._lock:
            self.logs.clear()

    def get_logs(self, level: str | None = None) -> list[dict[str, Any]]:
        """Snapshot of the records, optionally only those at ``level``."""
        with self._lock:
            return [record for record in self.logs if level is None or record["level"] == level]

    def has_log(self, message: str, level: str | None = None) -> bool:
        """True if a record's message contains ``message``."""
        return any(message in record["message"] for record in self.get_logs(level))

    def mentions(self, text: str) -> bool:
        """True if ``text`` appears in any message or field value."""
        for record in self.get_logs():
            if text in record["message"]:
                return True
            if any(text in str(value) for value in record.get("extra", {}).values()):
                return True
        return False
