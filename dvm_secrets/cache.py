# SPDX-License-Identifier: MIT
# Copyright (c) 2025 DevOpsMaestro contributors

"""Time-to-live cache for resolved secret values."""

import time
from dataclasses import dataclass
from typing import Callable

from ._locking import ReadWriteLock

DEFAULT_CACHE_TTL_SECONDS = 300.0


@dataclass(frozen=True)
class _CacheEntry:
    value: str
    expires_at: float


class SecretCache:
    """In-memory cache of resolved secrets, scoped to one resolution session.

    Entries expire lazily: ``get`` treats an entry whose expiry has passed as a
    miss, so no background sweeper is needed. ``prune`` only reclaims memory.

    Callers should ``clear()`` the cache once the enclosing command finishes so
    secrets do not stay resident for the whole TTL.

    Args:
        ttl_seconds: Lifetime of each entry
        clock: Monotonic time source in seconds, injectable for tests
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._entries: dict[tuple[str, str, str], _CacheEntry] = {}
        self._lock = ReadWriteLock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @staticmethod
    def _key(provider: str, name: str, key: str | None) -> tuple[str, str, str]:
        return (provider, name, key or "")

    def get(self, provider: str, name: str, key: str | None = None) -> str | None:
        """Return the cached value, or None if absent or expired."""
        with self._lock.read_lock():
            entry = self._entries.get(self._key(provider, name, key))
            if entry is None:
                return None
            if self._clock() > entry.expires_at:
                return None
            return entry.value

    def set(self, provider: str, name: str, key: str | None, value: str) -> None:
        with self._lock.write_lock():
            self._entries[self._key(provider, name, key)] = _CacheEntry(
                value=value,
                expires_at=self._clock() + self._ttl,
            )

    def delete(self, provider: str, name: str, key: str | None = None) -> None:
        with self._lock.write_lock():
            self._entries.pop(self._key(provider, name, key), None)

    def clear(self) -> None:
        """Remove every entry."""
        with self._lock.write_lock():
            self._entries = {}

    def prune(self) -> int:
        """Remove expired entries and return how many were removed."""
        with self._lock.write_lock():
            now = self._clock()
            expired = [k for k, entry in self._entries.items() if now > entry.expires_at]
            for k in expired:
                del self._entries[k]
            return len(expired)

    def size(self) -> int:
        """Number of entries, including expired ones not yet pruned."""
        with self._lock.read_lock():
            return len(self._entries)

    def __len__(self) -> int:
        return self.size()
