from __future__ import annotations

from asyncio import Lock
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
import time
from typing import Any

from .config import MATCH_CACHE_TTL


class TTLCache:
    """A simple in-memory TTL cache with async-safe access."""

    def __init__(self, ttl_seconds: float = 300.0) -> None:
        self._ttl = ttl_seconds
        self._lock = Lock()
        self._store: dict[Any, tuple[Any, float]] = {}

    async def get(self, key: Any) -> Any | None:
        now = time.monotonic()
        async with self._lock:
            entry = self._store.get(key)
            if not entry:
                return None
            value, expires_at = entry
            if expires_at <= now:
                self._store.pop(key, None)
                return None
            return value

    async def set(self, key: Any, value: Any, ttl_seconds: float | None = None) -> None:
        ttl = self._ttl if ttl_seconds is None else ttl_seconds
        expires_at = time.monotonic() + max(ttl, 0.0)
        async with self._lock:
            if ttl <= 0:
                self._store.pop(key, None)
            else:
                self._store[key] = (value, expires_at)

    async def set_many(self, keys: Iterable[Any], value: Any) -> None:
        """Store ``value`` under every non-empty key, e.g. a match id and its code."""

        for key in keys:
            if key:
                await self.set(key, value)

    async def invalidate(self, key: Any) -> None:
        async with self._lock:
            self._store.pop(key, None)

    async def invalidate_many(self, keys: Iterable[Any]) -> None:
        wanted = {key for key in keys if key}
        if not wanted:
            return
        async with self._lock:
            for key in wanted:
                self._store.pop(key, None)

    async def clear(self) -> None:
        async with self._lock:
            self._store.clear()


class LockRegistry:
    """One ``asyncio.Lock`` per key, kept only while someone holds or awaits it."""

    def __init__(self) -> None:
        self._locks: dict[str, Lock] = {}
        self._users: dict[str, int] = {}

    def _lock(self, key: str) -> Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = Lock()
        return lock

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        """Serialize work on ``key``; the lock is dropped after its last user."""

        lock = self._lock(key)
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            remaining = self._users.get(key, 1) - 1
            if remaining:
                self._users[key] = remaining
            else:
                self._users.pop(key, None)
                self._locks.pop(key, None)

    def locked(self, key: str) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def discard(self, key: str) -> None:
        if key in self._users:
            return
        self._locks.pop(key, None)

    def clear(self) -> None:
        self._locks.clear()
        self._users.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._locks


# Match snapshots keyed by both id and share code
match_cache = TTLCache(ttl_seconds=float(MATCH_CACHE_TTL))
match_locks = LockRegistry()
