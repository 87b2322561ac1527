"""Cross-process settings cache backends.

The settings store consults one of these before bulk-reading the table so
that concurrent workers do not each hit the database. Entries expire after a
TTL; writes delete the entry so the next reader reloads from the table.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from threading import Lock
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

from filelock import FileLock, Timeout

logger = logging.getLogger("perftweaks.cache")

SETTINGS_CACHE_KEY = "npt_settings_all"


class SharedCache(Protocol):
    """Minimal TTL cache interface shared by the backends below."""

    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any, ttl: int) -> None:
        ...

    def delete(self, key: str) -> None:
        ...

    def clear(self) -> None:
        ...


class MemorySharedCache:
    """Process-local TTL cache.

    Suitable for single-process hosts and tests; ``ttl=0`` means no expiry.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[Optional[float], Any]] = {}
        self._lock = Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at is not None and self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl: int) -> None:
        expires_at = self._clock() + ttl if ttl > 0 else None
        with self._lock:
            self._entries[key] = (expires_at, value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class FileSharedCache:
    """JSON file cache shared between processes on the same host.

    Every read and write holds a ``FileLock`` on ``<path>.lock``. Values must
    be JSON serialisable. A corrupt or unreadable file is treated as empty.
    """

    def __init__(
        self,
        path: Path | str,
        *,
        lock_timeout: float = 5.0,
        clock: Callable[[], float] = time.time,
    ):
        self.path = Path(path)
        self.lock_path = f"{self.path}.lock"
        self.lock_timeout = lock_timeout
        self._clock = clock
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable settings cache %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, Any]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f)
        tmp_path.replace(self.path)

    def get(self, key: str) -> Optional[Any]:
        try:
            with FileLock(self.lock_path, timeout=self.lock_timeout):
                entry = self._read().get(key)
        except Timeout:
            logger.warning("Timed out waiting for settings cache lock %s", self.lock_path)
            return None
        except OSError as e:
            logger.warning("Failed to read settings cache %s: %s", self.path, e)
            return None
        if not isinstance(entry, dict):
            return None
        expires_at = entry.get("expires_at")
        if expires_at is not None and self._clock() >= expires_at:
            return None
        return entry.get("value")

    def set(self, key: str, value: Any, ttl: int) -> None:
        expires_at = self._clock() + ttl if ttl > 0 else None
        try:
            with FileLock(self.lock_path, timeout=self.lock_timeout):
                data = self._read()
                data[key] = {"expires_at": expires_at, "value": value}
                self._write(data)
        except Timeout:
            logger.warning("Timed out waiting for settings cache lock %s", self.lock_path)
        except OSError as e:
            logger.warning("Failed to write settings cache %s: %s", self.path, e)

    def delete(self, key: str) -> None:
        try:
            with FileLock(self.lock_path, timeout=self.lock_timeout):
                data = self._read()
                if key in data:
                    del data[key]
                    self._write(data)
        except Timeout:
            logger.warning("Timed out waiting for settings cache lock %s", self.lock_path)
        except OSError as e:
            logger.warning("Failed to update settings cache %s: %s", self.path, e)

    def clear(self) -> None:
        try:
            with FileLock(self.lock_path, timeout=self.lock_timeout):
                self.path.unlink(missing_ok=True)
        except Timeout:
            logger.warning("Timed out waiting for settings cache lock %s", self.lock_path)
        except OSError as e:
            logger.warning("Failed to clear settings cache %s: %s", self.path, e)


def create_shared_cache(backend: str, path: Path | str | None = None) -> Optional[SharedCache]:
    """Build the cache named by ``PERFTWEAKS_CACHE_BACKEND``; ``none`` disables it."""

    if backend == "none":
        return None
    if backend == "memory":
        return MemorySharedCache()
    if backend == "file":
        if path is None:
            raise ValueError("file cache backend requires a path")
        return FileSharedCache(path)
    raise ValueError(f"Unknown cache backend: {backend}")


__all__ = [
    "SETTINGS_CACHE_KEY",
    "FileSharedCache",
    "MemorySharedCache",
    "SharedCache",
    "create_shared_cache",
]
