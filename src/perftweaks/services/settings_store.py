"""Read-through settings store with a lazily loaded in-process cache.

All configuration reads go through :class:`SettingsStore`. The first ``get``
bulk-loads the whole table (or a snapshot from the shared cache) so that the
many small flag lookups made while evaluating features cost one query.
Reads never raise: if the bulk load fails the store falls back to caller
defaults for the rest of its lifetime and reports ``is_degraded``. Writes
raise, and leave the cache untouched when they fail.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from threading import RLock
from typing import Mapping, Optional, Union

from ..config import BaseConfig
from ..domain.repositories import SettingsRepository
from ..errors import StoreError, StoreReadError, StoreWriteError, ValidationError
from ..infra.cache import SETTINGS_CACHE_KEY, SharedCache
from ..models.settings import SETTING_KEY_MAX_LENGTH
from .features import DEFAULT_SETTINGS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Unloaded:
    """Cache has not been populated yet."""


@dataclass
class Loaded:
    """Cache populated from the table; ``degraded`` marks a failed bulk read."""

    values: dict[str, str] = field(default_factory=dict)
    degraded: bool = False


CacheState = Union[Unloaded, Loaded]

UNLOADED = Unloaded()


def _encode(key: str, value: object) -> str:
    if value is None:
        raise ValidationError(f"Setting {key} requires a value", key=key)
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


class SettingsStore:
    """Key-value settings with load-once caching and write-through updates."""

    def __init__(
        self,
        repository: SettingsRepository,
        shared_cache: Optional[SharedCache] = None,
        *,
        cache_ttl: int = BaseConfig.DEFAULT_CACHE_TTL,
    ):
        self.repository = repository
        self.shared_cache = shared_cache
        self.cache_ttl = cache_ttl
        self._state: CacheState = UNLOADED
        self._lock = RLock()

    @property
    def state(self) -> CacheState:
        return self._state

    @property
    def is_degraded(self) -> bool:
        """True when the bulk load failed and reads are serving defaults."""
        self._loaded()
        state = self._state
        return isinstance(state, Loaded) and state.degraded

    def _loaded(self) -> Loaded:
        state = self._state
        if isinstance(state, Loaded):
            return state
        with self._lock:
            if isinstance(self._state, Unloaded):
                try:
                    self._state = Loaded(self.load_all())
                except StoreReadError as exc:
                    logger.error(
                        "Failed to load settings, serving defaults",
                        extra={"error": str(exc)},
                    )
                    self._state = Loaded(degraded=True)
            return self._state

    def load_all(self) -> dict[str, str]:
        """Bulk read every setting, preferring a fresh shared-cache snapshot.

        Raises:
            StoreReadError: the table could not be read.
        """
        if self.shared_cache is not None:
            cached = self.shared_cache.get(SETTINGS_CACHE_KEY)
            if isinstance(cached, dict):
                logger.debug("Settings served from shared cache")
                return dict(cached)

        values = self.repository.load_all()

        if self.shared_cache is not None:
            self.shared_cache.set(SETTINGS_CACHE_KEY, dict(values), self.cache_ttl)
        return values

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return the stored value for ``key`` or ``default``; never raises."""
        return self._loaded().values.get(key, default)

    def snapshot(self) -> dict[str, str]:
        """Copy of everything currently cached."""
        return dict(self._loaded().values)

    def update(self, key: str, value: object) -> None:
        """Persist ``value`` under ``key`` and refresh the cached entry.

        Raises:
            ValidationError: ``key`` is empty, not a string or too long.
            StoreWriteError: the upsert failed; the cache is left as it was.
        """
        if not isinstance(key, str) or not key.strip():
            raise ValidationError("Invalid setting key", key=key if isinstance(key, str) else None)
        if len(key) > SETTING_KEY_MAX_LENGTH:
            raise ValidationError(
                f"Setting key longer than {SETTING_KEY_MAX_LENGTH} characters", key=key
            )
        encoded = _encode(key, value)

        try:
            self.repository.upsert(key, encoded)
        except StoreWriteError as exc:
            logger.error("Failed to save setting", extra={"key": key, "error": str(exc)})
            raise

        with self._lock:
            if isinstance(self._state, Loaded):
                self._state.values[key] = encoded
        self._invalidate_shared()

    def initialize_defaults(self, defaults: Optional[Mapping[str, str]] = None) -> list[str]:
        """Write each default whose key has no stored value yet.

        Existing values always win, so repeated activation never overwrites an
        operator's edits. Returns the keys that were written.
        """
        if defaults is None:
            defaults = DEFAULT_SETTINGS

        written: list[str] = []
        for key, value in defaults.items():
            try:
                if self.repository.get(key) is not None:
                    continue
                self.update(key, value)
            except (StoreError, ValidationError) as exc:
                logger.error(
                    "Failed to set default", extra={"key": key, "error": str(exc)}
                )
                continue
            written.append(key)

        if written:
            logger.info("Initialized default settings", extra={"keys": written})
        return written

    def create_table(self) -> None:
        """Create the settings table if missing.

        Raises:
            StoreWriteError: the table does not exist afterwards.
        """
        self.repository.create_table()

    def drop(self) -> None:
        """Remove all persisted settings and forget every cached copy.

        Raises:
            StoreWriteError: the table could not be dropped.
        """
        try:
            self.repository.drop_table()
        except StoreWriteError as exc:
            logger.error("Failed to drop settings table", extra={"error": str(exc)})
            raise
        self._invalidate_shared()
        self.reset()

    def reset(self) -> None:
        """Return to the unloaded state; the next ``get`` reloads."""
        with self._lock:
            self._state = UNLOADED

    def _invalidate_shared(self) -> None:
        if self.shared_cache is not None:
            self.shared_cache.delete(SETTINGS_CACHE_KEY)


__all__ = [
    "CacheState",
    "Loaded",
    "SettingsStore",
    "Unloaded",
]
