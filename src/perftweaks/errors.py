"""Exception hierarchy for settings storage and validation."""

from __future__ import annotations


class PerfTweaksError(Exception):
    """Base class for all plugin errors."""


class StoreError(PerfTweaksError):
    """The persistent settings table could not be read or written."""


class StoreReadError(StoreError):
    """Bulk load of the settings table failed."""


class StoreWriteError(StoreError):
    """An upsert, table creation or drop did not take effect."""

    def __init__(self, message: str, *, key: str | None = None):
        super().__init__(message)
        self.key = key


class ValidationError(PerfTweaksError, ValueError):
    """A setting key or submitted value was rejected before reaching the store."""

    def __init__(self, message: str, *, key: str | None = None):
        super().__init__(message)
        self.key = key


__all__ = [
    "PerfTweaksError",
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
    "ValidationError",
]
