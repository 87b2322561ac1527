"""Settings repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol


class SettingsRepository(Protocol):
    """Persistent key-value table behind the settings store.

    Implementations raise ``StoreReadError`` / ``StoreWriteError`` rather than
    driver exceptions.
    """

    def create_table(self) -> None:
        """Create the backing table if it does not exist."""
        ...

    def load_all(self) -> dict[str, str]:
        """Return every stored key with its value."""
        ...

    def get(self, key: str) -> Optional[str]:
        """Read a single key directly from the table, bypassing any cache."""
        ...

    def upsert(self, key: str, value: str) -> None:
        """Insert or replace the value stored under ``key``."""
        ...

    def drop_table(self) -> None:
        """Remove the backing table and everything in it."""
        ...
