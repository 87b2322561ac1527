"""Define-once host constants (revision limit, trash retention, autosave)."""

from __future__ import annotations

from typing import Any, Dict, Optional

POST_REVISIONS = "POST_REVISIONS"
EMPTY_TRASH_DAYS = "EMPTY_TRASH_DAYS"
AUTOSAVE_INTERVAL = "AUTOSAVE_INTERVAL"


class HostConstants:
    """Named values that, once defined, can never be redefined."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._values: Dict[str, Any] = dict(initial or {})

    def define(self, name: str, value: Any) -> bool:
        """Define ``name`` unless it already is; return whether it was set."""
        if name in self._values:
            return False
        self._values[name] = value
        return True

    def is_defined(self, name: str) -> bool:
        return name in self._values

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._values)


__all__ = [
    "AUTOSAVE_INTERVAL",
    "EMPTY_TRASH_DAYS",
    "POST_REVISIONS",
    "HostConstants",
]
