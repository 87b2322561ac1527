"""Admin-side validation and persistence of submitted settings."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Mapping

from ..errors import StoreWriteError, ValidationError
from .features import BOOLEAN_KEYS, FEATURES, NUMERIC_FEATURES
from .settings_store import SettingsStore

logger = logging.getLogger(__name__)

_LEADING_INT_RE = re.compile(r"\s*[+-]?([0-9]+)")


@dataclass
class SaveResult:
    """Aggregate outcome of one form submission."""

    errors: list[str] = field(default_factory=list)
    saved: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {"updated": self.ok, "saved": list(self.saved), "errors": list(self.errors)}


def absint(value: Any) -> int:
    """Absolute integer of a submitted field; unparseable input becomes 0."""

    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return abs(value)
    if isinstance(value, float):
        return abs(int(value))
    match = _LEADING_INT_RE.match(str(value))
    return int(match.group(1)) if match else 0


def _checked(value: Any) -> bool:
    # Checkbox semantics: presence means checked, but explicit JSON false does not.
    return value is not None and value is not False


def save_settings(store: SettingsStore, form: Mapping[str, Any]) -> SaveResult:
    """Validate and persist every field of a settings submission.

    Checkboxes absent from ``form`` are stored as ``"0"``. Numeric fields
    absent from ``form`` are left alone; present ones must fall within the
    feature's bounds. Each failure is reported per key; any failure makes
    the whole save unsuccessful.
    """
    result = SaveResult()

    for key in BOOLEAN_KEYS:
        value = "1" if _checked(form.get(key)) else "0"
        try:
            store.update(key, value)
        except (StoreWriteError, ValidationError) as exc:
            result.errors.append(f"{key}: {exc}")
        else:
            result.saved.append(key)

    for key, feature in NUMERIC_FEATURES.items():
        if key not in form:
            continue
        number = absint(form[key])
        if not feature.in_bounds(number):
            result.errors.append(
                f"{key}: Value must be between {feature.minimum} and {feature.maximum}"
            )
            continue
        try:
            store.update(key, str(number))
        except (StoreWriteError, ValidationError) as exc:
            result.errors.append(f"{key}: {exc}")
        else:
            result.saved.append(key)

    if result.errors:
        logger.error("Errors saving settings - %s", ", ".join(result.errors))
    else:
        logger.info("Settings saved", extra={"keys": result.saved})
    return result


def current_settings(store: SettingsStore) -> dict[str, str]:
    """Every feature key with the value the admin form should show."""

    return {key: store.get(key, feature.default) for key, feature in FEATURES.items()}


__all__ = ["SaveResult", "absint", "current_settings", "save_settings"]
