"""Feature flag definitions and value parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

_INTEGER_RE = re.compile(r"-?[0-9]+")

# Setting keys
DISABLE_DNS_PREFETCH = "disable_dns_prefetch"
DISABLE_SELF_PINGBACKS = "disable_self_pingbacks"
DISABLE_GOOGLE_MAPS = "disable_google_maps"
DISABLE_GOOGLE_FONTS = "disable_google_fonts"
POST_REVISIONS_LIMIT = "post_revisions_limit"
EMPTY_TRASH_DAYS = "empty_trash_days"
AUTOSAVE_FREQUENCY = "autosave_frequency"
ENABLE_SHORTCODE_CLEANUP = "enable_shortcode_cleanup"
HEARTBEAT_FREQUENCY = "heartbeat_frequency"
CLEANUP_ON_UNINSTALL = "cleanup_on_uninstall"


def parse_int(value: Optional[str]) -> Optional[int]:
    """Return the integer a stored string encodes, or None.

    Only plain decimal strings qualify: no whitespace, sign other than a
    leading minus, decimal point or exponent.
    """
    if not isinstance(value, str) or not _INTEGER_RE.fullmatch(value):
        return None
    return int(value)


@dataclass(frozen=True)
class BooleanFeature:
    """On/off flag; active only when the stored value is exactly ``"1"``."""

    key: str
    default: str = "0"
    label: str = ""

    def is_active(self, value: Optional[str]) -> bool:
        return value == "1"


@dataclass(frozen=True)
class NumericFeature:
    """Bounded integer tunable with inclusive ``[minimum, maximum]``."""

    key: str
    default: str
    minimum: int
    maximum: int
    label: str = ""

    def in_bounds(self, number: int) -> bool:
        return self.minimum <= number <= self.maximum

    def resolve(self, value: Optional[str]) -> Optional[int]:
        """Return the override to apply, or None to keep the host default."""
        number = parse_int(value)
        if number is None or not self.in_bounds(number):
            return None
        return number


Feature = Union[BooleanFeature, NumericFeature]

FEATURES: dict[str, Feature] = {
    feature.key: feature
    for feature in (
        BooleanFeature(DISABLE_DNS_PREFETCH, label="Disable DNS Prefetching"),
        BooleanFeature(DISABLE_SELF_PINGBACKS, label="Disable Self Pingbacks"),
        BooleanFeature(DISABLE_GOOGLE_MAPS, label="Disable Google Maps API"),
        BooleanFeature(DISABLE_GOOGLE_FONTS, label="Disable Google Fonts"),
        NumericFeature(POST_REVISIONS_LIMIT, "5", 0, 100, label="Post Revisions Limit"),
        NumericFeature(EMPTY_TRASH_DAYS, "30", 0, 365, label="Empty Trash Days"),
        NumericFeature(AUTOSAVE_FREQUENCY, "60", 10, 3600, label="Autosave Frequency (seconds)"),
        BooleanFeature(ENABLE_SHORTCODE_CLEANUP, label="Enable Shortcode Cleanup"),
        NumericFeature(HEARTBEAT_FREQUENCY, "60", 15, 300, label="Heartbeat Frequency (seconds)"),
        BooleanFeature(CLEANUP_ON_UNINSTALL, default="1", label="Remove all data on uninstall"),
    )
}

DEFAULT_SETTINGS: dict[str, str] = {key: feature.default for key, feature in FEATURES.items()}

BOOLEAN_FEATURES: dict[str, BooleanFeature] = {
    key: feature for key, feature in FEATURES.items() if isinstance(feature, BooleanFeature)
}
NUMERIC_FEATURES: dict[str, NumericFeature] = {
    key: feature for key, feature in FEATURES.items() if isinstance(feature, NumericFeature)
}

BOOLEAN_KEYS = tuple(BOOLEAN_FEATURES)
NUMERIC_KEYS = tuple(NUMERIC_FEATURES)


__all__ = [
    "BOOLEAN_FEATURES",
    "BOOLEAN_KEYS",
    "DEFAULT_SETTINGS",
    "FEATURES",
    "NUMERIC_FEATURES",
    "NUMERIC_KEYS",
    "BooleanFeature",
    "Feature",
    "NumericFeature",
    "parse_int",
]
