"""Feature flag parsing and bounds."""

from __future__ import annotations

import pytest

from perftweaks.services.features import (
    BOOLEAN_KEYS,
    DEFAULT_SETTINGS,
    FEATURES,
    NUMERIC_FEATURES,
    parse_int,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("0", 0),
        ("45", 45),
        ("-3", -3),
        ("", None),
        (" 45", None),
        ("45.0", None),
        ("1e2", None),
        ("abc", None),
        (None, None),
    ],
)
def test_parse_int(raw, expected):
    assert parse_int(raw) == expected


@pytest.mark.parametrize("value", ["1"])
def test_boolean_active_only_for_exact_one(value):
    assert FEATURES["disable_dns_prefetch"].is_active(value)


@pytest.mark.parametrize("value", ["true", "yes", "", "0", " 1", "01", None])
def test_boolean_inactive_for_anything_else(value):
    assert not FEATURES["disable_dns_prefetch"].is_active(value)


@pytest.mark.parametrize("key", list(NUMERIC_FEATURES))
def test_numeric_bounds_are_inclusive(key):
    feature = NUMERIC_FEATURES[key]

    assert feature.resolve(str(feature.minimum)) == feature.minimum
    assert feature.resolve(str(feature.maximum)) == feature.maximum
    assert feature.resolve(str(feature.minimum - 1)) is None
    assert feature.resolve(str(feature.maximum + 1)) is None


def test_declared_bounds():
    bounds = {key: (f.minimum, f.maximum) for key, f in NUMERIC_FEATURES.items()}

    assert bounds == {
        "post_revisions_limit": (0, 100),
        "empty_trash_days": (0, 365),
        "autosave_frequency": (10, 3600),
        "heartbeat_frequency": (15, 300),
    }


def test_defaults_cover_every_feature():
    assert set(DEFAULT_SETTINGS) == set(FEATURES)
    assert DEFAULT_SETTINGS["cleanup_on_uninstall"] == "1"
    assert all(DEFAULT_SETTINGS[key] == "0" for key in BOOLEAN_KEYS if key != "cleanup_on_uninstall")
