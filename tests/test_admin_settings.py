"""Admin-side validation and saving of submitted settings."""

from __future__ import annotations

import pytest

from perftweaks.services.admin_settings import absint, current_settings, save_settings
from perftweaks.services.features import BOOLEAN_KEYS
from perftweaks.services.settings_store import SettingsStore


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("45", 45), ("-45", 45), ("12abc", 12), ("abc", 0), ("", 0), (7, 7), (-3, 3), (2.9, 2)],
)
def test_absint(raw, expected):
    assert absint(raw) == expected


def test_checkboxes_present_are_on_absent_are_off(store):
    result = save_settings(store, {"disable_google_fonts": "on", "cleanup_on_uninstall": ""})

    assert result.ok
    assert store.get("disable_google_fonts") == "1"
    assert store.get("cleanup_on_uninstall") == "1"
    assert store.get("disable_dns_prefetch") == "0"
    assert set(BOOLEAN_KEYS) <= set(result.saved)


def test_json_false_checkbox_is_off(store):
    save_settings(store, {"disable_google_maps": False})

    assert store.get("disable_google_maps") == "0"


def test_numeric_fields_saved_within_bounds(store):
    result = save_settings(
        store,
        {"post_revisions_limit": "0", "heartbeat_frequency": "300", "autosave_frequency": "10"},
    )

    assert result.ok
    assert store.get("post_revisions_limit") == "0"
    assert store.get("heartbeat_frequency") == "300"
    assert store.get("autosave_frequency") == "10"


def test_missing_numeric_fields_are_left_alone(store):
    store.update("empty_trash_days", "9")

    save_settings(store, {})

    assert store.get("empty_trash_days") == "9"


def test_out_of_range_field_is_reported_and_not_saved(store):
    store.update("heartbeat_frequency", "60")

    result = save_settings(store, {"heartbeat_frequency": "10", "empty_trash_days": "14"})

    assert not result.ok
    assert result.errors == ["heartbeat_frequency: Value must be between 15 and 300"]
    assert store.get("heartbeat_frequency") == "60"
    assert store.get("empty_trash_days") == "14"


def test_write_failures_aggregate(fake_repo):
    fake_repo.fail_writes = True
    store = SettingsStore(fake_repo)

    result = save_settings(store, {"heartbeat_frequency": "30"})

    assert not result.ok
    assert result.saved == []
    assert len(result.errors) == len(BOOLEAN_KEYS) + 1
    assert result.to_dict()["updated"] is False


def test_current_settings_fills_defaults(store):
    store.update("heartbeat_frequency", "120")

    values = current_settings(store)

    assert values["heartbeat_frequency"] == "120"
    assert values["post_revisions_limit"] == "5"
    assert values["cleanup_on_uninstall"] == "1"
