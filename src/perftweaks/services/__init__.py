"""Service module exports."""

from . import admin_settings, evaluator, features, lifecycle, settings_store

__all__ = [
    "admin_settings",
    "evaluator",
    "features",
    "lifecycle",
    "settings_store",
]
