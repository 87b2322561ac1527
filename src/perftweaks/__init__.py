"""Network & Performance Tweaks: config-gated site performance tweaks."""

from __future__ import annotations

from .config import BaseConfig, DevConfig
from .context import PluginContext, create_plugin_context
from .services.evaluator import FeatureGateEvaluator, FeatureState
from .services.settings_store import SettingsStore

__version__ = "1.0.0"

__all__ = [
    "BaseConfig",
    "DevConfig",
    "FeatureGateEvaluator",
    "FeatureState",
    "PluginContext",
    "SettingsStore",
    "create_plugin_context",
]
