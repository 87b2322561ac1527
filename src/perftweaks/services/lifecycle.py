"""Activation, boot and uninstall entry points."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..errors import StoreWriteError
from .evaluator import FeatureGateEvaluator
from .features import CLEANUP_ON_UNINSTALL, DEFAULT_SETTINGS
from .settings_store import SettingsStore

if TYPE_CHECKING:
    from ..context import PluginContext

logger = logging.getLogger(__name__)


def activate(store: SettingsStore) -> list[str]:
    """Create the settings table and seed defaults; safe to run repeatedly.

    Raises:
        StoreWriteError: the table could not be created.
    """
    try:
        store.create_table()
    except StoreWriteError as exc:
        logger.error("Failed to create settings table", extra={"error": str(exc)})
        raise
    written = store.initialize_defaults(DEFAULT_SETTINGS)
    logger.info("Plugin activated", extra={"defaults_written": written})
    return written


def boot(context: PluginContext) -> FeatureGateEvaluator:
    """Build the evaluator for one unit of work and register active features."""
    evaluator = FeatureGateEvaluator(
        context.store,
        context.bus,
        scripts=context.scripts,
        styles=context.styles,
        constants=context.constants,
        shortcodes=context.shortcodes,
        home_url=context.config.HOME_URL,
    )
    evaluator.register()
    context.evaluator = evaluator
    return evaluator


def uninstall(store: SettingsStore) -> bool:
    """Drop all plugin data if the operator asked for it; return whether it ran.

    When the settings cannot be read the answer is unknown, and data is kept.
    """
    cleanup = store.get(CLEANUP_ON_UNINSTALL, DEFAULT_SETTINGS[CLEANUP_ON_UNINSTALL])
    if store.is_degraded:
        logger.warning("Uninstall: settings unreadable, skipping cleanup")
        return False
    if cleanup != "1":
        logger.info("Uninstall: cleanup disabled, keeping settings table")
        return False

    try:
        store.drop()
    except StoreWriteError as exc:
        logger.error("Uninstall: failed to drop table", extra={"error": str(exc)})
        return False
    finally:
        if store.shared_cache is not None:
            store.shared_cache.clear()
    logger.info("Uninstall: plugin data removed")
    return True


__all__ = ["activate", "boot", "uninstall"]
