"""Plugin context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.cache import SharedCache, create_shared_cache
from .infra.database import (
    SessionFactory,
    create_db_engine,
    create_session_factory,
    init_database,
)
from .infra.repositories import SQLModelSettingsRepository
from .runtime import AssetRegistry, EventBus, HostConstants, ShortcodeRegistry
from .services.evaluator import FeatureGateEvaluator
from .services.settings_store import SettingsStore


@dataclass
class PluginContext:
    """Everything one host process shares between plugin entry points."""

    config: BaseConfig
    engine: Engine
    session_factory: SessionFactory
    settings_repo: SQLModelSettingsRepository
    store: SettingsStore
    shared_cache: Optional[SharedCache] = None

    # Host-side registries handed to the evaluator
    bus: EventBus = field(default_factory=EventBus)
    scripts: AssetRegistry = field(default_factory=AssetRegistry)
    styles: AssetRegistry = field(default_factory=AssetRegistry)
    constants: HostConstants = field(default_factory=HostConstants)
    shortcodes: ShortcodeRegistry = field(default_factory=ShortcodeRegistry)

    evaluator: Optional[FeatureGateEvaluator] = None


def create_plugin_context(
    config: Optional[BaseConfig] = None,
    *,
    engine: Optional[Engine] = None,
) -> PluginContext:
    """Create and initialize the plugin context."""

    if config is None:
        config = BaseConfig()

    if engine is None:
        engine = create_db_engine(config)
    init_database(engine)
    session_factory = create_session_factory(engine)

    settings_repo = SQLModelSettingsRepository(session_factory)
    shared_cache = create_shared_cache(config.CACHE_BACKEND, config.cache_path)
    store = SettingsStore(settings_repo, shared_cache, cache_ttl=config.CACHE_TTL)

    return PluginContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        settings_repo=settings_repo,
        store=store,
        shared_cache=shared_cache,
    )
