"""Pytest configuration and shared fixtures for plugin tests.

Provides an isolated SQLite settings table per test, stores wired to it, and
in-memory host registries so features can be exercised without a real host.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine

from perftweaks.errors import StoreReadError, StoreWriteError
from perftweaks.infra.cache import MemorySharedCache
from perftweaks.infra.database import create_session_factory
from perftweaks.infra.repositories import SQLModelSettingsRepository
from perftweaks.models import Setting  # noqa: F401  # register table metadata
from perftweaks.runtime import AssetRegistry, EventBus, HostConstants, ShortcodeRegistry
from perftweaks.services.evaluator import FeatureGateEvaluator
from perftweaks.services.settings_store import SettingsStore

HOME_URL = "https://example.test"


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "settings.db"


@pytest.fixture(scope="function")
def db_engine(db_path: Path):
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine with the settings table created
    """
    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Transactional session factory matching the one the plugin wires up."""
    return create_session_factory(db_engine)


@pytest.fixture
def settings_repo(session_factory) -> SQLModelSettingsRepository:
    return SQLModelSettingsRepository(session_factory)


@pytest.fixture
def shared_cache() -> MemorySharedCache:
    return MemorySharedCache()


@pytest.fixture
def store(settings_repo) -> SettingsStore:
    """Store without a shared cache: every cold load hits the table."""
    return SettingsStore(settings_repo)


@pytest.fixture
def cached_store(settings_repo, shared_cache) -> SettingsStore:
    return SettingsStore(settings_repo, shared_cache, cache_ttl=60)


# =============================================================================
# Test Doubles
# =============================================================================


class FakeSettingsRepository:
    """In-memory repository with switchable failures and call counters."""

    def __init__(self, values: dict[str, str] | None = None):
        self.values: dict[str, str] = dict(values or {})
        self.fail_reads = False
        self.fail_writes = False
        self.load_calls = 0
        self.dropped = False

    def create_table(self) -> None:
        if self.fail_writes:
            raise StoreWriteError("create failed")

    def load_all(self) -> dict[str, str]:
        self.load_calls += 1
        if self.fail_reads:
            raise StoreReadError("database unavailable")
        return dict(self.values)

    def get(self, key: str):
        if self.fail_reads:
            raise StoreReadError("database unavailable")
        return self.values.get(key)

    def upsert(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StoreWriteError("write failed", key=key)
        self.values[key] = value

    def drop_table(self) -> None:
        if self.fail_writes:
            raise StoreWriteError("drop failed")
        self.values.clear()
        self.dropped = True


@pytest.fixture
def fake_repo() -> FakeSettingsRepository:
    return FakeSettingsRepository()


# =============================================================================
# Host Runtime Fixtures
# =============================================================================


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def scripts() -> AssetRegistry:
    return AssetRegistry()


@pytest.fixture
def styles() -> AssetRegistry:
    return AssetRegistry()


@pytest.fixture
def constants() -> HostConstants:
    return HostConstants()


@pytest.fixture
def shortcodes() -> ShortcodeRegistry:
    registry = ShortcodeRegistry()
    registry.add("gallery")
    return registry


@pytest.fixture
def make_evaluator(bus, scripts, styles, constants, shortcodes):
    """Factory building an evaluator over a store seeded with ``values``."""

    def _make(values: dict[str, str] | None = None, repo=None) -> FeatureGateEvaluator:
        repository = repo if repo is not None else FakeSettingsRepository(values)
        return FeatureGateEvaluator(
            SettingsStore(repository),
            bus,
            scripts=scripts,
            styles=styles,
            constants=constants,
            shortcodes=shortcodes,
            home_url=HOME_URL,
        )

    return _make
