"""Environment-driven configuration."""

from __future__ import annotations

import pytest

from perftweaks import config as config_module
from perftweaks.config import BaseConfig


@pytest.fixture(autouse=True)
def data_dir(tmp_path, monkeypatch):
    for name in (
        "PERFTWEAKS_DATABASE_URL",
        "PERFTWEAKS_CACHE_BACKEND",
        "PERFTWEAKS_CACHE_TTL",
        "PERFTWEAKS_DEV_MODE",
        "PERFTWEAKS_SECRET_KEY",
        "PERFTWEAKS_HOME_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PERFTWEAKS_DATA_DIR", str(tmp_path / "data"))
    return tmp_path / "data"


def test_defaults(data_dir):
    config = BaseConfig()

    assert config.DATA_DIR == data_dir.resolve()
    assert data_dir.exists()
    assert config.DATABASE_URL == f"sqlite:///{data_dir.resolve() / 'perftweaks.db'}"
    assert config.CACHE_BACKEND == "memory"
    assert config.CACHE_TTL == 12 * 60 * 60
    assert config.cache_path == data_dir.resolve() / "settings_cache.json"


def test_sqlite_engine_options_allow_threads():
    options = BaseConfig().sqlalchemy_engine_options()

    assert options["connect_args"] == {"check_same_thread": False}


def test_non_sqlite_url_has_no_connect_args(monkeypatch):
    monkeypatch.setenv("PERFTWEAKS_DATABASE_URL", "postgresql://db.test/site")

    assert BaseConfig().sqlalchemy_engine_options() == {}


def test_cache_settings_from_environment(monkeypatch):
    monkeypatch.setenv("PERFTWEAKS_CACHE_BACKEND", " File ")
    monkeypatch.setenv("PERFTWEAKS_CACHE_TTL", "600")

    config = BaseConfig()

    assert config.CACHE_BACKEND == "file"
    assert config.CACHE_TTL == 600


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("PERFTWEAKS_CACHE_BACKEND", "redis"),
        ("PERFTWEAKS_CACHE_TTL", "soon"),
        ("PERFTWEAKS_CACHE_TTL", "-1"),
    ],
)
def test_invalid_values_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError):
        BaseConfig()


def test_production_requires_secret_key(monkeypatch):
    monkeypatch.setenv("PERFTWEAKS_DEV_MODE", "false")

    with pytest.raises(ValueError, match="SECRET_KEY"):
        BaseConfig()

    monkeypatch.setenv("PERFTWEAKS_SECRET_KEY", "s3cret")
    assert BaseConfig().DEV_MODE is False


def test_test_config_disables_shared_cache(monkeypatch):
    monkeypatch.setenv("PERFTWEAKS_CACHE_BACKEND", "file")

    config = config_module.TestConfig()

    assert config.TESTING is True
    assert config.CACHE_BACKEND == "none"
