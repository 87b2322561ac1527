"""Plugin configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "perftweaks"
    DB_FILENAME = "perftweaks.db"
    CACHE_FILENAME = "settings_cache.json"
    CACHE_BACKENDS = ("memory", "file", "none")
    # Shared settings snapshot lifetime, 12 hours
    DEFAULT_CACHE_TTL = 12 * 60 * 60

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("PERFTWEAKS_SECRET_KEY", "replace-me")
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("PERFTWEAKS_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("PERFTWEAKS_DATABASE_URL", self._build_sqlite_url())
        self.CACHE_BACKEND = os.getenv("PERFTWEAKS_CACHE_BACKEND", "memory").strip().lower()
        self.CACHE_TTL = _env_int("PERFTWEAKS_CACHE_TTL", self.DEFAULT_CACHE_TTL)
        self.HOME_URL = os.getenv("PERFTWEAKS_HOME_URL", "http://localhost")
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("PERFTWEAKS_SECRET_KEY must be set in non-dev mode.")
        if self.CACHE_BACKEND not in self.CACHE_BACKENDS:
            raise ValueError(
                f"PERFTWEAKS_CACHE_BACKEND must be one of {', '.join(self.CACHE_BACKENDS)}"
            )
        if self.CACHE_TTL < 0:
            raise ValueError("PERFTWEAKS_CACHE_TTL must not be negative.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory holding the SQLite file, shared cache and logs."""

        data_root = os.getenv("PERFTWEAKS_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    @property
    def cache_path(self) -> Path:
        """Location of the file-backed shared settings cache."""

        return Path(self.DATA_DIR) / self.CACHE_FILENAME

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        engine_options: dict[str, Any] = {}
        if self.DATABASE_URL.startswith("sqlite"):
            engine_options["connect_args"] = {"check_same_thread": False}
        return engine_options


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration for test runs: no shared cache, quiet console."""

    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.CACHE_BACKEND = "none"
