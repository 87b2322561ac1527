"""SQLModel settings repository against a real SQLite table."""

from __future__ import annotations

import pytest
from sqlalchemy import inspect
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlmodel import select

from perftweaks.errors import StoreReadError
from perftweaks.infra.repositories.settings import upsert_statement
from perftweaks.models import Setting


def test_upsert_inserts_then_replaces(settings_repo, session_factory):
    settings_repo.upsert("empty_trash_days", "30")
    settings_repo.upsert("empty_trash_days", "7")

    with session_factory() as session:
        rows = session.exec(select(Setting).where(Setting.setting_key == "empty_trash_days")).all()

    assert len(rows) == 1
    assert rows[0].setting_value == "7"


def test_load_all_returns_flat_mapping(settings_repo):
    settings_repo.upsert("a", "1")
    settings_repo.upsert("b", "2")

    assert settings_repo.load_all() == {"a": "1", "b": "2"}


def test_get_reads_single_key(settings_repo):
    settings_repo.upsert("a", "1")

    assert settings_repo.get("a") == "1"
    assert settings_repo.get("missing") is None


def test_create_table_is_idempotent(settings_repo, db_engine):
    settings_repo.drop_table()
    assert not inspect(db_engine).has_table("npt_settings")

    settings_repo.create_table()
    settings_repo.create_table()

    assert inspect(db_engine).has_table("npt_settings")


def test_load_all_without_table_raises_read_error(settings_repo):
    settings_repo.drop_table()

    with pytest.raises(StoreReadError):
        settings_repo.load_all()


def test_drop_table_tolerates_missing_table(settings_repo):
    settings_repo.drop_table()
    settings_repo.drop_table()


@pytest.mark.parametrize(
    ("dialect", "compiler", "clause"),
    [
        ("sqlite", sqlite.dialect, "ON CONFLICT (setting_key) DO UPDATE"),
        ("postgresql", postgresql.dialect, "ON CONFLICT (setting_key) DO UPDATE"),
        ("mysql", mysql.dialect, "ON DUPLICATE KEY UPDATE"),
        ("mariadb", mysql.dialect, "ON DUPLICATE KEY UPDATE"),
    ],
)
def test_upsert_is_one_native_statement(dialect, compiler, clause):
    statement = upsert_statement(dialect, "heartbeat_frequency", "45")

    sql = str(statement.compile(dialect=compiler()))

    assert sql.startswith("INSERT INTO npt_settings")
    assert clause in sql


def test_upsert_statement_unknown_dialect():
    assert upsert_statement("mssql", "heartbeat_frequency", "45") is None
