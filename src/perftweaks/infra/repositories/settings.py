"""Settings repository for the plugin's key/value table."""

from __future__ import annotations

from functools import partial
from typing import Callable, Optional

from sqlalchemy import inspect
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.base import Executable
from sqlmodel import Session, select

from ...errors import StoreReadError, StoreWriteError
from ...models.settings import Setting
from ..database import SessionFactory


def _on_conflict_update(insert, key: str, value: str):
    statement = insert(Setting.__table__).values(setting_key=key, setting_value=value)
    return statement.on_conflict_do_update(
        index_elements=["setting_key"],
        set_={"setting_value": value},
    )


def _on_duplicate_key_update(key: str, value: str):
    statement = mysql.insert(Setting.__table__).values(setting_key=key, setting_value=value)
    return statement.on_duplicate_key_update(setting_value=value)


# Dialects with a native "insert or replace by unique key"
_NATIVE_UPSERT: dict[str, Callable[[str, str], Executable]] = {
    "sqlite": partial(_on_conflict_update, sqlite.insert),
    "postgresql": partial(_on_conflict_update, postgresql.insert),
    "mysql": _on_duplicate_key_update,
    "mariadb": _on_duplicate_key_update,
}


def upsert_statement(dialect: str, key: str, value: str) -> Optional[Executable]:
    """Single-statement upsert for ``dialect``, or None when it has none."""
    build = _NATIVE_UPSERT.get(dialect)
    return build(key, value) if build is not None else None


def _engine_of(session: Session) -> Engine:
    bind = session.get_bind()
    if isinstance(bind, Connection):
        return bind.engine
    return bind


class SQLModelSettingsRepository:
    """SQLModel-based settings repository."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    @property
    def table_name(self) -> str:
        return Setting.__tablename__

    def create_table(self) -> None:
        try:
            with self.session_factory() as session:
                engine = _engine_of(session)
            Setting.__table__.create(engine, checkfirst=True)
            exists = inspect(engine).has_table(self.table_name)
        except SQLAlchemyError as exc:
            raise StoreWriteError(f"Failed to create table {self.table_name}: {exc}") from exc
        if not exists:
            raise StoreWriteError(f"Failed to create table {self.table_name}")

    def load_all(self) -> dict[str, str]:
        try:
            with self.session_factory() as session:
                rows = session.exec(select(Setting)).all()
                return {
                    row.setting_key: row.setting_value
                    for row in rows
                    if row.setting_key is not None and row.setting_value is not None
                }
        except SQLAlchemyError as exc:
            raise StoreReadError(f"Failed to load settings: {exc}") from exc

    def get(self, key: str) -> Optional[str]:
        try:
            with self.session_factory() as session:
                row = session.exec(select(Setting).where(Setting.setting_key == key)).first()
                return row.setting_value if row else None
        except SQLAlchemyError as exc:
            raise StoreReadError(f"Failed to read setting {key}: {exc}") from exc

    def upsert(self, key: str, value: str) -> None:
        try:
            with self.session_factory() as session:
                dialect = _engine_of(session).dialect.name
                statement = upsert_statement(dialect, key, value)
                if statement is not None:
                    session.connection().execute(statement)
                else:
                    setting = session.exec(
                        select(Setting).where(Setting.setting_key == key)
                    ).first()
                    if setting:
                        setting.setting_value = value
                    else:
                        setting = Setting(setting_key=key, setting_value=value)
                    session.add(setting)
                session.commit()
        except SQLAlchemyError as exc:
            raise StoreWriteError(f"Failed to save setting {key}: {exc}", key=key) from exc

    def drop_table(self) -> None:
        try:
            with self.session_factory() as session:
                engine = _engine_of(session)
            Setting.__table__.drop(engine, checkfirst=True)
        except SQLAlchemyError as exc:
            raise StoreWriteError(f"Failed to drop table {self.table_name}: {exc}") from exc


__all__ = ["SQLModelSettingsRepository", "upsert_statement"]
