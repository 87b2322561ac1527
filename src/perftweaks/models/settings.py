"""Plugin settings stored in the database."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlalchemy import Column, Text
from sqlmodel import Field, SQLModel

# 191 chars keeps the unique index within utf8mb4 limits on MySQL
SETTING_KEY_MAX_LENGTH = 191


class Setting(SQLModel, table=True):
    """One key-value row; values are strings ("0"/"1" flags, decimal integers)."""

    __tablename__: ClassVar[str] = "npt_settings"

    id: Optional[int] = Field(default=None, primary_key=True)
    setting_key: str = Field(
        nullable=False,
        unique=True,
        index=True,
        max_length=SETTING_KEY_MAX_LENGTH,
    )
    setting_value: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
