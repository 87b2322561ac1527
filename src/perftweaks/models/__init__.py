"""SQLModel table exports."""

from .settings import SETTING_KEY_MAX_LENGTH, Setting

__all__ = [
    "SETTING_KEY_MAX_LENGTH",
    "Setting",
]
