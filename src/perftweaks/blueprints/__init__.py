"""Blueprint exports."""

from . import admin

__all__ = [
    "admin",
]
