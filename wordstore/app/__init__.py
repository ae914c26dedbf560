"""
Application Module
==================
The storage facade and process-scoped settings.

Key Components:
    - WordStore: Facade routing CRUD calls to the active backend
    - ThemeSettings: Persisted light/dark preference
"""

from .store import WordStore
from .settings import ThemeSettings

__all__ = [
    "WordStore",
    "ThemeSettings",
]
