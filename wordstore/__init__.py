"""
wordstore
=========
Word book persistence with one API over two storage substrates:
an embedded SQLite database, or flat key-value storage.
"""

from .config import StoreConfig
from .app.store import WordStore
from .storage.models import Difficulty, Word, WordBook, WordBookCreate, WordBookSummary, WordCreate

__all__ = [
    "StoreConfig",
    "WordStore",
    "Difficulty",
    "Word",
    "WordBook",
    "WordBookCreate",
    "WordBookSummary",
    "WordCreate",
]
