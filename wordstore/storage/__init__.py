"""
Storage Module
==============
Word book persistence backends.

Repository Pattern:
    - IWordBookRepository: Abstract interface for storage
    - SQLiteRepository: Embedded SQL implementation (imported on demand)
    - FlatStorageRepository: Key-value implementation
    - BackendFactory: Picks one of them at startup
"""

from .repository import IWordBookRepository
from .flat_repo import FlatStorageRepository
from .factory import BackendFactory, create_backend
from .kv import KeyValueStore, FileKeyValueStore, MemoryKeyValueStore
from .seed import DEFAULT_BOOKS, seed_default_data
from .models import (
    Difficulty,
    Word,
    WordBook,
    WordBookCreate,
    WordBookSummary,
    WordCreate,
)

__all__ = [
    # Repository Pattern
    "IWordBookRepository",
    "FlatStorageRepository",
    "BackendFactory",
    "create_backend",
    # Substrate
    "KeyValueStore",
    "FileKeyValueStore",
    "MemoryKeyValueStore",
    # Seeding
    "DEFAULT_BOOKS",
    "seed_default_data",
    # Models
    "Difficulty",
    "Word",
    "WordBook",
    "WordBookCreate",
    "WordBookSummary",
    "WordCreate",
]
