"""
Storage Backend Factory
=======================
Factory pattern for creating repository backends.
Selects the storage substrate once, from configuration or runtime capability.
"""

import importlib.util
import logging
from typing import Callable, Optional

from wordstore.config import StoreConfig
from wordstore.errors import UnknownBackendError
from wordstore.storage.repository import IWordBookRepository
from wordstore.storage.flat_repo import FlatStorageRepository
from wordstore.storage.kv import FileKeyValueStore, KeyValueStore, MemoryKeyValueStore

logger = logging.getLogger(__name__)

BackendBuilder = Callable[[StoreConfig], IWordBookRepository]


def create_kv_store(config: StoreConfig) -> KeyValueStore:
    """Key-value substrate described by config."""
    if config.flat_store == "memory":
        return MemoryKeyValueStore()
    return FileKeyValueStore(config.storage_dir)


def _build_sqlite(config: StoreConfig) -> IWordBookRepository:
    # Imported here so runtimes without the SQL engine can still load flat storage.
    from wordstore.storage.sqlite_repo import SQLiteRepository
    return SQLiteRepository(config.db_path)


def _build_flat(config: StoreConfig) -> IWordBookRepository:
    return FlatStorageRepository(create_kv_store(config))


def sql_engine_available() -> bool:
    """True when the runtime ships the embedded SQLite engine."""
    return importlib.util.find_spec("_sqlite3") is not None


class BackendFactory:
    """
    Factory for creating repository backends.

    Usage:
        # Backend named in config, or picked by capability for 'auto'
        repo = BackendFactory.create_from_config(StoreConfig())

        # Explicit backend
        repo = BackendFactory.create("flat", config)
    """

    # Registry of available backends
    _builders: dict[str, BackendBuilder] = {
        "sqlite": _build_sqlite,
        "flat": _build_flat,
    }

    @classmethod
    def create(cls, name: str, config: Optional[StoreConfig] = None) -> IWordBookRepository:
        """
        Create a repository backend.

        Args:
            name: Backend identifier ('sqlite', 'flat')
            config: Store configuration (defaults if None)

        Returns:
            Unopened repository instance

        Raises:
            UnknownBackendError: If name is not registered
        """
        name = name.lower()
        if name not in cls._builders:
            raise UnknownBackendError(name, cls.available_backends())

        return cls._builders[name](config or StoreConfig())

    @classmethod
    def create_from_config(cls, config: StoreConfig) -> IWordBookRepository:
        name = config.backend
        if name == "auto":
            name = cls.get_default_backend()
            logger.info(f"Auto-selected '{name}' storage backend")
        return cls.create(name, config)

    @classmethod
    def register(cls, name: str, builder: BackendBuilder) -> None:
        """
        Register a new backend.

        Args:
            name: Backend identifier
            builder: Callable building an unopened repository from a StoreConfig
        """
        cls._builders[name.lower()] = builder

    @classmethod
    def unregister(cls, name: str) -> None:
        """
        Unregister a backend.

        Raises:
            KeyError: If backend not registered
        """
        name = name.lower()
        if name not in cls._builders:
            raise KeyError(f"Backend '{name}' not registered")
        del cls._builders[name]

    @classmethod
    def available_backends(cls) -> list[str]:
        return list(cls._builders.keys())

    @classmethod
    def is_available(cls, name: str) -> bool:
        return name.lower() in cls._builders

    @classmethod
    def get_default_backend(cls) -> str:
        """
        Get the default backend identifier.

        Returns:
            'sqlite' when the SQL engine is present, otherwise 'flat'
        """
        if "sqlite" in cls._builders and sql_engine_available():
            return "sqlite"
        if "flat" in cls._builders:
            return "flat"

        available = cls.available_backends()
        if available:
            return available[0]

        raise RuntimeError("No storage backends registered")


def create_backend(config: Optional[StoreConfig] = None) -> IWordBookRepository:
    """
    Convenience function to create the configured backend.

    Example:
        repo = create_backend(StoreConfig(backend="flat"))
    """
    return BackendFactory.create_from_config(config or StoreConfig())
