"""
Store Configuration
===================
Configuration for the word book store and its backend selection.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Optional

BackendName = Literal["auto", "sqlite", "flat"]


@dataclass
class StoreConfig:
    """
    Store configuration.

    Attributes:
        data_dir: Directory for application data
        backend: 'sqlite', 'flat', or 'auto' to pick by runtime capability
        db_name: SQLite database file name
        db_path: Path to SQLite database (defaults to data_dir/db_name)
        storage_dir: Directory for flat key-value files (defaults to data_dir/storage)
        flat_store: 'file' for on-disk keys, 'memory' for a process-local store
        seed_defaults: Seed the sample word books into an empty store
    """

    data_dir: Path = field(default_factory=lambda: Path("data"))
    backend: BackendName = "auto"

    # Relational
    db_name: str = "word_game.db"
    db_path: Optional[Path] = None

    # Flat storage
    storage_dir: Optional[Path] = None
    flat_store: Literal["file", "memory"] = "file"

    seed_defaults: bool = True

    def __post_init__(self):
        """Ensure directories exist and set defaults."""
        self.data_dir = Path(self.data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        if self.db_path is None:
            self.db_path = self.data_dir / self.db_name
        if self.storage_dir is None:
            self.storage_dir = self.data_dir / "storage"

    @classmethod
    def from_dict(cls, config_dict: dict) -> "StoreConfig":
        """
        Create config from dictionary.

        Args:
            config_dict: Configuration dictionary

        Returns:
            StoreConfig instance
        """
        path_fields = {"data_dir", "db_path", "storage_dir"}
        processed = {}

        for key, value in config_dict.items():
            if key in path_fields and value is not None:
                processed[key] = Path(value)
            else:
                processed[key] = value

        return cls(**processed)

    def to_dict(self) -> dict:
        return {
            "data_dir": str(self.data_dir),
            "backend": self.backend,
            "db_name": self.db_name,
            "db_path": str(self.db_path) if self.db_path else None,
            "storage_dir": str(self.storage_dir) if self.storage_dir else None,
            "flat_store": self.flat_store,
            "seed_defaults": self.seed_defaults,
        }
