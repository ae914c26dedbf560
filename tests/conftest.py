import pytest
import pytest_asyncio
from pathlib import Path
import sys

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from wordstore.config import StoreConfig
from wordstore.storage.flat_repo import FlatStorageRepository
from wordstore.storage.kv import FileKeyValueStore, MemoryKeyValueStore
from wordstore.storage.sqlite_repo import SQLiteRepository


@pytest.fixture
def sqlite_config(tmp_path):
    """Config pointing the relational backend at a temp directory."""
    return StoreConfig(data_dir=tmp_path, backend="sqlite")


@pytest.fixture
def flat_config(tmp_path):
    """Config pointing the flat backend at a temp directory."""
    return StoreConfig(data_dir=tmp_path, backend="flat")


@pytest_asyncio.fixture
async def sqlite_repo(tmp_path):
    """Opened SQLite repository on a temp database file."""
    repo = SQLiteRepository(tmp_path / "test_words.db")
    await repo.open()
    yield repo
    await repo.close()


@pytest.fixture
def memory_store():
    return MemoryKeyValueStore()


@pytest_asyncio.fixture
async def flat_repo(memory_store):
    """Opened flat repository on an in-memory key-value store."""
    repo = FlatStorageRepository(memory_store)
    await repo.open()
    yield repo
    await repo.close()


@pytest_asyncio.fixture
async def flat_file_repo(tmp_path):
    """Opened flat repository on JSON files."""
    repo = FlatStorageRepository(FileKeyValueStore(tmp_path / "storage"))
    await repo.open()
    yield repo
    await repo.close()


@pytest_asyncio.fixture(params=["sqlite", "flat"])
async def any_repo(request, tmp_path):
    """Each backend in turn, for contracts both must honor."""
    if request.param == "sqlite":
        repo = SQLiteRepository(tmp_path / "any.db")
    else:
        repo = FlatStorageRepository(FileKeyValueStore(tmp_path / "storage"))
    await repo.open()
    yield repo
    await repo.close()
