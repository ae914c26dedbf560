"""
Key-Value Storage Substrate
===========================
Flat, key-scoped persistence for runtimes without an SQL engine.

Each key holds one JSON document. Reads and writes always move the whole
document; there is no partial update at this level.

Implementations:
    - FileKeyValueStore: one JSON file per key, async I/O via aiofiles
    - MemoryKeyValueStore: process-local dict, still JSON round-tripped
"""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os

from wordstore.errors import SerializationError, ValidationError

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_\-]+$")


def _check_key(key: str) -> str:
    if not _KEY_PATTERN.match(key or ""):
        raise ValidationError(f"Invalid storage key: {key!r}", "key")
    return key


def encode_value(key: str, value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise SerializationError(key, "Value is not JSON serializable", str(e)) from e


def decode_value(key: str, raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise SerializationError(key, "Stored value is not valid JSON", str(e)) from e


class KeyValueStore(ABC):
    """Abstract async key-value store."""

    @abstractmethod
    async def get(self, key: str, default: Any = None) -> Any:
        """
        Read and decode the value under key.

        Returns:
            The decoded value, or default when the key is absent
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Encode and write value under key, replacing any previous value."""
        pass

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Remove key. Removing an absent key is a no-op."""
        pass

    @abstractmethod
    async def contains(self, key: str) -> bool:
        pass


class FileKeyValueStore(KeyValueStore):
    """
    Directory-backed store: key 'x' lives in '<root>/x.json'.

    Writes go to a temp file first, then replace the target.
    """

    def __init__(self, root: Path | str = "data/storage"):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.root / f"{_check_key(key)}.json"

    async def get(self, key: str, default: Any = None) -> Any:
        path = self._path(key)
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                raw = await f.read()
        except FileNotFoundError:
            return default
        return decode_value(key, raw)

    async def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        raw = encode_value(key, value)
        temp_path = path.with_name(path.name + ".tmp")
        async with aiofiles.open(temp_path, "w", encoding="utf-8") as f:
            await f.write(raw)
        await aiofiles.os.replace(temp_path, path)

    async def remove(self, key: str) -> None:
        try:
            await aiofiles.os.remove(self._path(key))
        except FileNotFoundError:
            logger.debug(f"remove({key}): key already absent")

    async def contains(self, key: str) -> bool:
        return await aiofiles.os.path.exists(self._path(key))


class MemoryKeyValueStore(KeyValueStore):
    """In-process store holding encoded JSON text per key."""

    def __init__(self):
        self._data: dict[str, str] = {}

    async def get(self, key: str, default: Any = None) -> Any:
        raw = self._data.get(_check_key(key))
        if raw is None:
            return default
        return decode_value(key, raw)

    async def set(self, key: str, value: Any) -> None:
        self._data[_check_key(key)] = encode_value(key, value)

    async def remove(self, key: str) -> None:
        self._data.pop(_check_key(key), None)

    async def contains(self, key: str) -> bool:
        return _check_key(key) in self._data

    def keys(self) -> list[str]:
        """Keys currently stored, for inspection."""
        return sorted(self._data)
