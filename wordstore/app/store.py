"""
Word Store Facade
=================
The single surface the application calls for word book persistence.

Routes every operation to whichever backend initialize() selected. Callers
never see which substrate is active, except through the documented
per-backend update semantics.
"""

from __future__ import annotations

import logging
from typing import Optional

from wordstore.config import StoreConfig
from wordstore.errors import StoreNotInitializedError, ValidationError, WordStoreError
from wordstore.app.settings import ThemeSettings
from wordstore.storage.factory import create_backend, create_kv_store
from wordstore.storage.models import (
    WORD_FIELDS,
    WordBook,
    WordBookCreate,
    WordBookSummary,
    WordCreate,
)
from wordstore.storage.repository import IWordBookRepository
from wordstore.storage.seed import seed_default_data

logger = logging.getLogger(__name__)


class WordStore:
    """
    Facade over the active word book backend.

    Usage:
        store = WordStore(StoreConfig(backend="auto"))
        await store.initialize()
        books = await store.list_books()

        # or
        async with WordStore() as store:
            book_id = await store.add_book(WordBookCreate(title="Test"))
    """

    def __init__(
        self,
        config: Optional[StoreConfig] = None,
        backend: Optional[IWordBookRepository] = None,
    ):
        """
        Args:
            config: Store configuration (defaults if None)
            backend: Pre-built backend; skips selection when given
        """
        self.config = config or StoreConfig()
        self._backend = backend
        self._ready = False
        self._theme: Optional[ThemeSettings] = None

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def backend_name(self) -> Optional[str]:
        """Name of the selected backend, or None before selection."""
        return self._backend.name if self._backend else None

    # ==================== Lifecycle ====================

    async def initialize(self) -> None:
        """
        Select and open the backend, seeding default data into an empty store.

        Safe to call more than once; later calls do nothing.

        Raises:
            InitializationError: If the backend cannot create its store
        """
        if self._ready:
            logger.debug("initialize() called on a ready store, skipping")
            return

        if self._backend is None:
            self._backend = create_backend(self.config)

        try:
            await self._backend.open()
            if self.config.seed_defaults and await self._backend.needs_seed():
                await seed_default_data(self._backend)
        except WordStoreError:
            logger.error(f"Initializing '{self._backend.name}' backend failed, closing it")
            await self._backend.close()
            raise

        self._ready = True
        logger.info(f"Word store ready on '{self._backend.name}' backend")

    async def close(self) -> None:
        if self._backend is not None:
            await self._backend.close()
        self._ready = False

    async def __aenter__(self) -> "WordStore":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _repo(self, operation: str) -> IWordBookRepository:
        if not self._ready:
            raise StoreNotInitializedError(operation)
        return self._backend

    async def settings(self) -> ThemeSettings:
        """Theme settings stored alongside this store's data, loaded on first use."""
        if self._theme is None:
            theme = ThemeSettings(create_kv_store(self.config))
            await theme.load()
            self._theme = theme
        return self._theme

    # ==================== Word Book Operations ====================

    async def list_books(self) -> list[WordBookSummary]:
        return await self._repo("list_books").list_books()

    async def get_book(self, book_id: int) -> Optional[WordBook]:
        return await self._repo("get_book").get_book(book_id)

    async def add_book(self, book: WordBookCreate) -> int:
        return await self._repo("add_book").add_book(book)

    async def update_book(self, book_id: int, **updates) -> None:
        repo = self._repo("update_book")
        if "title" in updates and not updates["title"]:
            raise ValidationError("Word book title is required", "title")
        await repo.update_book(book_id, **updates)

    async def delete_book(self, book_id: int) -> None:
        await self._repo("delete_book").delete_book(book_id)

    # ==================== Word Operations ====================

    async def add_word(self, book_id: int, word: WordCreate) -> None:
        await self._repo("add_word").add_word(book_id, word)

    async def update_word(
        self,
        word_id: int,
        book_id: Optional[int] = None,
        **updates
    ) -> None:
        repo = self._repo("update_word")
        for name in WORD_FIELDS:
            if name in updates and not updates[name]:
                raise ValidationError(f"Word '{name}' is required", name)
        await repo.update_word(word_id, book_id=book_id, **updates)

    async def delete_word(self, book_id: int, word_id: int) -> None:
        await self._repo("delete_word").delete_word(book_id, word_id)
