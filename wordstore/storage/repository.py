"""
Repository Pattern Interface
============================
Abstract base class for word book storage operations.
Both storage substrates implement it so callers never branch on the backend.
"""

from abc import ABC, abstractmethod
from typing import Optional

from wordstore.storage.models import (
    WordBook,
    WordBookCreate,
    WordBookSummary,
    WordCreate,
)


class IWordBookRepository(ABC):
    """
    Abstract repository interface for word book storage.

    Implementations:
        - SQLiteRepository: embedded SQL database with a cascading foreign key
        - FlatStorageRepository: key-value storage, joins and cascades by hand

    Every operation is a coroutine. Backends hold no locks; callers that may
    mutate the same book concurrently must serialize those writes themselves.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Backend identifier.

        Returns:
            Short name like 'sqlite' or 'flat'
        """
        pass

    # ==================== Lifecycle ====================

    @abstractmethod
    async def open(self) -> None:
        """
        Open or create the underlying store and make it ready for CRUD calls.

        Raises:
            InitializationError: If the store cannot be prepared
        """
        pass

    @abstractmethod
    async def needs_seed(self) -> bool:
        """
        Check whether the store is empty and should receive default data.

        Returns:
            True if the seeding module should run
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying store."""
        pass

    # ==================== Word Book Operations ====================

    @abstractmethod
    async def list_books(self) -> list[WordBookSummary]:
        """
        List all word books, most recently created first.

        Returns:
            Summaries carrying the live count of each book's words
        """
        pass

    @abstractmethod
    async def get_book(self, book_id: int) -> Optional[WordBook]:
        """
        Get a word book with its words attached.

        Args:
            book_id: Word book identifier

        Returns:
            WordBook if found, None otherwise
        """
        pass

    @abstractmethod
    async def add_book(self, book: WordBookCreate) -> int:
        """
        Create a new word book with an empty word collection.

        Args:
            book: Word book creation data

        Returns:
            Backend-generated book ID
        """
        pass

    @abstractmethod
    async def update_book(self, book_id: int, **updates) -> None:
        """
        Update word book fields.

        Which fields are written is backend specific: the relational backend
        writes only title, description and difficulty; flat storage merges
        every supplied field.

        Args:
            book_id: Book to update
            **updates: Fields to update
        """
        pass

    @abstractmethod
    async def delete_book(self, book_id: int) -> None:
        """
        Delete a word book and every word it owns.

        Args:
            book_id: Book to delete
        """
        pass

    # ==================== Word Operations ====================

    @abstractmethod
    async def add_word(self, book_id: int, word: WordCreate) -> None:
        """
        Add a word to a book.

        Args:
            book_id: Owning book
            word: Word creation data
        """
        pass

    @abstractmethod
    async def update_word(
        self,
        word_id: int,
        book_id: Optional[int] = None,
        **updates
    ) -> None:
        """
        Update word fields.

        Args:
            word_id: Word to update
            book_id: Owning book; required by backends without a reverse index
            **updates: chinese and/or english
        """
        pass

    @abstractmethod
    async def delete_word(self, book_id: int, word_id: int) -> None:
        """
        Remove a word from a book.

        Args:
            book_id: Owning book
            word_id: Word to remove
        """
        pass
