"""
Flat-Storage Repository Implementation
======================================
IWordBookRepository on a KeyValueStore, for runtimes without SQL.

Layout:
    wordbooks_db          list of book records, newest first
    words_db_<bookId>     list of word records owned by that book

Joins (word counts, attached words) and the cascade on book delete are done
by hand. A book delete is two writes: the filtered index, then removal of the
book's word key. A crash between them leaves an unreferenced word key behind;
it is never reattached because ids are never reused.
"""

import logging
from dataclasses import asdict, fields
from typing import Iterable, Optional

from wordstore.errors import SerializationError, StatementError
from wordstore.storage.kv import KeyValueStore
from wordstore.storage.repository import IWordBookRepository
from wordstore.storage.models import (
    BOOK_FIELDS,
    WORD_FIELDS,
    Word,
    WordBook,
    WordBookCreate,
    WordBookSummary,
    WordCreate,
    now_ms,
)

logger = logging.getLogger(__name__)

BOOKS_KEY = "wordbooks_db"
WORDS_KEY_PREFIX = "words_db_"

_BOOK_RECORD_FIELDS = {f.name for f in fields(WordBookSummary)} - {"word_count"}


def words_key(book_id: int) -> str:
    return f"{WORDS_KEY_PREFIX}{book_id}"


def next_id(existing_ids: Iterable[int]) -> int:
    """
    Timestamp-style id that is unique within a collection.

    Uses the current epoch milliseconds, bumped past the largest existing id
    so calls within the same millisecond still get distinct, increasing ids.
    """
    candidate = now_ms()
    highest = max(existing_ids, default=None)
    if highest is not None and candidate <= highest:
        candidate = highest + 1
    return candidate


class FlatStorageRepository(IWordBookRepository):
    """
    Key-value implementation of the word book repository interface.

    updateBook here overwrites every supplied field, unlike the relational
    backend which only writes title, description and difficulty.
    """

    def __init__(self, store: KeyValueStore):
        """
        Initialize flat-storage repository.

        Args:
            store: Key-value substrate holding the collections
        """
        self.store = store

    @property
    def name(self) -> str:
        return "flat"

    # ==================== Lifecycle ====================

    async def open(self) -> None:
        # No schema: the index key is created by the first add_book.
        logger.debug(f"Flat storage ready on {type(self.store).__name__}")

    async def needs_seed(self) -> bool:
        return not await self._has_key(BOOKS_KEY)

    async def close(self) -> None:
        pass

    # ==================== Collection helpers ====================

    async def _read_list(self, key: str) -> list[dict]:
        try:
            value = await self.store.get(key, [])
        except SerializationError as e:
            logger.error(f"Read {key} failed: {e}")
            raise
        except OSError as e:
            logger.error(f"Read {key} failed: {e}")
            raise StatementError(str(e), f"get {key}") from e

        if not isinstance(value, list):
            logger.error(f"Read {key} failed: expected a list, got {type(value).__name__}")
            raise StatementError(f"Collection under '{key}' is not a list", f"get {key}")
        return value

    async def _write_list(self, key: str, records: list[dict]) -> None:
        try:
            await self.store.set(key, records)
        except SerializationError as e:
            logger.error(f"Write {key} failed: {e}")
            raise
        except OSError as e:
            logger.error(f"Write {key} failed: {e}")
            raise StatementError(str(e), f"set {key}") from e

    async def _has_key(self, key: str) -> bool:
        try:
            return await self.store.contains(key)
        except OSError as e:
            logger.error(f"Lookup {key} failed: {e}")
            raise StatementError(str(e), f"contains {key}") from e

    async def _remove_key(self, key: str) -> None:
        try:
            await self.store.remove(key)
        except OSError as e:
            logger.error(f"Remove {key} failed: {e}")
            raise StatementError(str(e), f"remove {key}") from e

    @staticmethod
    def _summary(record: dict, word_count: int) -> WordBookSummary:
        known = {k: record.get(k) for k in _BOOK_RECORD_FIELDS}
        known["progress"] = known["progress"] or 0
        return WordBookSummary(**known, word_count=word_count)

    @staticmethod
    def _word(record: dict, book_id: int) -> Word:
        return Word(
            id=record["id"],
            book_id=record.get("book_id", book_id),
            chinese=record["chinese"],
            english=record["english"],
        )

    # ==================== Word Book Operations ====================

    async def list_books(self) -> list[WordBookSummary]:
        books = await self._read_list(BOOKS_KEY)
        summaries = []
        for record in books:
            words = await self._read_list(words_key(record["id"]))
            summaries.append(self._summary(record, len(words)))
        return summaries

    async def get_book(self, book_id: int) -> Optional[WordBook]:
        books = await self._read_list(BOOKS_KEY)
        record = next((b for b in books if b["id"] == book_id), None)
        if record is None:
            return None

        words = await self._read_list(words_key(book_id))
        summary = self._summary(record, len(words))
        book_fields = asdict(summary)
        book_fields.pop("word_count")
        return WordBook(**book_fields, words=[self._word(w, book_id) for w in words])

    async def add_book(self, book: WordBookCreate) -> int:
        books = await self._read_list(BOOKS_KEY)
        new_id = next_id(b["id"] for b in books)
        record = WordBook(id=new_id, create_time=now_ms(), **asdict(book)).to_record()

        books.insert(0, record)
        await self._write_list(BOOKS_KEY, books)
        await self._write_list(words_key(new_id), [])
        return new_id

    async def update_book(self, book_id: int, **updates) -> None:
        filtered_updates = {k: v for k, v in updates.items() if k in BOOK_FIELDS}
        ignored = set(updates) - set(filtered_updates)
        if ignored:
            logger.debug(f"update_book({book_id}) ignores fields: {sorted(ignored)}")

        books = await self._read_list(BOOKS_KEY)
        for idx, record in enumerate(books):
            if record["id"] == book_id:
                books[idx] = {**record, **filtered_updates}
                await self._write_list(BOOKS_KEY, books)
                return
        logger.debug(f"update_book({book_id}): no such book")

    async def delete_book(self, book_id: int) -> None:
        books = await self._read_list(BOOKS_KEY)
        remaining = [b for b in books if b["id"] != book_id]
        await self._write_list(BOOKS_KEY, remaining)
        await self._remove_key(words_key(book_id))

    # ==================== Word Operations ====================

    async def add_word(self, book_id: int, word: WordCreate) -> None:
        books = await self._read_list(BOOKS_KEY)
        if not any(b["id"] == book_id for b in books):
            # Mirrors the relational foreign key: no words without a book.
            logger.error(f"add_word failed: word book {book_id} does not exist")
            raise StatementError(
                f"Word book {book_id} does not exist",
                f"append {words_key(book_id)}"
            )

        key = words_key(book_id)
        words = await self._read_list(key)
        word_id = next_id(w["id"] for w in words)
        words.append(Word(id=word_id, book_id=book_id, **asdict(word)).to_record())
        await self._write_list(key, words)

    async def update_word(
        self,
        word_id: int,
        book_id: Optional[int] = None,
        **updates
    ) -> None:
        if book_id is None:
            # No reverse index from word id to book: refuse rather than scan.
            logger.error(f"update_word({word_id}) requires book_id on flat storage")
            return

        filtered_updates = {k: v for k, v in updates.items() if k in WORD_FIELDS}
        key = words_key(book_id)
        words = await self._read_list(key)
        for idx, record in enumerate(words):
            if record["id"] == word_id:
                words[idx] = {**record, **filtered_updates}
                await self._write_list(key, words)
                return
        logger.debug(f"update_word({word_id}): not found in book {book_id}")

    async def delete_word(self, book_id: int, word_id: int) -> None:
        key = words_key(book_id)
        if not await self._has_key(key):
            return
        words = await self._read_list(key)
        await self._write_list(key, [w for w in words if w["id"] != word_id])
