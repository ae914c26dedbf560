"""
SQLite Repository Implementation
================================
Concrete implementation of IWordBookRepository on an embedded SQLite file.
Uses aiosqlite so every statement runs off the event loop on the
connection's own worker thread. The connection is opened once and held
until close().
"""

import logging
from pathlib import Path
from typing import Any, Optional, Sequence

import aiosqlite

from wordstore.errors import InitializationError, StatementError
from wordstore.storage.repository import IWordBookRepository
from wordstore.storage.models import (
    Word,
    WordBook,
    WordBookCreate,
    WordBookSummary,
    WordCreate,
    now_ms,
)

logger = logging.getLogger(__name__)

SCHEMA = """
    CREATE TABLE IF NOT EXISTS wordbooks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        description TEXT,
        icon TEXT,
        difficulty TEXT,
        progress INTEGER DEFAULT 0,
        gradient TEXT,
        create_time INTEGER
    );

    CREATE TABLE IF NOT EXISTS words (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        book_id INTEGER,
        chinese TEXT NOT NULL,
        english TEXT NOT NULL,
        FOREIGN KEY (book_id) REFERENCES wordbooks(id) ON DELETE CASCADE
    );

    CREATE INDEX IF NOT EXISTS idx_words_book_id ON words(book_id);
"""

# updateBook writes only these columns; icon, gradient and progress are kept.
BOOK_UPDATE_FIELDS = ("title", "description", "difficulty")
WORD_UPDATE_FIELDS = ("chinese", "english")


class SQLiteRepository(IWordBookRepository):
    """
    SQLite implementation of the word book repository interface.

    Tables:
        - wordbooks: Book metadata
        - words: Word pairs, book_id cascades on delete
    """

    def __init__(self, db_path: Path | str = "data/word_game.db"):
        """
        Initialize SQLite repository.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self._conn: Optional[aiosqlite.Connection] = None

    @property
    def name(self) -> str:
        return "sqlite"

    # ==================== Lifecycle ====================

    async def open(self) -> None:
        """Open the database file, then create the schema."""
        if self._conn is not None:
            logger.warning(f"Database already open: {self.db_path}, continuing with schema setup")
        else:
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                conn = await aiosqlite.connect(self.db_path)
                conn.row_factory = aiosqlite.Row
                await conn.execute("PRAGMA foreign_keys = ON")
                self._conn = conn
            except (aiosqlite.Error, OSError) as e:
                logger.error(f"Open database failed: {self.db_path}: {e}")

        await self._create_tables()

    async def _create_tables(self) -> None:
        """Create tables if absent. Failure here is fatal."""
        if self._conn is None:
            raise InitializationError(
                "No open database connection",
                details=str(self.db_path)
            )
        try:
            await self._conn.executescript(SCHEMA)
            await self._conn.commit()
        except aiosqlite.Error as e:
            logger.error(f"Create tables failed: {e}")
            raise InitializationError("Create tables failed", details=str(e)) from e

    async def needs_seed(self) -> bool:
        rows = await self._select("SELECT count(*) AS count FROM wordbooks")
        return rows[0]["count"] == 0

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    # ==================== Statement helpers ====================

    def _require_conn(self, sql: str) -> aiosqlite.Connection:
        if self._conn is None:
            raise StatementError("Database is not open", sql)
        return self._conn

    async def _execute(self, sql: str, params: Sequence[Any] = ()) -> aiosqlite.Cursor:
        """Run one write statement and commit it."""
        conn = self._require_conn(sql)
        try:
            cursor = await conn.execute(sql, params)
            await conn.commit()
            return cursor
        except aiosqlite.Error as e:
            logger.error(f"Execute SQL failed: {sql.strip()} {e}")
            await conn.rollback()
            raise StatementError(str(e), sql.strip()) from e

    async def _select(self, sql: str, params: Sequence[Any] = ()) -> list[aiosqlite.Row]:
        conn = self._require_conn(sql)
        try:
            async with conn.execute(sql, params) as cursor:
                return list(await cursor.fetchall())
        except aiosqlite.Error as e:
            logger.error(f"Select SQL failed: {sql.strip()} {e}")
            raise StatementError(str(e), sql.strip()) from e

    def _row_to_summary(self, row: aiosqlite.Row) -> WordBookSummary:
        """Convert database row to WordBookSummary dataclass."""
        return WordBookSummary(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            icon=row["icon"],
            difficulty=row["difficulty"],
            gradient=row["gradient"],
            progress=row["progress"] or 0,
            create_time=row["create_time"],
            word_count=row["word_count"],
        )

    def _row_to_word(self, row: aiosqlite.Row) -> Word:
        """Convert database row to Word dataclass."""
        return Word(
            id=row["id"],
            book_id=row["book_id"],
            chinese=row["chinese"],
            english=row["english"],
        )

    # ==================== Word Book Operations ====================

    async def list_books(self) -> list[WordBookSummary]:
        rows = await self._select(
            """
            SELECT b.*, (SELECT count(*) FROM words w WHERE w.book_id = b.id) AS word_count
            FROM wordbooks b
            ORDER BY b.id DESC
            """
        )
        return [self._row_to_summary(row) for row in rows]

    async def get_book(self, book_id: int) -> Optional[WordBook]:
        rows = await self._select("SELECT * FROM wordbooks WHERE id = ?", (book_id,))
        if not rows:
            return None
        row = rows[0]

        word_rows = await self._select(
            "SELECT * FROM words WHERE book_id = ? ORDER BY id",
            (book_id,)
        )
        return WordBook(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            icon=row["icon"],
            difficulty=row["difficulty"],
            gradient=row["gradient"],
            progress=row["progress"] or 0,
            create_time=row["create_time"],
            words=[self._row_to_word(w) for w in word_rows],
        )

    async def add_book(self, book: WordBookCreate) -> int:
        cursor = await self._execute(
            """
            INSERT INTO wordbooks (title, description, icon, difficulty, gradient, progress, create_time)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (book.title, book.description, book.icon, book.difficulty,
             book.gradient, book.progress, now_ms())
        )
        return cursor.lastrowid

    async def update_book(self, book_id: int, **updates) -> None:
        filtered_updates = {k: v for k, v in updates.items() if k in BOOK_UPDATE_FIELDS}
        ignored = set(updates) - set(filtered_updates)
        if ignored:
            logger.debug(f"update_book({book_id}) ignores fields: {sorted(ignored)}")

        if not filtered_updates:
            return

        set_clause = ", ".join(f"{k} = ?" for k in filtered_updates.keys())
        await self._execute(
            f"UPDATE wordbooks SET {set_clause} WHERE id = ?",
            (*filtered_updates.values(), book_id)
        )

    async def delete_book(self, book_id: int) -> None:
        """Delete the book's words, then the book, in one transaction."""
        conn = self._require_conn("DELETE FROM wordbooks")
        statements = (
            "DELETE FROM words WHERE book_id = ?",
            "DELETE FROM wordbooks WHERE id = ?",
        )
        current = statements[0]
        try:
            for current in statements:
                await conn.execute(current, (book_id,))
            await conn.commit()
        except aiosqlite.Error as e:
            logger.error(f"Execute SQL failed: {current} {e}")
            await conn.rollback()
            raise StatementError(str(e), current) from e

    # ==================== Word Operations ====================

    async def add_word(self, book_id: int, word: WordCreate) -> None:
        await self._execute(
            "INSERT INTO words (book_id, chinese, english) VALUES (?, ?, ?)",
            (book_id, word.chinese, word.english)
        )

    async def update_word(
        self,
        word_id: int,
        book_id: Optional[int] = None,
        **updates
    ) -> None:
        # The row carries its own book_id, so the caller's book_id is not needed.
        filtered_updates = {k: v for k, v in updates.items() if k in WORD_UPDATE_FIELDS}
        if not filtered_updates:
            return

        set_clause = ", ".join(f"{k} = ?" for k in filtered_updates.keys())
        await self._execute(
            f"UPDATE words SET {set_clause} WHERE id = ?",
            (*filtered_updates.values(), word_id)
        )

    async def delete_word(self, book_id: int, word_id: int) -> None:
        await self._execute("DELETE FROM words WHERE id = ?", (word_id,))
