"""
Tests for the Flat-Storage Repository
=====================================
Key-value backend: collection layout, hand-rolled joins and cascade,
full-overwrite updates and the bookId requirement on word updates.
"""

import pytest

from wordstore.errors import SerializationError, StatementError, ValidationError, WordStoreError
from wordstore.storage.flat_repo import BOOKS_KEY, next_id, words_key
from wordstore.storage.kv import FileKeyValueStore, MemoryKeyValueStore
from wordstore.storage.models import WordBookCreate, WordCreate

pytestmark = [pytest.mark.flat]


class TestKeyValueStores:
    """Tests for the storage substrates."""

    @pytest.mark.asyncio
    async def test_file_store_round_trip(self, tmp_path):
        store = FileKeyValueStore(tmp_path / "kv")

        assert await store.get("missing", []) == []
        await store.set("books", [{"title": "基础词汇"}])

        assert await store.contains("books")
        assert (tmp_path / "kv" / "books.json").exists()
        assert await store.get("books") == [{"title": "基础词汇"}]
        assert not (tmp_path / "kv" / "books.json.tmp").exists()

        await store.remove("books")
        await store.remove("books")
        assert not await store.contains("books")

    @pytest.mark.asyncio
    async def test_file_store_rejects_corrupt_json(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(SerializationError) as exc_info:
            await store.get("broken")
        assert exc_info.value.key == "broken"

    @pytest.mark.asyncio
    async def test_keys_are_validated(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        with pytest.raises(ValidationError):
            await store.set("../escape", 1)

    @pytest.mark.asyncio
    async def test_memory_store_copies_values(self):
        store = MemoryKeyValueStore()
        value = [{"id": 1}]
        await store.set("k", value)
        value.append({"id": 2})

        assert await store.get("k") == [{"id": 1}]
        assert store.keys() == ["k"]

    @pytest.mark.asyncio
    async def test_unserializable_value_is_rejected(self):
        store = MemoryKeyValueStore()
        with pytest.raises(SerializationError):
            await store.set("k", {"bad": object()})


class TestIdGeneration:

    def test_next_id_is_unique_within_same_millisecond(self, monkeypatch):
        monkeypatch.setattr("wordstore.storage.flat_repo.now_ms", lambda: 1_000)
        assert next_id([]) == 1_000
        assert next_id([1_000]) == 1_001
        assert next_id([5, 1_200]) == 1_201

    @pytest.mark.asyncio
    async def test_rapid_adds_get_distinct_ids(self, flat_repo):
        ids = [await flat_repo.add_book(WordBookCreate(title=f"B{i}")) for i in range(20)]
        assert len(set(ids)) == 20
        assert ids == sorted(ids)


class TestBookOperations:
    """Tests for word book operations on flat storage."""

    @pytest.mark.asyncio
    async def test_index_absent_means_needs_seed(self, flat_repo, memory_store):
        assert await flat_repo.needs_seed() is True
        book_id = await flat_repo.add_book(WordBookCreate(title="Only"))
        assert await flat_repo.needs_seed() is False

        # An emptied index still exists, so it is not reseeded.
        await flat_repo.delete_book(book_id)
        assert await memory_store.get(BOOKS_KEY) == []
        assert await flat_repo.needs_seed() is False

    @pytest.mark.asyncio
    async def test_add_book_layout(self, flat_repo, memory_store):
        book_id = await flat_repo.add_book(WordBookCreate(title="Layout", icon="📚"))

        books = await memory_store.get(BOOKS_KEY)
        assert books[0]["id"] == book_id
        assert books[0]["title"] == "Layout"
        assert books[0]["create_time"] > 0
        assert await memory_store.get(words_key(book_id)) == []

    @pytest.mark.asyncio
    async def test_list_books_newest_first_with_live_counts(self, flat_repo, memory_store):
        older = await flat_repo.add_book(WordBookCreate(title="Older"))
        newer = await flat_repo.add_book(WordBookCreate(title="Newer"))
        await flat_repo.add_word(older, WordCreate("猫", "cat"))

        books = await flat_repo.list_books()
        assert [b.id for b in books] == [newer, older]
        assert books[1].word_count == 1

        # Counts are recomputed from the word key, not stored on the book.
        await memory_store.set(words_key(older), [])
        books = await flat_repo.list_books()
        assert books[1].word_count == 0

    @pytest.mark.asyncio
    async def test_update_book_overwrites_every_supplied_field(self, flat_repo):
        book_id = await flat_repo.add_book(WordBookCreate(
            title="Old", icon="📚", gradient="g1", progress=3,
        ))

        await flat_repo.update_book(book_id, title="New", icon="🐾", gradient="g2", progress=80)

        book = await flat_repo.get_book(book_id)
        assert (book.title, book.icon, book.gradient, book.progress) == ("New", "🐾", "g2", 80)

    @pytest.mark.asyncio
    async def test_update_book_ignores_id_and_unknown_fields(self, flat_repo):
        book_id = await flat_repo.add_book(WordBookCreate(title="Stable"))
        await flat_repo.update_book(book_id, id=1, create_time=0, colour="red")

        book = await flat_repo.get_book(book_id)
        assert book.id == book_id
        assert book.create_time != 0

    @pytest.mark.asyncio
    async def test_update_missing_book_is_noop(self, flat_repo):
        await flat_repo.update_book(123, title="Ghost")
        assert await flat_repo.list_books() == []

    @pytest.mark.asyncio
    async def test_delete_book_removes_word_file(self, flat_file_repo, tmp_path):
        book_id = await flat_file_repo.add_book(WordBookCreate(title="Doomed"))
        await flat_file_repo.add_word(book_id, WordCreate("狗", "dog"))
        word_file = tmp_path / "storage" / f"{words_key(book_id)}.json"
        assert word_file.exists()

        await flat_file_repo.delete_book(book_id)

        assert not word_file.exists()
        assert await flat_file_repo.get_book(book_id) is None
        assert await flat_file_repo.list_books() == []


class TestWordOperations:
    """Tests for word operations on flat storage."""

    @pytest.mark.asyncio
    async def test_add_word_appends_with_book_reference(self, flat_repo):
        book_id = await flat_repo.add_book(WordBookCreate(title="Words"))
        await flat_repo.add_word(book_id, WordCreate("一", "one"))
        await flat_repo.add_word(book_id, WordCreate("二", "two"))

        words = (await flat_repo.get_book(book_id)).words
        assert [w.english for w in words] == ["one", "two"]
        assert all(w.book_id == book_id for w in words)
        assert words[0].id != words[1].id

    @pytest.mark.asyncio
    async def test_add_word_to_missing_book_is_rejected(self, flat_repo, memory_store):
        with pytest.raises(StatementError):
            await flat_repo.add_word(999, WordCreate("鸟", "bird"))
        assert not await memory_store.contains(words_key(999))

    @pytest.mark.asyncio
    async def test_update_word_with_book_id(self, flat_repo):
        book_id = await flat_repo.add_book(WordBookCreate(title="Fix"))
        await flat_repo.add_word(book_id, WordCreate("香蕉", "banan"))
        word = (await flat_repo.get_book(book_id)).words[0]

        await flat_repo.update_word(word.id, book_id=book_id, english="banana")

        updated = (await flat_repo.get_book(book_id)).words[0]
        assert (updated.id, updated.chinese, updated.english) == (word.id, "香蕉", "banana")

    @pytest.mark.asyncio
    async def test_update_word_without_book_id_is_refused(self, flat_repo, caplog):
        book_id = await flat_repo.add_book(WordBookCreate(title="Strict"))
        await flat_repo.add_word(book_id, WordCreate("橙子", "orange"))
        word = (await flat_repo.get_book(book_id)).words[0]

        await flat_repo.update_word(word.id, english="changed")

        assert "requires book_id" in caplog.text
        assert (await flat_repo.get_book(book_id)).words[0].english == "orange"

    @pytest.mark.asyncio
    async def test_delete_word(self, flat_repo):
        book_id = await flat_repo.add_book(WordBookCreate(title="Trim"))
        await flat_repo.add_word(book_id, WordCreate("电脑", "computer"))
        await flat_repo.add_word(book_id, WordCreate("手机", "phone"))
        first = (await flat_repo.get_book(book_id)).words[0]

        await flat_repo.delete_word(book_id, first.id)

        words = (await flat_repo.get_book(book_id)).words
        assert [w.english for w in words] == ["phone"]

    @pytest.mark.asyncio
    async def test_delete_word_from_missing_book_creates_nothing(self, flat_repo, memory_store):
        await flat_repo.delete_word(555, 1)
        assert not await memory_store.contains(words_key(555))


class TestStorageFailures:
    """Substrate failures are logged and surface as store errors."""

    @pytest.mark.asyncio
    async def test_corrupt_index_is_logged_and_raised(self, flat_file_repo, tmp_path, caplog):
        (tmp_path / "storage" / f"{BOOKS_KEY}.json").write_text("[{", encoding="utf-8")

        with pytest.raises(SerializationError) as exc_info:
            await flat_file_repo.list_books()

        assert exc_info.value.key == BOOKS_KEY
        assert f"Read {BOOKS_KEY} failed" in caplog.text

    @pytest.mark.asyncio
    async def test_unreadable_word_key_is_a_statement_error(self, flat_file_repo, tmp_path, caplog):
        book_id = await flat_file_repo.add_book(WordBookCreate(title="Broken"))
        word_file = tmp_path / "storage" / f"{words_key(book_id)}.json"
        word_file.unlink()
        word_file.mkdir()

        with pytest.raises(StatementError) as exc_info:
            await flat_file_repo.list_books()

        assert isinstance(exc_info.value, WordStoreError)
        assert exc_info.value.statement == f"get {words_key(book_id)}"
        assert f"Read {words_key(book_id)} failed" in caplog.text

    @pytest.mark.asyncio
    async def test_failed_word_key_removal_is_a_statement_error(self, flat_file_repo, tmp_path, caplog):
        book_id = await flat_file_repo.add_book(WordBookCreate(title="Stuck"))
        word_file = tmp_path / "storage" / f"{words_key(book_id)}.json"
        word_file.unlink()
        word_file.mkdir()

        with pytest.raises(StatementError) as exc_info:
            await flat_file_repo.delete_book(book_id)

        assert exc_info.value.statement == f"remove {words_key(book_id)}"
        assert f"Remove {words_key(book_id)} failed" in caplog.text

    @pytest.mark.asyncio
    async def test_failed_lookup_is_a_statement_error(self, flat_repo, mocker, caplog):
        mocker.patch.object(
            flat_repo.store, "contains", side_effect=PermissionError("denied")
        )

        with pytest.raises(StatementError):
            await flat_repo.delete_word(1, 1)

        assert f"Lookup {words_key(1)} failed" in caplog.text
