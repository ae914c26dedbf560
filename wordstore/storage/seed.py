"""
Default Data Seeding
====================
Populates an empty store with two sample word books.

Goes through the repository's public add operations only, so seeded rows get
the same id assignment and validation as user-created ones.
"""

import logging

from wordstore.storage.models import Difficulty, WordBookCreate, WordCreate
from wordstore.storage.repository import IWordBookRepository

logger = logging.getLogger(__name__)


DEFAULT_BOOKS = [
    {
        "title": "基础词汇",
        "description": "日常生活中的常用词汇",
        "icon": "📚",
        "difficulty": Difficulty.EASY.value,
        "gradient": "linear-gradient(135deg, #667eea 0%, #764ba2 100%)",
        "words": [
            ("苹果", "apple"),
            ("香蕉", "banana"),
            ("橙子", "orange"),
            ("电脑", "computer"),
            ("手机", "phone"),
        ],
    },
    {
        "title": "动物世界",
        "description": "各种动物的英文名称",
        "icon": "🐾",
        "difficulty": Difficulty.MEDIUM.value,
        "gradient": "linear-gradient(135deg, #f093fb 0%, #f5576c 100%)",
        "words": [
            ("猫", "cat"),
            ("狗", "dog"),
            ("鸟", "bird"),
            ("老虎", "tiger"),
        ],
    },
]


async def seed_default_data(repo: IWordBookRepository) -> list[int]:
    """
    Insert the default word books and their words.

    Not guarded: callers must check the store is empty first.

    Args:
        repo: Repository to populate

    Returns:
        IDs of the created books, in insertion order
    """
    book_ids = []
    for entry in DEFAULT_BOOKS:
        book_id = await repo.add_book(WordBookCreate(
            title=entry["title"],
            description=entry["description"],
            icon=entry["icon"],
            difficulty=entry["difficulty"],
            gradient=entry["gradient"],
        ))
        for chinese, english in entry["words"]:
            await repo.add_word(book_id, WordCreate(chinese=chinese, english=english))
        book_ids.append(book_id)

    logger.info(f"Seeded {len(book_ids)} default word books on {repo.name} backend")
    return book_ids
