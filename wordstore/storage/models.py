"""
Storage Models
==============
Dataclasses for the word book data transfer objects.
"""

import time
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional

from wordstore.errors import ValidationError


class Difficulty(str, Enum):
    """Suggested difficulty labels. Stored as plain strings, never enforced."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


# Fields a caller may set on a word book. id and create_time belong to the backend.
BOOK_FIELDS = ("title", "description", "icon", "difficulty", "gradient", "progress")
WORD_FIELDS = ("chinese", "english")


@dataclass
class WordBookCreate:
    """Data required to create a word book."""
    title: str
    description: str = ""
    icon: str = ""
    difficulty: str = Difficulty.EASY.value
    gradient: str = ""
    progress: int = 0

    def __post_init__(self):
        if not self.title:
            raise ValidationError("Word book title is required", "title")
        if isinstance(self.difficulty, Difficulty):
            self.difficulty = self.difficulty.value


@dataclass
class WordCreate:
    """Data required to add a word to a book."""
    chinese: str
    english: str

    def __post_init__(self):
        for name in WORD_FIELDS:
            if not getattr(self, name):
                raise ValidationError(f"Word '{name}' is required", name)


@dataclass
class Word:
    """Word record with full data."""
    id: int
    book_id: int
    chinese: str
    english: str

    def to_record(self) -> dict:
        return asdict(self)


@dataclass
class WordBookSummary:
    """Word book as listed, with the live count of its words."""
    id: int
    title: str
    description: Optional[str]
    icon: Optional[str]
    difficulty: Optional[str]
    gradient: Optional[str]
    progress: int
    create_time: Optional[int]
    word_count: int = 0


@dataclass
class WordBook:
    """Word book record with its words attached."""
    id: int
    title: str
    description: Optional[str]
    icon: Optional[str]
    difficulty: Optional[str]
    gradient: Optional[str]
    progress: int
    create_time: Optional[int]
    words: list[Word] = field(default_factory=list)

    @property
    def word_count(self) -> int:
        return len(self.words)

    def to_record(self) -> dict:
        """Book fields as persisted, without the attached words."""
        record = asdict(self)
        record.pop("words")
        return record


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)
