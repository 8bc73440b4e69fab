# models/verse.py
from dataclasses import dataclass, field
from typing import List, Optional

@dataclass(frozen=True)
class ParsedReference:
    book_token: str
    book_ordinal: int
    book_name: str
    chapter: Optional[int] = None
    start_verse: Optional[int] = None
    end_verse: Optional[int] = None
    fuzzy: bool = False

    def __post_init__(self):
        if self.chapter is None and (self.start_verse is not None or self.end_verse is not None):
            raise ValueError("A book-only reference cannot carry verse numbers")

    @property
    def is_partial(self):
        """True when only the book was given (no chapter or verse)."""
        return self.chapter is None


@dataclass
class VerseResult:
    text: str
    matched_book: str
    book_ordinal: int
    chapter: int
    verse: int
    language: str
    source: str
    end_verse: Optional[int] = None
    defaulted: bool = False
    fuzzy: bool = False
    verse_ids: List[str] = field(default_factory=list)

    @property
    def reference(self):
        display = f"{self.matched_book} {self.chapter}:{self.verse}"
        if self.end_verse:
            display += f"-{self.end_verse}"
        return display

    def to_dict(self):
        return {
            "text": self.text,
            "reference": self.reference,
            "matchedBook": self.matched_book,
            "bookNumber": self.book_ordinal,
            "chapter": self.chapter,
            "verse": self.verse,
            "endVerse": self.end_verse,
            "defaulted": self.defaulted,
            "fuzzy": self.fuzzy,
            "language": self.language,
            "source": self.source,
        }
