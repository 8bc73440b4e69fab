# This file makes the models directory a Python package
from .book import BookEntry, BOOKS
from .canon import VERSE_COUNTS
from .verse import ParsedReference, VerseResult

__all__ = [
    'BookEntry',
    'BOOKS',
    'VERSE_COUNTS',
    'ParsedReference',
    'VerseResult',
]
