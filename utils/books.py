# utils/books.py
import re

from models.book import BOOKS

SUPPORTED_LANGUAGES = ('en', 'da')

_WHITESPACE = re.compile(r'\s+')


def normalize_token(token):
    """Lowercase, trim and collapse inner whitespace of a book token."""
    if not token:
        return ''
    return _WHITESPACE.sub(' ', token.strip().lower())


class BookRegistry:
    def __init__(self, books=BOOKS, languages=SUPPORTED_LANGUAGES):
        self.languages = tuple(languages)
        self._books = tuple(sorted(books, key=lambda b: b.ordinal))
        self._by_ordinal = {}
        self._lookup = {}
        self._validate_and_index()

    def _validate_and_index(self):
        expected = list(range(1, len(self._books) + 1))
        ordinals = [book.ordinal for book in self._books]
        if ordinals != expected:
            raise ValueError(f"Book ordinals must be unique and contiguous from 1, got {ordinals}")

        for book in self._books:
            missing = [lang for lang in self.languages if not book.names.get(lang)]
            if missing:
                raise ValueError(f"Book {book.ordinal} has no canonical name for {missing}")
            self._by_ordinal[book.ordinal] = book

            keys = [book.names[lang] for lang in self.languages] + list(book.abbreviations)
            for key in keys:
                normalized = normalize_token(key)
                owner = self._lookup.get(normalized)
                if owner is not None and owner != book.ordinal:
                    raise ValueError(f"'{key}' is claimed by books {owner} and {book.ordinal}")
                self._lookup[normalized] = book.ordinal

    def __len__(self):
        return len(self._books)

    def books(self):
        return self._books

    def get(self, ordinal):
        return self._by_ordinal.get(ordinal)

    def canonical_name(self, ordinal, language):
        return self._by_ordinal[ordinal].names[language]

    def lookup_exact(self, token, language=None):
        """Resolve a book name or abbreviation to its ordinal.

        Any supported language's canonical name and the shared abbreviation
        pool are accepted, whatever ``language`` is requested.
        """
        return self._lookup.get(normalize_token(token))

    def candidates(self, language):
        """Ordered (key, ordinal) pairs for fuzzy matching.

        Books are visited in canonical order; within a book the requested
        language's name comes first, then the other names, then abbreviations.
        """
        pairs = []
        for book in self._books:
            names = [book.names[language]] if language in book.names else []
            names += [book.names[lang] for lang in self.languages if lang != language]
            seen = set()
            for key in names + sorted(book.abbreviations):
                normalized = normalize_token(key)
                if normalized in seen:
                    continue
                seen.add(normalized)
                pairs.append((normalized, book.ordinal))
        return pairs


default_registry = BookRegistry()
