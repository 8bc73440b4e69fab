# utils/reference_parser.py
import logging
import re

from models.verse import ParsedReference
from utils.books import default_registry
from utils.fuzzy import BookMatcher

logger = logging.getLogger(__name__)

MAX_NUMBER = 999

# A book token is an optional leading numeral (1-3) followed by one or more
# words of letters; accented letters and a trailing apostrophe are allowed
# ("1 Krønikebog", "Nehemias' Bog").
_WORD = r"[^\W\d_]+'?"
_BOOK = rf"(?:[1-3]\s*)?{_WORD}(?:\s+{_WORD})*"

FULL_REFERENCE_RE = re.compile(
    rf"^(?P<book>{_BOOK})\s*(?P<chapter>\d+)\s*[:.]\s*(?P<verse>\d+)(?:\s*-\s*(?P<end>\d+))?$"
)
BOOK_ONLY_RE = re.compile(rf"^{_BOOK}$")

_PUNCTUATION_VARIANTS = str.maketrans({
    '’': "'",  # right single quote
    '–': '-',  # en dash
    '—': '-',  # em dash
})


def _positive(value):
    number = int(value)
    if number < 1 or number > MAX_NUMBER:
        raise ValueError(f"{value} is outside 1..{MAX_NUMBER}")
    return number


class ReferenceParser:
    def __init__(self, registry=None, matcher=None):
        self.registry = registry or default_registry
        self.matcher = matcher or BookMatcher(self.registry)

    def resolve_book(self, token, language):
        """Exact lookup first, fuzzy match as fallback.

        Returns (ordinal, canonical_name, fuzzy) or None.
        """
        ordinal = self.registry.lookup_exact(token, language)
        if ordinal is not None:
            return ordinal, self.registry.canonical_name(ordinal, language), False

        match = self.matcher.find_closest(token, language)
        if match is None:
            return None
        return match.ordinal, match.book_name, True

    def parse(self, raw, language='en'):
        if not raw or not raw.strip():
            return None
        text = raw.strip().translate(_PUNCTUATION_VARIANTS)

        match = FULL_REFERENCE_RE.match(text)
        if match:
            book_token = match.group('book').strip()
            try:
                chapter = _positive(match.group('chapter'))
                start_verse = _positive(match.group('verse'))
                end_verse = _positive(match.group('end')) if match.group('end') else None
            except ValueError as e:
                logger.info(f"Rejected reference '{raw}': {e}")
                return None

            resolved = self.resolve_book(book_token, language)
            if resolved is None:
                logger.info(f"Could not resolve book '{book_token}' in '{raw}' ({language})")
                return None
            ordinal, book_name, fuzzy = resolved
            return ParsedReference(
                book_token=book_token,
                book_ordinal=ordinal,
                book_name=book_name,
                chapter=chapter,
                start_verse=start_verse,
                end_verse=end_verse,
                fuzzy=fuzzy,
            )

        # Book-only input ("Genesis", "1 Mosebog") is a partial reference
        if BOOK_ONLY_RE.match(text):
            resolved = self.resolve_book(text, language)
            if resolved is None:
                logger.info(f"Could not resolve book-only reference '{raw}' ({language})")
                return None
            ordinal, book_name, fuzzy = resolved
            return ParsedReference(
                book_token=text,
                book_ordinal=ordinal,
                book_name=book_name,
                fuzzy=fuzzy,
            )

        logger.info(f"Reference '{raw}' does not match any known pattern")
        return None


default_parser = ReferenceParser()


def parse_reference(raw, language='en'):
    return default_parser.parse(raw, language)
