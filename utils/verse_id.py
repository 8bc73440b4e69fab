# utils/verse_id.py
"""Verse ids in the upstream ``BBCCCVVV`` format.

The book ordinal is written bare (no padding), chapter and verse are padded to
three digits: John 3:16 -> ``43003016``, Genesis 1:1 -> ``1001001``.
"""
import re

BOOK_COUNT = 66
MAX_COMPONENT = 999

_VERSE_ID_RE = re.compile(r'^(\d{1,2})(\d{3})(\d{3})$')


def _check(ordinal, chapter, verse, allow_zero_verse=False):
    if not 1 <= ordinal <= BOOK_COUNT:
        raise ValueError(f"Book ordinal {ordinal} is outside 1..{BOOK_COUNT}")
    if not 1 <= chapter <= MAX_COMPONENT:
        raise ValueError(f"Chapter {chapter} is outside 1..{MAX_COMPONENT}")
    lowest = 0 if allow_zero_verse else 1
    if not lowest <= verse <= MAX_COMPONENT:
        raise ValueError(f"Verse {verse} is outside {lowest}..{MAX_COMPONENT}")


def encode_verse_id(ordinal, chapter, verse):
    _check(ordinal, chapter, verse)
    return f"{ordinal}{chapter:03d}{verse:03d}"


def decode_verse_id(verse_id):
    match = _VERSE_ID_RE.match(str(verse_id))
    if not match:
        raise ValueError(f"Malformed verse id: {verse_id!r}")
    ordinal, chapter, verse = (int(group) for group in match.groups())
    _check(ordinal, chapter, verse)
    return ordinal, chapter, verse


def chapter_range_id(ordinal, chapter):
    """Id covering a whole chapter, e.g. ``43003000-43003999``."""
    _check(ordinal, chapter, 0, allow_zero_verse=True)
    return f"{ordinal}{chapter:03d}000-{ordinal}{chapter:03d}999"
