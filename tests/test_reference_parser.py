# tests/test_reference_parser.py
import pytest

from models.verse import ParsedReference
from utils.reference_parser import parse_reference


def test_full_citation(parser):
    parsed = parser.parse('John 3:16', 'en')
    assert parsed.book_name == 'John'
    assert parsed.book_ordinal == 43
    assert (parsed.chapter, parsed.start_verse, parsed.end_verse) == (3, 16, None)
    assert not parsed.fuzzy
    assert not parsed.is_partial


def test_danish_abbreviation_resolves_to_genesis(parser):
    parsed = parser.parse('1 Mos 1:1', 'da')
    assert parsed.book_ordinal == 1
    assert parsed.book_name == '1 Mosebog'
    assert (parsed.chapter, parsed.start_verse) == (1, 1)


def test_typo_is_fuzzy_corrected_to_same_result(parser):
    exact = parser.parse('John 3:16', 'en')
    typo = parser.parse('Jonh 3:16', 'en')
    assert typo.fuzzy
    assert (typo.book_ordinal, typo.book_name, typo.chapter, typo.start_verse) == \
        (exact.book_ordinal, exact.book_name, exact.chapter, exact.start_verse)


def test_unresolvable_book_fails_whole_parse(parser):
    assert parser.parse('Xyzzy 3:16', 'en') is None


def test_book_only_input_is_partial(parser):
    parsed = parser.parse('Genesis', 'en')
    assert parsed.is_partial
    assert parsed.book_ordinal == 1
    assert parsed.chapter is None
    assert parsed.start_verse is None
    assert parsed.end_verse is None


def test_book_only_with_leading_numeral(parser):
    parsed = parser.parse('1 Mosebog', 'da')
    assert parsed.is_partial
    assert parsed.book_ordinal == 1


def test_verse_range(parser):
    parsed = parser.parse('1 Cor 13:4-7', 'en')
    assert parsed.book_name == '1 Corinthians'
    assert (parsed.chapter, parsed.start_verse, parsed.end_verse) == (13, 4, 7)


def test_backwards_range_is_accepted_by_the_grammar(parser):
    parsed = parser.parse('John 3:16-14', 'en')
    assert (parsed.start_verse, parsed.end_verse) == (16, 14)


@pytest.mark.parametrize('raw, language, ordinal', [
    ('John 3.16', 'en', 43),
    ('john3:16', 'en', 43),
    ('1co 13:4', 'en', 46),
    ('1 Krønikebog 1:1', 'da', 13),
    ("Nehemias' Bog 2:3", 'da', 16),
    ('Åbenbaringen 21:4', 'da', 66),
    ('Song of Solomon 2:1', 'en', 22),
    ('1 Cor 13:4–7', 'en', 46),
])
def test_accepted_spellings(parser, raw, language, ordinal):
    parsed = parser.parse(raw, language)
    assert parsed is not None, raw
    assert parsed.book_ordinal == ordinal


@pytest.mark.parametrize('raw', [
    '',
    '   ',
    '3:16',
    'Genesis 1',
    'John 0:16',
    'John 3:0',
    'John 3:1000',
    'John 3:16-',
    'John: 3',
])
def test_rejected_input(parser, raw):
    assert parser.parse(raw, 'en') is None


def test_book_token_keeps_original_casing(parser):
    assert parser.parse('  JOHN 3:16 ', 'en').book_token == 'JOHN'


def test_module_level_helper_uses_default_registry():
    assert parse_reference('Rev 21:4').book_name == 'Revelation'


def test_book_only_reference_cannot_carry_verses():
    with pytest.raises(ValueError):
        ParsedReference(book_token='John', book_ordinal=43, book_name='John', start_verse=3)
