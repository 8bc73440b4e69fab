# tests/test_verse_id.py
import pytest

from utils.verse_id import chapter_range_id, decode_verse_id, encode_verse_id


def test_encode_pads_chapter_and_verse_but_not_book():
    assert encode_verse_id(43, 3, 16) == '43003016'
    assert encode_verse_id(1, 1, 1) == '1001001'
    assert encode_verse_id(19, 119, 176) == '19119176'


@pytest.mark.parametrize('ordinal, chapter, verse', [
    (1, 1, 1),
    (9, 10, 100),
    (66, 22, 21),
    (19, 999, 999),
])
def test_decode_inverts_encode(ordinal, chapter, verse):
    assert decode_verse_id(encode_verse_id(ordinal, chapter, verse)) == (ordinal, chapter, verse)


@pytest.mark.parametrize('ordinal, chapter, verse', [
    (0, 1, 1),
    (67, 1, 1),
    (1, 0, 1),
    (1, 1, 1000),
])
def test_out_of_range_components_are_rejected(ordinal, chapter, verse):
    with pytest.raises(ValueError):
        encode_verse_id(ordinal, chapter, verse)


@pytest.mark.parametrize('verse_id', ['', 'abc', '43003', '123003016', '0001001'])
def test_malformed_ids_are_rejected(verse_id):
    with pytest.raises(ValueError):
        decode_verse_id(verse_id)


def test_chapter_range_id():
    assert chapter_range_id(43, 3) == '43003000-43003999'
