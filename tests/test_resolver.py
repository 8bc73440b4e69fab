# tests/test_resolver.py
import asyncio

import pytest

from tests.fakes import FakeFetcher, dict_loader
from utils.errors import (
    InvalidRequest,
    ReferenceUnparseable,
    UpstreamTimeout,
    VerseNotFoundLocally,
    VerseNotFoundRemote,
)
from utils.resolver import VerseResolver
from utils.verse_store import LocalVerseStore


@pytest.fixture
def load_calls():
    return []


@pytest.fixture
def store(datasets, load_calls):
    return LocalVerseStore(dict_loader(datasets, calls=load_calls))


def make_resolver(parser, store=None, fetcher=None):
    return VerseResolver(parser=parser, local_store=store, remote_fetcher=fetcher)


def resolve(resolver, reference, language='en', source='local'):
    return asyncio.run(resolver.resolve_verse(reference, language, source))


def test_local_single_verse(parser, store):
    result = resolve(make_resolver(parser, store), 'John 3:16')
    assert result.text.startswith('For God loved the world')
    assert result.reference == 'John 3:16'
    assert result.verse_ids == ['43003016']
    assert not result.defaulted
    assert result.source == 'local'


def test_local_range_is_joined_in_order(parser, store):
    result = resolve(make_resolver(parser, store), '1 Cor 13:4-7')
    assert result.reference == '1 Corinthians 13:4-7'
    assert result.text == ('Love is patient and kind. It does not behave indecently. '
                           'It does not rejoice over unrighteousness. It bears all things.')
    assert result.verse_ids == ['46013004', '46013005', '46013006', '46013007']


@pytest.mark.parametrize('reference', ['John 3:16-14', 'John 3:16-16'])
def test_degenerate_range_becomes_single_verse(parser, store, reference):
    result = resolve(make_resolver(parser, store), reference)
    assert result.end_verse is None
    assert result.verse_ids == ['43003016']
    assert result.reference == 'John 3:16'


def test_book_only_defaults_to_first_verse(parser, store):
    result = resolve(make_resolver(parser, store), 'Genesis')
    assert result.defaulted
    assert (result.chapter, result.verse) == (1, 1)
    assert result.text.startswith('In the beginning')


def test_danish_local_lookup(parser, store):
    result = resolve(make_resolver(parser, store), '1 Mos 1:1', language='da')
    assert result.matched_book == '1 Mosebog'
    assert result.text.startswith('I begyndelsen')


def test_fuzzy_match_is_reported(parser, store):
    result = resolve(make_resolver(parser, store), 'Jonh 3:16')
    assert result.fuzzy
    assert result.matched_book == 'John'


def test_unparseable_reference(parser, store):
    with pytest.raises(ReferenceUnparseable) as excinfo:
        resolve(make_resolver(parser, store), 'not a verse 12')
    assert excinfo.value.status_code == 400


def test_unsupported_language(parser, store):
    with pytest.raises(InvalidRequest):
        resolve(make_resolver(parser, store), 'John 3:16', language='fr')


def test_unsupported_source(parser, store):
    with pytest.raises(InvalidRequest):
        resolve(make_resolver(parser, store), 'John 3:16', source='cache')


def test_local_miss_does_not_fall_back_to_remote(parser, store):
    fetcher = FakeFetcher({'43003018': '<span class="verse">remote text</span>'})
    with pytest.raises(VerseNotFoundLocally):
        resolve(make_resolver(parser, store, fetcher), 'John 3:18')
    assert fetcher.calls == []


def test_range_with_missing_verse_fails_locally(parser, store):
    with pytest.raises(VerseNotFoundLocally):
        resolve(make_resolver(parser, store), 'John 3:16-18')


def test_concurrent_local_requests_load_dataset_once(parser, store, load_calls):
    resolver = make_resolver(parser, store)

    async def scenario():
        return await asyncio.gather(*(resolver.resolve_verse('John 3:16', 'en', 'local') for _ in range(50)))

    results = asyncio.run(scenario())
    assert load_calls == ['en']
    assert len({result.text for result in results}) == 1


def test_remote_range_keeps_verse_order(parser):
    fetcher = FakeFetcher(
        markup={
            '46013004': '<span class="verse">four</span>',
            '46013005': '<span class="verse">five</span>',
            '46013006': '<span class="verse">six</span>',
        },
        delays={'46013004': 0.03, '46013005': 0.02, '46013006': 0.0},
    )
    result = resolve(make_resolver(parser, fetcher=fetcher), '1 Cor 13:4-6', source='remote')
    assert fetcher.completed[0] == '46013006'
    assert result.text == 'four five six'
    assert result.source == 'remote'


def test_remote_markup_is_cleaned(parser):
    fetcher = FakeFetcher({'43011035': '<span class="verse"><span class="chapterNum">11</span>'
                                       'Jesus gave way to tears.<a class="xrefLink">+</a></span>'})
    result = resolve(make_resolver(parser, fetcher=fetcher), 'John 11:35', source='remote')
    assert result.text == 'Jesus gave way to tears.'


def test_remote_not_found_propagates(parser):
    with pytest.raises(VerseNotFoundRemote):
        resolve(make_resolver(parser, fetcher=FakeFetcher()), 'John 3:16', source='remote')


def test_remote_empty_text_is_not_found(parser):
    fetcher = FakeFetcher({'43003016': '<span class="verse"><a class="xrefLink">+</a></span>'})
    with pytest.raises(VerseNotFoundRemote):
        resolve(make_resolver(parser, fetcher=fetcher), 'John 3:16', source='remote')


def test_remote_timeout_propagates(parser):
    fetcher = FakeFetcher({
        '43003016': '<span class="verse">ok</span>',
        '43003017': UpstreamTimeout('too slow'),
    })
    with pytest.raises(UpstreamTimeout):
        resolve(make_resolver(parser, fetcher=fetcher), 'John 3:16-17', source='remote')


def test_first_failure_in_verse_order_wins(parser):
    fetcher = FakeFetcher(
        markup={
            '43003016': UpstreamTimeout('slow'),
            '43003017': VerseNotFoundRemote('gone'),
        },
        delays={'43003016': 0.02},
    )
    with pytest.raises(UpstreamTimeout):
        resolve(make_resolver(parser, fetcher=fetcher), 'John 3:16-17', source='remote')


def test_result_serialisation(parser, store):
    body = resolve(make_resolver(parser, store), '1 Cor 13:4-5').to_dict()
    assert body['reference'] == '1 Corinthians 13:4-5'
    assert body['bookNumber'] == 46
    assert body['endVerse'] == 5
    assert body['language'] == 'en'


def test_remote_range_is_clamped_to_chapter_length(parser):
    # John 3 has 36 verses
    fetcher = FakeFetcher({f'43003{verse:03d}': f'<span class="verse">v{verse}</span>' for verse in range(1, 37)})
    result = resolve(make_resolver(parser, fetcher=fetcher), 'John 3:1-999', source='remote')
    assert len(fetcher.calls) == 36
    assert result.end_verse == 36
    assert result.reference == 'John 3:1-36'
    assert result.text.endswith('v35 v36')


def test_range_starting_on_last_verse_collapses_to_it(parser):
    fetcher = FakeFetcher({'43003036': '<span class="verse">last</span>'})
    result = resolve(make_resolver(parser, fetcher=fetcher), 'John 3:36-40', source='remote')
    assert result.end_verse is None
    assert fetcher.calls == [('43003036', 'en')]


def test_remote_requests_are_bounded(parser):
    markup = {f'19119{verse:03d}': f'<span class="verse">v{verse}</span>' for verse in range(1, 177)}
    fetcher = FakeFetcher(markup, delays={verse_id: 0.001 for verse_id in markup})
    resolver = VerseResolver(parser=parser, remote_fetcher=fetcher, max_concurrency=3)

    result = asyncio.run(resolver.resolve_verse('Psalms 119:1-176', 'en', 'remote'))

    assert len(fetcher.calls) == 176
    assert fetcher.peak_active <= 3
    assert result.text.startswith('v1 v2 v3')


@pytest.mark.parametrize('reference', ['John 3:37', 'John 22:1'])
def test_verses_outside_the_canon_never_reach_upstream(parser, reference):
    fetcher = FakeFetcher()
    with pytest.raises(VerseNotFoundRemote):
        resolve(make_resolver(parser, fetcher=fetcher), reference, source='remote')
    assert fetcher.calls == []


def test_verse_outside_the_canon_is_a_local_miss(parser, store):
    with pytest.raises(VerseNotFoundLocally):
        resolve(make_resolver(parser, store), 'Jude 2:1')
