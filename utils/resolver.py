# utils/resolver.py
import asyncio
import logging

from models.canon import chapter_count, verse_count
from models.verse import VerseResult
from utils.books import SUPPORTED_LANGUAGES
from utils.errors import InvalidRequest, ReferenceUnparseable, VerseNotFoundLocally, VerseNotFoundRemote
from utils.markup import MarkupCleaner
from utils.reference_parser import ReferenceParser
from utils.remote_fetcher import RemoteVerseFetcher
from utils.verse_id import encode_verse_id
from utils.verse_store import LocalVerseStore

logger = logging.getLogger(__name__)

SOURCE_LOCAL = 'local'
SOURCE_REMOTE = 'remote'
SOURCES = (SOURCE_LOCAL, SOURCE_REMOTE)
DEFAULT_MAX_CONCURRENCY = 5


class VerseResolver:
    """Reference string in, verse text out.

    Local and remote are alternative sources chosen by the caller; a miss in
    one is never retried against the other.
    """

    def __init__(self, parser=None, local_store=None, remote_fetcher=None, cleaner=None,
                 languages=SUPPORTED_LANGUAGES, max_concurrency=DEFAULT_MAX_CONCURRENCY):
        self.parser = parser or ReferenceParser()
        self.local_store = local_store
        self.remote_fetcher = remote_fetcher
        self.cleaner = cleaner or MarkupCleaner()
        self.languages = tuple(languages)
        self.max_concurrency = max_concurrency

    async def resolve_verse(self, reference, language='en', source=SOURCE_LOCAL):
        if language not in self.languages:
            raise InvalidRequest(f"Unsupported language code: {language}")
        if source not in SOURCES:
            raise InvalidRequest(f"Unsupported source: {source}")

        parsed = self.parser.parse(reference, language)
        if parsed is None:
            raise ReferenceUnparseable(f"Could not parse reference: {reference}")

        defaulted = parsed.is_partial
        if defaulted:
            chapter, start_verse, end_verse = 1, 1, None
            logger.info(f"Book-only reference '{reference}' defaulted to {parsed.book_name} 1:1")
        else:
            chapter, start_verse, end_verse = parsed.chapter, parsed.start_verse, parsed.end_verse

        if end_verse is not None and end_verse <= start_verse:
            if end_verse != start_verse:
                logger.warning(f"Degenerate range in '{reference}' ({start_verse}-{end_verse}), using verse {start_verse} only")
            end_verse = None

        chapter_length = self._chapter_length(parsed.book_ordinal, chapter)
        if chapter_length is None or start_verse > chapter_length:
            not_found = VerseNotFoundLocally if source == SOURCE_LOCAL else VerseNotFoundRemote
            raise not_found(f"{parsed.book_name} {chapter}:{start_verse} is outside the canon")
        if end_verse is not None and end_verse > chapter_length:
            logger.warning(f"Range in '{reference}' ends past {parsed.book_name} {chapter} "
                           f"({chapter_length} verses), clamping")
            end_verse = chapter_length if chapter_length > start_verse else None

        last_verse = end_verse if end_verse is not None else start_verse
        verse_ids = [encode_verse_id(parsed.book_ordinal, chapter, verse)
                     for verse in range(start_verse, last_verse + 1)]

        if source == SOURCE_LOCAL:
            texts = await self._resolve_local(verse_ids, language)
        else:
            texts = await self._resolve_remote(verse_ids, language)

        return VerseResult(
            text=' '.join(texts),
            matched_book=parsed.book_name,
            book_ordinal=parsed.book_ordinal,
            chapter=chapter,
            verse=start_verse,
            end_verse=end_verse,
            defaulted=defaulted,
            fuzzy=parsed.fuzzy,
            language=language,
            source=source,
            verse_ids=verse_ids,
        )

    async def _resolve_local(self, verse_ids, language):
        if self.local_store is None:
            raise InvalidRequest("Local verse data is not configured")
        await self.local_store.ensure_loaded(language)

        texts = []
        for verse_id in verse_ids:
            text = self.local_store.get_verse_text(verse_id, language)
            if text is None:
                raise VerseNotFoundLocally(f"Verse {verse_id} not found in local '{language}' data")
            texts.append(text)
        return texts

    async def _resolve_remote(self, verse_ids, language):
        if self.remote_fetcher is None:
            raise InvalidRequest("Remote verse source is not configured")

        semaphore = asyncio.Semaphore(self.max_concurrency)
        results = await asyncio.gather(
            *(self._fetch_remote_text(semaphore, verse_id, language) for verse_id in verse_ids),
            return_exceptions=True,
        )
        # gather keeps argument order, so results line up with ascending verses
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return results

    @staticmethod
    def _chapter_length(ordinal, chapter):
        if chapter > chapter_count(ordinal):
            return None
        return verse_count(ordinal, chapter)

    async def _fetch_remote_text(self, semaphore, verse_id, language):
        async with semaphore:
            markup = await self.remote_fetcher.fetch_verse_markup(verse_id, language)
        text = self.cleaner.clean(markup)
        if not text:
            raise VerseNotFoundRemote(f"Verse {verse_id} ({language}) has no readable text at source")
        return text


def build_resolver(config, **overrides):
    """Resolver wired from a Config class; keyword overrides replace collaborators."""
    cleaner = overrides.pop('cleaner', None)
    if cleaner is None:
        cleaner = MarkupCleaner()
        cleaner.add_remove_selectors(*config.CLEANER_EXTRA_SELECTORS)

    local_store = overrides.pop('local_store', None) or LocalVerseStore.from_config(config)
    remote_fetcher = overrides.pop('remote_fetcher', None) or RemoteVerseFetcher.from_config(config)
    return VerseResolver(
        parser=overrides.pop('parser', None),
        local_store=local_store,
        remote_fetcher=remote_fetcher,
        cleaner=cleaner,
        languages=config.SUPPORTED_LANGUAGES,
        max_concurrency=config.REMOTE_MAX_CONCURRENCY,
    )
