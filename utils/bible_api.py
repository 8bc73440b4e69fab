# utils/bible_api.py
"""Client for the API.Bible REST service (keyed, JSON).

Used for translations the local datasets and the study-bible endpoint do not
cover. Results are flattened to ``{id, reference, text}`` with the HTML
content cleaned to plain text.
"""
import asyncio
import json
import logging
import re

import aiohttp

from utils.errors import SourceUnavailable, UpstreamError, UpstreamTimeout, VerseNotFoundRemote
from utils.markup import MarkupCleaner

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 10

# Verse number markers in API.Bible content
VERSE_NUMBER_SELECTORS = ('span.v',)

# "Genesis", "1 Kings": a bare book name gets its first chapter back
BOOK_QUERY_RE = re.compile(r"^[1-3]?\s*[^\W\d_]+$")


class BibleApiClient:
    def __init__(self, base_url, api_key, default_bible_id, timeout=8.0, cleaner=None, session=None):
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.default_bible_id = default_bible_id
        self.timeout = timeout
        if cleaner is None:
            cleaner = MarkupCleaner()
            cleaner.add_remove_selectors(*VERSE_NUMBER_SELECTORS)
        self.cleaner = cleaner
        self._session = session
        self._owns_session = session is None

    @classmethod
    def from_config(cls, config, **kwargs):
        timeout = config.BIBLE_API_TIMEOUT_SECONDS
        budget = config.REQUEST_BUDGET_SECONDS
        if budget:
            timeout = min(timeout, max(budget - 1, budget / 2))
        return cls(
            base_url=config.BIBLE_API_BASE_URL,
            api_key=config.BIBLE_API_KEY,
            default_bible_id=config.BIBLE_API_DEFAULT_ID,
            timeout=timeout,
            **kwargs
        )

    @property
    def configured(self):
        return bool(self.api_key)

    async def _get_session(self):
        if self._session is None or getattr(self._session, 'closed', False):
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self):
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    async def _get_json(self, path, params=None):
        if not self.configured:
            raise SourceUnavailable("BIBLE_API_KEY is not set")

        url = f"{self.base_url}{path}"
        session = await self._get_session()
        logger.info(f"Bible API request {path} {params or ''}")
        try:
            async with session.get(url, headers={'api-key': self.api_key}, params=params,
                                   timeout=aiohttp.ClientTimeout(total=self.timeout)) as response:
                if response.status == 404:
                    raise VerseNotFoundRemote(f"Bible API has nothing at {path}")
                if response.status != 200:
                    raise UpstreamError(f"Bible API answered {response.status} for {path}",
                                        status_code=response.status)
                body = await response.read()
        except asyncio.TimeoutError as e:
            raise UpstreamTimeout(f"Bible API did not answer within {self.timeout}s") from e
        except aiohttp.ClientError as e:
            raise UpstreamError(f"Error contacting Bible API: {e}", status_code=502) from e

        try:
            payload = json.loads(body.decode('utf-8'))
        except ValueError as e:
            raise UpstreamError(f"Malformed JSON from Bible API for {path}", status_code=502) from e
        if not isinstance(payload, dict):
            raise UpstreamError(f"Unexpected Bible API response for {path}", status_code=502)
        return payload.get('data')

    def _entry(self, item, reference=None):
        return {
            'id': str(item.get('id', '')),
            'reference': reference or item.get('reference') or '',
            'text': self.cleaner.clean(item.get('content') or item.get('text') or ''),
        }

    async def search(self, query, bible_id=None, limit=DEFAULT_SEARCH_LIMIT):
        """Verses or passages matching ``query``; an empty list when nothing matches."""
        bible_id = bible_id or self.default_bible_id

        if BOOK_QUERY_RE.match(query.strip()):
            book = await self._find_book(query.strip(), bible_id)
            if book is not None:
                chapter = await self._get_json(f"/bibles/{bible_id}/chapters/{book['id']}.1")
                if isinstance(chapter, dict):
                    return [self._entry(chapter, reference=f"{book.get('name')} 1")]
            logger.info(f"No book named '{query}' in {bible_id}, falling back to text search")

        data = await self._get_json(f"/bibles/{bible_id}/search", params={'query': query, 'limit': limit})
        if not isinstance(data, dict):
            return []
        # Reference-like queries come back as passages, word queries as verses
        items = data.get('passages') or data.get('verses') or []
        return [self._entry(item) for item in items if isinstance(item, dict)]

    async def _find_book(self, name, bible_id):
        books = await self._get_json(f"/bibles/{bible_id}/books")
        if not isinstance(books, list):
            return None
        wanted = name.lower()
        books = [book for book in books if isinstance(book, dict) and book.get('name')]
        for book in books:
            if book['name'].lower() == wanted:
                return book
        for book in books:
            if wanted in book['name'].lower():
                return book
        return None

    async def get_verse(self, verse_id, bible_id=None):
        """One verse by its API.Bible id (e.g. ``JHN.3.16``)."""
        bible_id = bible_id or self.default_bible_id
        data = await self._get_json(f"/bibles/{bible_id}/verses/{verse_id}")
        if not isinstance(data, dict):
            raise VerseNotFoundRemote(f"Bible API returned no verse for {verse_id}")
        return self._entry(data)

    async def list_bibles(self):
        data = await self._get_json("/bibles")
        if not isinstance(data, list):
            return []
        bibles = []
        for bible in data:
            if not isinstance(bible, dict) or not bible.get('id'):
                continue
            language = bible.get('language') or {}
            bibles.append({
                'id': bible.get('id'),
                'name': bible.get('name'),
                'language': {'id': language.get('id'), 'name': language.get('name')},
            })
        return bibles
