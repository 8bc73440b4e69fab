# utils/remote_fetcher.py
"""Verse markup from the upstream study-bible JSON endpoint.

The endpoint is an undocumented internal API of a third-party site. Its
request headers, URL templates and envelope shape are kept in this module so
they can be updated without touching the resolver.
"""
import asyncio
import json
import logging
import threading
import time

import aiohttp

from utils.errors import InvalidRequest, UpstreamError, UpstreamTimeout, VerseNotFoundRemote
from utils.verse_id import chapter_range_id

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0
BUDGET_MARGIN_SECONDS = 1.0
DEFAULT_CACHE_TTL_SECONDS = 24 * 60 * 60

USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36'
)
ACCEPT_LANGUAGE = {
    'en': 'en-US,en;q=0.9',
    'da': 'da-DK,da;q=0.9,en;q=0.8',
}


def request_headers(language, referer='https://www.jw.org/'):
    return {
        'Accept': 'application/json, text/plain, */*',
        'User-Agent': USER_AGENT,
        'Accept-Language': ACCEPT_LANGUAGE.get(language, 'en-US,en;q=0.9'),
        'Referer': referer,
    }


def extract_verse_markup(payload, verse_id):
    """Pull one verse's markup out of a ``{ranges: {id: ...}}`` envelope.

    Prefers ``verses[0].content`` and falls back to ``html``. Returns None when
    neither is present.
    """
    if not isinstance(payload, dict):
        return None
    ranges = payload.get('ranges')
    if not isinstance(ranges, dict):
        return None
    entry = ranges.get(verse_id)
    if not isinstance(entry, dict):
        return None

    verses = entry.get('verses')
    if isinstance(verses, list) and verses and isinstance(verses[0], dict):
        content = verses[0].get('content')
        if isinstance(content, str) and content:
            return content
    html = entry.get('html')
    if isinstance(html, str) and html:
        return html
    return None


def extract_chapter_verses(payload, range_id):
    """List of (verse_id, markup) pairs from a chapter range envelope, or None."""
    if not isinstance(payload, dict):
        return None
    ranges = payload.get('ranges')
    if not isinstance(ranges, dict):
        return None
    entry = ranges.get(range_id)
    if not isinstance(entry, dict) or not isinstance(entry.get('verses'), list):
        return None

    verses = []
    for verse in entry['verses']:
        if not isinstance(verse, dict):
            continue
        verse_id = verse.get('vsID')
        verses.append((str(verse_id) if verse_id is not None else None, verse.get('content')))
    return verses


class FetchCache:
    """Successful fetches keyed by (verse_id, language); expiry is checked on read."""

    def __init__(self, ttl_seconds=DEFAULT_CACHE_TTL_SECONDS, clock=time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries = {}
        self._lock = threading.Lock()

    def get(self, verse_id, language):
        key = (verse_id, language)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            text, fetched_at = entry
            if self._clock() - fetched_at >= self.ttl_seconds:
                del self._entries[key]
                return None
            return text

    def set(self, verse_id, language, text):
        with self._lock:
            self._entries[(verse_id, language)] = (text, self._clock())

    def __len__(self):
        with self._lock:
            return len(self._entries)


class RemoteVerseFetcher:
    def __init__(self, base_url, verse_paths, chapter_paths=None, timeouts=None,
                 request_budget=None, chapter_timeout=None, cache=None, session=None):
        self.base_url = base_url.rstrip('/')
        self.verse_paths = dict(verse_paths)
        self.chapter_paths = dict(chapter_paths or {})
        self.timeouts = dict(timeouts or {})
        self.request_budget = request_budget
        self.chapter_timeout = chapter_timeout
        self.cache = cache if cache is not None else FetchCache()
        self._session = session
        self._owns_session = session is None

        for language in self.verse_paths:
            configured = self.timeouts.get(language, DEFAULT_TIMEOUT_SECONDS)
            effective = self.timeout_for(language)
            if effective < configured:
                logger.warning(
                    f"Remote timeout for '{language}' lowered from {configured}s to {effective}s "
                    f"to stay inside the {request_budget}s request budget"
                )

    @classmethod
    def from_config(cls, config, **kwargs):
        kwargs.setdefault('cache', FetchCache(ttl_seconds=config.REMOTE_CACHE_TTL_SECONDS))
        return cls(
            base_url=config.REMOTE_BASE_URL,
            verse_paths=config.REMOTE_VERSE_PATHS,
            chapter_paths=config.REMOTE_CHAPTER_PATHS,
            timeouts=config.REMOTE_TIMEOUTS,
            request_budget=config.REQUEST_BUDGET_SECONDS,
            **kwargs
        )

    def timeout_for(self, language):
        timeout = self.timeouts.get(language, DEFAULT_TIMEOUT_SECONDS)
        if self.request_budget:
            ceiling = max(self.request_budget - BUDGET_MARGIN_SECONDS, self.request_budget / 2)
            timeout = min(timeout, ceiling)
        return timeout

    def verse_url(self, verse_id, language):
        if language not in self.verse_paths:
            raise InvalidRequest(f"Unsupported language code: {language}")
        return f"{self.base_url}{self.verse_paths[language]}{verse_id}"

    def chapter_url(self, range_id, language):
        if language not in self.chapter_paths:
            raise InvalidRequest(f"No chapter endpoint configured for language: {language}")
        return f"{self.base_url}{self.chapter_paths[language]}{range_id}"

    async def _get_session(self):
        if self._session is None or getattr(self._session, 'closed', False):
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self):
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    async def _get_json(self, url, language, timeout):
        session = await self._get_session()
        try:
            async with session.get(url, headers=request_headers(language),
                                   timeout=aiohttp.ClientTimeout(total=timeout)) as response:
                if response.status != 200:
                    raise UpstreamError(
                        f"Upstream answered {response.status} for {url}",
                        status_code=response.status,
                    )
                body = await response.read()
        except asyncio.TimeoutError as e:
            raise UpstreamTimeout(f"Upstream did not answer within {timeout}s ({language})") from e
        except aiohttp.ClientError as e:
            raise UpstreamError(f"Proxy error fetching from source ({language}): {e}",
                                status_code=getattr(e, 'status', None) or 502) from e

        # UnicodeDecodeError is a ValueError too
        try:
            return json.loads(body.decode('utf-8'))
        except ValueError as e:
            raise UpstreamError(f"Malformed JSON from upstream for {url}: {e}", status_code=502) from e

    async def fetch_verse_markup(self, verse_id, language):
        """Raw markup for one verse. Served from the cache while fresh."""
        cached = self.cache.get(verse_id, language)
        if cached is not None:
            logger.info(f"Cache hit for {verse_id} ({language})")
            return cached

        url = self.verse_url(verse_id, language)
        started = time.monotonic()
        logger.info(f"Fetching verse {verse_id} ({language}) from {url}")
        payload = await self._get_json(url, language, self.timeout_for(language))
        logger.info(f"Upstream answered for {verse_id} ({language}) in {time.monotonic() - started:.2f}s")

        markup = extract_verse_markup(payload, verse_id)
        if markup is None:
            raise VerseNotFoundRemote(f"Verse {verse_id} not found at source ({language})")
        self.cache.set(verse_id, language, markup)
        return markup

    async def fetch_chapter_verses(self, ordinal, chapter, language):
        """All (verse_id, markup) pairs of a chapter in one batched request."""
        range_id = chapter_range_id(ordinal, chapter)
        url = self.chapter_url(range_id, language)
        timeout = self.chapter_timeout or self.timeout_for(language)
        payload = await self._get_json(url, language, timeout)

        verses = extract_chapter_verses(payload, range_id)
        if verses is None:
            raise VerseNotFoundRemote(f"Invalid response structure for chapter range {range_id} ({language})")
        return verses
