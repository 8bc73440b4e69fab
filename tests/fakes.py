# tests/fakes.py
import asyncio
import json

from utils.errors import VerseNotFoundRemote


class FakeResponse:
    def __init__(self, status=200, body='', error=None):
        self.status = status
        if isinstance(body, bytes):
            self.body = body
        elif isinstance(body, str):
            self.body = body.encode('utf-8')
        else:
            self.body = json.dumps(body).encode('utf-8')
        self.error = error

    async def read(self):
        return self.body

    async def text(self):
        return self.body.decode('utf-8')

    async def __aenter__(self):
        if self.error is not None:
            raise self.error
        return self

    async def __aexit__(self, *exc_info):
        return False


class FakeSession:
    """Stands in for aiohttp.ClientSession; ``responder(url)`` builds each response."""

    def __init__(self, responder):
        self.responder = responder
        self.requests = []
        self.closed = False

    def get(self, url, headers=None, params=None, timeout=None):
        self.requests.append({'url': url, 'headers': headers, 'params': params, 'timeout': timeout})
        return self.responder(url)

    async def close(self):
        self.closed = True


def envelope(verse_id, content=None, html=None):
    entry = {}
    if content is not None:
        entry['verses'] = [{'vsID': verse_id, 'content': content}]
    if html is not None:
        entry['html'] = html
    return {'ranges': {verse_id: entry}}


class FakeFetcher:
    """Remote fetcher double keyed by verse id.

    ``markup`` maps verse ids to markup strings or exceptions to raise;
    ``delays`` maps verse ids to seconds to wait before answering.
    """

    def __init__(self, markup=None, delays=None):
        self.markup = dict(markup or {})
        self.delays = dict(delays or {})
        self.calls = []
        self.completed = []
        self.active = 0
        self.peak_active = 0

    async def fetch_verse_markup(self, verse_id, language):
        self.calls.append((verse_id, language))
        self.active += 1
        self.peak_active = max(self.peak_active, self.active)
        try:
            await asyncio.sleep(self.delays.get(verse_id, 0))
        finally:
            self.active -= 1
        value = self.markup.get(verse_id)
        self.completed.append(verse_id)
        if isinstance(value, BaseException):
            raise value
        if value is None:
            raise VerseNotFoundRemote(f"Verse {verse_id} not found at source ({language})")
        return value

    async def close(self):
        pass


def dict_loader(datasets, calls=None, delay=0.0):
    """Async loader serving in-memory datasets, recording each call."""
    async def load(language):
        if calls is not None:
            calls.append(language)
        await asyncio.sleep(delay)
        return datasets[language]
    return load
