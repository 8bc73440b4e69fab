# utils/verse_store.py
import asyncio
import json
import logging
import os

import aiohttp

from utils.errors import LoadFailure

logger = logging.getLogger(__name__)


def _read_json(path):
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def file_loader(data_dir):
    """Loader reading ``<data_dir>/<language>.json`` off the event loop."""
    async def load(language):
        path = os.path.join(data_dir, f"{language}.json")
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, _read_json, path)
        except FileNotFoundError as e:
            raise LoadFailure(f"No verse dataset for '{language}' at {path}") from e
        except (OSError, ValueError) as e:
            raise LoadFailure(f"Could not read verse dataset {path}: {e}") from e
    return load


def http_loader(base_url, session=None, timeout=60.0):
    """Loader fetching ``<base_url>/<language>.json`` as a static asset."""
    async def load(language):
        url = f"{base_url.rstrip('/')}/{language}.json"
        owns_session = session is None
        client = session or aiohttp.ClientSession()
        try:
            async with client.get(url, timeout=aiohttp.ClientTimeout(total=timeout)) as response:
                if response.status != 200:
                    raise LoadFailure(f"Verse dataset request for '{language}' answered {response.status}")
                body = await response.read()
            return json.loads(body.decode('utf-8'))
        except asyncio.TimeoutError as e:
            raise LoadFailure(f"Timed out loading verse dataset from {url}") from e
        except (aiohttp.ClientError, ValueError) as e:
            raise LoadFailure(f"Could not load verse dataset from {url}: {e}") from e
        finally:
            if owns_session:
                await client.close()
    return load


class LocalVerseStore:
    """Whole-language verse datasets held in memory, loaded lazily once.

    Concurrent first requests for a language share one in-flight load task.
    A failed load is not remembered, so the next access tries again.
    """

    def __init__(self, loader):
        self._loader = loader
        self._datasets = {}
        self._inflight = {}

    @classmethod
    def from_config(cls, config):
        if config.VERSE_DATA_URL:
            return cls(http_loader(config.VERSE_DATA_URL))
        return cls(file_loader(config.VERSE_DATA_DIR))

    def is_loaded(self, language):
        return language in self._datasets

    def loaded_languages(self):
        return sorted(self._datasets)

    async def ensure_loaded(self, language):
        if language in self._datasets:
            return
        task = self._inflight.get(language)
        if task is None:
            task = asyncio.ensure_future(self._load(language))
            self._inflight[language] = task
        # Shielded so a cancelled caller does not cancel the load others await
        await asyncio.shield(task)

    async def _load(self, language):
        logger.info(f"Loading verse dataset for '{language}'...")
        try:
            data = await self._loader(language)
        except LoadFailure:
            logger.error(f"Verse dataset load failed for '{language}'")
            raise
        except Exception as e:
            logger.error(f"Verse dataset load failed for '{language}': {e}")
            raise LoadFailure(f"Could not load verse dataset for '{language}': {e}") from e
        finally:
            self._inflight.pop(language, None)

        if not isinstance(data, dict) or not data:
            raise LoadFailure(f"Verse dataset for '{language}' is empty or not a JSON object")

        self._datasets[language] = {str(key): value for key, value in data.items()}
        logger.info(f"Loaded {len(data)} verses for '{language}'")

    def get_verse_text(self, verse_id, language):
        dataset = self._datasets.get(language)
        if dataset is None:
            return None
        return dataset.get(verse_id) or None
