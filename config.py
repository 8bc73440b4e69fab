# config.py
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent


def _float_env(name, default):
    value = os.getenv(name)
    return float(value) if value else default


def _list_env(name):
    value = os.getenv(name, '')
    return [item.strip() for item in value.split(',') if item.strip()]


class Config:
    SUPPORTED_LANGUAGES = ('en', 'da')

    # Bulk datasets: <dir>/<lang>.json on disk, or <url>/<lang>.json over HTTP when set
    VERSE_DATA_DIR = os.getenv('VERSE_DATA_DIR', os.path.join(BASE_DIR, 'data', 'verse-data'))
    VERSE_DATA_URL = os.getenv('VERSE_DATA_URL')

    REMOTE_BASE_URL = os.getenv('REMOTE_BASE_URL', 'https://www.jw.org')
    REMOTE_VERSE_PATHS = {
        'en': '/en/library/bible/study-bible/books/json/html/',
        'da': '/da/bibliotek/bibelen/studiebibel/b%C3%B8ger/json/html/',
    }
    REMOTE_CHAPTER_PATHS = {
        'en': '/en/library/bible/study-bible/books/json/data/',
        'da': '/da/bibliotek/bibelen/studiebibel/b%C3%B8ger/json/data/',
    }

    # Outer budget for one proxy request; remote timeouts are kept strictly below it
    REQUEST_BUDGET_SECONDS = _float_env('REQUEST_BUDGET_SECONDS', 10.0)
    REMOTE_TIMEOUTS = {
        'en': _float_env('REMOTE_TIMEOUT_EN', 8.0),
        'da': _float_env('REMOTE_TIMEOUT_DA', 9.0),
    }
    # Upper bound on simultaneous upstream requests for one verse range
    REMOTE_MAX_CONCURRENCY = int(os.getenv('REMOTE_MAX_CONCURRENCY', 5))
    REMOTE_CACHE_TTL_SECONDS = _float_env('REMOTE_CACHE_TTL_SECONDS', 24 * 60 * 60)

    # API.Bible search proxy; its routes answer 503 until a key is set
    BIBLE_API_BASE_URL = os.getenv('BIBLE_API_BASE_URL', 'https://api.scripture.api.bible/v1')
    BIBLE_API_KEY = os.getenv('BIBLE_API_KEY')
    BIBLE_API_DEFAULT_ID = os.getenv('BIBLE_API_DEFAULT_ID', 'de4e12af7f28f599-02')  # KJV
    BIBLE_API_TIMEOUT_SECONDS = _float_env('BIBLE_API_TIMEOUT_SECONDS', 8.0)

    CLEANER_EXTRA_SELECTORS = _list_env('CLEANER_EXTRA_SELECTORS')

    GENERATOR_DELAY_SECONDS = _float_env('GENERATOR_DELAY_SECONDS', 0.25)
    GENERATOR_TIMEOUT_SECONDS = _float_env('GENERATOR_TIMEOUT_SECONDS', 20.0)

    PORT = int(os.getenv('PORT', 5001))
