# scripts/generate_verse_data.py
import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

# Add the parent directory to the Python path properly
current_dir = Path(__file__).resolve().parent
backend_dir = current_dir.parent
sys.path.insert(0, str(backend_dir))

from config import Config
from utils.dataset_generator import VerseDatasetGenerator
from utils.markup import MarkupCleaner
from utils.remote_fetcher import FetchCache, RemoteVerseFetcher

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Build the bulk verse dataset for one language.")
    parser.add_argument('--lang', default='da', choices=Config.SUPPORTED_LANGUAGES)
    parser.add_argument('--output', default=None,
                        help="Output JSON file (default: <VERSE_DATA_DIR>/<lang>.json)")
    parser.add_argument('--delay', type=float, default=Config.GENERATOR_DELAY_SECONDS,
                        help="Seconds to wait between chapter requests")
    parser.add_argument('--timeout', type=float, default=Config.GENERATOR_TIMEOUT_SECONDS,
                        help="Per-chapter request timeout in seconds")
    return parser.parse_args(argv)


async def generate(args):
    output = args.output or os.path.join(Config.VERSE_DATA_DIR, f"{args.lang}.json")

    cleaner = MarkupCleaner()
    cleaner.add_remove_selectors(*Config.CLEANER_EXTRA_SELECTORS)
    # No outer request budget offline; chapters get the longer timeout
    fetcher = RemoteVerseFetcher(
        base_url=Config.REMOTE_BASE_URL,
        verse_paths=Config.REMOTE_VERSE_PATHS,
        chapter_paths=Config.REMOTE_CHAPTER_PATHS,
        timeouts=Config.REMOTE_TIMEOUTS,
        chapter_timeout=args.timeout,
        cache=FetchCache(ttl_seconds=0),
    )
    generator = VerseDatasetGenerator(fetcher, cleaner, output, delay_seconds=args.delay)
    try:
        return await generator.run(args.lang)
    finally:
        await fetcher.close()


def main(argv=None):
    args = parse_args(argv)
    try:
        report = asyncio.run(generate(args))
    except Exception as e:
        logger.error(f"Unhandled error during dataset generation: {e}", exc_info=True)
        return 1
    return 0 if report.fetched or report.skipped else 1


if __name__ == '__main__':
    sys.exit(main())
