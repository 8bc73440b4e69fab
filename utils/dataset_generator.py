# utils/dataset_generator.py
import asyncio
import json
import logging
import os
import time
from dataclasses import dataclass

from models.canon import VERSE_COUNTS
from utils.errors import VerseLookupError
from utils.verse_id import encode_verse_id

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 20


@dataclass
class GeneratorReport:
    fetched: int = 0
    skipped: int = 0
    failed: int = 0
    total_chapters: int = 0
    verses: int = 0
    duration_seconds: float = 0.0


def load_existing_dataset(path):
    """Previously generated verses, or an empty dict when there are none usable."""
    if not os.path.exists(path):
        logger.info(f"No existing data file at {path}. Starting fresh.")
        return {}
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read existing data file {path} ({e}). Starting fresh.")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Existing data file {path} is not a JSON object. Starting fresh.")
        return {}
    logger.info(f"Loaded {len(data)} existing verses from {path}")
    return data


def save_dataset(data, path):
    """Write the dataset atomically so an interrupted run never truncates it."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    tmp_path = f"{path}.tmp"
    with open(tmp_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False)
    os.replace(tmp_path, path)
    logger.info(f"Saved {len(data)} verses to {path}")


class VerseDatasetGenerator:
    """Walks the canon chapter by chapter and accumulates a verse-id -> text map.

    Re-runs resume: a chapter whose first verse is already present is skipped.
    The file is flushed after every book that fetched anything, and once more
    at the end.
    """

    def __init__(self, fetcher, cleaner, output_path, delay_seconds=0.25, canon=None, sleep=asyncio.sleep):
        self.fetcher = fetcher
        self.cleaner = cleaner
        self.output_path = output_path
        self.delay_seconds = delay_seconds
        self.canon = canon if canon is not None else VERSE_COUNTS
        self._sleep = sleep

    async def run(self, language):
        logger.info(f"Starting chapter fetch for '{language}', output {self.output_path}, "
                    f"{self.delay_seconds}s between chapters")
        data = load_existing_dataset(self.output_path)
        report = GeneratorReport(verses=len(data))
        started = time.monotonic()

        for ordinal in sorted(self.canon):
            book_fetched = False
            for chapter in range(1, len(self.canon[ordinal]) + 1):
                report.total_chapters += 1

                first_verse_id = encode_verse_id(ordinal, chapter, 1)
                if data.get(first_verse_id):
                    report.skipped += 1
                    continue

                book_fetched = True
                try:
                    added = await self._fetch_chapter(data, ordinal, chapter, language)
                except VerseLookupError as e:
                    logger.error(f"Chapter {ordinal}:{chapter} ({language}) failed: {e}")
                    report.failed += 1
                except Exception as e:
                    logger.error(f"Unexpected error on chapter {ordinal}:{chapter} ({language}): {e}", exc_info=True)
                    report.failed += 1
                else:
                    report.fetched += 1
                    report.verses += added

                await self._sleep(self.delay_seconds)

                if report.total_chapters % PROGRESS_EVERY == 0:
                    logger.info(
                        f"Progress: {report.total_chapters} chapters attempted, {report.fetched} success, "
                        f"{report.failed} errors, {report.skipped} skipped. {len(data)} verses. "
                        f"Elapsed: {time.monotonic() - started:.1f}s"
                    )

            if book_fetched:
                logger.info(f"Finished book {ordinal}")
                save_dataset(data, self.output_path)

        save_dataset(data, self.output_path)
        report.duration_seconds = time.monotonic() - started
        logger.info(
            f"Fetching complete: {report.fetched} chapters fetched, {report.failed} failed, "
            f"{report.skipped} skipped of {report.total_chapters}; {len(data)} verses in dataset; "
            f"{report.duration_seconds:.1f}s"
        )
        return report

    async def _fetch_chapter(self, data, ordinal, chapter, language):
        verses = await self.fetcher.fetch_chapter_verses(ordinal, chapter, language)
        added = 0
        for verse_id, markup in verses:
            text = self.cleaner.clean(markup)
            if not verse_id or not text:
                logger.warning(f"Empty text or missing id for a verse in {ordinal}:{chapter} ({language})")
                continue
            if verse_id not in data:
                data[verse_id] = text
                added += 1
        logger.info(f"Parsed {added} new verses for {ordinal}:{chapter} ({language})")
        return added
