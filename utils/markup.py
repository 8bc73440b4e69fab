# utils/markup.py
import logging
import re

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

# Non-content elements in the upstream verse markup. The upstream changes its
# markup without notice, so callers can extend this list (CLEANER_EXTRA_SELECTORS).
DEFAULT_REMOVE_SELECTORS = (
    '.xrefLink',
    '.footnoteLink',
    '.parabreak',
    '.heading',
    'span.chapterNum',
    '.studyNoteMarker',
)

# Tried in order; the first selector that yields text wins
DEFAULT_CONTENT_SELECTORS = (
    'span.verse',
    'span[class^="style-"]',
)

_WHITESPACE = re.compile(r'\s+')


class MarkupCleaner:
    def __init__(self, remove_selectors=DEFAULT_REMOVE_SELECTORS, content_selectors=DEFAULT_CONTENT_SELECTORS):
        self.remove_selectors = list(remove_selectors)
        self.content_selectors = list(content_selectors)

    def add_remove_selectors(self, *selectors):
        for selector in selectors:
            selector = selector.strip()
            if selector and selector not in self.remove_selectors:
                self.remove_selectors.append(selector)

    def clean(self, markup):
        """Turn a verse HTML fragment into plain text. Never raises."""
        if not markup:
            return ''
        try:
            soup = BeautifulSoup(markup, 'html.parser')
            for selector in self.remove_selectors:
                for element in soup.select(selector):
                    element.decompose()

            text = ''
            for selector in self.content_selectors:
                text = ' '.join(element.get_text() for element in soup.select(selector))
                if text.strip():
                    break
            if not text.strip():
                text = soup.get_text()
        except Exception as e:
            logger.error(f"Error parsing verse markup: {e}")
            return ''

        text = text.replace('+', '')
        return _WHITESPACE.sub(' ', text).strip()


default_cleaner = MarkupCleaner()


def clean_to_plain_text(markup):
    return default_cleaner.clean(markup)
