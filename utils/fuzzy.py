# utils/fuzzy.py
from dataclasses import dataclass
import logging

from rapidfuzz.distance import OSA, Levenshtein
from thefuzz import process

from utils.books import default_registry, normalize_token

logger = logging.getLogger(__name__)

MIN_TOKEN_LENGTH = 2
SCORE_CUTOFF = 60
TRANSPOSITION_COST = 0.5


@dataclass(frozen=True)
class BookMatch:
    book_name: str
    ordinal: int
    score: float


def book_score(query, candidate, **kwargs):
    """0-100 similarity where swapping two neighbouring letters costs half an edit.

    OSA counts an adjacent swap ("jonh" -> "john") as one edit and plain
    Levenshtein as two; the difference is the number of swaps, which are
    charged at ``TRANSPOSITION_COST`` instead.
    """
    longest = max(len(query), len(candidate))
    if longest == 0:
        return 100.0
    osa = OSA.distance(query, candidate)
    swaps = Levenshtein.distance(query, candidate) - osa
    distance = osa - (1 - TRANSPOSITION_COST) * swaps
    return max(0.0, 100.0 * (longest - distance) / longest)


class BookMatcher:
    def __init__(self, registry=None, score_cutoff=SCORE_CUTOFF):
        self.registry = registry or default_registry
        self.score_cutoff = score_cutoff
        self._candidates = {}

    def _candidates_for(self, language):
        if language not in self._candidates:
            pairs = self.registry.candidates(language)
            self._candidates[language] = ([key for key, _ in pairs], dict(pairs))
        return self._candidates[language]

    def find_closest(self, token, language):
        """Return the best-scoring book for a misspelt token, or None.

        Choices are passed in registry order and extractOne only replaces its
        current best on a strictly higher score, so ties go to the earlier book.
        """
        query = normalize_token(token)
        if len(query) < MIN_TOKEN_LENGTH:
            return None

        keys, ordinals = self._candidates_for(language)
        best = process.extractOne(query, keys, processor=None, scorer=book_score,
                                  score_cutoff=self.score_cutoff)
        if best is None:
            logger.info(f"No fuzzy book match for '{token}' at or above {self.score_cutoff}")
            return None

        key, score = best[0], best[1]
        ordinal = ordinals[key]
        book_name = self.registry.canonical_name(ordinal, language)
        logger.info(f"Fuzzy matched '{token}' to '{book_name}' via '{key}' (score {score:.1f})")
        return BookMatch(book_name=book_name, ordinal=ordinal, score=score)
