"""
Fuzzy matching of path tokens against the artist authority list.
"""
import logging
from dataclasses import replace
from typing import Iterable, List, Tuple

from rapidfuzz import process, utils
from rapidfuzz.distance import Levenshtein

from .. import config
from ..models import FileRecord, unique
from .credits import CREDIT_PATTERN
from .text import NAME_SEPARATORS, split_tokens


class FuzzyNameIndex:
    """
    Read-only lookup over authorized names.

    Scores are normalized Levenshtein similarity (0-1) on lowercased,
    punctuation-stripped strings. Safe to share between threads.
    """

    def __init__(self, names: Iterable[str]):
        self._names: Tuple[str, ...] = unique(names)
        self._processed: Tuple[str, ...] = tuple(utils.default_process(n) for n in self._names)

    def __len__(self) -> int:
        return len(self._names)

    @property
    def names(self) -> Tuple[str, ...]:
        return self._names

    def get(self, token: str, threshold: float = config.FUZZY_ARTIST_THRESHOLD) -> List[Tuple[str, float]]:
        """All (name, score) pairs scoring at or above `threshold`, best first."""
        query = utils.default_process(token)
        if not query or not self._names:
            return []

        hits = process.extract(
            query,
            self._processed,
            scorer=Levenshtein.normalized_similarity,
            score_cutoff=threshold,
            limit=None,
        )
        return [(self._names[idx], score) for _, score, idx in hits]


def name_tokens(path: str) -> List[str]:
    return [t for t in split_tokens(path, NAME_SEPARATORS) if not CREDIT_PATTERN.search(t)]


def find_artist_mentions(record: FileRecord,
                         index: FuzzyNameIndex,
                         threshold: float = config.FUZZY_ARTIST_THRESHOLD) -> FileRecord:
    names = list(record.names)
    for token in name_tokens(str(record.path)):
        matches = index.get(token, threshold)
        if matches:
            logging.debug(f"Artist match for '{token}': {matches}")
        names.extend(name for name, _ in matches)

    return replace(record, names=unique(names))
