import re
from dataclasses import replace
from typing import Iterable, Tuple

from ..models import FileRecord, unique
from .text import break_camel_case, split_tokens

CREDIT_PATTERN = re.compile(r'credit', re.IGNORECASE)


def pick_credit(candidates: Iterable[str]) -> Tuple[str, ...]:
    """
    Collapses candidates to the one with the most words.

    Equal word counts keep the first one seen, so callers control the tie
    through candidate order.
    """
    credits = [break_camel_case(c) for c in unique(candidates)]
    credits = [c for c in credits if c]
    if not credits:
        return ()
    # max() returns the first maximal item
    return (max(credits, key=lambda c: len(c.split(' '))),)


def detect_credits(record: FileRecord) -> FileRecord:
    """Finds credit/copyright mentions in tag values and path components."""
    candidates = list(record.credits)

    candidates += [v.strip() for v in record.tags.values() if CREDIT_PATTERN.search(v)]
    candidates += [t for t in split_tokens(str(record.path)) if CREDIT_PATTERN.search(t)]

    return replace(record, credits=pick_credit(candidates))
