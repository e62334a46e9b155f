"""
String helpers shared by the enrichment passes.
"""
import re
from typing import List, Tuple, Union

# Capital starting a lowercase word, or a run of capitals (an acronym)
_CAMEL_BOUNDARY = re.compile(r'([A-Z](?=[a-z]+)|[A-Z]+(?![a-z]))')
_MULTI_SPACE = re.compile(r'\s\s+')
_DIGITS = re.compile(r'(\d+)')

PATH_SEPARATORS = r'[/\\_-]'
NAME_SEPARATORS = r'[/\\()_-]'


def break_camel_case(s: str) -> str:
    """'JaneDoePhotoCredit' -> 'Jane Doe Photo Credit'."""
    s = _CAMEL_BOUNDARY.sub(r' \1', s or '')
    return _MULTI_SPACE.sub(' ', s).strip()


def split_tokens(text: str, separators: str = PATH_SEPARATORS) -> List[str]:
    """Splits on `separators`, trims, and drops empty tokens."""
    return [t.strip() for t in re.split(separators, text) if t.strip()]


def natural_sort_key(name: str) -> List[Union[Tuple[int, int], Tuple[int, str]]]:
    """
    Numeric-aware key so 'img2' sorts before 'img10'.
    Digit runs compare as numbers, everything else case-insensitively.
    """
    key = []
    for part in _DIGITS.split(name):
        if not part:
            continue
        if part.isdigit():
            key.append((0, int(part)))
        else:
            key.append((1, part.lower()))
    return key
