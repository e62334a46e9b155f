"""
Subject access points from matched artists and exhibition cycle codes.
"""
import logging
import re
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from .. import config
from ..models import AuthorityArtist, CycleSubject, FileRecord, unique
from .paths import directory_tokens

CYCLE_CODE = re.compile(config.CYCLE_CODE_PATTERN)


def artist_subjects(names: Sequence[str], artists_by_name: Dict[str, AuthorityArtist]) -> List[str]:
    """
    Subjects of every matched artist.

    Names come from the same authority list, so a missing entry is a bug
    rather than bad input.
    """
    subjects: List[str] = []
    for name in names:
        artist = artists_by_name.get(name)
        if artist is None:
            raise KeyError(f"Matched artist '{name}' is not in the authority list")
        subjects.extend(artist.subjectAccessPoints)
    return subjects


def find_cycle_code(tokens: Sequence[str],
                    abbreviations: Sequence[str] = config.PROGRAM_ABBREVIATIONS) -> Optional[str]:
    """
    Finds '<ABBR> <DD.D>' in folder tokens, e.g. ['IAIR', '22.1'] -> 'IAIR 22.1'.
    The code may share the abbreviation's token or sit in any later one.
    """
    for i, token in enumerate(tokens):
        for abbr in abbreviations:
            m = re.search(rf'\b{re.escape(abbr)}\b', token)
            if not m:
                continue
            rest = [token[m.end():]] + list(tokens[i + 1:])
            for candidate in rest:
                code = CYCLE_CODE.search(candidate)
                if code:
                    return f"{abbr} {code.group(0)}"
    return None


def match_cycle(code: str, cycles: Sequence[CycleSubject]) -> Optional[str]:
    """prefLabel of the first cycle whose altLabels contain `code`."""
    for cycle in cycles:
        if any(code in alt for alt in cycle.altLabel) and cycle.prefLabel:
            return cycle.prefLabel[0]
    return None


def resolve_subjects(record: FileRecord,
                     artists_by_name: Dict[str, AuthorityArtist],
                     cycles: Sequence[CycleSubject],
                     dir_path: Optional[Union[str, Path]] = None) -> FileRecord:
    subjects = list(record.subjects)
    subjects.extend(artist_subjects(record.names, artists_by_name))

    if dir_path is None:
        dir_path = record.path.parent

    code = find_cycle_code(directory_tokens(dir_path))
    label = match_cycle(code, cycles) if code else None
    if label:
        if any(s.lower() == label.lower() for s in subjects):
            # The folder's cycle settles it
            subjects = [label]
        else:
            logging.debug(f"Cycle subject '{label}' added beside {subjects} for {record.path.name}")
            subjects.append(label)

    return replace(record, subjects=unique(subjects))
