from pathlib import Path
from typing import Optional, Union

from .. import config
from ..models import FileRecord
from .credits import detect_credits
from .dates import detect_dates
from .names import find_artist_mentions
from .paths import tag_path_tokens
from .subjects import resolve_subjects


def enrich_record(record: FileRecord,
                  references,
                  source: Optional[Union[str, Path]] = None,
                  threshold: float = config.FUZZY_ARTIST_THRESHOLD) -> FileRecord:
    """
    Runs the pure passes over one identified record. Each pass returns a new
    record; names are matched before subjects are resolved from them.
    `references` is a loaders.ReferenceData.
    """
    record = detect_dates(record)
    record = detect_credits(record)
    record = find_artist_mentions(record, references.index, threshold)
    record = resolve_subjects(record, references.artists_by_name, references.cycles)
    return tag_path_tokens(record, source)
