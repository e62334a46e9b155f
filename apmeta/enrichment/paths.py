from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Union

from .. import config
from ..models import FileRecord
from .text import split_tokens


def directory_tokens(dir_path: Union[str, Path]) -> List[str]:
    """Ordered tokens of a folder path, minus mount markers and generic folders."""
    return [t for t in split_tokens(str(dir_path)) if t not in config.PATH_NOISE]


def tag_path_tokens(record: FileRecord, dir_path: Optional[Union[str, Path]] = None) -> FileRecord:
    """
    Stores each folder token under `path[0]`, `path[1]`, ... in path order.
    Defaults to the file's own containing folder.
    """
    if dir_path is None:
        dir_path = record.path.parent

    tags = dict(record.tags)
    for i, token in enumerate(directory_tokens(dir_path)):
        tags[f"path[{i}]"] = token

    return replace(record, tags=tags)
