import logging
import os
from pathlib import Path
from typing import Iterator, List, Optional, Set

from .. import config
from ..exceptions import ApmetaError, EmptyBatchError
from ..models import RawFile


def is_junk(name: str) -> bool:
    """OS and tool leftovers that never get described."""
    return name in config.JUNK_NAMES or name.startswith(config.JUNK_PREFIXES)


class DirectoryLister:
    """
    Lists the files of a folder that make up one description batch.
    """

    def __init__(self, skip_names: Optional[Set[str]] = None):
        self.skip_names = skip_names or set()

    def list_files(self, root: Path, recursive: bool = False) -> List[RawFile]:
        if not root.is_dir():
            raise ApmetaError(f"You need to give me a directory/folder! ({root})")

        files = [RawFile(p) for p in self._iter_files(root, recursive)]
        if not files:
            raise EmptyBatchError(f"No files to describe in {root}")

        logging.info(f"Found {len(files)} files in {root}")
        return files

    def _iter_files(self, root: Path, recursive: bool) -> Iterator[Path]:
        """Depth-first walker using os.scandir for speed."""
        stack = [root]
        while stack:
            current = stack.pop()
            try:
                with os.scandir(current) as it:
                    entries = list(it)
            except (OSError, PermissionError):
                logging.warning(f"Permission denied: {current}")
                continue

            # Sort for stable traversal order
            entries.sort(key=lambda e: e.name.lower())

            dirs = []
            for e in entries:
                if is_junk(e.name) or e.name in self.skip_names:
                    continue
                if e.is_dir(follow_symlinks=False):
                    dirs.append(Path(e.path))
                elif e.is_file(follow_symlinks=False):
                    yield Path(e.path)

            if recursive:
                # Reversed so we process A before Z
                for d in reversed(dirs):
                    stack.append(d)
