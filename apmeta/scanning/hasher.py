import hashlib
from pathlib import Path

from .. import config
from ..exceptions import FileHashError


class FileHasher:
    """
    Content fingerprints for digital objects.

    Always a full SHA-256 read: the digest is stored in the apmeta file and
    checked again by `verify`, so both sides must read the same bytes.
    """

    algorithm = 'sha256'

    def compute_hash(self, path: Path) -> str:
        try:
            return self._full_sha256(path)
        except OSError as e:
            raise FileHashError(f"Could not hash {path.name}: {e.strerror or e}") from e

    def verify(self, path: Path, expected: str) -> bool:
        return self.compute_hash(path) == expected.strip().lower()

    def _full_sha256(self, path: Path) -> str:
        """Reads entire file. High I/O cost."""
        h = hashlib.new(self.algorithm)
        with open(path, 'rb') as f:
            while chunk := f.read(config.HASH_CHUNK_SIZE):
                h.update(chunk)
        return h.hexdigest()
