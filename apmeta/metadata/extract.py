import io
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from .. import config
from ..exceptions import MetadataExtractionError, MissingDependencyError, TagExtractionError
from ..models import TechnicalMetadata

# Optional imports handled gracefully; the dependency check reports them
try:
    import exifread
except ImportError:
    exifread = None

# Type hint 'Any' prevents Pylance from complaining about "None" having no attribute "parse"
MediaInfo: Any = None
try:
    from pymediainfo import MediaInfo
except ImportError:
    MediaInfo = None


class MetadataExtractor:
    """
    Technical metadata and embedded tags for one file.

    Strategies:
      - Technical report: 'pymediainfo' (libmediainfo) text output plus tracks.
      - Embedded tags: 'exifread' over the head of image files.
    """

    def __init__(self, exif_read_size: int = config.EXIF_READ_SIZE):
        self.exif_read_size = exif_read_size

    def check_available(self):
        if MediaInfo is None or not MediaInfo.can_parse():
            raise MissingDependencyError("MediaInfo dependency is not installed!")
        if exifread is None:
            raise MissingDependencyError("exifread module not found!")

    def get_technical_metadata(self, path: Path) -> TechnicalMetadata:
        """
        Runs MediaInfo twice: once for the human-readable report kept as the
        general note, once for the track structure.
        """
        try:
            text = MediaInfo.parse(str(path), output="")
            mi = MediaInfo.parse(str(path))
        except Exception as e:
            raise MetadataExtractionError(f"MediaInfo failed for {path.name}: {e}") from e

        track_types = {t.track_type for t in mi.tracks}
        general = next((t for t in mi.tracks if t.track_type == "General"), None)

        modified = None
        if general is not None:
            modified = self._parse_mediainfo_date(getattr(general, "file_last_modification_date", None))
        if modified is None:
            logging.debug(f"No modification date from MediaInfo for {path.name}; using filesystem mtime.")
            modified = datetime.fromtimestamp(path.stat().st_mtime)

        return TechnicalMetadata(
            report=self.clean_report(text, path.name),
            modified=modified,
            is_image="Image" in track_types,
            is_video="Video" in track_types,
        )

    def get_embedded_tags(self, path: Path) -> Dict[str, str]:
        """
        Reads descriptive tags from the first `exif_read_size` bytes.
        Only keys present in the file come back.
        """
        try:
            with path.open('rb') as f:
                head = f.read(self.exif_read_size)
            return self.tags_from_buffer(head)
        except Exception as e:
            raise TagExtractionError(f"Exif parsing failed for {path.name}: {e}") from e

    def tags_from_buffer(self, buffer: bytes) -> Dict[str, str]:
        # details=False speeds up processing significantly
        raw = exifread.process_file(io.BytesIO(buffer), details=False)
        tags = {}
        for exif_key, name in config.EXIF_TAG_MAP.items():
            if exif_key in raw:
                value = str(raw[exif_key]).strip()
                if value:
                    tags[name] = value
        return tags

    @staticmethod
    def clean_report(report: str, basename: str) -> str:
        """Tightens MediaInfo's aligned 'Key     : value' layout and hides the full path."""
        report = re.sub(r'[ \t]+: ', ': ', report or '')
        report = re.sub(r'Complete [Nn]ame[^\n]*\n', f"Original name: {basename}\n", report)
        return report.strip()

    def _parse_mediainfo_date(self, dt_str: Optional[str]) -> Optional[datetime]:
        """
        Reads MediaInfo's '[UTC ]YYYY-MM-DD HH:MM:SS[.fff][ UTC]' stamps and returns
        naive local time, matching the filesystem fallback.
        """
        if not dt_str:
            return None

        clean = str(dt_str).strip()
        is_utc = "UTC" in clean
        clean = clean.replace("UTC", "").strip().split(".")[0]

        try:
            parsed = datetime.strptime(clean, "%Y-%m-%d %H:%M:%S")
        except ValueError:
            return None

        if is_utc:
            return parsed.replace(tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
        return parsed
