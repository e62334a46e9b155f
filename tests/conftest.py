import pytest
from datetime import datetime
from pathlib import Path
from apmeta.models import AuthorityArtist, CycleSubject, FileRecord, FormatMatch
from apmeta.reference.loaders import ReferenceData


@pytest.fixture
def references():
    """Synthetic authority and cycle lists."""
    artists = [
        AuthorityArtist("ArtistName", ("Residency Program",)),
        AuthorityArtist("Jane Painter", ("Painting", "Window Works 19.2")),
        AuthorityArtist("Carlos Sculptor", ("Sculpture",)),
    ]
    cycles = [
        CycleSubject(("International Artist-in-Residence 22.1",), ("IAIR 22.1",)),
        CycleSubject(("Window Works 19.2",), ("WW 19.2", "WW19.2")),
    ]
    return ReferenceData.build(artists, cycles)


@pytest.fixture
def make_record():
    """Factory for identified records with sensible defaults."""
    def _make(path, modified=datetime(2021, 6, 1, 12, 0), mime="image/jpeg",
              fmt="JPEG File Interchange Format", **kwargs):
        return FileRecord(
            path=Path(path),
            modified=modified,
            format_match=FormatMatch(mime=mime, format=fmt),
            **kwargs
        )
    return _make
