from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Tuple

from . import config

# One flat ISAD(G) row; keys follow config.ISAD_FIELDS
ArchivalRecord = Dict[str, Any]


@dataclass(frozen=True)
class FormatMatch:
    """
    First match reported by the format identification tool.
    """
    mime: str = ''
    format: str = ''
    id: str = ''
    basis: str = ''
    warning: str = ''


@dataclass(frozen=True)
class DateEvent:
    eventDates: str = ''
    eventTypes: str = ''
    eventStartDates: str = ''
    eventEndDates: str = ''
    eventActors: str = ''


@dataclass(frozen=True)
class RawFile:
    """
    A file listed for description, before any tool has looked at it.
    """
    path: Path


@dataclass(frozen=True)
class FileRecord:
    """
    An identified file. Only exists once format identification and the
    technical metadata report have succeeded; every later pass takes one
    of these and returns an augmented copy.
    """
    path: Path
    modified: datetime
    format_match: FormatMatch
    is_image: bool = False
    is_video: bool = False
    technical_report: str = ''
    checksum: str = ''

    # Enrichment (filled by the pure passes)
    tags: Dict[str, str] = field(default_factory=dict)
    dates: Tuple[DateEvent, ...] = ()
    credits: Tuple[str, ...] = ()
    names: Tuple[str, ...] = ()
    subjects: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AuthorityArtist:
    authorizedFormOfName: str
    subjectAccessPoints: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CycleSubject:
    prefLabel: Tuple[str, ...]
    altLabel: Tuple[str, ...]


@dataclass(frozen=True)
class TechnicalMetadata:
    report: str
    modified: datetime
    is_image: bool
    is_video: bool


@dataclass(frozen=True)
class VerificationReport:
    total: int
    passed: int
    missing: Tuple[str, ...] = ()
    unhashed: Tuple[str, ...] = ()
    mismatched: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.passed == self.total


def unique(values) -> Tuple[str, ...]:
    """Order-preserving dedup, dropping empty strings."""
    return tuple(dict.fromkeys(v for v in values if v))


def blank_record() -> ArchivalRecord:
    """Every ISAD(G) column present and empty."""
    return {k: '' for k in config.ISAD_FIELDS}
