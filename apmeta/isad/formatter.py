"""
Maps enriched FileRecords onto flat ISAD(G) rows.
"""
from typing import List, Sequence

from .. import config
from ..enrichment.text import break_camel_case, natural_sort_key
from ..models import ArchivalRecord, DateEvent, FileRecord, FormatMatch, blank_record

EVENT_FIELDS = ['eventDates', 'eventTypes', 'eventStartDates', 'eventEndDates', 'eventActors']


def natural_sort(records: Sequence[FileRecord]) -> List[FileRecord]:
    """
    Orders records by file base name, numbers compared numerically.
    Equal stems fall back to the full path.
    """
    return sorted(records, key=lambda r: (natural_sort_key(r.path.stem), natural_sort_key(str(r.path))))


def extent_and_medium(match: FormatMatch) -> str:
    """'1 image file (JPEG File Interchange Format)', or '1 digital object' for application/*."""
    major = match.mime.split('/')[0] if match.mime else ''
    kind = f"{major} file" if major and major != 'application' else 'digital object'
    if match.format:
        return f"1 {kind} ({match.format})"
    return f"1 {kind}"


def make_title(record: FileRecord, include_ext: bool = False) -> str:
    name = record.path.name if include_ext else record.path.stem
    return break_camel_case(name.replace('_', ' ').replace('-', ' '))


def event_series(dates: Sequence[DateEvent], field: str) -> str:
    return '|'.join(getattr(d, field) or config.EMPTY_SLOT for d in dates)


def format_record(record: FileRecord, position: int, batch_size: int,
                  include_ext_title: bool = False) -> ArchivalRecord:
    """
    One Item-level row. `position` is 1-based within the naturally sorted batch.
    """
    row = blank_record()
    row.update({
        'legacyId': position,
        'identifier': str(position).zfill(3) if batch_size > 1 else '',
        'title': make_title(record, include_ext_title),
        'levelOfDescription': config.ITEM_LEVEL,
        'extentAndMedium': extent_and_medium(record.format_match),
        'reproductionConditions': ' & '.join(record.credits),
        'language': config.LANGUAGE,
        'locationOfOriginals': config.LOCATION_OF_ORIGINALS,
        'digitalObjectPath': str(record.path),
        'digitalObjectChecksum': record.checksum,
        'generalNote': record.technical_report,
        'subjectAccessPoints': '|'.join(record.subjects),
        'nameAccessPoints': '|'.join(record.names),
        'languageOfDescription': config.LANGUAGE,
        'publicationStatus': config.PUBLICATION_STATUS,
        'culture': config.CULTURE,
    })
    for field in EVENT_FIELDS:
        row[field] = event_series(record.dates, field)
    return row


def format_batch(records: Sequence[FileRecord], include_ext_title: bool = False) -> List[ArchivalRecord]:
    """Natural-sorts the batch, then formats each record by its position."""
    ordered = natural_sort(records)
    return [
        format_record(r, i, len(ordered), include_ext_title)
        for i, r in enumerate(ordered, start=1)
    ]
