import re
from dataclasses import replace
from typing import Dict, Optional

from ..models import DateEvent, FileRecord

# Checked in this order; later patterns override earlier ones' fields
FILENAME_DATE_PATTERNS = [
    re.compile(r'(?P<month>\d{1,2})[-.](?P<day>\d{1,2})[-.](?P<year>\d{4})'),
    re.compile(r'(?P<month>\d{1,2})[-.](?P<day>\d{1,2})[-.](?P<year>\d{2})[^\d]'),
    re.compile(r'(?P<year>\d{4})[-.](?P<month>\d{1,2})[-.](?P<day>\d{1,2})'),
]

CREATION = 'Creation'


def expand_year(year: str) -> str:
    """Two-digit years: 90-99 are the 1900s, everything else the 2000s."""
    if len(year) == 2:
        return ('19' if int(year) >= 90 else '20') + year
    return year


def filename_date(stem: str) -> Optional[str]:
    """
    Best date string found in a file name (extension already stripped).
    Returns 'YYYY-MM-DD', 'YYYY-MM', 'YYYY' or None.
    """
    groups: Dict[str, str] = {}
    for pattern in FILENAME_DATE_PATTERNS:
        m = pattern.search(stem)
        if m:
            groups.update({k: v for k, v in m.groupdict().items() if v})

    year = groups.get('year')
    if not year:
        return None
    year = expand_year(year)

    month = groups.get('month')
    if not month:
        return year
    day = groups.get('day')
    if not day:
        return f"{year}-{month.zfill(2)}"
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


def detect_dates(record: FileRecord) -> FileRecord:
    """
    Adds a Creation event for the modification date and, when the file name
    carries a different date, a second one for that.
    """
    modified_str = record.modified.strftime('%Y-%m-%d')
    candidates = [DateEvent(eventDates=modified_str, eventTypes=CREATION)]

    named = filename_date(record.path.stem)
    if named and named != modified_str:
        candidates.append(DateEvent(eventDates=named, eventTypes=CREATION))

    # Re-running must not pile up identical events
    dates = list(record.dates)
    for event in candidates:
        if event not in dates:
            dates.append(event)

    return replace(record, dates=tuple(dates))
