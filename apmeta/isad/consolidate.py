"""
Container consolidation: wraps a closed batch of Item rows in one File-level
parent and lifts values every child shares up to it.

Promotion deletes fields from the children, so run this once on the final
batch only; appending items afterwards cannot restore what was lifted.
"""
import logging
import secrets
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple, Union

from .. import config
from ..models import ArchivalRecord, blank_record, unique


def new_batch_id() -> str:
    return secrets.token_hex(9)


def common_value(values: Sequence[Any]) -> Optional[Any]:
    """The shared value if every entry is equal, else None."""
    if not values:
        return None
    first = values[0]
    return first if all(v == first for v in values) else None


def split_series(value: Any) -> List[str]:
    return [t for t in str(value or '').split('|') if t and t != config.EMPTY_SLOT]


def append_series(existing: Any, value: str) -> str:
    """Pipe-appends `value` unless it is already in the series."""
    parts = [t for t in str(existing or '').split('|') if t]
    if value not in parts:
        parts.append(value)
    return '|'.join(parts)


def date_key(token: str) -> Tuple[int, ...]:
    """'2021-05' -> (2021, 5). Non-numeric parts sort as 0."""
    return tuple(int(p) if p.isdigit() else 0 for p in token.split('-'))


def attach_batch_id(records: Sequence[ArchivalRecord], batch_id: str) -> None:
    for r in records:
        r['alternativeIdentifiers'] = append_series(r.get('alternativeIdentifiers'), batch_id)
        r['alternativeIdentifierLabels'] = append_series(r.get('alternativeIdentifierLabels'), config.BATCH_ID_LABEL)


def container_title(source: Union[str, Path]) -> str:
    parts = [p for p in Path(source).parts if p not in ('/', '\\') and not p.endswith(':\\')]
    return ', '.join(parts[-3:])


def union_series(children: Sequence[ArchivalRecord], field: str) -> str:
    return '|'.join(unique(t for c in children for t in split_series(c.get(field))))


def container_events(children: Sequence[ArchivalRecord]) -> dict:
    """
    Event columns for the parent: the shared value where the children agree,
    otherwise NULL dates with a start/end range spanning every child date.
    """
    dates = sorted(
        unique(t for c in children for t in split_series(c.get('eventDates'))),
        key=date_key,
    )

    def shared(field: str) -> Optional[str]:
        return common_value([c.get(field, '') for c in children])

    def bound(field: str, index: int) -> str:
        value = shared(field)
        # A shared series of NULLs says nothing
        if value and split_series(value):
            return value
        return dates[index] if dates else config.EMPTY_SLOT

    return {
        'eventDates': shared('eventDates') or config.EMPTY_SLOT,
        'eventTypes': 'Creation',
        'eventStartDates': bound('eventStartDates', 0),
        'eventEndDates': bound('eventEndDates', -1),
        'eventActors': union_series(children, 'eventActors') or config.EMPTY_SLOT,
    }


def build_container(children: Sequence[ArchivalRecord], source: Union[str, Path], batch_id: str) -> ArchivalRecord:
    n = len(children)
    parent = blank_record()
    parent.update({
        'legacyId': n + 1,
        'identifier': batch_id,
        'title': container_title(source),
        'levelOfDescription': config.CONTAINER_LEVEL,
        'extentAndMedium': f"{n} digital object{'' if n == 1 else 's'}",
        'language': config.LANGUAGE,
        'languageOfDescription': config.LANGUAGE,
        'publicationStatus': config.PUBLICATION_STATUS,
        'alternativeIdentifiers': batch_id,
        'alternativeIdentifierLabels': config.BATCH_ID_LABEL,
        'culture': config.CULTURE,
    })
    for field in config.ACCESS_POINT_FIELDS:
        parent[field] = union_series(children, field)
    parent.update(container_events(children))
    return parent


def promote_homogeneous(parent: ArchivalRecord, children: Sequence[ArchivalRecord]) -> List[str]:
    """
    Moves every non-event value all children share onto the parent and
    deletes it from the children. Returns the promoted field names.
    """
    if not children:
        return []

    promoted = []
    for key in list(children[0].keys()):
        if key.startswith('event') or key in config.ITEM_ONLY_FIELDS:
            continue
        if any(key not in c for c in children):
            continue
        match = common_value([c[key] for c in children])
        if match in (None, ''):
            continue
        if parent.get(key, '') in ('', match):
            parent[key] = match
            for c in children:
                del c[key]
            promoted.append(key)
    return promoted


def consolidate(records: Sequence[ArchivalRecord],
                source: Union[str, Path],
                batch_id: Optional[str] = None) -> List[ArchivalRecord]:
    """
    Links a formatted, naturally sorted batch under a synthesized parent.
    A single record is returned on its own with no parent.
    """
    batch_id = batch_id or new_batch_id()
    children = [dict(r) for r in records]
    attach_batch_id(children, batch_id)

    if len(children) <= 1:
        return children

    parent = build_container(children, source, batch_id)
    promoted = promote_homogeneous(parent, children)
    if promoted:
        logging.info(f"Promoted to container: {', '.join(promoted)}")

    for c in children:
        c['parentId'] = parent['legacyId']
    return [parent] + children
