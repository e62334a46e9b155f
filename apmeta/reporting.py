"""
Reading and writing apmeta files: ISAD(G) rows as CSV in AtoM import order.
"""
import csv
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from . import config
from .exceptions import ApmetaError
from .models import ArchivalRecord


def write_isad_csv(records: Sequence[ArchivalRecord], output_csv: Path) -> Path:
    """
    Writes every ISAD(G) column for every row. Fields lifted to the
    container are absent from its children and come out as empty cells.
    """
    output_csv.parent.mkdir(parents=True, exist_ok=True)
    with open(output_csv, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=config.ISAD_FIELDS, restval='', extrasaction='ignore')
        writer.writeheader()
        for record in records:
            writer.writerow(record)

    logging.info(f"Wrote {len(records)} archival descriptions to {output_csv}")
    return output_csv


def read_isad_csv(path: Path) -> List[Dict[str, str]]:
    try:
        with open(path, "r", newline="", encoding="utf-8") as f:
            return list(csv.DictReader(f))
    except (OSError, csv.Error, UnicodeDecodeError) as e:
        raise ApmetaError(f"Error parsing CSV: {e}") from e


def find_apmeta_file(source: Path) -> Path:
    """
    Accepts an apmeta CSV directly, or a folder holding one.
    The default file name wins over other `apmeta*.csv` candidates.
    """
    if source.is_file():
        return source
    if not source.is_dir():
        raise ApmetaError(f"Nothing found at {source}")

    default = source / config.DEFAULT_OUTPUT_NAME
    if default.is_file():
        return default

    candidates = sorted(source.glob("apmeta*.csv"))
    if not candidates:
        raise ApmetaError(f"No apmeta file found in {source}")
    return candidates[0]


def find_existing_batch_id(path: Path) -> Optional[str]:
    """Batch identifier recorded by an earlier run, if any."""
    if not path.is_file():
        return None

    for row in read_isad_csv(path):
        labels = (row.get('alternativeIdentifierLabels') or '').split('|')
        ids = (row.get('alternativeIdentifiers') or '').split('|')
        for label, value in zip(labels, ids):
            if label == config.BATCH_ID_LABEL and value:
                return value
    return None
