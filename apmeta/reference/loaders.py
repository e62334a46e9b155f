"""
Loaders for the AtoM reference exports the enrichment passes match against:

- Authority records CSV -> artist names and their subjects.
- Subject SKOS RDF/XML -> exhibition cycles and their short codes.
"""
import csv
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Tuple

from ..enrichment.names import FuzzyNameIndex
from ..exceptions import ReferenceDataError
from ..models import AuthorityArtist, CycleSubject

SKOS_NS = {
    'rdf': 'http://www.w3.org/1999/02/22-rdf-syntax-ns#',
    'skos': 'http://www.w3.org/2004/02/skos/core#',
}


@dataclass(frozen=True)
class ReferenceData:
    """
    Everything the per-file passes read. Built once before enrichment and
    never modified afterwards, so worker threads can share it.
    """
    artists: Tuple[AuthorityArtist, ...]
    cycles: Tuple[CycleSubject, ...]
    index: FuzzyNameIndex
    artists_by_name: Dict[str, AuthorityArtist]

    @classmethod
    def build(cls, artists, cycles) -> 'ReferenceData':
        artists = tuple(artists)
        return cls(
            artists=artists,
            cycles=tuple(cycles),
            index=FuzzyNameIndex(a.authorizedFormOfName for a in artists),
            artists_by_name={a.authorizedFormOfName: a for a in artists},
        )


def load_artists(csv_path: Path) -> Tuple[AuthorityArtist, ...]:
    """Reads an AtoM authority record export (headers required)."""
    try:
        with open(csv_path, newline='', encoding='utf-8-sig') as f:
            reader = csv.DictReader(f)
            if not reader.fieldnames or 'authorizedFormOfName' not in reader.fieldnames:
                raise ReferenceDataError(f"{csv_path.name} has no authorizedFormOfName column")

            artists = []
            for row in reader:
                name = (row.get('authorizedFormOfName') or '').strip()
                if not name:
                    continue
                subjects = row.get('subjectAccessPoints') or ''
                artists.append(AuthorityArtist(
                    authorizedFormOfName=name,
                    subjectAccessPoints=tuple(s.strip() for s in subjects.split('|') if s.strip()),
                ))
    except (OSError, csv.Error, UnicodeDecodeError) as e:
        raise ReferenceDataError(f"Unable to read artist list {csv_path}: {e}") from e

    logging.info(f"Loaded {len(artists)} authority artists from {csv_path.name}")
    return tuple(artists)


def load_cycle_subjects(xml_path: Path) -> Tuple[CycleSubject, ...]:
    """
    Reads skos:Concepts, keeping those with at least one dotted altLabel
    (cycle codes such as 'IAIR 22.1').
    """
    try:
        root = ET.parse(xml_path).getroot()
    except (OSError, ET.ParseError) as e:
        raise ReferenceDataError(f"Unable to read cycle subjects {xml_path}: {e}") from e

    concepts = root.findall('skos:Concept', SKOS_NS)
    if not concepts:
        raise ReferenceDataError("No subjects data found!")

    cycles = []
    for concept in concepts:
        pref = tuple((e.text or '').strip() for e in concept.findall('skos:prefLabel', SKOS_NS) if e.text)
        alt = tuple(
            (e.text or '').strip() for e in concept.findall('skos:altLabel', SKOS_NS)
            if e.text and '.' in e.text
        )
        if not alt:
            continue
        cycles.append(CycleSubject(prefLabel=pref, altLabel=alt))

    logging.info(f"Loaded {len(cycles)} exhibition cycles from {xml_path.name}")
    return tuple(cycles)
