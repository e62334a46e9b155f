"""
Configuration constants for apmeta.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# --- Directory Listing ---
# Files the OS or other tools leave behind; never described.
JUNK_NAMES = {'.DS_Store', 'Thumbs.db', 'desktop.ini', '.localized', 'Icon\r', '.Spotlight-V100', '.Trashes'}
JUNK_PREFIXES = ('._', '~$')

DEFAULT_OUTPUT_NAME = "apmeta.csv"
LOGS_DIRECTORY = Path("logs")

# --- Path Tokens ---
# Volume mount marker and generic top-level folder, ignored when tagging paths
PATH_NOISE = {'Volumes', 'Archive'}

# Exhibition program abbreviations searched for in folder names
PROGRAM_ABBREVIATIONS = ['IAIR', 'WW', 'HSR']
CYCLE_CODE_PATTERN = r'(?<!\d)\d{2}\.\d(?!\d)'

# --- Embedded Tags ---
# Bytes read from the head of an image before tag parsing
EXIF_READ_SIZE = 512 * 1024

# exifread key -> tag name kept on the record
EXIF_TAG_MAP = {
    'Image XPTitle': 'title',
    'Image XPComment': 'description',
    'Image XPSubject': 'Object Name',
    'Image Copyright': 'Copyright Notice',
    'EXIF UserComment': 'Caption/Abstract',
    'Image ImageDescription': 'ImageDescription',
    'Image Artist': 'Artist',
}

# --- Matching ---
FUZZY_ARTIST_THRESHOLD = 0.8

# --- Hashing ---
HASH_CHUNK_SIZE = 64 * 1024  # 64 KB chunks for reading

# --- ISAD(G) Defaults ---
LANGUAGE = 'en'
CULTURE = 'en'
PUBLICATION_STATUS = 'Draft'
LOCATION_OF_ORIGINALS = 'ARCHIVE_445 Server'
ITEM_LEVEL = 'Item'
CONTAINER_LEVEL = 'File'
BATCH_ID_LABEL = 'apmeta-folderID'
EMPTY_SLOT = 'NULL'

# Column order of the AtoM ISAD(G) 2.6 CSV import template
ISAD_FIELDS = [
    'legacyId', 'parentId', 'qubitParentSlug', 'identifier', 'accessionNumber',
    'title', 'levelOfDescription', 'extentAndMedium', 'repository',
    'archivalHistory', 'acquisition', 'scopeAndContent', 'appraisal', 'accruals',
    'arrangement', 'accessConditions', 'reproductionConditions', 'language',
    'script', 'languageNote', 'physicalCharacteristics', 'findingAids',
    'locationOfOriginals', 'locationOfCopies', 'relatedUnitsOfDescription',
    'publicationNote', 'digitalObjectPath', 'digitalObjectURI',
    'digitalObjectChecksum', 'generalNote', 'subjectAccessPoints',
    'placeAccessPoints', 'nameAccessPoints', 'genreAccessPoints',
    'descriptionIdentifier', 'institutionIdentifier', 'rules',
    'descriptionStatus', 'levelOfDetail', 'revisionHistory',
    'languageOfDescription', 'scriptOfDescription', 'sources', 'archivistNote',
    'publicationStatus', 'physicalObjectName', 'physicalObjectLocation',
    'physicalObjectType', 'alternativeIdentifiers', 'alternativeIdentifierLabels',
    'eventDates', 'eventTypes', 'eventStartDates', 'eventEndDates', 'eventActors',
    'eventActorHistories', 'culture',
]

# Describe one object; never lifted to the container
ITEM_ONLY_FIELDS = {'legacyId', 'parentId', 'digitalObjectPath', 'digitalObjectURI', 'digitalObjectChecksum'}

ACCESS_POINT_FIELDS = ['subjectAccessPoints', 'placeAccessPoints', 'nameAccessPoints', 'genreAccessPoints']


@dataclass(frozen=True)
class DefineOptions:
    """Knobs for one `define` run."""
    recursive: bool = False
    include_ext_title: bool = False
    fuzzy_threshold: float = FUZZY_ARTIST_THRESHOLD
    batch_id: Optional[str] = None
    skip_failed: bool = False
    max_workers: int = 3
    exif_read_size: int = EXIF_READ_SIZE
