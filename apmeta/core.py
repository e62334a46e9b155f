import json
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from . import config
from .config import DefineOptions
from .enrichment.pipeline import enrich_record
from .exceptions import ApmetaError, EmptyBatchError, TagExtractionError
from .isad.consolidate import consolidate
from .isad.formatter import format_batch
from .metadata.extract import MetadataExtractor
from .metadata.identify import FormatIdentifier
from .models import ArchivalRecord, FileRecord, RawFile
from .reference.loaders import ReferenceData, load_artists, load_cycle_subjects
from .reporting import find_existing_batch_id, write_isad_csv
from .scanning.filesystem import DirectoryLister
from .scanning.hasher import FileHasher


class DescribeApp:
    def __init__(self,
                 artists_csv: Path,
                 cycles_xml: Path,
                 options: Optional[DefineOptions] = None,
                 debug_dir: Optional[Path] = None):
        self.artists_csv = artists_csv
        self.cycles_xml = cycles_xml
        self.options = options or DefineOptions()
        self.debug_dir = debug_dir

        self.identifier = FormatIdentifier()
        self.extractor = MetadataExtractor(self.options.exif_read_size)
        self.hasher = FileHasher()

    def define(self, source: Path, output_csv: Optional[Path] = None) -> List[ArchivalRecord]:
        """
        Executes the description pipeline for one folder.
        1. Check tools, list files, load reference data
        2. Inspect (external tools, in parallel)
        3. Enrich (pure passes)
        4. Format, consolidate, write
        """
        opts = self.options
        output_csv = output_csv or source / config.DEFAULT_OUTPUT_NAME

        # --- Step 1: Preconditions ---
        self.identifier.check_available()
        self.extractor.check_available()

        lister = DirectoryLister(skip_names={output_csv.name})
        files = lister.list_files(source, recursive=opts.recursive)

        references = ReferenceData.build(
            load_artists(self.artists_csv),
            load_cycle_subjects(self.cycles_xml),
        )

        # --- Step 2: Inspection ---
        records = self.inspect_all(files)

        # --- Step 3: Enrichment ---
        records = [enrich_record(r, references, source, opts.fuzzy_threshold) for r in records]
        if self.debug_dir:
            self._write_debug(records)

        # --- Step 4: ISAD ---
        rows = format_batch(records, include_ext_title=opts.include_ext_title)
        batch_id = opts.batch_id or find_existing_batch_id(output_csv)
        if batch_id:
            logging.info(f"Reusing batch identifier {batch_id}")
        isad = consolidate(rows, source, batch_id)

        write_isad_csv(isad, output_csv)
        logging.info("Description complete.")
        return isad

    def inspect_all(self, files: List[RawFile]) -> List[FileRecord]:
        """
        Runs the external tools for every file on a thread pool and waits
        for all of them. Any failure aborts the batch unless `skip_failed`
        is set, in which case the file is logged and left out.
        """
        results = {}
        pool = ThreadPoolExecutor(max_workers=max(1, self.options.max_workers))
        try:
            futures = {pool.submit(self.inspect, f): i for i, f in enumerate(files)}
            for future in tqdm(as_completed(futures), total=len(futures), desc="Inspecting"):
                index = futures[future]
                try:
                    results[index] = future.result()
                except ApmetaError as e:
                    if not self.options.skip_failed:
                        raise
                    logging.error(f"Skipping {files[index].path.name}: {e}")
        finally:
            pool.shutdown(wait=True, cancel_futures=True)

        # Listing order, not completion order
        records = [results[i] for i in sorted(results)]

        if not records:
            raise EmptyBatchError("Every file failed inspection; nothing to describe.")
        return records

    def inspect(self, raw: RawFile) -> FileRecord:
        path = raw.path
        match = self.identifier.identify(path)
        technical = self.extractor.get_technical_metadata(path)

        tags = {}
        if technical.is_image:
            try:
                tags = self.extractor.get_embedded_tags(path)
            except TagExtractionError as e:
                logging.warning(str(e))

        return FileRecord(
            path=path,
            modified=technical.modified,
            format_match=match,
            is_image=technical.is_image,
            is_video=technical.is_video,
            technical_report=technical.report,
            checksum=self.hasher.compute_hash(path),
            tags=tags,
        )

    def _write_debug(self, records: List[FileRecord]):
        self.debug_dir.mkdir(parents=True, exist_ok=True)
        out = self.debug_dir / "last-output-debug.json"
        with open(out, "w", encoding="utf-8") as f:
            json.dump([asdict(r) for r in records], f, indent=2, default=str)
        logging.debug(f"Enriched records written to {out}")
