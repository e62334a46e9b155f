import time
import pytest
from datetime import datetime
from pathlib import Path
from apmeta.config import DefineOptions
from apmeta.core import DescribeApp
from apmeta.exceptions import (EmptyBatchError, IdentificationError, MissingDependencyError,
                               ReferenceDataError, TagExtractionError)
from apmeta.models import FormatMatch, TechnicalMetadata
from apmeta.reporting import read_isad_csv
from apmeta.scanning.filesystem import DirectoryLister

CYCLES = """<?xml version="1.0" encoding="UTF-8"?>
<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
         xmlns:skos="http://www.w3.org/2004/02/skos/core#">
  <skos:Concept>
    <skos:prefLabel>Window Works 19.2</skos:prefLabel>
    <skos:altLabel>WW 19.2</skos:altLabel>
  </skos:Concept>
</rdf:RDF>
"""


class FakeIdentifier:
    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)

    def check_available(self):
        pass

    def identify(self, path):
        if path.name in self.fail_on:
            raise IdentificationError(f"Siegfried could not identify {path.name}")
        return FormatMatch(mime="image/jpeg", format="JPEG File Interchange Format")


class FakeExtractor:
    def __init__(self, tags=None, broken_tags=()):
        self.tags = tags or {}
        self.broken_tags = set(broken_tags)

    def check_available(self):
        pass

    def get_technical_metadata(self, path):
        return TechnicalMetadata(
            report=f"General\nOriginal name: {path.name}",
            modified=datetime(2021, 6, 1, 9, 0),
            is_image=True,
            is_video=False,
        )

    def get_embedded_tags(self, path):
        if path.name in self.broken_tags:
            raise TagExtractionError(f"Exif parsing failed for {path.name}")
        return dict(self.tags.get(path.name, {}))


@pytest.fixture
def refs(tmp_path):
    ref_dir = tmp_path / "refs"
    ref_dir.mkdir()
    artists = ref_dir / "artists.csv"
    artists.write_text(
        "authorizedFormOfName,subjectAccessPoints\n"
        "ArtistName,Residency Program\n"
        "Someone Else,Painting\n",
        encoding="utf-8",
    )
    cycles = ref_dir / "cycles.xml"
    cycles.write_text(CYCLES, encoding="utf-8")
    return artists, cycles


@pytest.fixture
def source(tmp_path):
    folder = tmp_path / "Archive" / "IAIR_22.1" / "ArtistName"
    folder.mkdir(parents=True)
    (folder / "IMG_2021.05.20.jpg").write_bytes(b"second image")
    (folder / "IMG_2021.05.12.jpg").write_bytes(b"first image")
    (folder / ".DS_Store").write_bytes(b"junk")
    return folder


def make_app(refs, tmp_path, identifier=None, extractor=None, **options):
    app = DescribeApp(refs[0], refs[1], DefineOptions(**options), debug_dir=tmp_path / "logs")
    app.identifier = identifier or FakeIdentifier()
    app.extractor = extractor or FakeExtractor(
        tags={"IMG_2021.05.12.jpg": {"Copyright Notice": "Credit: J. Doe"}},
    )
    return app


def test_end_to_end_folder(refs, source, tmp_path):
    isad = make_app(refs, tmp_path).define(source)

    parent, first, second = isad
    assert parent["levelOfDescription"] == "File"
    assert parent["title"] == "Archive, IAIR_22.1, ArtistName"
    assert parent["extentAndMedium"] == "2 digital objects"
    assert parent["subjectAccessPoints"] == "Residency Program"
    assert parent["nameAccessPoints"] == "ArtistName"
    assert parent["eventStartDates"] == "2021-05-12"
    assert parent["eventEndDates"] == "2021-06-01"

    assert [c["title"] for c in (first, second)] == ["IMG 2021.05.12", "IMG 2021.05.20"]
    assert [c["identifier"] for c in (first, second)] == ["001", "002"]
    for child in (first, second):
        assert "subjectAccessPoints" not in child
        assert "nameAccessPoints" not in child
        assert child["parentId"] == parent["legacyId"]
        assert child["levelOfDescription"] == "Item"
        assert len(child["digitalObjectChecksum"]) == 64

    assert first["reproductionConditions"] == "Credit: J. Doe"
    assert second["reproductionConditions"] == ""
    assert first["eventDates"] == "2021-06-01|2021-05-12"

    rows = read_isad_csv(source / "apmeta.csv")
    assert len(rows) == 3
    assert (tmp_path / "logs" / "last-output-debug.json").exists()


def test_batch_id_reused_on_second_run(refs, source, tmp_path):
    first = make_app(refs, tmp_path).define(source)
    second = make_app(refs, tmp_path).define(source)
    assert first[0]["identifier"] == second[0]["identifier"]
    assert len(second) == 3


def test_explicit_batch_id(refs, source, tmp_path):
    isad = make_app(refs, tmp_path, batch_id="0123abcd").define(source, tmp_path / "out.csv")
    assert isad[0]["identifier"] == "0123abcd"
    assert (tmp_path / "out.csv").exists()


def test_failed_file_aborts_batch(refs, source, tmp_path):
    app = make_app(refs, tmp_path, identifier=FakeIdentifier(fail_on={"IMG_2021.05.20.jpg"}))
    with pytest.raises(IdentificationError):
        app.define(source)
    assert not (source / "apmeta.csv").exists()


def test_failed_file_skipped_when_asked(refs, source, tmp_path):
    app = make_app(refs, tmp_path, identifier=FakeIdentifier(fail_on={"IMG_2021.05.20.jpg"}), skip_failed=True)
    isad = app.define(source)
    assert len(isad) == 1
    assert isad[0]["levelOfDescription"] == "Item"
    assert isad[0]["parentId"] == ""


def test_all_files_failing_is_empty_batch(refs, source, tmp_path):
    identifier = FakeIdentifier(fail_on={"IMG_2021.05.12.jpg", "IMG_2021.05.20.jpg"})
    app = make_app(refs, tmp_path, identifier=identifier, skip_failed=True)
    with pytest.raises(EmptyBatchError):
        app.define(source)


def test_tag_failure_is_not_fatal(refs, source, tmp_path):
    extractor = FakeExtractor(broken_tags={"IMG_2021.05.12.jpg"})
    isad = make_app(refs, tmp_path, extractor=extractor).define(source)
    assert len(isad) == 3


def test_missing_dependency_stops_before_files(refs, source, tmp_path):
    class NoSiegfried(FakeIdentifier):
        def check_available(self):
            raise MissingDependencyError("Siegfried dependency is not installed!")

        def identify(self, path):
            raise AssertionError("no file should be touched")

    with pytest.raises(MissingDependencyError):
        make_app(refs, tmp_path, identifier=NoSiegfried()).define(source)


def test_empty_folder(refs, tmp_path):
    empty = tmp_path / "empty"
    empty.mkdir()
    with pytest.raises(EmptyBatchError):
        make_app(refs, tmp_path).define(empty)


def test_bad_reference_data(refs, source, tmp_path):
    app = make_app(refs, tmp_path)
    app.cycles_xml = tmp_path / "missing.xml"
    with pytest.raises(ReferenceDataError):
        app.define(source)


def test_cycle_folder_collapses_subject(refs, tmp_path):
    folder = tmp_path / "WW 19.2"
    folder.mkdir()
    (folder / "a.jpg").write_bytes(b"a")
    refs[0].write_text(
        "authorizedFormOfName,subjectAccessPoints\n"
        "ArtistName,window works 19.2|Painting\n",
        encoding="utf-8",
    )
    (folder / "ArtistName_b.jpg").write_bytes(b"b")
    isad = make_app(refs, tmp_path).define(folder)
    parent = isad[0]
    children = isad[1:]
    assert parent["subjectAccessPoints"] == "Window Works 19.2"
    # Both items agree, so the subject lives on the container only
    assert all("subjectAccessPoints" not in c for c in children)


class SlowIdentifier(FakeIdentifier):
    def __init__(self, slow):
        super().__init__()
        self.slow = slow

    def identify(self, path):
        if path.name == self.slow:
            time.sleep(0.05)
        return super().identify(path)


@pytest.mark.parametrize("slow", ["photo.jpg", "photo.tif"])
def test_identifiers_independent_of_finish_order(refs, tmp_path, slow):
    folder = tmp_path / "pairs"
    folder.mkdir()
    (folder / "photo.jpg").write_bytes(b"jpg")
    (folder / "photo.tif").write_bytes(b"tif")

    isad = make_app(refs, tmp_path, identifier=SlowIdentifier(slow), batch_id="abc").define(folder)
    by_name = {Path(r["digitalObjectPath"]).name: r["identifier"] for r in isad[1:]}
    assert by_name == {"photo.jpg": "001", "photo.tif": "002"}


def test_inspect_all_keeps_listing_order(refs, tmp_path):
    folder = tmp_path / "ordered"
    folder.mkdir()
    for name in ("a.jpg", "b.jpg", "c.jpg"):
        (folder / name).write_bytes(name.encode())

    app = make_app(refs, tmp_path, identifier=SlowIdentifier("a.jpg"))
    files = DirectoryLister().list_files(folder)
    records = app.inspect_all(files)
    assert [r.path.name for r in records] == ["a.jpg", "b.jpg", "c.jpg"]
