import logging
from pathlib import Path

from tqdm import tqdm

from .exceptions import FileHashError, VerificationError
from .models import VerificationReport
from .reporting import find_apmeta_file, read_isad_csv
from .scanning.hasher import FileHasher


class ChecksumVerifier:
    """
    Confirms the digital objects listed in an apmeta file still exist and
    still hash to the recorded checksum.
    """

    def __init__(self):
        self.hasher = FileHasher()

    def verify(self, source: Path) -> VerificationReport:
        apmeta_file = find_apmeta_file(source)
        logging.info(f"Verify: {apmeta_file}")

        entries = [e for e in read_isad_csv(apmeta_file) if e.get('digitalObjectPath')]
        total = len(entries)
        if not entries:
            raise VerificationError("No archival descriptions with digital objects found in list!")

        missing, unhashed, mismatched = [], [], []
        passed = 0
        for entry in tqdm(entries, desc="Verifying"):
            path = Path(entry['digitalObjectPath'])
            expected = entry.get('digitalObjectChecksum') or ''

            if not path.exists():
                logging.error(f"File does not exist:   {path.name}")
                missing.append(str(path))
                continue
            if not expected:
                logging.error(f"Not precalculated:     {path.name}")
                unhashed.append(str(path))
                continue

            try:
                ok = self.hasher.verify(path, expected)
            except FileHashError as e:
                logging.error(str(e))
                ok = False
            if not ok:
                logging.error(f"Hashes did not match:  {path.name}")
                mismatched.append(str(path))
                continue
            passed += 1

        logging.info(f"{passed}/{total} passed checksum validation.")
        return VerificationReport(
            total=total,
            passed=passed,
            missing=tuple(missing),
            unhashed=tuple(unhashed),
            mismatched=tuple(mismatched),
        )
