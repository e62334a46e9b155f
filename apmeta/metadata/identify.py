import json
import logging
import shutil
import subprocess
from pathlib import Path

from ..exceptions import IdentificationError, MissingDependencyError
from ..models import FormatMatch


class FormatIdentifier:
    """
    Wraps the Siegfried ('sf') command line utility.
    Must be installed and on the system PATH.
    """

    executable = 'sf'

    def check_available(self):
        if not shutil.which(self.executable):
            raise MissingDependencyError("Siegfried dependency is not installed!")

    def identify(self, path: Path) -> FormatMatch:
        # -nr = don't recurse, -json = JSON output
        cmd = [self.executable, '-nr', '-json', str(path)]
        try:
            out = subprocess.check_output(cmd, stderr=subprocess.DEVNULL, text=True)
        except FileNotFoundError as e:
            raise MissingDependencyError("Siegfried dependency is not installed!") from e
        except subprocess.CalledProcessError as e:
            raise IdentificationError(f"Siegfried failed on {path.name} (exit {e.returncode})") from e

        return self.parse_report(out, path)

    def parse_report(self, raw: str, path: Path) -> FormatMatch:
        try:
            report = json.loads(raw)
        except json.JSONDecodeError as e:
            raise IdentificationError(f"Siegfried returned unreadable output for {path.name}") from e

        files = report.get('files') or []
        if not files:
            raise IdentificationError(f"Siegfried reported no files for {path.name}")

        entry = files[0]
        if entry.get('errors'):
            raise IdentificationError(f"Siegfried error for {path.name}: {entry['errors']}")

        matches = entry.get('matches') or []
        if not matches:
            raise IdentificationError(f"Siegfried could not identify {path.name}")

        match = matches[0]
        if match.get('warning'):
            logging.debug(f"Siegfried warning for {path.name}: {match['warning']}")

        return FormatMatch(
            mime=match.get('mime', '') or '',
            format=match.get('format', '') or '',
            id=match.get('id', '') or '',
            basis=match.get('basis', '') or '',
            warning=match.get('warning', '') or '',
        )
