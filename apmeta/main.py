import argparse
import logging
import sys
from pathlib import Path

from . import config
from .config import DefineOptions
from .core import DescribeApp
from .exceptions import ApmetaError
from .verify import ChecksumVerifier


def setup_logging(log_dir: Path, verbose: bool):
    """Sets up logging to both console and a file in the logs directory."""
    log_level = logging.DEBUG if verbose else logging.INFO

    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "apmeta.log"

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ]
    )

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)


def parse_args(argv=None):
    p = argparse.ArgumentParser(prog="apmeta", description="Archival description (ISAD(G)) packets for folders of digital files")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("--logs", type=Path, default=config.LOGS_DIRECTORY, help="Directory for log and debug output")
    sub = p.add_subparsers(dest="command", required=True)

    d = sub.add_parser("define", help="Sniff folder contents into an apmeta (ISAD CSV) file")
    d.add_argument("source", type=Path, nargs="?", default=Path("."), help="Folder to describe")
    d.add_argument("--output", type=Path, default=None, help=f"apmeta file (default: source/{config.DEFAULT_OUTPUT_NAME})")
    d.add_argument("--artists", type=Path, required=True, help="AtoM authority record CSV export")
    d.add_argument("--cycles", type=Path, required=True, help="AtoM subjects SKOS XML export")
    d.add_argument("--recursive", action="store_true", help="Describe files in sub-folders too")
    d.add_argument("--include-ext", action="store_true", help="Keep the file extension in item titles")
    d.add_argument("--threshold", type=float, default=config.FUZZY_ARTIST_THRESHOLD, help="Artist match similarity (0-1)")
    d.add_argument("--batch-id", default=None, help="Reuse this folder identifier instead of generating one")
    d.add_argument("--skip-failed", action="store_true", help="Leave out files that fail inspection instead of aborting")
    d.add_argument("--workers", type=int, default=3, help="Parallel workers for file inspection")

    v = sub.add_parser("verify", help="Check digital objects in an apmeta file against their checksums")
    v.add_argument("source", type=Path, nargs="?", default=Path("."), help="apmeta file or the folder holding it")

    return p.parse_args(argv)


def run_define(args) -> int:
    source = args.source.resolve()
    logging.info(f"Looking at: {source}")

    options = DefineOptions(
        recursive=args.recursive,
        include_ext_title=args.include_ext,
        fuzzy_threshold=args.threshold,
        batch_id=args.batch_id,
        skip_failed=args.skip_failed,
        max_workers=args.workers,
    )
    app = DescribeApp(args.artists, args.cycles, options, debug_dir=args.logs)
    app.define(source, args.output)
    return 0


def run_verify(args) -> int:
    report = ChecksumVerifier().verify(args.source.resolve())
    return 0 if report.ok else 1


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.logs, args.verbose)

    handlers = {"define": run_define, "verify": run_verify}
    try:
        sys.exit(handlers[args.command](args))
    except ApmetaError as e:
        logging.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        sys.exit(1)
    except Exception:
        logging.exception(f"Fatal error during {args.command}.")
        sys.exit(1)


if __name__ == "__main__":
    main()
