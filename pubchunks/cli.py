"""
Command line interface for pubchunks.

Usage:
    pubchunks extract article.xml other.xml --sections title abstract refs
    pubchunks extract articles/*.xml --format json --parallel
    pubchunks detect articles/*.xml
    pubchunks sections --publisher hindawi
    pubchunks publishers
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import pandas as pd
from tabulate import tabulate

from pubchunks.chunks import available_publishers, chunks_batch, supported_sections
from pubchunks.config import ExtractionConfig
from pubchunks.exceptions import PubChunksError
from pubchunks.extractors.detector import PublisherDetector
from pubchunks.models import Section
from pubchunks.readers.xml_reader import XMLReader
from pubchunks.tabularize import tabularize


MAX_CELL_WIDTH = 60


def _shorten(value: object) -> object:
    if isinstance(value, str) and len(value) > MAX_CELL_WIDTH:
        return value[: MAX_CELL_WIDTH - 3] + "..."
    return value


def format_table(name: str, table: pd.DataFrame) -> str:
    """Render one DataFrame for the terminal."""
    rows = [[_shorten(v) for v in row] for row in table.itertuples(index=False)]
    lines = [f"== {name} ({len(table)} rows)", tabulate(rows, headers=list(table.columns), tablefmt="simple")]
    return "\n".join(lines)


def cmd_extract(args: argparse.Namespace) -> int:
    config = ExtractionConfig(
        sections=tuple(args.sections) if args.sections else None,
        publisher=args.publisher,
        output=args.output,
        on_error="record" if args.quiet_errors else "warn",
        parallel=args.parallel,
        max_workers=args.workers,
        rules_path=args.rules,
    )
    results = chunks_batch(args.files, config=config)

    if args.format == "json":
        print(json.dumps([r.to_dict() for r in results], indent=2, ensure_ascii=False))
    else:
        for name, table in tabularize(results, config.sections).items():
            print(format_table(name, table))
            print()

    return 0 if all(r.ok for r in results) else 1


def cmd_detect(args: argparse.Namespace) -> int:
    reader = XMLReader()
    detector = PublisherDetector()
    rows = []
    status = 0
    for path in args.files:
        try:
            publisher, reason = detector.detect_with_reason(reader.read(path))
            rows.append([str(path), publisher.value, reason])
        except PubChunksError as e:
            rows.append([str(path), "-", f"error: {e}"])
            status = 1
    print(tabulate(rows, headers=["document", "publisher", "diagnostic"], tablefmt="simple"))
    return status


def cmd_sections(args: argparse.Namespace) -> int:
    if args.publisher:
        names = supported_sections(args.publisher)
    else:
        names = [s.value for s in Section]
    for name in names:
        print(name)
    return 0


def cmd_publishers(args: argparse.Namespace) -> int:
    for name in available_publishers():
        print(name)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pubchunks",
        description="Extract sections from scholarly article XML",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract = subparsers.add_parser("extract", help="Extract sections from XML files")
    extract.add_argument("files", type=Path, nargs="+", help="XML file(s)")
    extract.add_argument(
        "--sections",
        "-s",
        nargs="+",
        choices=[s.value for s in Section],
        metavar="SECTION",
        help="Sections to extract (default: all)",
    )
    extract.add_argument(
        "--publisher",
        "-p",
        default="auto",
        help="Force a publisher profile (default: auto-detect)",
    )
    extract.add_argument("--format", "-f", choices=("table", "json"), default="table")
    extract.add_argument(
        "--output",
        choices=("text", "xml"),
        default="text",
        help="Return text or serialised XML for content sections",
    )
    extract.add_argument("--rules", type=Path, help="YAML file with extra extraction rules")
    extract.add_argument("--parallel", action="store_true", help="Process files on a thread pool")
    extract.add_argument("--workers", type=int, default=4, help="Thread pool size (default: 4)")
    extract.add_argument(
        "--quiet-errors",
        action="store_true",
        help="Record per-file failures without logging warnings",
    )
    extract.set_defaults(func=cmd_extract)

    detect = subparsers.add_parser("detect", help="Detect the publisher of XML files")
    detect.add_argument("files", type=Path, nargs="+", help="XML file(s)")
    detect.set_defaults(func=cmd_detect)

    sections = subparsers.add_parser("sections", help="List section names")
    sections.add_argument("--publisher", "-p", help="Only sections supported by this publisher")
    sections.set_defaults(func=cmd_sections)

    publishers = subparsers.add_parser("publishers", help="List publisher profiles")
    publishers.set_defaults(func=cmd_publishers)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        return args.func(args)
    except PubChunksError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
