#!/usr/bin/env python3
"""CLI entry point for the trip viewer build.

Usage:
    python build_viewer.py [--source-dir DIR] [--output-dir dist/] [--single]

Options:
    --source-dir DIR    Directory with the itinerary Markdown and KML exports
                        (default: $TRIP_SOURCE)
    --output-dir DIR    Site output directory (default: dist/)
    --snapshot-dir DIR  Previously written JSON used when the Markdown is missing
    --single            Also write trip-offline.html with data, CSS and JS inlined
    --dry-run           Parse and show counts without writing files
    --quiet             Only print errors
    --debug             Enable debug logging from the parsers
"""

import argparse
import logging
import sys

from trip_viewer.config import OUTPUT_DIR, SNAPSHOT_DIR, TRIP_SOURCE
from trip_viewer.pipeline import BuildError, run_build


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Build the offline trip viewer from itinerary Markdown and KML maps.",
    )
    parser.add_argument(
        "--source-dir",
        default=TRIP_SOURCE,
        help="Directory holding the Markdown and KML sources",
    )
    parser.add_argument(
        "--output-dir",
        default=str(OUTPUT_DIR),
        help="Output directory",
    )
    parser.add_argument(
        "--snapshot-dir",
        default=str(SNAPSHOT_DIR),
        help="JSON snapshot used when the Markdown source is missing",
    )
    parser.add_argument(
        "--single",
        action="store_true",
        dest="single_file",
        help="Also write a single self-contained offline HTML file",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show stats only, don't write files",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only print errors",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Debug logging",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        result = run_build(
            source_dir=args.source_dir,
            output_dir=args.output_dir,
            snapshot_dir=args.snapshot_dir,
            single_file=args.single_file,
            verbose=not args.quiet,
            dry_run=args.dry_run,
        )
    except BuildError as e:
        print(f"Error: build failed reading {e.path}", file=sys.stderr)
        print(f"  {e.cause}", file=sys.stderr)
        return 1

    if args.dry_run and not args.quiet:
        it = result.itinerary
        print(
            f"\nDry run complete ({result.origin}). {len(it.flights)} flights, "
            f"{len(it.days)} days, {len(it.places_from_md)} map places, "
            f"{len(result.places)} KML places."
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
