"""Orchestrates the build: resolve sources → parse (or fall back) → write site."""

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

from trip_viewer.config import (
    EMPTY_TRIP_TITLE,
    OFFLINE_HTML_NAME,
    OUTPUT_DIR,
    SNAPSHOT_DIR,
    TRIP_SOURCE,
)
from trip_viewer.models import Itinerary, Place
from trip_viewer.extract.md_parser import default_md_path, parse_itinerary_md
from trip_viewer.extract.kml_parser import KmlParseError, default_kml_paths, parse_kml_files
from trip_viewer.output import (
    copy_static_assets,
    data_dir_for,
    has_snapshot,
    load_snapshot,
    to_json,
    write_offline_html,
)

PathLike = Union[str, Path]


class BuildError(Exception):
    """A source file could not be read or parsed; nothing was written."""

    def __init__(self, path: PathLike, cause: Exception):
        self.path = str(path)
        self.cause = cause
        super().__init__(f"{self.path}: {cause}")


@dataclass
class BuildResult:
    itinerary: Itinerary
    places: List[Place]
    origin: str  # "source", "snapshot" or "empty"
    written: List[Path] = field(default_factory=list)


def empty_itinerary() -> Itinerary:
    return Itinerary(title=EMPTY_TRIP_TITLE)


def _parse_sources(md_path: Path, kml_paths: List[Path]) -> Tuple[Itinerary, List[Place]]:
    try:
        itinerary = parse_itinerary_md(md_path)
    except (OSError, UnicodeDecodeError) as e:
        raise BuildError(md_path, e) from e
    try:
        places = parse_kml_files(kml_paths)
    except KmlParseError as e:
        raise BuildError(e.path or ", ".join(str(p) for p in kml_paths), e) from e
    except (OSError, UnicodeDecodeError) as e:
        raise BuildError(getattr(e, "filename", None) or ", ".join(str(p) for p in kml_paths), e) from e
    return itinerary, places


def load_trip_data(
    source_dir: Optional[PathLike] = None,
    snapshot_dir: Optional[PathLike] = None,
    verbose: bool = True,
) -> Tuple[Itinerary, List[Place], str]:
    """Parse the trip sources, or fall back to a JSON snapshot, or to empty data.

    Returns:
        (itinerary, places, origin) where origin is "source", "snapshot" or "empty".
    """
    source_dir = Path(source_dir or TRIP_SOURCE)
    snapshot_dir = Path(snapshot_dir or SNAPSHOT_DIR)

    def log(msg):
        if verbose:
            print(msg, file=sys.stderr)

    md_path = default_md_path(source_dir)
    if md_path.exists():
        kml_paths = default_kml_paths(source_dir)
        log(f"Reading itinerary: {md_path}")
        itinerary, places = _parse_sources(md_path, kml_paths)
        found = sum(1 for p in kml_paths if p.exists())
        log(f"  {len(itinerary.days)} days, {len(itinerary.places_from_md)} map places")
        log(f"  {len(places)} KML places from {found}/{len(kml_paths)} files")
        return itinerary, places, "source"

    if has_snapshot(snapshot_dir):
        log(f"Itinerary not found ({md_path}); using snapshot in {snapshot_dir}")
        try:
            itinerary, places = load_snapshot(snapshot_dir)
        except (OSError, ValueError) as e:
            raise BuildError(snapshot_dir, e) from e
        return itinerary, places, "snapshot"

    log(f"WARNING: itinerary not found ({md_path}); building with empty data")
    return empty_itinerary(), [], "empty"


def run_build(
    source_dir: Optional[PathLike] = None,
    output_dir: Optional[PathLike] = None,
    snapshot_dir: Optional[PathLike] = None,
    single_file: bool = False,
    verbose: bool = True,
    dry_run: bool = False,
) -> BuildResult:
    """Run the full build end to end.

    Args:
        source_dir: Directory holding the Markdown and KML sources.
        output_dir: Site output directory (data/ goes inside it).
        snapshot_dir: Directory with a previously written itinerary.json/places.json.
        single_file: Also write a self-contained offline HTML page.
        verbose: Print progress to stderr.
        dry_run: Parse only; write nothing.
    """
    output_dir = Path(output_dir or OUTPUT_DIR)

    def log(msg):
        if verbose:
            print(msg, file=sys.stderr)

    itinerary, places, origin = load_trip_data(source_dir, snapshot_dir, verbose)
    result = BuildResult(itinerary=itinerary, places=places, origin=origin)
    if dry_run:
        return result

    itinerary_path, places_path = to_json(itinerary, places, data_dir_for(output_dir))
    result.written.extend([itinerary_path, places_path])
    log(f"Wrote {itinerary_path}, {places_path}")

    for path in copy_static_assets(output_dir):
        result.written.append(path)
        log(f"Copied {path.name} -> {output_dir}")

    if single_file:
        offline_path = write_offline_html(itinerary, places, output_dir / OFFLINE_HTML_NAME)
        result.written.append(offline_path)
        log(f"Offline page written to: {offline_path}")

    return result
