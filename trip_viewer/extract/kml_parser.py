"""Parse KML map exports into a flat list of Place records.

Folders are categories, placemarks are points. Names are matched without
namespace and without regard to case, so `<kml>`, `<KML>` and namespaced
KML 2.2 documents all read the same way.
"""

from __future__ import annotations

import logging
import math
import re
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from lxml import etree

from trip_viewer.config import (
    DESCRIPTION_MAX_CHARS,
    KML_FILE_NAMES,
    OTHER_CATEGORY,
    TRIP_SOURCE,
    UNNAMED_PLACE,
)
from trip_viewer.models import Place
from trip_viewer.normalize.text import (
    coords_to_google_maps_url,
    first_google_maps_href,
    strip_html,
    strip_order_prefix,
    truncate,
)

logger = logging.getLogger(__name__)

_COORD_SPLIT_RE = re.compile(r"[\s,]+")


class KmlParseError(ValueError):
    """A KML file is not well-formed XML."""

    def __init__(self, path: Optional[Union[str, Path]], message: str):
        self.path = str(path) if path is not None else None
        where = f"{self.path}: " if self.path else ""
        super().__init__(f"{where}{message}")


def _local(el) -> str:
    """Lower-cased tag name without namespace; '' for comments/PIs."""
    if not isinstance(el.tag, str):
        return ""
    return etree.QName(el).localname.lower()


def _children(el, name: str) -> list:
    return [c for c in el if _local(c) == name]


def _child(el, name: str):
    for c in el:
        if _local(c) == name:
            return c
    return None


def _child_text(el, name: str) -> str:
    c = _child(el, name)
    if c is None:
        return ""
    return "".join(c.itertext())


def _raw_markup(el) -> str:
    """Text of an element including any child markup, serialized."""
    if el is None:
        return ""
    parts = [el.text or ""]
    for c in el:
        parts.append(etree.tostring(c, encoding="unicode", with_tail=True))
    return "".join(parts)


def parse_coordinates(raw: str) -> Tuple[Optional[float], Optional[float]]:
    """'lng,lat[,alt]' -> (lat, lng); anything unreadable -> (None, None)."""
    parts = [p for p in _COORD_SPLIT_RE.split(raw.strip()) if p]
    if len(parts) < 2:
        return None, None
    try:
        lng, lat = float(parts[0]), float(parts[1])
    except ValueError:
        return None, None
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None, None
    return lat, lng


def _placemark_to_place(pm, category: str, ordinal: int) -> Place:
    name = _child_text(pm, "name").strip() or UNNAMED_PLACE
    description = _raw_markup(_child(pm, "description"))

    lat = lng = None
    point = _child(pm, "point")
    if point is not None:
        lat, lng = parse_coordinates(_child_text(point, "coordinates"))

    url = first_google_maps_href(description) or coords_to_google_maps_url(lat, lng)
    return Place(
        id=f"kml-{category}-{ordinal}",
        name=name,
        category=category,
        lat=lat,
        lng=lng,
        description=truncate(strip_html(description), DESCRIPTION_MAX_CHARS),
        google_maps_url=url,
    )


def _folder_category(folder, parent: Optional[str]) -> str:
    name = strip_order_prefix(_child_text(folder, "name").strip()).strip()
    return name or parent or OTHER_CATEGORY


def _walk(node, categories: List[str], acc: List[Place], start: int):
    """Depth first: child folders, then this node's own placemarks."""
    for folder in _children(node, "folder"):
        parent = categories[-1] if categories else None
        _walk(folder, categories + [_folder_category(folder, parent)], acc, start)

    category = categories[-1] if categories else OTHER_CATEGORY
    for pm in _children(node, "placemark"):
        acc.append(_placemark_to_place(pm, category, start + len(acc)))


def _document(root):
    if root is None or _local(root) != "kml":
        return None
    return _child(root, "document")


def parse_kml_text(
    xml: Union[str, bytes],
    start: int = 0,
    path: Optional[Union[str, Path]] = None,
) -> List[Place]:
    """Places in one KML document, numbered from ``start``.

    Raises KmlParseError when the document is not well-formed.
    """
    data = xml.encode("utf-8") if isinstance(xml, str) else xml
    try:
        root = etree.fromstring(data)
    except etree.XMLSyntaxError as e:
        raise KmlParseError(path, str(e)) from e

    document = _document(root)
    if document is None:
        logger.debug(f"No kml/Document element in {path or 'input'}")
        return []

    places: List[Place] = []
    _walk(document, [], places, start)
    return places


def parse_kml_files(kml_paths: Iterable[Union[str, Path]]) -> List[Place]:
    """Concatenate the places of every existing file, in path order.

    Missing files are skipped. Ordinals keep counting across files so every
    id in the result is distinct.
    """
    all_places: List[Place] = []
    for p in kml_paths:
        path = Path(p)
        if not path.exists():
            logger.debug(f"Skipping missing KML file: {path}")
            continue
        places = parse_kml_text(path.read_bytes(), start=len(all_places), path=path)
        logger.debug(f"Read {len(places)} places from {path}")
        all_places.extend(places)
    return all_places


def default_kml_paths(source_dir: Optional[Union[str, Path]] = None) -> List[Path]:
    base = Path(source_dir or TRIP_SOURCE)
    return [base / name for name in KML_FILE_NAMES]
