"""Output writers: JSON data files, static site assets, single-file offline page."""

import json
import shutil
from pathlib import Path
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup

from trip_viewer.config import (
    DATA_SUBDIR,
    ITINERARY_JSON_NAME,
    PLACES_JSON_NAME,
    STATIC_DIR,
    STATIC_FILES,
)
from trip_viewer.models import Itinerary, Place


# ---------------------------------------------------------------------------
# JSON output
# ---------------------------------------------------------------------------

def places_to_list(places: List[Place]) -> List[dict]:
    return [p.to_dict() for p in places]


def write_json(data, path: Path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def to_json(itinerary: Itinerary, places: List[Place], data_dir: Path) -> Tuple[Path, Path]:
    """Write itinerary.json and places.json into ``data_dir``."""
    itinerary_path = data_dir / ITINERARY_JSON_NAME
    places_path = data_dir / PLACES_JSON_NAME
    write_json(itinerary.to_dict(), itinerary_path)
    write_json(places_to_list(places), places_path)
    return itinerary_path, places_path


def has_snapshot(data_dir: Path) -> bool:
    return (data_dir / ITINERARY_JSON_NAME).exists() and (data_dir / PLACES_JSON_NAME).exists()


def load_snapshot(data_dir: Path) -> Tuple[Itinerary, List[Place]]:
    """Read back a pair of JSON files written by ``to_json``."""
    itinerary_data = json.loads((data_dir / ITINERARY_JSON_NAME).read_text(encoding="utf-8"))
    places_data = json.loads((data_dir / PLACES_JSON_NAME).read_text(encoding="utf-8"))
    return Itinerary.from_dict(itinerary_data), [Place.from_dict(p) for p in places_data]


# ---------------------------------------------------------------------------
# Static site
# ---------------------------------------------------------------------------

def copy_static_assets(dist_dir: Path, static_dir: Path = STATIC_DIR) -> List[Path]:
    """Copy the front-end files that exist into ``dist_dir``."""
    dist_dir.mkdir(parents=True, exist_ok=True)
    copied = []
    for name in STATIC_FILES:
        src = static_dir / name
        if src.exists():
            dest = dist_dir / name
            shutil.copyfile(src, dest)
            copied.append(dest)
    return copied


def inline_data_script(itinerary: Itinerary, places: List[Place]) -> str:
    payload = json.dumps(
        {"itinerary": itinerary.to_dict(), "places": places_to_list(places)},
        ensure_ascii=False,
    )
    # keep "</script>" inside strings from ending the inline script
    payload = payload.replace("</", "<\\/")
    return f"window.__TRIP_DATA__={payload};"


def build_offline_html(
    itinerary: Itinerary,
    places: List[Place],
    static_dir: Path = STATIC_DIR,
) -> str:
    """index.html with style.css and app.js inlined and the trip data embedded."""
    html = (static_dir / "index.html").read_text(encoding="utf-8")
    app_js = (static_dir / "app.js").read_text(encoding="utf-8")
    style_css = (static_dir / "style.css").read_text(encoding="utf-8")

    soup = BeautifulSoup(html, "html.parser")

    for link in soup.find_all("link", rel="stylesheet"):
        if link.get("href", "").endswith("style.css"):
            style = soup.new_tag("style")
            style.string = style_css
            link.replace_with(style)

    for script in soup.find_all("script", src=True):
        if script["src"].endswith("app.js"):
            inline = soup.new_tag("script")
            inline.string = inline_data_script(itinerary, places) + "\n" + app_js
            script.replace_with(inline)

    return str(soup)


def write_offline_html(
    itinerary: Itinerary,
    places: List[Place],
    path: Path,
    static_dir: Optional[Path] = None,
) -> Path:
    html = build_offline_html(itinerary, places, static_dir or STATIC_DIR)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(html, encoding="utf-8")
    return path


def data_dir_for(dist_dir: Path) -> Path:
    return dist_dir / DATA_SUBDIR
