"""Parse the itinerary Markdown into an Itinerary record.

The document is split into level-2 blocks. Each block is run through an
ordered list of (detector, handler) pairs; detectors are not exclusive, so
one block may feed several fields (e.g. a block holding route A and route B
tables). Missing sections leave their field at its default.
"""

import json
import logging
import re
from functools import reduce
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

from trip_viewer.config import (
    HEAD_CHARS,
    ITINERARY_MD_NAME,
    MAP_CATEGORY_PATTERNS,
    ROUTE_FALLBACK_TITLES,
    ROUTE_KEYS,
    TRIP_DAYS,
    TRIP_SOURCE,
    TRIP_TITLE,
)
from trip_viewer.models import (
    Day,
    Flight,
    Hotel,
    Itinerary,
    MdPlace,
    ReservedRestaurant,
    Route,
    Slot,
)
from trip_viewer.extract.markdown_tables import (
    Row,
    parse_table_rows,
    split_blocks,
    split_subsections,
)
from trip_viewer.normalize.text import first_google_maps_link

logger = logging.getLogger(__name__)

Draft = Dict[str, object]
Detector = Callable[[str], bool]
Handler = Callable[[str, Draft], None]


# ---------------------------------------------------------------------------
# Flights / hotel
# ---------------------------------------------------------------------------

def _cell(row: Row, *keys: str) -> str:
    """Value of the first header present in the row, else ''."""
    for key in keys:
        if key in row:
            return row[key]
    return ""


def _parse_flights(block: str, draft: Draft):
    draft["flights"] = [
        Flight(
            direction=_cell(r, "方向", ""),
            date=_cell(r, "日期"),
            flight=_cell(r, "航班"),
            depart=_cell(r, "起飛"),
            arrive=_cell(r, "抵達"),
        )
        for r in parse_table_rows(block)
    ]


def _labeled(label: str) -> re.Pattern:
    return re.compile(r"\*\*" + label + r"\*\*[：:]\s*([^\n]+)")


_HOTEL_NAME_RE = _labeled("名稱")
_HOTEL_CHECK_IN_RE = _labeled("入住")
_HOTEL_CHECK_OUT_RE = _labeled("退房")
_HOTEL_ROOM_RE = _labeled("房型")


def _match_value(pattern: re.Pattern, text: str) -> str:
    m = pattern.search(text)
    return m.group(1).strip() if m else ""


def _parse_hotel(block: str, draft: Draft):
    name = _HOTEL_NAME_RE.search(block)
    if not name:
        return
    draft["hotel"] = Hotel(
        name=name.group(1).strip(),
        check_in=_match_value(_HOTEL_CHECK_IN_RE, block),
        check_out=_match_value(_HOTEL_CHECK_OUT_RE, block),
        room_type=_match_value(_HOTEL_ROOM_RE, block),
    )


# ---------------------------------------------------------------------------
# Reserved restaurants
# ---------------------------------------------------------------------------

_RESERVED_HEADING_RE = re.compile(r"##\s*已預訂餐廳")


def _is_reserved_block(block: str) -> bool:
    # only the block's own level-2 heading counts; a "### 已預訂餐廳"
    # sub-heading inside the map section is not the reserved list
    head = block[:HEAD_CHARS]
    return bool(_RESERVED_HEADING_RE.match(block)) and "三條推薦" not in head


def _parse_reserved(block: str, draft: Draft):
    draft["reserved_restaurants"] = [
        ReservedRestaurant(
            date=r.get("日期", ""),
            time=r.get("時間", ""),
            name=r.get("餐廳", ""),
            note=r.get("備註", ""),
        )
        for r in parse_table_rows(block)
        if r.get("日期") and r.get("餐廳")
    ]


# ---------------------------------------------------------------------------
# Routes A/B/C
# ---------------------------------------------------------------------------

def _route_heading_re(key: str) -> re.Pattern:
    return re.compile(r"^###\s*路線 " + key + r"[：:]", re.M)


def _route_title_re(key: str) -> re.Pattern:
    return re.compile(r"###\s*路線 " + key + r"[：:]\s*([^\n|]+)")


def _route_detector(key: str) -> Detector:
    heading = _route_heading_re(key)
    return lambda block: bool(heading.search(block))


def _route_handler(key: str) -> Handler:
    title_re = _route_title_re(key)

    def handle(block: str, draft: Draft):
        m = title_re.search(block)
        title = m.group(1).strip() if m else ""
        # rows come from every table in the block, not only this route's own
        rows = [r for r in parse_table_rows(block) if r.get("日") or r.get("時段")]
        routes = dict(draft["routes"])
        routes[key] = Route(title=title or ROUTE_FALLBACK_TITLES[key], rows=rows)
        draft["routes"] = routes

    return handle


# ---------------------------------------------------------------------------
# Days
# ---------------------------------------------------------------------------

def _day_heading_re(day: int, date: str) -> re.Pattern:
    return re.compile(r"^##\s*Day " + str(day) + "（" + re.escape(date) + "）", re.M)


def _day_detector(day: int, date: str) -> Detector:
    heading = _day_heading_re(day, date)
    return lambda block: bool(heading.search(block))


def _day_handler(day: int, date: str, title: str) -> Handler:
    def handle(block: str, draft: Draft):
        slots = [
            Slot(time=r.get("時段", ""), activity=r.get("行程", ""), note=r.get("備註", ""))
            for r in parse_table_rows(block)
        ]
        draft["days"] = draft["days"] + [Day(day=day, date=date, title=title, slots=slots)]

    return handle


# ---------------------------------------------------------------------------
# Itinerary map section
# ---------------------------------------------------------------------------

_MAP_HEADING_RE = re.compile(r"##\s*行程地圖")


def _subsection_category(sub: str) -> Optional[str]:
    for pattern, category in MAP_CATEGORY_PATTERNS:
        if pattern in sub:
            return category
    return None


def _row_to_md_place(row: Row, current_category: str) -> Optional[MdPlace]:
    name = row.get("地點", "").strip()
    if not name:
        return None
    category = row.get("類別", current_category).strip() or current_category
    return MdPlace(
        name=name,
        category=category,
        reserved_time=row.get("預訂時間", "").strip(),
        google_maps_url=first_google_maps_link(json.dumps(row, ensure_ascii=False)),
    )


def _fold_subsection(
    state: Tuple[str, List[MdPlace]], sub: str
) -> Tuple[str, List[MdPlace]]:
    current, places = state
    current = _subsection_category(sub) or current
    found = [_row_to_md_place(r, current) for r in parse_table_rows(sub)]
    return current, places + [p for p in found if p]


def parse_map_places(section: str) -> List[MdPlace]:
    """Places listed in the map section, categorized by their sub-heading.

    A sub-section without a recognised heading keeps the category of the
    sub-section before it.
    """
    _, places = reduce(_fold_subsection, split_subsections(section), ("", []))
    return places


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def _build_dispatch() -> List[Tuple[Detector, Handler]]:
    dispatch: List[Tuple[Detector, Handler]] = [
        (lambda block: "## 航班日程" in block[:HEAD_CHARS], _parse_flights),
        (lambda block: block[:HEAD_CHARS].startswith("## 酒店"), _parse_hotel),
        (_is_reserved_block, _parse_reserved),
    ]
    for key in ROUTE_KEYS:
        dispatch.append((_route_detector(key), _route_handler(key)))
    for day, date, title in TRIP_DAYS:
        dispatch.append((_day_detector(day, date), _day_handler(day, date, title)))
    return dispatch


BLOCK_DISPATCH = _build_dispatch()


def parse_itinerary_text(text: str) -> Itinerary:
    """Parse the full text of an itinerary Markdown document."""
    blocks = split_blocks(text)
    draft: Draft = {
        "flights": [],
        "hotel": None,
        "reserved_restaurants": [],
        "days": [],
        "routes": {key: Route() for key in ROUTE_KEYS},
    }

    for block in blocks:
        for detector, handler in BLOCK_DISPATCH:
            if detector(block):
                handler(block, draft)

    map_section = next((b for b in blocks if _MAP_HEADING_RE.match(b)), None)
    places = parse_map_places(map_section) if map_section else []

    itinerary = Itinerary(
        title=TRIP_TITLE,
        flights=draft["flights"],
        hotel=draft["hotel"],
        reserved_restaurants=draft["reserved_restaurants"],
        places_from_md=places,
        days=draft["days"],
        routes=draft["routes"],
    )
    logger.debug(
        f"Parsed {len(blocks)} blocks: {len(itinerary.flights)} flights, "
        f"{len(itinerary.days)} days, {len(places)} map places"
    )
    return itinerary


def parse_itinerary_md(md_path: Union[str, Path]) -> Itinerary:
    """Read and parse an itinerary Markdown file. OSError propagates."""
    text = Path(md_path).read_text(encoding="utf-8")
    return parse_itinerary_text(text)


def default_md_path(source_dir: Optional[Union[str, Path]] = None) -> Path:
    return Path(source_dir or TRIP_SOURCE) / ITINERARY_MD_NAME
