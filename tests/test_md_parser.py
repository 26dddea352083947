import pytest

from trip_viewer.config import ROUTE_FALLBACK_TITLES, TRIP_TITLE
from trip_viewer.extract.md_parser import (
    default_md_path,
    parse_itinerary_md,
    parse_itinerary_text,
    parse_map_places,
)
from trip_viewer.models import Itinerary


@pytest.fixture
def itinerary(minimal_md) -> Itinerary:
    return parse_itinerary_md(minimal_md)


# ---------------------------------------------------------------------------
# Fixture document
# ---------------------------------------------------------------------------

def test_flights_from_table(itinerary):
    assert len(itinerary.flights) == 2
    assert itinerary.flights[0].direction == "去程"
    assert itinerary.flights[0].flight == "CX 001"
    assert itinerary.flights[0].arrive == "10:30"


def test_short_flight_row_gets_empty_arrive(itinerary):
    back = itinerary.flights[1]
    assert back.flight == "CX 002"
    assert back.depart == "22:00"
    assert back.arrive == ""


def test_hotel_without_check_in_out(itinerary):
    assert itinerary.hotel is not None
    assert itinerary.hotel.name == "Test Hotel"
    assert itinerary.hotel.check_in == ""
    assert itinerary.hotel.check_out == ""
    assert itinerary.hotel.room_type == "Deluxe King"


def test_reserved_restaurants_need_date_and_name(itinerary):
    assert len(itinerary.reserved_restaurants) == 1
    r = itinerary.reserved_restaurants[0]
    assert (r.date, r.time, r.name, r.note) == ("2/26", "19:00", "Gaggan", "需穿著正式")


def test_day_one_detected(itinerary):
    assert len(itinerary.days) == 1
    day = itinerary.days[0]
    assert day.day == 1
    assert day.date == "2/26"
    assert day.title == "抵達＋文化＋都會休閒"
    assert len(day.slots) == 1
    assert day.slots[0].activity == "抵達 Test Hotel 入住"


def test_map_places_and_categories(itinerary):
    places = {p.name: p for p in itinerary.places_from_md}
    assert list(places) == ["Test Hotel", "大皇宮", "臥佛寺", "四面佛"]
    assert places["Test Hotel"].category == "酒店"
    assert places["Test Hotel"].google_maps_url == "https://www.google.com/maps/place/Test+Hotel"
    assert places["大皇宮"].category == "景點"
    assert places["大皇宮"].reserved_time == "10:00"
    assert places["大皇宮"].google_maps_url == "https://maps.google.com/?q=grand+palace"
    # own category cell wins; non-map link ignored
    assert places["臥佛寺"].category == "寺廟"
    assert places["臥佛寺"].google_maps_url is None
    # unrecognised sub-heading inherits the previous category
    assert places["四面佛"].category == "景點"


def test_routes(itinerary):
    assert set(itinerary.routes) == {"A", "B", "C"}
    a, b, c = (itinerary.routes[k] for k in "ABC")
    assert a.title == "高評分美食"
    # every route in the block sees every dated row, in document order
    shared = [
        {"日": "1", "時段": "晚上", "行程": "Gaggan"},
        {"日": "2", "時段": "中午", "行程": "水門雞飯"},
    ]
    assert a.rows == shared
    assert b.title == "平價小吃"
    assert b.rows == shared
    assert c.title == "" and c.rows == []


def test_title_is_fixed(itinerary):
    assert itinerary.title == TRIP_TITLE


# ---------------------------------------------------------------------------
# Defaults and edge cases
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("text", ["", "\n", "hello", "# only a title", "| a | b |", "##", "## \n"])
def test_documents_without_sections_give_empty_itinerary(text):
    result = parse_itinerary_text(text)
    assert result == Itinerary()
    assert result.to_dict() == {
        "title": TRIP_TITLE,
        "flights": [],
        "hotel": None,
        "reservedRestaurants": [],
        "placesFromMd": [],
        "days": [],
        "routes": {
            "A": {"title": "", "rows": []},
            "B": {"title": "", "rows": []},
            "C": {"title": "", "rows": []},
        },
    }


def test_hotel_requires_name():
    result = parse_itinerary_text("## 酒店\n\n**入住**：2/26 15:00\n")
    assert result.hotel is None


def test_hotel_ascii_colon_and_all_fields():
    text = (
        "## 酒店\n"
        "**名稱**: Hotel X \n"
        "**入住**：2/26 15:00\n"
        "**退房**：3/1 12:00\n"
        "**房型**：Twin\n"
    )
    hotel = parse_itinerary_text(text).hotel
    assert (hotel.name, hotel.check_in, hotel.check_out, hotel.room_type) == (
        "Hotel X", "2/26 15:00", "3/1 12:00", "Twin",
    )


def test_hotel_heading_must_start_block():
    result = parse_itinerary_text("## 住宿\n\n## 其他\n說明 ## 酒店\n**名稱**：X\n")
    assert result.hotel is None


def test_flights_empty_header_variant():
    text = "## 航班日程\n\n|  | 日期 | 航班 |\n|---|---|---|\n| 去程 | 2/26 | TG 101 |\n"
    flight = parse_itinerary_text(text).flights[0]
    assert flight.direction == "去程"
    assert flight.flight == "TG 101"
    assert flight.depart == ""


def test_day_requires_exact_heading():
    table = "\n| 時段 | 行程 |\n|---|---|\n| 上午 | 出發 |\n"
    assert parse_itinerary_text("## Day 1（2/27）" + table).days == []
    assert parse_itinerary_text("## Day 1 (2/26)" + table).days == []
    assert parse_itinerary_text("## Day 5（3/2）" + table).days == []


def test_days_follow_block_order():
    table = "\n| 時段 | 行程 | 備註 |\n|---|---|---|\n| 上午 | x | y |\n"
    text = "## Day 2（2/27）" + table + "## Day 4（3/1）" + table
    days = parse_itinerary_text(text).days
    assert [d.day for d in days] == [2, 4]
    assert days[1].title == "日按＋收尾"
    assert days[0].slots[0].note == "y"


def test_day_slots_span_interrupted_tables():
    text = (
        "## Day 3（2/28）\n"
        "| 時段 | 行程 |\n|---|---|\n| 上午 | a |\n"
        "中間說明\n"
        "| 時段 | 行程 |\n|---|---|\n| 晚上 | b |\n"
    )
    slots = parse_itinerary_text(text).days[0].slots
    assert [s.activity for s in slots] == ["a", "b"]


def test_reserved_skipped_in_route_overview():
    text = "## 已預訂餐廳與三條推薦路線\n| 日期 | 餐廳 |\n|---|---|\n| 2/26 | X |\n"
    assert parse_itinerary_text(text).reserved_restaurants == []


def test_level3_reserved_heading_is_not_the_reserved_section():
    text = (
        "## 已預訂餐廳\n| 日期 | 餐廳 |\n|---|---|\n| 2/26 | X |\n"
        "## 行程地圖\n### 已預訂餐廳\n| 地點 |\n|---|\n| X |\n"
    )
    result = parse_itinerary_text(text)
    assert [r.name for r in result.reserved_restaurants] == ["X"]
    assert result.places_from_md[0].category == "已預訂餐廳"


def test_route_title_fallback():
    text = "## 路線\n### 路線 C：|\n| 日 | 行程 |\n|---|---|\n| 1 | x |\n"
    route = parse_itinerary_text(text).routes["C"]
    assert route.title == ROUTE_FALLBACK_TITLES["C"]
    assert route.rows == [{"日": "1", "行程": "x"}]


def test_one_block_feeds_several_detectors():
    text = (
        "## Day 1（2/26）\n| 時段 | 行程 |\n|---|---|\n| 上午 | x |\n"
        "### 路線 A：快\n| 時段 | 行程 |\n|---|---|\n| 下午 | y |\n"
    )
    result = parse_itinerary_text(text)
    assert len(result.days) == 1
    assert result.routes["A"].title == "快"
    assert result.routes["A"].rows == [
        {"時段": "上午", "行程": "x"},
        {"時段": "下午", "行程": "y"},
    ]


def test_routes_in_one_block_share_its_rows():
    text = (
        "## 三條推薦路線\n"
        "### 路線 A：甲\n| 日 | 行程 |\n|---|---|\n| 1 | a |\n"
        "### 路線 C：丙\n| 日 | 行程 |\n|---|---|\n| 3 | c |\n"
    )
    routes = parse_itinerary_text(text).routes
    rows = [{"日": "1", "行程": "a"}, {"日": "3", "行程": "c"}]
    assert routes["A"].title == "甲" and routes["A"].rows == rows
    assert routes["C"].title == "丙" and routes["C"].rows == rows
    assert routes["B"].rows == []


def test_map_category_patterns_first_match_wins():
    section = "## 行程地圖\n### 酒店與日按區\n| 地點 |\n|---|\n| X |\n"
    assert parse_map_places(section)[0].category == "酒店"


def test_map_purchase_category_and_blank_rows():
    section = (
        "## 行程地圖\n| 地點 |\n|---|\n| 開頭 |\n"
        "### 安全套 / 藥局\n| 地點 | 連結 |\n|---|---|\n|  | x |\n| 藥局 | [m](https://goo.gl/maps/abc) |\n"
    )
    places = parse_map_places(section)
    assert [(p.name, p.category) for p in places] == [("開頭", ""), ("藥局", "採購")]
    assert places[1].google_maps_url == "https://goo.gl/maps/abc"


def test_only_first_map_section_is_used():
    text = (
        "## 行程地圖\n| 地點 |\n|---|\n| A |\n"
        "## 行程地圖（舊）\n| 地點 |\n|---|\n| B |\n"
    )
    assert [p.name for p in parse_itinerary_text(text).places_from_md] == ["A"]


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse_itinerary_md(tmp_path / "missing.md")


def test_default_md_path(tmp_path):
    assert default_md_path(tmp_path) == tmp_path / "曼谷成人行程規劃.md"
