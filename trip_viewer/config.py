"""Configuration: .env loading, paths, constants."""

import os
from pathlib import Path
from dotenv import load_dotenv

# Project root = parent of trip_viewer/
PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(PROJECT_ROOT / ".env")

# --- Paths ---
TRIP_SOURCE = os.getenv("TRIP_SOURCE", str(PROJECT_ROOT / "trip_source"))
OUTPUT_DIR = Path(os.getenv("TRIP_OUTPUT_DIR", str(PROJECT_ROOT / "dist")))
SNAPSHOT_DIR = Path(os.getenv("TRIP_SNAPSHOT_DIR", str(PROJECT_ROOT / "data")))
STATIC_DIR = Path(__file__).resolve().parent / "static"

ITINERARY_MD_NAME = "曼谷成人行程規劃.md"
KML_FILE_NAMES = [
    "曼谷成人行程_地圖_1_基礎.kml",
    "曼谷成人行程_地圖_2_三條路線.kml",
    "曼谷成人行程_地圖.kml",
]

# --- Build output ---
DATA_SUBDIR = "data"
ITINERARY_JSON_NAME = "itinerary.json"
PLACES_JSON_NAME = "places.json"
STATIC_FILES = ["index.html", "app.js", "style.css", "sw.js"]
OFFLINE_HTML_NAME = "trip-offline.html"

# --- Itinerary defaults ---
TRIP_TITLE = "曼谷 4 天成人混合行程規劃"
EMPTY_TRIP_TITLE = "行程"
ROUTE_KEYS = ["A", "B", "C"]
ROUTE_FALLBACK_TITLES = {
    "A": "高評分路線",
    "B": "性價比路線",
    "C": "Soapy 高檔路線",
}

# (day number, date label, title); the heading is "## Day N（date）"
TRIP_DAYS = [
    (1, "2/26", "抵達＋文化＋都會休閒"),
    (2, "2/27", "日按＋紅燈區初探"),
    (3, "2/28", "日按＋夜生活深入"),
    (4, "3/1", "日按＋收尾"),
]

# Ordered (sub-heading text, category) pairs for the itinerary map section
MAP_CATEGORY_PATTERNS = [
    ("### 酒店", "酒店"),
    ("### 日按區", "日按"),
    ("### 紅燈區", "紅燈區"),
    ("### Soapy", "Soapy"),
    ("### 已預訂餐廳", "已預訂餐廳"),
    ("### 景點", "景點"),
    ("### 安全套", "採購"),
]

# --- Markdown parsing ---
HEAD_CHARS = 200  # block prefix inspected for section classification

# --- KML parsing ---
OTHER_CATEGORY = "其他"
UNNAMED_PLACE = "未命名"
DESCRIPTION_MAX_CHARS = 200
