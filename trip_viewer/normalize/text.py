"""Text cleanup and Google Maps URL helpers shared by both parsers."""

import re
from typing import Iterable, Optional, Tuple

_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")
_ORDER_PREFIX_RE = re.compile(r"^\d+_")

# Markdown inline link with an absolute https target
_MD_LINK_RE = re.compile(r"\[([^\]]*)\]\((https://[^)]+)\)")
_MAPS_URL_RE = re.compile(r"google\.com/maps|maps\.google|goo\.gl/maps")

# href attributes inside KML description HTML, tried in order
_HREF_PATTERNS = [
    re.compile(r"""href=["'](https://[^"']*google\.com/maps[^"']*)["']""", re.I),
    re.compile(r"""href=["'](https://[^"']*goo\.gl[^"']*)["']""", re.I),
]


def collapse_ws(text: str) -> str:
    return _WS_RE.sub(" ", text)


def strip_html(html: Optional[str]) -> str:
    """Replace tags with spaces and collapse whitespace.

    Entities are left as-is; this is a tag filter, not an HTML renderer.
    """
    if not html or not isinstance(html, str):
        return ""
    return collapse_ws(_TAG_RE.sub(" ", html)).strip()


def truncate(text: str, limit: int) -> str:
    return text[:limit]


def strip_order_prefix(name: str) -> str:
    """'01_景點' -> '景點'."""
    return _ORDER_PREFIX_RE.sub("", name)


def extract_md_links(text: str) -> Iterable[Tuple[str, str]]:
    """Yield (label, url) for each Markdown link with an https URL."""
    for m in _MD_LINK_RE.finditer(text):
        yield m.group(1), m.group(2)


def is_google_maps_url(url: str) -> bool:
    return bool(_MAPS_URL_RE.search(url))


def first_google_maps_link(text: str) -> Optional[str]:
    for _label, url in extract_md_links(text):
        if is_google_maps_url(url):
            return url
    return None


def first_google_maps_href(html: Optional[str]) -> Optional[str]:
    """First embedded google.com/maps link, else first goo.gl link, else None."""
    if not html or not isinstance(html, str):
        return None
    for pattern in _HREF_PATTERNS:
        m = pattern.search(html)
        if m:
            return m.group(1)
    return None


def _format_coord(value: float) -> str:
    # whole numbers print without a trailing ".0"
    return str(int(value)) if float(value).is_integer() else repr(float(value))


def coords_to_google_maps_url(lat: Optional[float], lng: Optional[float]) -> Optional[str]:
    if lat is None or lng is None:
        return None
    return f"https://www.google.com/maps?q={_format_coord(lat)},{_format_coord(lng)}"
