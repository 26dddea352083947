"""Block splitting and pipe-table extraction for the itinerary Markdown."""

import re
from typing import Dict, List

from trip_viewer.normalize.text import collapse_ws

Row = Dict[str, str]

_H2_SPLIT_RE = re.compile(r"(?=^##\s)", re.M)
_H2_START_RE = re.compile(r"##\s")
_H3_SPLIT_RE = re.compile(r"(?=^###\s)", re.M)
_SEPARATOR_RE = re.compile(r"^\|?\s*[-:]+\s*(\|\s*[-:]+\s*)*\|?\s*$")


def split_blocks(text: str) -> List[str]:
    """Split a document at each level-2 heading.

    Text before the first heading is boilerplate and is dropped.
    """
    return [b for b in _H2_SPLIT_RE.split(text) if _H2_START_RE.match(b)]


def split_subsections(block: str) -> List[str]:
    """Split a block at each level-3 heading, keeping the leading part."""
    return [s for s in _H3_SPLIT_RE.split(block) if s]


def _split_cells(line: str) -> List[str]:
    if line.startswith("|"):
        line = line[1:]
    if line.endswith("|"):
        line = line[:-1]
    return [collapse_ws(c.strip().replace("**", "")) for c in line.split("|")]


def parse_table_rows(text: str) -> List[Row]:
    """Read every pipe table in ``text`` into header->cell mappings.

    Blank lines and separator lines are skipped without closing a table;
    any other non-table line closes it, and the next pipe line starts a new
    table with its own header. Short rows are padded with ''.
    """
    rows: List[Row] = []
    in_table = False
    header: List[str] = []
    for line in text.splitlines():
        trim = line.strip()
        if not trim:
            continue
        is_row = trim.startswith("|")
        if is_row and not _SEPARATOR_RE.match(trim):
            cells = _split_cells(trim)
            if not in_table:
                header = cells
                in_table = True
            else:
                row: Row = {}
                for i, h in enumerate(header):
                    row[h] = cells[i] if i < len(cells) else ""
                rows.append(row)
        elif in_table and not is_row:
            in_table = False
    return rows
