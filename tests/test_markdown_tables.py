from trip_viewer.extract.markdown_tables import (
    parse_table_rows,
    split_blocks,
    split_subsections,
)


def test_split_blocks_drops_leading_boilerplate():
    text = "# Title\nintro\n## One\na\n## Two\nb\n### Two.1\nc\n"
    blocks = split_blocks(text)
    assert [b.splitlines()[0] for b in blocks] == ["## One", "## Two"]
    assert "### Two.1" in blocks[1]


def test_split_blocks_without_headings():
    assert split_blocks("just text\n| a | b |\n") == []
    assert split_blocks("") == []


def test_split_subsections_keeps_leading_part():
    subs = split_subsections("## Map\nintro\n### A\nx\n### B\ny\n")
    assert len(subs) == 3
    assert subs[0].startswith("## Map")
    assert subs[2].startswith("### B")


def test_header_and_cells_are_cleaned():
    rows = parse_table_rows(
        "|  **名稱**  | 備   註 |\n|---|:--:|\n| **A**  |  x    y |\n"
    )
    assert rows == [{"名稱": "A", "備 註": "x y"}]


def test_ragged_rows_padded_and_extra_cells_dropped():
    rows = parse_table_rows("| a | b | c |\n|---|---|---|\n| 1 |\n| 1 | 2 | 3 | 4 |\n")
    assert rows == [
        {"a": "1", "b": "", "c": ""},
        {"a": "1", "b": "2", "c": "3"},
    ]


def test_blank_lines_do_not_close_table():
    rows = parse_table_rows("| a |\n|---|\n| 1 |\n\n| 2 |\n")
    assert rows == [{"a": "1"}, {"a": "2"}]


def test_text_line_closes_table_and_next_run_reopens():
    text = "| a | b |\n|---|---|\n| 1 | 2 |\nsome note\n| c | d |\n|---|---|\n| 3 | 4 |\n"
    rows = parse_table_rows(text)
    assert rows == [{"a": "1", "b": "2"}, {"c": "3", "d": "4"}]


def test_header_only_table_has_no_rows():
    assert parse_table_rows("| a | b |\n|---|---|\n") == []

