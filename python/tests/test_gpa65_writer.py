"""Tests for GPA section rendering."""

from __future__ import annotations

import io

from gpa65.labels import ResolvedLabel
from gpa65.lines import LineRecord, extract_line_records, sort_line_records
from gpa65.model import LineKind
from gpa65.ranges import AddressRange
from gpa65.writer import (
    COLUMN_WIDTH,
    LINE_NUMBER_WIDTH,
    GpaWriter,
    format_label,
    format_range,
    format_source_line,
)


def _render(callback):
    buf = io.StringIO()
    callback(GpaWriter(buf))
    return buf.getvalue().split("\n")


def test_format_range_columns():
    text = format_range(AddressRange("CODE", 0x200, 0x20F))
    assert text == "CODE".ljust(COLUMN_WIDTH) + "000200..00020F"
    assert text.split() == ["CODE", "000200..00020F"]


def test_format_range_long_name_keeps_separator():
    name = "X" * (COLUMN_WIDTH + 3)
    assert format_range(AddressRange(name, 0, 1)) == f"{name} 000000..000001"


def test_label_address_column_is_aligned_with_qualifier():
    plain = format_label(ResolvedLabel("loop", 0x1234, 0))
    qualified = format_label(ResolvedLabel("loop", 0x1234, 0, qualifier="main"))
    assert plain.index("001234") == COLUMN_WIDTH
    assert qualified.index("001234") == COLUMN_WIDTH
    assert qualified.startswith("main/loop ")


def test_label_size_rules():
    assert format_label(ResolvedLabel("tbl", 0xABCD, 0x1F)).endswith("00ABCD 1F")
    assert format_label(ResolvedLabel("flag", 0x10, 1)).endswith("000010")
    assert format_label(ResolvedLabel("main", 0x200, 0x20, scope_symbol=True)).endswith("000200")


def test_source_line_marker_keeps_alignment():
    record = LineRecord("a.c", 42, 0x1000, LineKind.ASM)
    active = format_source_line(record)
    superseded = format_source_line(record, True)
    assert active == "42".ljust(LINE_NUMBER_WIDTH) + "001000"
    assert superseded == "#" + "42".ljust(LINE_NUMBER_WIDTH - 1) + "001000"
    assert active.index("001000") == superseded.index("001000")


def test_sections_end_with_blank_line():
    lines = _render(lambda w: w.write_segments([AddressRange("CODE", 0x200, 0x20F)]))
    assert lines == ["[SECTIONS]", "CODE".ljust(COLUMN_WIDTH) + "000200..00020F", "", ""]
    lines = _render(lambda w: w.write_scopes([]))
    assert lines == ["[FUNCTIONS]", "", ""]
    lines = _render(lambda w: w.write_labels([ResolvedLabel("a", 1, 0)]))
    assert lines[0] == "[USER]" and lines[-2:] == ["", ""]


def test_header():
    lines = _render(lambda w: w.write_header("game.dbg"))
    assert lines == ["### GPA symbol file for game.dbg ###", "", ""]


def test_source_lines_scenario(line_info_builder):
    info = line_info_builder(
        [
            (0, 7, LineKind.ASM, 0, [0x1000]),
            (0, 3, LineKind.MACRO, 0, [0x1000]),
        ]
    )
    records = sort_line_records(extract_line_records(info))
    lines = _render(lambda w: w.write_source_lines(records))
    assert lines[0] == "[SOURCE LINES]"
    assert lines.count("File: a.c") == 1
    assert lines[1] == "File: a.c"
    assert lines[2] == "#" + "7".ljust(LINE_NUMBER_WIDTH - 1) + "001000"
    assert lines[3] == "3".ljust(LINE_NUMBER_WIDTH) + "001000"
    assert lines[4:] == ["", ""]


def test_file_header_repeats_when_source_changes():
    records = [
        LineRecord("a.s", 1, 0x10, LineKind.ASM),
        LineRecord("a.s", 2, 0x11, LineKind.ASM),
        LineRecord("b.c", 9, 0x12, LineKind.EXT),
        LineRecord("a.s", 3, 0x13, LineKind.ASM),
    ]
    lines = _render(lambda w: w.write_source_lines(records))
    headers = [line for line in lines if line.startswith("File: ")]
    assert headers == ["File: a.s", "File: b.c", "File: a.s"]
    assert lines[4] == ""
    assert lines[5] == "File: b.c"


def test_long_qualifier_keeps_one_space_before_address():
    qualifier = "q" * (COLUMN_WIDTH + 6)
    text = format_label(ResolvedLabel("x", 0x1234, 0, qualifier=qualifier))
    assert text == f"{qualifier}/x 001234"
