"""GPA symbol file rendering.

Every section is a bracketed title, one record per line, and a trailing
blank line.  Names are padded so the address column starts at the same
position in every section.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence, TextIO

from .labels import ResolvedLabel
from .lines import LineRecord, mark_superseded
from .ranges import AddressRange

COLUMN_WIDTH = 24
LINE_NUMBER_WIDTH = 10
COMMENT_MARKER = "#"

SECTION_SEGMENTS = "[SECTIONS]"
SECTION_SCOPES = "[FUNCTIONS]"
SECTION_LABELS = "[USER]"
SECTION_LINES = "[SOURCE LINES]"


def _hex6(value: int) -> str:
    return f"{value:06X}"


def _pad(text: str, width: int) -> str:
    if len(text) >= width:
        return text + " "
    return text.ljust(width)


def format_range(entry: AddressRange) -> str:
    return f"{_pad(entry.name, COLUMN_WIDTH)}{_hex6(entry.start)}..{_hex6(entry.end)}"


def format_label(label: ResolvedLabel) -> str:
    prefix = f"{label.qualifier}/" if label.qualifier else ""
    text = prefix + _pad(label.name, COLUMN_WIDTH - len(prefix))
    text += _hex6(label.address)
    if label.show_size:
        text += f" {label.size:X}"
    return text


def format_source_line(record: LineRecord, superseded: bool = False) -> str:
    marker = COMMENT_MARKER if superseded else ""
    number = _pad(str(record.line), LINE_NUMBER_WIDTH - len(marker))
    return f"{marker}{number}{_hex6(record.address)}"


class GpaWriter:
    """Writes GPA sections to a text stream."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def _line(self, text: str = "") -> None:
        self.stream.write(text + "\n")

    def write_header(self, input_name: str) -> None:
        self._line(f"### GPA symbol file for {input_name} ###")
        self._line()

    def _write_ranges(self, title: str, ranges: Iterable[AddressRange]) -> None:
        self._line(title)
        for entry in ranges:
            self._line(format_range(entry))
        self._line()

    def write_segments(self, ranges: Iterable[AddressRange]) -> None:
        self._write_ranges(SECTION_SEGMENTS, ranges)

    def write_scopes(self, ranges: Iterable[AddressRange]) -> None:
        self._write_ranges(SECTION_SCOPES, ranges)

    def write_labels(self, labels: Iterable[ResolvedLabel]) -> None:
        self._line(SECTION_LABELS)
        for label in labels:
            self._line(format_label(label))
        self._line()

    def write_source_lines(self, records: Sequence[LineRecord]) -> None:
        """Write records that are already in merge-sort order."""
        self._line(SECTION_LINES)
        flags = mark_superseded(records)
        previous: Optional[str] = None
        for index, record in enumerate(records):
            if index == 0 or record.source_name != previous:
                if index > 0:
                    self._line()
                self._line(f"File: {record.source_name}")
                previous = record.source_name
            self._line(format_source_line(record, flags[index]))
        self._line()


__all__ = [
    "COLUMN_WIDTH",
    "GpaWriter",
    "LINE_NUMBER_WIDTH",
    "format_label",
    "format_range",
    "format_source_line",
]
