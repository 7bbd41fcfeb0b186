"""Source line records: flattening, ordering and superseded marking.

When several lines map to the same address (macro expansions, compiler
output interleaved with assembly), the record a reader cares about most
must be the one left active.  Records are sorted so that it lands last in
its address group; every earlier record of the group is then marked as
superseded by looking at the record that follows it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

from .dbginfo import DebugInfo
from .model import LineKind


@dataclass(frozen=True)
class LineRecord:
    source_name: str
    line: int
    address: int
    kind: LineKind
    depth: int = 0


# Assembly < external < everything else (macro bodies, high-level lines).
LINE_KIND_PRIORITY: Dict[LineKind, int] = {
    LineKind.ASM: 0,
    LineKind.EXT: 1,
}
_DEFAULT_PRIORITY = 2


def line_kind_priority(kind: LineKind) -> int:
    return LINE_KIND_PRIORITY.get(kind, _DEFAULT_PRIORITY)


def line_sort_key(record: LineRecord) -> Tuple[int, int, int]:
    return (record.address, line_kind_priority(record.kind), record.depth)


def extract_line_records(info: DebugInfo) -> List[LineRecord]:
    """Emit one record per (source, line, span); lines without spans are dropped."""
    records: List[LineRecord] = []
    for source in info.sources():
        for line in info.lines_by_source(source.id):
            for span in info.spans_by_line(line.id):
                records.append(
                    LineRecord(
                        source_name=source.name,
                        line=line.number,
                        address=span.start,
                        kind=line.kind,
                        depth=line.count,
                    )
                )
    return records


def sort_line_records(records: Iterable[LineRecord]) -> List[LineRecord]:
    return sorted(records, key=line_sort_key)


def mark_superseded(records: Sequence[LineRecord]) -> List[bool]:
    """Flag each record that shares its address with the next one.

    The final record of the sequence has no successor and is never flagged.
    """
    flags: List[bool] = []
    last = len(records) - 1
    for index, record in enumerate(records):
        flags.append(index < last and record.address == records[index + 1].address)
    return flags


__all__ = [
    "LINE_KIND_PRIORITY",
    "LineRecord",
    "extract_line_records",
    "line_kind_priority",
    "line_sort_key",
    "mark_superseded",
    "sort_line_records",
]
