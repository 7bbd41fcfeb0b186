"""Inclusive address ranges for procedure scopes and segments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from .dbginfo import DebugInfo

LOGGER = logging.getLogger("gpa65.ranges")

NULL_SEGMENT = "NULL"


@dataclass(frozen=True)
class AddressRange:
    name: str
    start: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.start + 1


def build_scope_ranges(info: DebugInfo) -> List[AddressRange]:
    """Ranges of named, non-empty procedure scopes in enumeration order."""
    ranges: List[AddressRange] = []
    for scope in info.scopes():
        if not scope.is_procedure or scope.size <= 0 or not scope.name:
            continue
        symbol = info.symbol_by_id(scope.symbol_id) if scope.symbol_id is not None else None
        if symbol is None:
            LOGGER.debug("scope %s has no defining symbol; skipped", scope.name)
            continue
        ranges.append(AddressRange(scope.name, symbol.value, symbol.value + scope.size - 1))
    return ranges


def build_segment_ranges(info: DebugInfo) -> List[AddressRange]:
    """Ranges of populated segments, ascending by start address."""
    segments = [seg for seg in info.segments() if seg.size > 0 and seg.name != NULL_SEGMENT]
    segments.sort(key=lambda seg: (seg.start, seg.name))
    return [AddressRange(seg.name, seg.start, seg.start + seg.size - 1) for seg in segments]


__all__ = ["AddressRange", "NULL_SEGMENT", "build_scope_ranges", "build_segment_ranges"]
