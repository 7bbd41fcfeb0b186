"""Typed records for ld65 debug information."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional, Tuple


class SymbolKind(Enum):
    EQUATE = "equ"
    LABEL = "lab"
    IMPORT = "imp"


class ScopeKind(Enum):
    GLOBAL = "global"
    MODULE = "file"
    SCOPE = "scope"
    STRUCT = "struct"
    ENUM = "enum"


class LineKind(IntEnum):
    """Line origin as numbered in the debug file."""

    ASM = 0
    EXT = 1
    MACRO = 2


class Severity(IntEnum):
    WARNING = 0
    ERROR = 1


@dataclass(frozen=True)
class Symbol:
    id: int
    name: str
    value: int
    size: int = 0
    kind: SymbolKind = SymbolKind.LABEL
    scope_id: Optional[int] = None
    parent_id: Optional[int] = None
    segment_id: Optional[int] = None
    export_id: Optional[int] = None

    @property
    def is_import(self) -> bool:
        return self.kind is SymbolKind.IMPORT

    @property
    def is_cheap_local(self) -> bool:
        return self.parent_id is not None


@dataclass(frozen=True)
class Scope:
    id: int
    name: str
    kind: ScopeKind
    size: int = 0
    module_id: Optional[int] = None
    symbol_id: Optional[int] = None
    parent_id: Optional[int] = None

    @property
    def is_procedure(self) -> bool:
        return self.kind is ScopeKind.SCOPE


@dataclass(frozen=True)
class Module:
    id: int
    name: str
    source_id: int


@dataclass(frozen=True)
class Segment:
    id: int
    name: str
    start: int
    size: int


@dataclass(frozen=True)
class Source:
    id: int
    name: str


@dataclass(frozen=True)
class Line:
    id: int
    source_id: int
    number: int
    kind: LineKind = LineKind.ASM
    count: int = 0
    span_ids: Tuple[int, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Span:
    """Address range covered by a line; ``start`` is absolute."""

    id: int
    segment_id: int
    start: int
    size: int = 0


@dataclass(frozen=True)
class ParseMessage:
    """A single warning or error raised while reading a debug file."""

    severity: Severity
    name: str
    line: int
    text: str

    def format(self) -> str:
        label = "Error" if self.severity is Severity.ERROR else "Warning"
        return f"{label}:{self.name}({self.line}): {self.text}"


__all__ = [
    "LineKind",
    "Line",
    "Module",
    "ParseMessage",
    "Scope",
    "ScopeKind",
    "Segment",
    "Severity",
    "Source",
    "Span",
    "Symbol",
    "SymbolKind",
]
