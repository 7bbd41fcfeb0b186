"""Query surface over loaded debug information.

The converter never touches the debug file directly.  Everything it needs
goes through the :class:`DebugInfo` protocol, which mirrors the lookups the
cc65 ``dbginfo`` API offers (by id, by name, by address range).
:class:`InMemoryDebugInfo` is the only implementation; the file reader
builds one and tests construct them by hand.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Protocol

from .model import Line, Module, Scope, Segment, Source, Span, Symbol, SymbolKind


class DebugInfo(Protocol):
    def symbols_in_range(self, start: int, end: int) -> List[Symbol]: ...

    def symbol_by_id(self, symbol_id: int) -> Optional[Symbol]: ...

    def symbols_by_name(self, name: str) -> List[Symbol]: ...

    def scopes(self) -> List[Scope]: ...

    def scope_by_id(self, scope_id: int) -> Optional[Scope]: ...

    def scopes_by_name(self, name: str) -> List[Scope]: ...

    def segments(self) -> List[Segment]: ...

    def sources(self) -> List[Source]: ...

    def source_by_id(self, source_id: int) -> Optional[Source]: ...

    def module_by_id(self, module_id: int) -> Optional[Module]: ...

    def lines_by_source(self, source_id: int) -> List[Line]: ...

    def spans_by_line(self, line_id: int) -> List[Span]: ...

    def span_count(self) -> int: ...


class InMemoryDebugInfo:
    """Indexed, read-only view over plain record lists."""

    def __init__(
        self,
        *,
        symbols: Iterable[Symbol] = (),
        scopes: Iterable[Scope] = (),
        segments: Iterable[Segment] = (),
        sources: Iterable[Source] = (),
        modules: Iterable[Module] = (),
        lines: Iterable[Line] = (),
        spans: Iterable[Span] = (),
    ) -> None:
        self._symbols: List[Symbol] = list(symbols)
        self._scopes: List[Scope] = list(scopes)
        self._segments: List[Segment] = list(segments)
        self._sources: List[Source] = list(sources)
        self._modules: List[Module] = list(modules)
        self._lines: List[Line] = list(lines)
        self._spans: List[Span] = list(spans)

        self._symbol_ids: Dict[int, Symbol] = {sym.id: sym for sym in self._symbols}
        self._symbol_names: Dict[str, List[Symbol]] = {}
        for sym in self._symbols:
            self._symbol_names.setdefault(sym.name, []).append(sym)
        # Only labels are addresses; equates and imports stay out of range queries.
        self._symbols_by_value: List[Symbol] = sorted(
            (sym for sym in self._symbols if sym.kind is SymbolKind.LABEL),
            key=lambda sym: (sym.value, sym.name, sym.id),
        )

        self._scope_ids: Dict[int, Scope] = {scope.id: scope for scope in self._scopes}
        self._scope_names: Dict[str, List[Scope]] = {}
        for scope in self._scopes:
            self._scope_names.setdefault(scope.name, []).append(scope)

        self._source_ids: Dict[int, Source] = {src.id: src for src in self._sources}
        self._module_ids: Dict[int, Module] = {mod.id: mod for mod in self._modules}
        self._span_ids: Dict[int, Span] = {span.id: span for span in self._spans}

        self._lines_by_source: Dict[int, List[Line]] = {}
        for line in self._lines:
            self._lines_by_source.setdefault(line.source_id, []).append(line)
        self._line_ids: Dict[int, Line] = {line.id: line for line in self._lines}

    # ------------------------------------------------------------------
    # Symbols
    # ------------------------------------------------------------------
    def symbols_in_range(self, start: int, end: int) -> List[Symbol]:
        """Return labels with ``start <= value <= end``, ordered by value then name."""
        return [sym for sym in self._symbols_by_value if start <= sym.value <= end]

    def symbol_by_id(self, symbol_id: int) -> Optional[Symbol]:
        return self._symbol_ids.get(symbol_id)

    def symbols_by_name(self, name: str) -> List[Symbol]:
        return list(self._symbol_names.get(name, ()))

    # ------------------------------------------------------------------
    # Scopes and modules
    # ------------------------------------------------------------------
    def scopes(self) -> List[Scope]:
        return list(self._scopes)

    def scope_by_id(self, scope_id: int) -> Optional[Scope]:
        return self._scope_ids.get(scope_id)

    def scopes_by_name(self, name: str) -> List[Scope]:
        return list(self._scope_names.get(name, ()))

    def module_by_id(self, module_id: int) -> Optional[Module]:
        return self._module_ids.get(module_id)

    # ------------------------------------------------------------------
    # Segments, sources, lines, spans
    # ------------------------------------------------------------------
    def segments(self) -> List[Segment]:
        return list(self._segments)

    def sources(self) -> List[Source]:
        return list(self._sources)

    def source_by_id(self, source_id: int) -> Optional[Source]:
        return self._source_ids.get(source_id)

    def lines_by_source(self, source_id: int) -> List[Line]:
        return list(self._lines_by_source.get(source_id, ()))

    def spans_by_line(self, line_id: int) -> List[Span]:
        line = self._line_ids.get(line_id)
        if line is None:
            return []
        return [self._span_ids[span_id] for span_id in line.span_ids if span_id in self._span_ids]

    def span_count(self) -> int:
        return len(self._spans)


__all__ = ["DebugInfo", "InMemoryDebugInfo"]
