"""Reader for ld65 debug files (``ld65 --dbgfile``).

The file holds one record per line: a keyword, a tab, then comma separated
``key=value`` pairs.  Values are integers (decimal or ``0x`` hex), ``+``
separated id lists, bare words, or double quoted strings.  Example::

    version major=2,minor=0
    file    id=0,name="hello.s",size=412,mtime=0x6512A7C4,mod=0
    line    id=3,file=0,line=12,type=0,count=0,span=1
    mod     id=0,name="hello.o",file=0
    seg     id=0,name="CODE",start=0x000200,size=0x0010,addrsize=absolute,type=ro
    span    id=1,seg=0,start=4,size=3
    scope   id=1,name="main",mod=0,type=scope,size=16,parent=0,sym=2,span=0
    sym     id=2,name="main",addrsize=absolute,size=16,scope=0,def=3,val=0x200,seg=0,type=lab

Problems are never raised; they are reported as :class:`ParseMessage`
objects to a callback and the offending record is skipped.  Span starts are
stored relative to their segment and are made absolute here.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from .dbginfo import InMemoryDebugInfo
from .model import (
    Line,
    LineKind,
    Module,
    ParseMessage,
    Scope,
    ScopeKind,
    Segment,
    Severity,
    Source,
    Span,
    Symbol,
    SymbolKind,
)

LOGGER = logging.getLogger("gpa65.dbgfile")

SUPPORTED_MAJOR = 2
IGNORED_KEYWORDS = {"csym", "info", "lib", "type"}

ParseCallback = Callable[[ParseMessage], None]
Attributes = Dict[str, str]


def parse_attributes(text: str) -> Attributes:
    """Split ``key=value,...`` into a dict, honouring quoted strings."""
    attrs: Attributes = {}
    pos = 0
    length = len(text)
    while pos < length:
        eq = text.find("=", pos)
        if eq < 0:
            raise ValueError(f"missing '=' in {text[pos:]!r}")
        key = text[pos:eq].strip()
        if not key:
            raise ValueError("empty attribute name")
        pos = eq + 1
        if pos < length and text[pos] == '"':
            pos += 1
            chars: List[str] = []
            while True:
                if pos >= length:
                    raise ValueError(f"unterminated string for {key}")
                ch = text[pos]
                if ch == "\\" and pos + 1 < length:
                    chars.append(text[pos + 1])
                    pos += 2
                    continue
                if ch == '"':
                    pos += 1
                    break
                chars.append(ch)
                pos += 1
            value = "".join(chars)
            if pos < length and text[pos] != ",":
                raise ValueError(f"unexpected text after string for {key}")
        else:
            comma = text.find(",", pos)
            end = length if comma < 0 else comma
            value = text[pos:end].strip()
            pos = end
        attrs[key] = value
        pos += 1
    return attrs


def _to_int(value: str, key: str) -> int:
    text = value.strip()
    try:
        if text.lower().startswith("0x"):
            return int(text, 16)
        return int(text, 10)
    except ValueError:
        raise ValueError(f"invalid number for {key}: {value!r}") from None


def _to_id_list(value: str, key: str) -> Tuple[int, ...]:
    if not value:
        return ()
    return tuple(_to_int(part, key) for part in value.split("+"))


_SYMBOL_KINDS = {kind.value: kind for kind in SymbolKind}
_SCOPE_KINDS = {kind.value: kind for kind in ScopeKind}
_LINE_KINDS = {int(kind): kind for kind in LineKind}


class DebugFileReader:
    """Builds an :class:`InMemoryDebugInfo` from ld65 debug text."""

    def __init__(self, name: str, callback: ParseCallback) -> None:
        self.name = name
        self.callback = callback
        self._lineno = 0
        self.sources: Dict[int, Source] = {}
        self.lines: Dict[int, Line] = {}
        self.modules: Dict[int, Module] = {}
        self.segments: Dict[int, Segment] = {}
        self.spans: Dict[int, Span] = {}
        self.scopes: Dict[int, Scope] = {}
        self.symbols: Dict[int, Symbol] = {}
        self._handlers: Dict[str, Callable[[Attributes], None]] = {
            "version": self._parse_version,
            "file": self._parse_file,
            "line": self._parse_line,
            "mod": self._parse_mod,
            "seg": self._parse_seg,
            "span": self._parse_span,
            "scope": self._parse_scope,
            "sym": self._parse_sym,
        }

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------
    def _report(self, severity: Severity, text: str, lineno: Optional[int] = None) -> None:
        line = self._lineno if lineno is None else lineno
        self.callback(ParseMessage(severity, self.name, line, text))

    def error(self, text: str, lineno: Optional[int] = None) -> None:
        self._report(Severity.ERROR, text, lineno)

    def warning(self, text: str, lineno: Optional[int] = None) -> None:
        self._report(Severity.WARNING, text, lineno)

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------
    def feed(self, lines: Iterable[str]) -> InMemoryDebugInfo:
        for lineno, raw in enumerate(lines, start=1):
            self._lineno = lineno
            text = raw.strip()
            if not text:
                continue
            parts = text.split(None, 1)
            keyword = parts[0]
            handler = self._handlers.get(keyword)
            if handler is None:
                if keyword not in IGNORED_KEYWORDS:
                    self.warning(f"Unknown keyword \"{keyword}\" - skipping")
                continue
            try:
                attrs = parse_attributes(parts[1] if len(parts) > 1 else "")
                handler(attrs)
            except KeyError as exc:
                self.error(f"Required attribute {exc.args[0]} missing for \"{keyword}\"")
            except ValueError as exc:
                self.error(f"{exc} in \"{keyword}\"")
        self._lineno = 0
        return self._resolve()

    # ------------------------------------------------------------------
    # Record handlers
    # ------------------------------------------------------------------
    def _parse_version(self, attrs: Attributes) -> None:
        major = _to_int(attrs["major"], "major")
        if major != SUPPORTED_MAJOR:
            self.error(f"Unsupported debug file version {major} (expected {SUPPORTED_MAJOR}.x)")

    def _parse_file(self, attrs: Attributes) -> None:
        source_id = _to_int(attrs["id"], "id")
        self.sources[source_id] = Source(source_id, attrs["name"])

    def _parse_line(self, attrs: Attributes) -> None:
        line_id = _to_int(attrs["id"], "id")
        raw_kind = _to_int(attrs.get("type", "0"), "type")
        kind = _LINE_KINDS.get(raw_kind)
        if kind is None:
            self.warning(f"Unknown line type {raw_kind}")
            kind = LineKind.MACRO
        self.lines[line_id] = Line(
            id=line_id,
            source_id=_to_int(attrs["file"], "file"),
            number=_to_int(attrs["line"], "line"),
            kind=kind,
            count=_to_int(attrs.get("count", "0"), "count"),
            span_ids=_to_id_list(attrs.get("span", ""), "span"),
        )

    def _parse_mod(self, attrs: Attributes) -> None:
        mod_id = _to_int(attrs["id"], "id")
        self.modules[mod_id] = Module(mod_id, attrs["name"], _to_int(attrs["file"], "file"))

    def _parse_seg(self, attrs: Attributes) -> None:
        seg_id = _to_int(attrs["id"], "id")
        self.segments[seg_id] = Segment(
            seg_id,
            attrs["name"],
            _to_int(attrs["start"], "start"),
            _to_int(attrs["size"], "size"),
        )

    def _parse_span(self, attrs: Attributes) -> None:
        span_id = _to_int(attrs["id"], "id")
        self.spans[span_id] = Span(
            span_id,
            _to_int(attrs["seg"], "seg"),
            _to_int(attrs["start"], "start"),
            _to_int(attrs.get("size", "0"), "size"),
        )

    def _parse_scope(self, attrs: Attributes) -> None:
        scope_id = _to_int(attrs["id"], "id")
        raw_kind = attrs.get("type", ScopeKind.MODULE.value)
        kind = _SCOPE_KINDS.get(raw_kind)
        if kind is None:
            self.warning(f"Unknown scope type \"{raw_kind}\"")
            kind = ScopeKind.MODULE
        self.scopes[scope_id] = Scope(
            id=scope_id,
            name=attrs["name"],
            kind=kind,
            size=_to_int(attrs.get("size", "0"), "size"),
            module_id=_to_int(attrs["mod"], "mod"),
            symbol_id=_to_int(attrs["sym"], "sym") if "sym" in attrs else None,
            parent_id=_to_int(attrs["parent"], "parent") if "parent" in attrs else None,
        )

    def _parse_sym(self, attrs: Attributes) -> None:
        sym_id = _to_int(attrs["id"], "id")
        raw_kind = attrs.get("type", SymbolKind.EQUATE.value)
        kind = _SYMBOL_KINDS.get(raw_kind)
        if kind is None:
            self.warning(f"Unknown symbol type \"{raw_kind}\"")
            kind = SymbolKind.EQUATE
        if "val" in attrs:
            value = _to_int(attrs["val"], "val")
        elif kind is SymbolKind.IMPORT:
            value = 0
        else:
            raise KeyError("val")
        self.symbols[sym_id] = Symbol(
            id=sym_id,
            name=attrs["name"],
            value=value,
            size=_to_int(attrs.get("size", "0"), "size"),
            kind=kind,
            scope_id=_to_int(attrs["scope"], "scope") if "scope" in attrs else None,
            parent_id=_to_int(attrs["parent"], "parent") if "parent" in attrs else None,
            segment_id=_to_int(attrs["seg"], "seg") if "seg" in attrs else None,
            export_id=_to_int(attrs["exp"], "exp") if "exp" in attrs else None,
        )

    # ------------------------------------------------------------------
    # Cross references
    # ------------------------------------------------------------------
    def _check_ref(self, table: Mapping[int, object], ref: Optional[int], what: str, owner: str) -> None:
        if ref is not None and ref not in table:
            self.error(f"Invalid {what} id {ref} in {owner}")

    def _resolve(self) -> InMemoryDebugInfo:
        for mod in self.modules.values():
            self._check_ref(self.sources, mod.source_id, "file", f"module {mod.id}")
        for line in self.lines.values():
            self._check_ref(self.sources, line.source_id, "file", f"line {line.id}")
            for span_id in line.span_ids:
                self._check_ref(self.spans, span_id, "span", f"line {line.id}")

        spans: Dict[int, Span] = {}
        for span in self.spans.values():
            segment = self.segments.get(span.segment_id)
            if segment is None:
                self.error(f"Invalid segment id {span.segment_id} in span {span.id}")
                continue
            spans[span.id] = replace(span, start=segment.start + span.start)

        for scope in self.scopes.values():
            owner = f"scope {scope.id}"
            self._check_ref(self.modules, scope.module_id, "module", owner)
            self._check_ref(self.symbols, scope.symbol_id, "symbol", owner)
            self._check_ref(self.scopes, scope.parent_id, "scope", owner)

        symbols: Dict[int, Symbol] = {}
        for sym in self.symbols.values():
            owner = f"symbol {sym.id}"
            self._check_ref(self.scopes, sym.scope_id, "scope", owner)
            self._check_ref(self.symbols, sym.parent_id, "symbol", owner)
            self._check_ref(self.segments, sym.segment_id, "segment", owner)
            if sym.is_import and sym.export_id is not None:
                export = self.symbols.get(sym.export_id)
                if export is None:
                    self.error(f"Invalid export id {sym.export_id} in {owner}")
                else:
                    sym = replace(sym, value=export.value)
            symbols[sym.id] = sym

        LOGGER.debug(
            "read %d sources, %d lines, %d spans, %d scopes, %d symbols, %d segments",
            len(self.sources),
            len(self.lines),
            len(spans),
            len(self.scopes),
            len(symbols),
            len(self.segments),
        )
        return InMemoryDebugInfo(
            symbols=symbols.values(),
            scopes=self.scopes.values(),
            segments=self.segments.values(),
            sources=self.sources.values(),
            modules=self.modules.values(),
            lines=self.lines.values(),
            spans=spans.values(),
        )


def parse_debug_text(lines: Iterable[str], name: str, callback: ParseCallback) -> InMemoryDebugInfo:
    return DebugFileReader(name, callback).feed(lines)


def read_debug_file(path: Path | str, callback: ParseCallback) -> Optional[InMemoryDebugInfo]:
    """Read ``path``; an unreadable file is reported and yields ``None``."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8", errors="replace") as handle:
            return parse_debug_text(handle, str(path), callback)
    except OSError as exc:
        callback(ParseMessage(Severity.ERROR, str(path), 0, f"Cannot open input file: {exc.strerror or exc}"))
        return None


__all__ = [
    "DebugFileReader",
    "parse_attributes",
    "parse_debug_text",
    "read_debug_file",
]
