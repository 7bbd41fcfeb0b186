"""Label resolution for the ``[USER]`` section."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Set

from .dbginfo import DebugInfo
from .model import Symbol

MAX_ADDRESS = 0xFFFFFFFF


@dataclass(frozen=True)
class ResolvedLabel:
    name: str
    address: int
    size: int
    qualifier: str = ""
    scope_symbol: bool = False

    @property
    def show_size(self) -> bool:
        return not self.scope_symbol and self.size > 1

    @property
    def qualified_name(self) -> str:
        if not self.qualifier:
            return self.name
        return f"{self.qualifier}/{self.name}"


def scope_symbol_ids(info: DebugInfo) -> Set[int]:
    """Ids of symbols that define the start of some scope."""
    return {scope.symbol_id for scope in info.scopes() if scope.symbol_id is not None}


def is_ambiguous(info: DebugInfo, symbol: Symbol) -> bool:
    """True when another non-import symbol carries the same name."""
    duplicates = info.symbols_by_name(symbol.name)
    if len(duplicates) <= 1:
        return False
    return any(other.id != symbol.id and not other.is_import for other in duplicates)


def _scope_qualifier(info: DebugInfo, scope_id: Optional[int]) -> str:
    if scope_id is None:
        return ""
    scope = info.scope_by_id(scope_id)
    if scope is None:
        return ""
    if scope.name:
        return scope.name
    # Anonymous scopes fall back to the main source file of their module.
    if scope.module_id is None:
        return ""
    module = info.module_by_id(scope.module_id)
    if module is None:
        return ""
    source = info.source_by_id(module.source_id)
    return source.name if source is not None else ""


def qualifier_for(info: DebugInfo, symbol: Symbol) -> str:
    if symbol.is_cheap_local:
        parent = info.symbol_by_id(symbol.parent_id)
        return parent.name if parent is not None else ""
    if is_ambiguous(info, symbol):
        return _scope_qualifier(info, symbol.scope_id)
    return ""


def resolve_labels(info: DebugInfo, *, start: int = 0, end: int = MAX_ADDRESS) -> List[ResolvedLabel]:
    """Resolve every symbol in ``start..end`` in the database's own order."""
    scope_ids = scope_symbol_ids(info)
    labels: List[ResolvedLabel] = []
    for symbol in info.symbols_in_range(start, end):
        labels.append(
            ResolvedLabel(
                name=symbol.name,
                address=symbol.value,
                size=symbol.size,
                qualifier=qualifier_for(info, symbol),
                scope_symbol=symbol.id in scope_ids,
            )
        )
    return labels


__all__ = [
    "MAX_ADDRESS",
    "ResolvedLabel",
    "is_ambiguous",
    "qualifier_for",
    "resolve_labels",
    "scope_symbol_ids",
]
