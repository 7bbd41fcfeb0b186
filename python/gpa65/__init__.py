"""
gpa65 - GPA symbol file generator for cc65 debug info.

Reads the debug file ld65 writes with ``--dbgfile`` and produces the flat
symbol file logic-analyzer software loads (segments, functions, labels and
source lines).  Each stage lives in its own module:

    model.py      → typed debug records
    dbginfo.py    → query interface + in-memory implementation
    dbgfile.py    → ld65 debug file reader
    context.py    → per-run diagnostics
    lines.py      → source line flattening, ordering, superseded marking
    labels.py     → label qualification
    ranges.py     → scope and segment address ranges
    writer.py     → section rendering
    converter.py  → load / policy / atomic write
    cli.py        → command line front-end

Use ``python -m gpa65`` or ``python/gpa65.py`` to run the converter.
"""

from __future__ import annotations

__version__ = "1.0.0"

from .context import RunContext  # noqa: E402,F401
from .converter import (  # noqa: E402,F401
    ConvertOptions,
    DebugInfoLoadError,
    Gpa65Error,
    OutputWriteError,
    SectionSelection,
    convert,
    write_symbol_file,
)
from .dbgfile import parse_debug_text, read_debug_file  # noqa: E402,F401
from .dbginfo import DebugInfo, InMemoryDebugInfo  # noqa: E402,F401
from .cli import main  # noqa: E402,F401

__all__ = [
    "ConvertOptions",
    "DebugInfo",
    "DebugInfoLoadError",
    "Gpa65Error",
    "InMemoryDebugInfo",
    "OutputWriteError",
    "RunContext",
    "SectionSelection",
    "convert",
    "main",
    "parse_debug_text",
    "read_debug_file",
    "write_symbol_file",
]
