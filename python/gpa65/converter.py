"""Conversion driver: load, apply the diagnostics policy, write sections."""

from __future__ import annotations

import contextlib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, TextIO

from .context import RunContext
from .dbgfile import read_debug_file
from .dbginfo import DebugInfo
from .labels import resolve_labels
from .lines import extract_line_records, sort_line_records
from .ranges import build_scope_ranges, build_segment_ranges
from .writer import GpaWriter

LOGGER = logging.getLogger("gpa65.converter")


class Gpa65Error(RuntimeError):
    """Base class for fatal conversion failures."""


class DebugInfoLoadError(Gpa65Error):
    """Raised when the debug file is unreadable or fails the error policy."""


class OutputWriteError(Gpa65Error):
    """Raised when the symbol file cannot be written."""


@dataclass
class SectionSelection:
    segments: bool = False
    scopes: bool = False
    labels: bool = False
    lines: bool = False

    @property
    def empty(self) -> bool:
        return not (self.segments or self.scopes or self.labels or self.lines)

    @classmethod
    def everything(cls) -> "SectionSelection":
        return cls(segments=True, scopes=True, labels=True, lines=True)


@dataclass
class ConvertOptions:
    input_path: Path
    output_path: Path
    sections: SectionSelection = field(default_factory=SectionSelection.everything)
    ignore_warnings: bool = False
    ignore_errors: bool = False

    def effective_sections(self) -> SectionSelection:
        if self.sections.empty:
            return SectionSelection.everything()
        return self.sections


def check_diagnostics(ctx: RunContext, *, ignore_errors: bool, ignore_warnings: bool) -> None:
    """Raise :class:`DebugInfoLoadError` unless every reported problem is suppressed."""
    if ctx.errors > 0:
        if not ignore_errors:
            raise DebugInfoLoadError(f"{ctx.errors} error(s) in debug data")
        LOGGER.info("-e: Ignoring source data errors.")
    if ctx.warnings > 0:
        if not ignore_warnings:
            raise DebugInfoLoadError(f"{ctx.warnings} warning(s) in debug data")
        LOGGER.info("-w: Ignoring source data warnings.")


def write_symbol_file(
    info: DebugInfo,
    stream: TextIO,
    *,
    input_name: str,
    sections: Optional[SectionSelection] = None,
) -> None:
    """Render the selected sections of ``info`` to ``stream``."""
    selected = sections or SectionSelection.everything()
    writer = GpaWriter(stream)
    writer.write_header(input_name)
    if selected.segments:
        writer.write_segments(build_segment_ranges(info))
    if selected.scopes:
        writer.write_scopes(build_scope_ranges(info))
    if selected.labels:
        writer.write_labels(resolve_labels(info))
    if selected.lines:
        writer.write_source_lines(sort_line_records(extract_line_records(info)))


def _write_output(info: DebugInfo, options: ConvertOptions) -> None:
    output = Path(options.output_path)
    tmp_path = output.with_name(output.name + ".tmp")
    try:
        with tmp_path.open("w", encoding="utf-8", newline="\r\n") as handle:
            write_symbol_file(
                info,
                handle,
                input_name=str(options.input_path),
                sections=options.effective_sections(),
            )
        tmp_path.replace(output)
    except OSError as exc:
        raise OutputWriteError(f"Error opening {output} for write: {exc.strerror or exc}") from exc
    finally:
        with contextlib.suppress(OSError):
            tmp_path.unlink(missing_ok=True)


def convert(options: ConvertOptions, ctx: Optional[RunContext] = None) -> RunContext:
    """Run one conversion and return the context holding its diagnostics."""
    ctx = ctx or RunContext()
    info = read_debug_file(options.input_path, ctx.report)
    if info is None:
        raise DebugInfoLoadError(f"Cannot read {options.input_path}")
    LOGGER.info("%s", ctx.status_line())
    check_diagnostics(ctx, ignore_errors=options.ignore_errors, ignore_warnings=options.ignore_warnings)
    _write_output(info, options)
    LOGGER.info("Wrote %s", options.output_path)
    return ctx


__all__ = [
    "ConvertOptions",
    "DebugInfoLoadError",
    "Gpa65Error",
    "OutputWriteError",
    "SectionSelection",
    "check_diagnostics",
    "convert",
    "write_symbol_file",
]
