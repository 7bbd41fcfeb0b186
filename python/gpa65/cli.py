"""gpa65 command line entry point."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List

from . import __version__
from .converter import ConvertOptions, Gpa65Error, SectionSelection, convert

LOG = logging.getLogger("gpa65.cli")

EXIT_OK = 0
EXIT_FAILURE = 1


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gpa65",
        description="Convert cc65 debug data to GPA symbol files for logic analyzers.",
    )
    parser.add_argument("input", type=Path, metavar="INPUT", help="ld65 debug file (.dbg)")
    parser.add_argument("output", type=Path, metavar="OUTPUT", help="GPA symbol file to write (.sym)")

    program = parser.add_argument_group("program options")
    program.add_argument("-w", "--ignore-warnings", action="store_true", help="Ignore source data warnings")
    program.add_argument("-e", "--ignore-errors", action="store_true", help="Ignore source data errors")
    program.add_argument(
        "--log-level",
        default=os.environ.get("GPA65_LOG", "INFO"),
        help="Logging level (default INFO, or $GPA65_LOG)",
    )
    program.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    output = parser.add_argument_group("output options (default all)")
    output.add_argument("-s", "--sections", action="store_true", help="Print segments (Sections)")
    output.add_argument("-f", "--functions", action="store_true", help="Print scopes (Functions)")
    output.add_argument("-u", "--user-labels", action="store_true", help="Print labels (User)")
    output.add_argument("-l", "--source-lines", action="store_true", help="Print lines (Source lines)")
    return parser


def options_from_args(args: argparse.Namespace) -> ConvertOptions:
    sections = SectionSelection(
        segments=args.sections,
        scopes=args.functions,
        labels=args.user_labels,
        lines=args.source_lines,
    )
    if sections.empty:
        LOG.info("No output flags specified; defaulting to all.")
        sections = SectionSelection.everything()
    return ConvertOptions(
        input_path=args.input,
        output_path=args.output,
        sections=sections,
        ignore_warnings=args.ignore_warnings,
        ignore_errors=args.ignore_errors,
    )


def main(argv: List[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    options = options_from_args(args)
    try:
        convert(options)
    except Gpa65Error as exc:
        LOG.error("%s", exc)
        return EXIT_FAILURE
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
