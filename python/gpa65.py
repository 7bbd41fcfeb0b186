#!/usr/bin/env python3
"""Entry point for the gpa65 symbol file generator."""

from __future__ import annotations

from gpa65 import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
