"""Per-run state shared by the reader and the converter."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from .model import ParseMessage, Severity

LOGGER = logging.getLogger("gpa65.context")


@dataclass
class RunContext:
    """Collects parse diagnostics for one conversion run."""

    errors: int = 0
    warnings: int = 0
    messages: List[ParseMessage] = field(default_factory=list)

    def report(self, message: ParseMessage) -> None:
        """Callback handed to the debug file reader."""
        self.messages.append(message)
        if message.severity is Severity.WARNING:
            self.warnings += 1
            LOGGER.warning("%s", message.format())
        else:
            self.errors += 1
            LOGGER.error("%s", message.format())

    @property
    def clean(self) -> bool:
        return self.errors == 0 and self.warnings == 0

    def status_line(self) -> str:
        if self.errors > 0:
            return f"File loaded with {self.errors} errors"
        if self.warnings > 0:
            return f"File loaded with {self.warnings} warnings"
        return "File loaded successfully"
