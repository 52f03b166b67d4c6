"""Fixed-level loggers exposing print, println and printf."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from . import core


@dataclass(frozen=True)
class LevelLogger:
    """Writes to one of the shared logger's outputs under a fixed label."""

    output: str
    label: str

    def _stream(self) -> Optional[core.Writer]:
        return getattr(core.logger(), self.output)

    def print(self, message: str) -> None:
        """Log ``message`` as is."""
        core.print_message(self._stream(), self.label, message)

    def println(self, *args: Any) -> None:
        """Log the space-joined arguments followed by a newline."""
        core.print_line(self._stream(), self.label, *args)

    def printf(self, fmt: str, *args: Any) -> None:
        """Log ``fmt`` formatted with ``args``."""
        core.print_format(self._stream(), self.label, fmt, *args)


def get_debug_logger() -> LevelLogger:
    """Return a logger writing DEBUG entries to the debug output."""
    return LevelLogger("debug", "DEBUG")


def get_error_logger() -> LevelLogger:
    """Return a logger writing ERROR entries to the error output."""
    return LevelLogger("error", "ERROR")


def get_info_logger() -> LevelLogger:
    """Return a logger writing INFO entries to the info output."""
    return LevelLogger("info", "INFO")


def get_notice_logger() -> LevelLogger:
    """Return a logger writing NOTICE entries to the info output."""
    return LevelLogger("info", "NOTICE")


def get_verbose_logger() -> LevelLogger:
    """Return a logger writing DEBUG entries to the debug output."""
    return LevelLogger("debug", "DEBUG")


def get_warning_logger() -> LevelLogger:
    """Return a logger writing WARNING entries to the info output."""
    return LevelLogger("info", "WARNING")