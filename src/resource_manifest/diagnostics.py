# src/resource_manifest/diagnostics.py

"""Explicit diagnostics sink handed to the resource collector.

Every message is recorded (so callers and tests can inspect what happened
during a run) and forwarded to the program logger.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal

from .utils_logs import get_logger

DiagnosticLevel = Literal["verbose", "info", "warn"]

_LOG_LEVELS: dict[DiagnosticLevel, int] = {
    "verbose": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
}


@dataclass(frozen=True)
class DiagnosticEntry:
    level: DiagnosticLevel
    message: str


@dataclass
class Diagnostics:
    """Collects verbose/info/warn messages emitted by one collector run."""

    forward: bool = True
    entries: list[DiagnosticEntry] = field(default_factory=list)

    def _emit(self, level: DiagnosticLevel, msg: str, *args: object) -> None:
        message = msg % args if args else msg
        # list.append is atomic; worker threads may report concurrently
        self.entries.append(DiagnosticEntry(level, message))
        if self.forward:
            get_logger().log(_LOG_LEVELS[level], message)

    def verbose(self, msg: str, *args: object) -> None:
        self._emit("verbose", msg, *args)

    def info(self, msg: str, *args: object) -> None:
        self._emit("info", msg, *args)

    def warn(self, msg: str, *args: object) -> None:
        self._emit("warn", msg, *args)

    def messages(self, level: DiagnosticLevel | None = None) -> list[str]:
        """Return recorded messages, optionally only those of one level."""
        return [e.message for e in self.entries if level is None or e.level == level]
