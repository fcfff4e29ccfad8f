# src/resource_manifest/utils_logs.py

"""Package logger: TRACE level, level tags, stdout/stderr split.

The level lives in ``current_runtime["log_level"]`` so the CLI, the config
loader and per-build overrides all steer the same logger.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, TextIO, cast

from .meta import PROGRAM_PACKAGE
from .runtime import current_runtime
from .utils import safe_log

TRACE_LEVEL = logging.DEBUG - 5
logging.addLevelName(TRACE_LEVEL, "TRACE")

# ordered from most to least verbose; "silent" is above every real level
_LEVELS: dict[str, int] = {
    "trace": TRACE_LEVEL,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
    "silent": logging.CRITICAL + 1,
}
LEVEL_ORDER = list(_LEVELS)

RESET = "\033[0m"
GRAY = "\033[90m"
CYAN = "\033[36m"

# levelno → (color, tag); info has no tag
_TAGS: dict[int, tuple[str, str]] = {
    TRACE_LEVEL: (GRAY, "[TRACE]"),
    logging.DEBUG: (CYAN, "[DEBUG]"),
    logging.WARNING: ("", "⚠️ "),
    logging.ERROR: ("", "❌ "),
    logging.CRITICAL: ("", "💥 "),
}


class LoggerWithTrace(logging.Logger):
    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(TRACE_LEVEL, msg, args, **kwargs)

    def error_if_not_debug(self, msg: str, *args: Any) -> None:
        """Log an error; the traceback is only attached at debug or below."""
        self.error(msg, *args, exc_info=self.isEnabledFor(logging.DEBUG))

    def critical_if_not_debug(self, msg: str, *args: Any) -> None:
        self.critical(msg, *args, exc_info=self.isEnabledFor(logging.DEBUG))


logging.setLoggerClass(LoggerWithTrace)


class TagFormatter(logging.Formatter):
    """Prefix records with their level tag, colored when enabled."""

    def format(self, record: logging.LogRecord) -> str:
        msg = super().format(record)
        color, tag = _TAGS.get(record.levelno, ("", ""))
        if not tag:
            return msg
        if color and current_runtime.get("use_color", True):
            tag = f"{color}{tag}{RESET}"
        return f"{tag} {msg}"


class DualStreamHandler(logging.StreamHandler[TextIO]):
    """Warnings and worse go to stderr, everything else to stdout.

    The stream is looked up per record so redirected/captured
    ``sys.stdout``/``sys.stderr`` are always honored.
    """

    def __init__(self) -> None:
        super().__init__(stream=sys.stdout)

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stderr if record.levelno >= logging.WARNING else sys.stdout
        super().emit(record)


_logger = cast("LoggerWithTrace", logging.getLogger(PROGRAM_PACKAGE))


def _install_handler() -> None:
    if any(isinstance(h, DualStreamHandler) for h in _logger.handlers):
        return
    handler = DualStreamHandler()
    handler.setFormatter(TagFormatter("%(message)s"))
    _logger.addHandler(handler)
    _logger.propagate = False


def _sync_level() -> None:
    _install_handler()
    _logger.setLevel(_LEVELS.get(get_log_level(), logging.INFO))


def get_logger() -> LoggerWithTrace:
    """Return the package logger, leveled from ``current_runtime``."""
    _sync_level()
    return _logger


def get_log_level() -> str:
    """Return the runtime log level name; anything unusable reads as 'error'."""
    level = cast("str | None", current_runtime.get("log_level"))  # type: ignore[redundant-cast]
    if level is None:
        safe_log("[LOGGER ERROR] ❌ Runtime does not specify log_level")
        return "error"
    if level not in _LEVELS:
        safe_log(f"[LOGGER ERROR] ❌ Unknown log level: {level!r}")
        return "error"
    return level


def set_log_level(level: str) -> None:
    current_runtime["log_level"] = level
    _sync_level()


@contextmanager
def temporary_log_level(level: str) -> Iterator[None]:
    """Run the block at ``level``, then restore the previous level."""
    previous = current_runtime["log_level"]
    set_log_level(level)
    try:
        yield
    finally:
        set_log_level(previous)


def log_dynamic(level: str, message: str) -> None:
    """Log ``message`` at a level given by name; unknown names log an error."""
    logger = get_logger()
    method = getattr(logger, level.lower(), None)
    if level.lower() in _LEVELS and callable(method):
        method(message)
    else:
        logger.error("Unknown log level: %r", level)
