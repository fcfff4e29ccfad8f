# src/resource_manifest/cli.py

import argparse
import platform
import sys
from difflib import get_close_matches
from pathlib import Path

from .actions import get_metadata, run_selftest
from .build import run_all_builds
from .config import (
    can_run_configless,
    determine_log_level,
    load_and_validate_config,
)
from .config_resolve import resolve_config
from .constants import DEFAULT_HINT_CUTOFF, DEFAULT_WORKERS
from .meta import DESCRIPTION, PROGRAM_DISPLAY, PROGRAM_SCRIPT
from .runtime import current_runtime
from .types import RootConfigInput
from .utils import get_sys_version_info, safe_log
from .utils_logs import LEVEL_ORDER, get_log_level, get_logger, set_log_level
from .utils_types import cast_hint

# errors that end a run with a plain one-line message
CONTROLLED_ERRORS = (FileNotFoundError, ValueError, TypeError, RuntimeError)

_UNRECOGNIZED = "unrecognized arguments:"


class HintingArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that suggests the closest known flag for a typo."""

    def _flag_hints(self, message: str) -> list[str]:
        if _UNRECOGNIZED not in message:
            return []
        known = [opt for action in self._actions for opt in action.option_strings]
        unknown = message.split(_UNRECOGNIZED, 1)[1].split()
        return [
            f"Hint: did you mean {match[0]}?"
            for arg in unknown
            if arg.startswith("-")
            and (match := get_close_matches(arg, known, n=1, cutoff=DEFAULT_HINT_CUTOFF))
        ]

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        lines = [f"{self.prog}: error: {message}", *self._flag_hints(message)]
        self.exit(2, "\n".join(lines) + "\n")


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        xmsg = f"invalid int value: {value!r}"
        raise argparse.ArgumentTypeError(xmsg) from None
    if number < 1:
        xmsg = f"must be at least 1, got {number}"
        raise argparse.ArgumentTypeError(xmsg)
    return number


def _add_toggle(
    parser: argparse.ArgumentParser,
    dest: str,
    on: tuple[str, str],
    off: tuple[str, str],
) -> None:
    """Add a ``--flag``/``--no-flag`` pair that defaults to None (unset)."""
    group = parser.add_mutually_exclusive_group()
    for (flag, help_text), value in ((on, True), (off, False)):
        group.add_argument(
            flag, dest=dest, action="store_const", const=value, help=help_text
        )
    group.set_defaults(**{dest: None})


def _setup_parser() -> argparse.ArgumentParser:
    parser = HintingArgumentParser(prog=PROGRAM_SCRIPT, description=DESCRIPTION)

    # --- what to scan ---
    parser.add_argument(
        "root",
        nargs="?",
        metavar="ROOT",
        help="Directory holding the resources/ tree (overrides config `root`).",
    )
    parser.add_argument("-c", "--config", help="Path to the config file.")
    parser.add_argument(
        "--module-info",
        metavar="FILE",
        help="JSON document with pre-computed module info per resource.",
    )
    parser.add_argument(
        "--filter",
        nargs="+",
        metavar="PATTERN",
        help="Override the global resource filter patterns.",
    )
    parser.add_argument(
        "--add-filter",
        nargs="+",
        metavar="PATTERN",
        help="Additional filter patterns. Extends config filters.",
    )

    # --- what to produce ---
    parser.add_argument(
        "-o",
        "--out",
        help="Directory the manifests are written under (default: ROOT).",
    )
    _add_toggle(
        parser,
        "fail_on_orphans",
        ("--fail-on-orphans", "Fail when resources belong to no component."),
        ("--no-fail-on-orphans", "Only warn about unassigned resources (default)."),
    )
    parser.add_argument(
        "--workers",
        type=_positive_int,
        metavar="N",
        help=f"Threads used for dependency analysis (default: {DEFAULT_WORKERS}).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Classify and report without writing any manifest.",
    )

    # --- output style ---
    _add_toggle(
        parser,
        "use_color",
        ("--color", "Force-enable ANSI color output (overrides auto-detect)."),
        ("--no-color", "Disable ANSI color output."),
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-q",
        "--quiet",
        action="store_const",
        const="warning",
        dest="log_level",
        help="Suppress non-critical output (same as --log-level warning).",
    )
    verbosity.add_argument(
        "-v",
        "--verbose",
        action="store_const",
        const="debug",
        dest="log_level",
        help="Verbose output (same as --log-level debug).",
    )
    verbosity.add_argument(
        "--log-level",
        choices=LEVEL_ORDER,
        dest="log_level",
        help="Set log verbosity level.",
    )

    # --- one-shot actions ---
    parser.add_argument("--version", action="store_true", help="Show version info.")
    parser.add_argument(
        "--selftest",
        action="store_true",
        help="Generate manifests for a tiny built-in library and check them.",
    )
    return parser


def _run(args: argparse.Namespace) -> int:
    logger = get_logger()

    if args.version:
        meta = get_metadata()
        logger.info("%s %s (%s)", PROGRAM_DISPLAY, meta.version, meta.commit)
        return 0

    if get_sys_version_info() < (3, 10):
        logger.error("%s requires Python 3.10 or newer.", PROGRAM_DISPLAY)
        return 1

    if args.selftest:
        return 0 if run_selftest() else 1

    # config may raise the log level set from CLI/env
    config_path: Path | None = None
    root_cfg: RootConfigInput | None = None
    loaded = load_and_validate_config(args)
    if loaded is not None:
        config_path, root_cfg, _summary = loaded
    logger.trace("[CONFIG] log level after loading config: %s", get_log_level())
    logger.debug(
        "Runtime: Python %s (%s)\n    %s",
        platform.python_version(),
        platform.python_implementation(),
        sys.version.replace("\n", " "),
    )

    if root_cfg is None:
        if not can_run_configless(args):
            logger.error(
                "No build config found (.%s.json) and no resource root provided.",
                PROGRAM_SCRIPT,
            )
            return 1
        # a single empty build that the CLI arguments fill in
        root_cfg = cast_hint(RootConfigInput, {"builds": [{}]})

    cwd = Path.cwd().resolve()
    config_dir = config_path.parent if config_path else cwd
    resolved = resolve_config(root_cfg, args, config_dir, cwd)

    if args.dry_run:
        logger.info("🧪 Dry-run mode: no manifests will be written.\n")
    if config_path:
        logger.info("🔧 Using config: %s", config_path.name)
    else:
        logger.info("🔧 Running in CLI-only mode (no config file).")
    logger.debug("📁 Config root: %s", config_dir)
    logger.debug("📂 Invoked from: %s", cwd)
    logger.info("🔧 Running %d build(s)\n", len(resolved["builds"]))

    run_all_builds(resolved["builds"], dry_run=args.dry_run, workers=resolved["workers"])
    return 0


def _report_failure(e: Exception, *, unexpected: bool) -> None:
    logger = get_logger()
    try:
        if unexpected:
            logger.critical_if_not_debug("Unexpected internal error: %s", e)
        elif not getattr(e, "silent", False):
            logger.error_if_not_debug(str(e))
    except Exception:  # noqa: BLE001
        safe_log(f"[FATAL] Logging failed while reporting: {e}")


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint; returns the process exit code."""
    get_logger()  # handlers and level from env/defaults

    try:
        args = _setup_parser().parse_args(argv)
        set_log_level(determine_log_level(args))
        if args.use_color is not None:
            current_runtime["use_color"] = args.use_color
        return _run(args)
    except CONTROLLED_ERRORS as e:
        _report_failure(e, unexpected=False)
        return 1
    except Exception as e:  # noqa: BLE001
        _report_failure(e, unexpected=True)
        return 1
