# src/resource_manifest/config.py

"""Finding, loading and shape-normalizing configuration files.

Typing and defaults are handled later by ``config_validate`` and
``config_resolve``; this module only turns whatever the user wrote into
``{"builds": [...], <root keys>}``.
"""

import argparse
import os
import sys
import traceback
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, cast

from .config_validate import validate_config
from .constants import DEFAULT_ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL
from .meta import PROGRAM_ENV, PROGRAM_SCRIPT
from .types import RootConfigInput
from .utils import load_jsonc, plural, remove_path_in_error_message
from .utils_logs import get_logger, log_dynamic, set_log_level
from .utils_schema import ValidationSummary
from .utils_types import cast_hint, schema_from_typeddict

# discovery order in the working directory
CONFIG_SUFFIXES = (".py", ".jsonc", ".json")

RawConfig = dict[str, Any] | list[Any] | None


def can_run_configless(args: argparse.Namespace) -> bool:
    """Without a config file, a resource root on the command line is required."""
    return bool(getattr(args, "root", None))


def determine_log_level(
    args: argparse.Namespace,
    root_log_level: str | None = None,
    build_log_level: str | None = None,
) -> str:
    """First of: CLI, env, build config, root config, default."""
    candidates = (
        getattr(args, "log_level", None),
        os.getenv(f"{PROGRAM_ENV}_{DEFAULT_ENV_LOG_LEVEL}"),
        os.getenv(DEFAULT_ENV_LOG_LEVEL),
        build_log_level,
        root_log_level,
    )
    return next((cast_hint(str, c) for c in candidates if c), DEFAULT_LOG_LEVEL)


def find_config(
    args: argparse.Namespace,
    cwd: Path,
    *,
    missing_level: str = "error",
) -> Path | None:
    """Return the config file to use, or None.

    An explicit ``--config`` must exist. Otherwise the first existing
    ``.resource-manifest{.py,.jsonc,.json}`` in ``cwd`` wins, and the absence
    of all of them is logged at ``missing_level``.
    """
    if getattr(args, "config", None):
        config = Path(args.config).expanduser().resolve()
        if not config.exists():
            xmsg = f"Specified config file not found: {config}"
            raise FileNotFoundError(xmsg)
        if config.is_dir():
            xmsg = f"Specified config path is a directory, not a file: {config}"
            raise ValueError(xmsg)
        return config

    found = [
        path
        for path in (cwd / f".{PROGRAM_SCRIPT}{s}" for s in CONFIG_SUFFIXES)
        if path.exists()
    ]
    if not found:
        log_dynamic(missing_level, f"No config file found in {cwd}")
        return None

    if len(found) > 1:
        get_logger().warning(
            "Multiple config files detected (%s); using %s.",
            ", ".join(p.name for p in found),
            found[0].name,
        )
    return found[0]


# --------------------------------------------------------------------------- #
# loading
# --------------------------------------------------------------------------- #


@contextmanager
def _importable_from(directory: Path) -> Iterator[None]:
    """Let a Python config import helper modules that sit next to it."""
    entry = str(directory)
    inserted = entry not in sys.path
    if inserted:
        sys.path.insert(0, entry)
    try:
        yield
    finally:
        if inserted and sys.path and sys.path[0] == entry:
            sys.path.pop(0)


def _load_python_config(config_path: Path) -> RawConfig:
    namespace: dict[str, Any] = {}
    with _importable_from(config_path.parent):
        try:
            source = config_path.read_text(encoding="utf-8")
            code = compile(source, str(config_path), "exec")
            exec(code, namespace)  # noqa: S102
        except Exception as e:
            xmsg = (
                f"Error while executing Python config: {config_path.name}\n"
                f"{type(e).__name__}: {e}\n{traceback.format_exc()}"
            )
            raise RuntimeError(xmsg) from e
    get_logger().trace(
        "[EXEC] names defined by %s: %s", config_path.name, list(namespace)
    )

    key = next((k for k in ("config", "builds") if k in namespace), None)
    if key is None:
        xmsg = f"{config_path.name} did not define `config` or `builds`"
        raise ValueError(xmsg)

    value = namespace[key]
    if value is not None and not isinstance(value, (dict, list)):
        xmsg = (
            f"{key} in {config_path.name} must be a dict, list, or None"
            f", not {type(value).__name__}"
        )
        raise TypeError(xmsg)
    return cast("RawConfig", value)


def load_config(config_path: Path) -> RawConfig:
    """Return the raw object a config file defines.

    ``.py`` files are executed and must define ``config`` or ``builds``;
    anything else is read as JSONC. None means "intentionally empty".
    """
    if config_path.suffix == ".py":
        return _load_python_config(config_path)

    try:
        return load_jsonc(config_path)
    except ValueError as e:
        reason = remove_path_in_error_message(str(e), config_path)
        xmsg = f"Error while loading configuration file '{config_path.name}': {reason}"
        raise ValueError(xmsg) from e


# --------------------------------------------------------------------------- #
# shape normalization
# --------------------------------------------------------------------------- #


def _parse_list(raw_config: list[Any]) -> dict[str, Any]:
    if all(isinstance(x, str) for x in raw_config):
        return {"builds": [{"root": root} for root in raw_config]}

    if not all(isinstance(x, dict) for x in raw_config):
        xmsg = (
            "Invalid mixed-type list: "
            "all elements must be strings or all must be objects."
        )
        raise TypeError(xmsg)

    builds = [dict(b) for b in raw_config]
    parsed: dict[str, Any] = {"builds": builds}
    # workers is root-only: the first build naming it decides, the rest drop it
    workers = [b.pop("workers") for b in builds if "workers" in b]
    if workers:
        parsed["workers"] = workers[0]
    return parsed


def _hoist_flat_build(raw_config: dict[str, Any]) -> dict[str, Any]:
    """Move every root-level key out of a flat single-build object."""
    root_keys = set(schema_from_typeddict(RootConfigInput)) - {"builds"}
    build = dict(raw_config)
    parsed = {k: build.pop(k) for k in raw_config if k in root_keys}
    parsed["builds"] = [build]
    return parsed


def parse_config(raw_config: RawConfig) -> dict[str, Any] | None:
    """Normalize a raw config into ``{"builds": [...], ...}`` without validating.

    Accepted shapes::

        None / [] / {}            nothing configured → None
        ["dist", "lib/dist"]      one build per resource root
        [{...}, {...}]            one build per object
        {"builds": [...]}         already canonical
        {"build": {...}}          one build plus root keys
        {...}                     one flat build; root keys are hoisted

    ``build`` given a list and ``builds`` given an object are accepted with a
    warning. Unknown keys are kept for the validator.
    """
    if not raw_config:
        return None

    if isinstance(raw_config, list):
        return _parse_list(raw_config)

    if not isinstance(raw_config, dict):  # pyright: ignore[reportUnnecessaryIsInstance]
        xmsg = (
            f"Invalid top-level value: {type(raw_config).__name__} "
            "(expected object, list of objects, or list of strings)"
        )
        raise TypeError(xmsg)

    logger = get_logger()
    builds = raw_config.get("builds")
    build = raw_config.get("build")
    parsed = dict(raw_config)

    if isinstance(builds, list):
        return parsed
    if isinstance(build, list) and "builds" not in raw_config:
        logger.warning("Config key 'build' holds a list; treating as 'builds'.")
        parsed["builds"] = parsed.pop("build")
        return parsed
    if isinstance(builds, dict):
        logger.warning("Config key 'builds' holds an object; treating as 'build'.")
        parsed["builds"] = [builds]
        return parsed
    if isinstance(build, dict):
        del parsed["build"]
        parsed["builds"] = [dict(build)]
        return parsed

    return _hoist_flat_build(raw_config)


# --------------------------------------------------------------------------- #
# validation entry point
# --------------------------------------------------------------------------- #


def _log_validation_summary(summary: ValidationSummary, config_path: Path) -> None:
    logger = get_logger()
    mode = "strict mode" if summary.strict else "lenient mode"

    sections = [
        (summary.errors, "error", "Errors", logger.error),
        (
            summary.strict_warnings,
            "strict warning",
            "Strict warnings (treated as errors)",
            logger.error,
        ),
        (summary.warnings, "normal warning", "Warnings (non-fatal)", logger.warning),
    ]
    counts = [
        f"{len(items)} {noun}{plural(items)}" for items, noun, _, _ in sections if items
    ]
    found = f"\nFound {', '.join(counts)}." if counts else ""

    if not summary.valid:
        logger.error(
            "Failed to validate configuration file %s (%s).%s",
            config_path.name,
            mode,
            found,
        )
    elif counts:
        logger.warning(
            "Validated configuration file %s (%s) with warnings.%s",
            config_path.name,
            mode,
            found,
        )
    else:
        logger.debug("Validated %s (%s) successfully.", config_path.name, mode)

    for items, _, title, log in sections:
        if items:
            log("\n%s:\n  • %s", title, "\n  • ".join(items))


def load_and_validate_config(
    args: argparse.Namespace,
) -> tuple[Path, RootConfigInput, ValidationSummary] | None:
    """Find, load, parse and validate the configuration.

    The log level is settled as early as possible: first from CLI/env, then
    again once the config's own ``log_level`` is known.

    Returns None when there is no config (or it is empty). An invalid config
    raises a ValueError marked ``silent`` (the summary was already logged)
    carrying the summary as ``data``.
    """
    set_log_level(determine_log_level(args))
    logger = get_logger()

    cwd = Path.cwd().resolve()
    if not cwd.exists():
        logger.warning("Working directory does not exist: %s", cwd)

    missing_level = "debug" if can_run_configless(args) else "error"
    config_path = find_config(args, cwd, missing_level=missing_level)
    if config_path is None:
        return None

    raw_config = load_config(config_path)
    if raw_config is None:
        return None

    if isinstance(raw_config, dict):
        raw_log_level = raw_config.get("log_level")
        if isinstance(raw_log_level, str) and raw_log_level:
            set_log_level(determine_log_level(args, raw_log_level))

    try:
        parsed_cfg = parse_config(raw_config)
    except TypeError as e:
        xmsg = f"Could not parse config {config_path.name}: {e}"
        raise TypeError(xmsg) from e
    if parsed_cfg is None:
        return None

    summary = validate_config(parsed_cfg)
    _log_validation_summary(summary, config_path)
    if not summary.valid:
        xmsg = f"Configuration file {config_path.name} contains validation errors."
        exception = ValueError(xmsg)
        exception.silent = True  # type: ignore[attr-defined]
        exception.data = summary  # type: ignore[attr-defined]
        raise exception

    return config_path, cast_hint(RootConfigInput, parsed_cfg), summary
