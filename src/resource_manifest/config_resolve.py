# src/resource_manifest/config_resolve.py


import argparse
import os
from pathlib import Path
from typing import Any

from .config import determine_log_level
from .constants import (
    DEFAULT_DEBUG_RESOURCES,
    DEFAULT_DESIGNTIME_RESOURCES,
    DEFAULT_ENV_WORKERS,
    DEFAULT_FAIL_ON_ORPHANS,
    DEFAULT_MERGED_RESOURCES,
    DEFAULT_RESOURCE_FILTERS,
    DEFAULT_ROOT_DIR,
    DEFAULT_STRICT_CONFIG,
    DEFAULT_SUPPORT_RESOURCES,
    DEFAULT_WORKERS,
)
from .meta import PROGRAM_ENV
from .runtime import current_runtime
from .types import (
    BuildConfig,
    BuildConfigInput,
    MetaBuildConfig,
    OriginType,
    PathResolved,
    RootConfig,
    RootConfigInput,
)
from .utils_logs import get_logger
from .utils_types import cast_hint

# --------------------------------------------------------------------------- #
# helpers
# --------------------------------------------------------------------------- #

# config key → default for the four classification lists
_CLASSIFICATION_DEFAULTS: dict[str, list[str]] = {
    "debug_resources": DEFAULT_DEBUG_RESOURCES,
    "merged_resources": DEFAULT_MERGED_RESOURCES,
    "designtime_resources": DEFAULT_DESIGNTIME_RESOURCES,
    "support_resources": DEFAULT_SUPPORT_RESOURCES,
}


def make_pathresolved(
    path: Path | str, base: Path | str, origin: OriginType
) -> PathResolved:
    return {"path": path, "base": Path(base), "origin": origin}


def _normalize_path_with_base(
    raw: Path | str, context_base: Path | str
) -> tuple[Path, Path | str]:
    """
    Normalize a user-provided directory or file path (from CLI or config).

    - If absolute → the path is its own base, rel="."
    - If relative → base = context_base, path = raw (preserve string form)
    """
    raw_path = Path(raw)
    rel: Path | str

    if raw_path.is_absolute():
        base = raw_path.resolve()
        rel = "."
    else:
        base = Path(context_base).resolve()
        rel = raw

    get_logger().trace("Normalized: raw=%r → base=%s, rel=%s", raw, base, rel)
    return base, rel


def resolved_path(entry: PathResolved) -> Path:
    """Absolute filesystem path for a resolved entry."""
    return (entry["base"] / entry["path"]).resolve()


def _resolve_path_option(
    cli_value: Any,
    cfg_value: Any,
    *,
    cwd: Path,
    config_dir: Path,
) -> PathResolved | None:
    if cli_value:
        base, rel = _normalize_path_with_base(cli_value, cwd)
        return make_pathresolved(rel, base, "cli")
    if cfg_value:
        base, rel = _normalize_path_with_base(cfg_value, config_dir)
        return make_pathresolved(rel, base, "config")
    return None


def _first_bool(*values: Any, default: bool) -> bool:
    for value in values:
        if isinstance(value, bool):
            return value
    return default


# --------------------------------------------------------------------------- #
# main per-build resolver
# --------------------------------------------------------------------------- #


def resolve_build_config(
    build_cfg: BuildConfigInput,
    args: argparse.Namespace,
    config_dir: Path,
    cwd: Path,
    root_cfg: RootConfigInput | None = None,
) -> BuildConfig:
    """Resolve a single BuildConfigInput into a ready-to-run BuildConfig.

    Applies CLI overrides, normalizes paths, fills defaults,
    and attaches provenance metadata.
    """
    logger = get_logger()
    root_cfg = root_cfg or {}

    meta: MetaBuildConfig = {
        "cli_base": cwd,
        "config_base": config_dir,
    }

    # ------------------------------
    # Resource root
    # ------------------------------
    root_wrapped = _resolve_path_option(
        getattr(args, "root", None),
        build_cfg.get("root"),
        cwd=cwd,
        config_dir=config_dir,
    )
    if root_wrapped is None:
        base, rel = _normalize_path_with_base(DEFAULT_ROOT_DIR, config_dir)
        root_wrapped = make_pathresolved(rel, base, "default")

    root_dir = resolved_path(root_wrapped)
    if not root_dir.is_dir():
        logger.warning(
            "Resource root does not exist: %s (origin: %s)",
            root_dir,
            root_wrapped["origin"],
        )

    # ------------------------------
    # Output directory (defaults to the resource root)
    # ------------------------------
    out_wrapped = _resolve_path_option(
        getattr(args, "out", None),
        build_cfg.get("out"),
        cwd=cwd,
        config_dir=config_dir,
    )
    if out_wrapped is None:
        out_wrapped = make_pathresolved(
            root_wrapped["path"], root_wrapped["base"], "default"
        )

    # ------------------------------
    # Module info document
    # ------------------------------
    module_info_wrapped = _resolve_path_option(
        getattr(args, "module_info", None),
        build_cfg.get("module_info"),
        cwd=cwd,
        config_dir=config_dir,
    )

    # ------------------------------
    # Global filter
    # ------------------------------
    filters: list[str]
    if getattr(args, "filter", None):
        # Full override
        filters = list(args.filter)
    elif "filter" in build_cfg:
        filters = list(build_cfg["filter"])
    else:
        filters = list(DEFAULT_RESOURCE_FILTERS)

    # Add-on filters (extend, not override)
    if getattr(args, "add_filter", None):
        filters.extend(args.add_filter)

    # ------------------------------
    # Classification lists
    # ------------------------------
    classification: dict[str, list[str]] = {
        key: list(build_cfg.get(key, default))  # type: ignore[misc]
        for key, default in _CLASSIFICATION_DEFAULTS.items()
    }

    # ------------------------------
    # Orphans
    # ------------------------------
    fail_on_orphans = _first_bool(
        getattr(args, "fail_on_orphans", None),
        build_cfg.get("fail_on_orphans"),
        root_cfg.get("fail_on_orphans"),
        default=DEFAULT_FAIL_ON_ORPHANS,
    )

    # ------------------------------
    # Log level
    # ------------------------------
    log_level = determine_log_level(
        args, root_cfg.get("log_level"), build_cfg.get("log_level")
    )

    resolved: dict[str, Any] = {
        "root": root_wrapped,
        "out": out_wrapped,
        "filter": filters,
        **classification,
        "external_resources": {
            k: list(v) for k, v in build_cfg.get("external_resources", {}).items()
        },
        "fail_on_orphans": fail_on_orphans,
        "log_level": log_level,
        "dry_run": bool(getattr(args, "dry_run", False)),
        "__meta__": meta,
    }
    if module_info_wrapped is not None:
        resolved["module_info"] = module_info_wrapped

    return cast_hint(BuildConfig, resolved)


# --------------------------------------------------------------------------- #
# root-level resolver
# --------------------------------------------------------------------------- #


def _resolve_workers(args: argparse.Namespace, root_cfg: RootConfigInput) -> int:
    #  workers: arg -> env -> root -> default
    logger = get_logger()
    if getattr(args, "workers", None) is not None:
        workers = int(args.workers)
    else:
        env_name = f"{PROGRAM_ENV}_{DEFAULT_ENV_WORKERS}"
        env_workers = os.getenv(env_name)
        workers = root_cfg.get("workers", DEFAULT_WORKERS)
        if env_workers is not None:
            try:
                workers = int(env_workers)
            except ValueError:
                logger.warning(
                    "Invalid %s=%r, using %d.", env_name, env_workers, workers
                )

    if workers < 1:
        logger.warning("workers must be at least 1 (got %d); using 1.", workers)
        workers = 1
    return workers


def resolve_config(
    root_input: RootConfigInput,
    args: argparse.Namespace,
    config_dir: Path,
    cwd: Path,
) -> RootConfig:
    """Fully resolve a loaded RootConfigInput into a ready-to-run RootConfig."""
    root_cfg = cast_hint(RootConfigInput, dict(root_input))

    # ------------------------------
    # Log level
    # ------------------------------
    #  log_level: arg -> env -> build -> root -> default
    log_level = determine_log_level(args, root_cfg.get("log_level"))

    # --- sync runtime ---
    current_runtime["log_level"] = log_level

    # ------------------------------
    # Resolve builds
    # ------------------------------
    builds_input = root_cfg.get("builds", [])
    resolved_builds = [
        resolve_build_config(b, args, config_dir, cwd, root_cfg) for b in builds_input
    ]

    resolved_root: RootConfig = {
        "builds": resolved_builds,
        "strict_config": root_cfg.get("strict_config", DEFAULT_STRICT_CONFIG),
        "workers": _resolve_workers(args, root_cfg),
        "log_level": log_level,
    }

    return resolved_root
