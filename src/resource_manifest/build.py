# src/resource_manifest/build.py


from pathlib import Path

from .collector import OrphanedResourcesError
from .config_resolve import resolved_path
from .constants import DEFAULT_WORKERS
from .diagnostics import Diagnostics
from .module_info import load_module_infos
from .pool import ResourcePool, scan_directory
from .resource_list_creator import Manifest, create_resource_lists
from .runtime import current_runtime
from .types import BuildConfig, CreatorOptions
from .utils import plural
from .utils_logs import get_logger, temporary_log_level

# --------------------------------------------------------------------------- #
# internal helpers
# --------------------------------------------------------------------------- #


def _creator_options(build_cfg: BuildConfig, *, workers: int) -> CreatorOptions:
    return {
        "filter": build_cfg["filter"],
        "debug_resources": build_cfg["debug_resources"],
        "merged_resources": build_cfg["merged_resources"],
        "designtime_resources": build_cfg["designtime_resources"],
        "support_resources": build_cfg["support_resources"],
        "external_resources": build_cfg["external_resources"],
        "fail_on_orphans": build_cfg["fail_on_orphans"],
        "workers": workers,
    }


def write_manifests(
    manifests: list[Manifest],
    out_dir: Path,
    *,
    dry_run: bool = False,
) -> list[Path]:
    """Write each manifest below ``out_dir`` at its resource path."""
    logger = get_logger()
    written: list[Path] = []
    for manifest in manifests:
        target = out_dir / manifest.path.lstrip("/")
        if dry_run:
            logger.info("[DRY RUN] Would write: %s", target)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(manifest.content, encoding="utf-8")
        logger.debug("📄 Wrote %s", target)
        written.append(target)
    return written


# --------------------------------------------------------------------------- #
# main build
# --------------------------------------------------------------------------- #


def run_build(
    build_cfg: BuildConfig,
    *,
    workers: int = DEFAULT_WORKERS,
) -> list[Manifest]:
    """Execute a single build task using a fully resolved config.

    Manifests that were built are written even when the run ends in an
    OrphanedResourcesError, which is re-raised afterwards.
    """
    logger = get_logger()
    dry_run = build_cfg.get("dry_run", False)
    root_dir = resolved_path(build_cfg["root"])
    out_dir = resolved_path(build_cfg["out"])

    logger.trace("[RUN_BUILD] root=%s, out=%s", root_dir, out_dir)

    # --- Collect the resource pool ---
    resources = scan_directory(root_dir)
    pool = ResourcePool(resources)
    if "module_info" in build_cfg:
        module_info_path = resolved_path(build_cfg["module_info"])
        infos = load_module_infos(module_info_path)
        pool.add_module_infos(infos)
        logger.debug(
            "Loaded module info for %d resource%s from %s",
            len(infos),
            plural(infos),
            module_info_path,
        )

    # --- Classify and group ---
    diagnostics = Diagnostics()
    try:
        manifests = create_resource_lists(
            resources,
            pool=pool,
            options=_creator_options(build_cfg, workers=workers),
            diagnostics=diagnostics,
        )
    except OrphanedResourcesError as e:
        write_manifests(list(e.manifests), out_dir, dry_run=dry_run)
        raise

    write_manifests(manifests, out_dir, dry_run=dry_run)
    logger.info(
        "✅ Build completed → %d manifest%s below %s",
        len(manifests),
        plural(manifests),
        out_dir,
    )
    return manifests


def run_all_builds(
    resolved_builds: list[BuildConfig],
    *,
    dry_run: bool,
    workers: int = DEFAULT_WORKERS,
) -> None:
    logger = get_logger()
    logger.trace("[run_all_builds] Resolved builds: %s", resolved_builds)

    for i, build_cfg in enumerate(resolved_builds, 1):
        build_cfg["dry_run"] = dry_run
        build_log_level = build_cfg.get("log_level") or current_runtime["log_level"]

        with temporary_log_level(build_log_level):
            logger.debug("Overriding log level → %s", build_log_level)
            logger.info("▶️  Build %d/%d", i, len(resolved_builds))
            run_build(build_cfg, workers=workers)

    logger.info("🎉 All builds complete.")
