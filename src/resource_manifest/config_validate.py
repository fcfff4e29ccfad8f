# src/resource_manifest/config_validate.py

from typing import Any

from .constants import DEFAULT_STRICT_CONFIG
from .types import BuildConfigInput, RootConfigInput
from .utils_schema import KeyNotices, ValidationSummary, check_mapping
from .utils_types import schema_from_typeddict

DRYRUN_KEYS = {"dry-run", "dry_run", "dryrun", "no-op", "no_op", "noop"}
DRYRUN_MSG = (
    "Ignored config key(s) {keys} {ctx}: this tool has no config option for it. "
    "Use the CLI flag '--dry-run' instead."
)

ROOT_ONLY_KEYS = {"workers"}
ROOT_ONLY_MSG = "Ignored {keys} {ctx}: these options only apply at the root level."

_ROOT_CONTEXT = "in top-level configuration"


def _strictness(cfg: dict[str, Any], inherited: bool, forced: bool | None) -> bool:
    if forced is not None:
        return forced
    own = cfg.get("strict_config")
    return own if isinstance(own, bool) else inherited


def _validate_build(
    build: dict[str, Any],
    number: int,
    summary: ValidationSummary,
    notices: KeyNotices,
    *,
    strict: bool,
) -> None:
    context = f"in build #{number}"
    flagged = notices.flag(
        "dry-run", DRYRUN_KEYS, build, context, DRYRUN_MSG, strict=strict
    )
    flagged |= notices.flag(
        "root-only", ROOT_ONLY_KEYS, build, context, ROOT_ONLY_MSG, strict=strict
    )
    check_mapping(
        summary,
        build,
        schema_from_typeddict(BuildConfigInput),
        context,
        strict=strict,
        skip=flagged,
    )


def validate_config(
    parsed_cfg: dict[str, Any], *, strict: bool | None = None
) -> ValidationSummary:
    """Validate a config already normalized by ``parse_config``.

    ``strict`` forces the mode for every level; when None, ``strict_config``
    is read from the root and may be overridden per build. In strict mode
    warnings are fatal but still reported as strict warnings.
    """
    root_strict = _strictness(parsed_cfg, DEFAULT_STRICT_CONFIG, strict)
    summary = ValidationSummary(strict=root_strict)
    notices = KeyNotices()

    flagged = notices.flag(
        "dry-run",
        DRYRUN_KEYS,
        parsed_cfg,
        _ROOT_CONTEXT,
        DRYRUN_MSG,
        strict=root_strict,
    )
    check_mapping(
        summary,
        parsed_cfg,
        schema_from_typeddict(RootConfigInput),
        _ROOT_CONTEXT,
        strict=root_strict,
        skip=flagged | {"builds"},
    )

    builds: Any = parsed_cfg.get("builds", [])
    if not isinstance(builds, list):
        summary.error("`builds` must be a list of builds.")
    elif not builds:
        if summary.errors or summary.strict_warnings:
            summary.warn("No `builds` key defined.", strict=False)
        else:
            summary.warn(
                "No `builds` key defined; continuing with empty configuration",
                strict=False,
            )

    for number, build in enumerate(builds if isinstance(builds, list) else [], 1):
        if not isinstance(build, dict):
            summary.error(
                f"Build #{number} must be an object"
                " with named keys (not a list or value)"
            )
            continue
        build_strict = _strictness(build, root_strict, strict)
        summary.strict |= build_strict
        _validate_build(build, number, summary, notices, strict=build_strict)

    notices.flush(summary)
    return summary.finish()
