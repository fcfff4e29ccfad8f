# src/resource_manifest/types.py
from __future__ import annotations

from pathlib import Path
from typing import Literal, TypedDict

from typing_extensions import NotRequired

OriginType = Literal["cli", "config", "default", "code", "test"]

ResourceFormat = Literal["raw", "ui5-define"]


# --------------------------------------------------------------------------- #
# resources.json
# --------------------------------------------------------------------------- #


class ResourceJSON(TypedDict):
    name: str
    module: NotRequired[str]
    size: NotRequired[int]
    format: NotRequired[str]
    isDebug: NotRequired[bool]
    merged: NotRequired[bool]
    designtime: NotRequired[bool]
    support: NotRequired[bool]
    locale: NotRequired[str]
    raw: NotRequired[str]
    theme: NotRequired[str]
    required: NotRequired[list[str]]
    condRequired: NotRequired[list[str]]
    dynRequired: NotRequired[bool]
    included: NotRequired[list[str]]
    requiresTopLevelScope: NotRequired[bool]
    exposedGlobalNames: NotRequired[list[str]]


class ManifestJSON(TypedDict):
    _version: str
    resources: list[ResourceJSON]


# --------------------------------------------------------------------------- #
# creator options
# --------------------------------------------------------------------------- #


class CreatorOptions(TypedDict, total=False):
    filter: list[str]
    debug_resources: list[str]
    merged_resources: list[str]
    designtime_resources: list[str]
    support_resources: list[str]
    external_resources: dict[str, list[str]]
    fail_on_orphans: bool
    workers: int


# --------------------------------------------------------------------------- #
# configuration (raw input)
# --------------------------------------------------------------------------- #


class BuildConfigInput(TypedDict, total=False):
    root: str
    out: str
    module_info: str

    filter: list[str]
    debug_resources: list[str]
    merged_resources: list[str]
    designtime_resources: list[str]
    support_resources: list[str]
    external_resources: dict[str, list[str]]

    # optional per-build override
    fail_on_orphans: bool
    strict_config: bool
    log_level: str


class RootConfigInput(TypedDict, total=False):
    builds: list[BuildConfigInput]

    # Defaults that cascade into each build
    fail_on_orphans: bool
    log_level: str

    # runtime behavior
    strict_config: bool
    workers: int


# --------------------------------------------------------------------------- #
# configuration (resolved)
# --------------------------------------------------------------------------- #


class PathResolved(TypedDict):
    path: Path | str  # absolute or relative to `base`
    base: Path  # canonical origin directory for resolution

    # meta only
    origin: OriginType  # provenance


class MetaBuildConfig(TypedDict):
    # sources of parameters
    cli_base: Path
    config_base: Path


class BuildConfig(TypedDict):
    root: PathResolved
    out: PathResolved
    module_info: NotRequired[PathResolved]

    filter: list[str]
    debug_resources: list[str]
    merged_resources: list[str]
    designtime_resources: list[str]
    support_resources: list[str]
    external_resources: dict[str, list[str]]

    fail_on_orphans: bool
    log_level: str

    # runtime flag (CLI only, not persisted in normal configs)
    dry_run: bool

    # global provenance (optional, for audit/debug)
    __meta__: MetaBuildConfig


class RootConfig(TypedDict):
    builds: list[BuildConfig]

    # runtime behavior
    log_level: str
    strict_config: bool
    workers: int
