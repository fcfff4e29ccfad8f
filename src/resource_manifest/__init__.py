# src/resource_manifest/__init__.py

"""Resource Manifest: classifies built UI resources into resources.json files.

Full developer API
==================
This package re-exports all non-private symbols from its submodules,
making it suitable for programmatic use, custom integrations, or plugins.
Anything prefixed with "_" is considered internal and may change.

Highlights:
    - main()                   → CLI entrypoint
    - create_resource_lists()  → Classify resources, return the manifests
    - ResourceCollector        → The staged classification pipeline
    - ResourceFilterList       → Ordered include/exclude glob patterns
    - run_build()              → Execute a build configuration
    - resolve_config()         → Merge CLI args with config files
"""

from .actions import (
    get_metadata,
    run_selftest,
)
from .build import (
    run_all_builds,
    run_build,
    write_manifests,
)
from .cli import (
    main,
)
from .collector import (
    OrphanedResourcesError,
    ResourceCollector,
)
from .config import (
    find_config,
    load_and_validate_config,
    load_config,
    parse_config,
)
from .config_resolve import resolve_build_config, resolve_config
from .config_validate import validate_config
from .constants import (
    DEFAULT_DEBUG_RESOURCES,
    DEFAULT_DESIGNTIME_RESOURCES,
    DEFAULT_ENV_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MERGED_RESOURCES,
    DEFAULT_RESOURCE_FILTERS,
    DEFAULT_STRICT_CONFIG,
    DEFAULT_SUPPORT_RESOURCES,
    DEFAULT_WORKERS,
    MANIFEST_NAME,
    MANIFEST_VERSION,
)
from .diagnostics import DiagnosticEntry, Diagnostics
from .filters import ResourceFilterList, negate_filters
from .meta import (
    PROGRAM_DISPLAY,
    PROGRAM_ENV,
    PROGRAM_PACKAGE,
    PROGRAM_SCRIPT,
    Metadata,
)
from .module_info import (
    DependencyKind,
    ModuleInfo,
    ModuleInfoError,
    ModuleInfoProvider,
    load_module_infos,
    parse_module_infos,
)
from .pool import Resource, ResourcePool, scan_directory
from .resource_info import ResourceInfo
from .resource_info_list import ResourceInfoList
from .resource_list_creator import Manifest, create_resource_lists
from .runtime import Runtime, current_runtime
from .types import (
    BuildConfig,
    BuildConfigInput,
    CreatorOptions,
    MetaBuildConfig,
    OriginType,
    PathResolved,
    RootConfig,
    RootConfigInput,
)
from .utils import (
    load_jsonc,
    should_use_color,
)
from .utils_logs import (
    LEVEL_ORDER,
    get_logger,
)
from .utils_types import (
    safe_isinstance,
    schema_from_typeddict,
)


__all__ = [  # noqa: RUF022
    # --- CLI / Actions ---
    "get_metadata",  # version info
    "main",
    "run_selftest",
    #
    # --- Manifest engine ---
    "DependencyKind",
    "DiagnosticEntry",
    "Diagnostics",
    "Manifest",
    "ModuleInfo",
    "ModuleInfoError",
    "ModuleInfoProvider",
    "OrphanedResourcesError",
    "Resource",
    "ResourceCollector",
    "ResourceFilterList",
    "ResourceInfo",
    "ResourceInfoList",
    "ResourcePool",
    "create_resource_lists",
    "load_module_infos",
    "negate_filters",
    "parse_module_infos",
    "scan_directory",
    #
    # --- Build ---
    "run_all_builds",
    "run_build",
    "write_manifests",
    #
    # --- Config Handling ---
    "find_config",
    "load_and_validate_config",
    "load_config",
    "parse_config",
    "resolve_build_config",
    "resolve_config",
    "validate_config",
    #
    # --- Constants / Metadata / Runtime ---
    "DEFAULT_DEBUG_RESOURCES",
    "DEFAULT_DESIGNTIME_RESOURCES",
    "DEFAULT_ENV_LOG_LEVEL",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_MERGED_RESOURCES",
    "DEFAULT_RESOURCE_FILTERS",
    "DEFAULT_STRICT_CONFIG",
    "DEFAULT_SUPPORT_RESOURCES",
    "DEFAULT_WORKERS",
    "MANIFEST_NAME",
    "MANIFEST_VERSION",
    "Metadata",
    "PROGRAM_DISPLAY",
    "PROGRAM_ENV",
    "PROGRAM_PACKAGE",
    "PROGRAM_SCRIPT",
    "current_runtime",
    #
    # --- utils ---
    "LEVEL_ORDER",
    "get_logger",
    "load_jsonc",
    "safe_isinstance",
    "schema_from_typeddict",
    "should_use_color",
    #
    # --- Types ---
    "BuildConfig",
    "BuildConfigInput",
    "CreatorOptions",
    "MetaBuildConfig",
    "OriginType",
    "PathResolved",
    "RootConfig",
    "RootConfigInput",
    "Runtime",
]
