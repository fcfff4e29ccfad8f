# src/resource_manifest/constants.py
"""
Central constants used across the project.
"""

# --- env keys ---
DEFAULT_ENV_LOG_LEVEL: str = "LOG_LEVEL"
DEFAULT_ENV_WORKERS: str = "WORKERS"

# --- config defaults ---
DEFAULT_STRICT_CONFIG: bool = True
DEFAULT_ROOT_DIR: str = "."
DEFAULT_LOG_LEVEL: str = "info"
DEFAULT_FAIL_ON_ORPHANS: bool = False
DEFAULT_WORKERS: int = 8
DEFAULT_HINT_CUTOFF: float = 0.6

# --- resource tree ---
RESOURCES_ROOT: str = "/resources/"
MANIFEST_NAME: str = "resources.json"
MANIFEST_VERSION: str = "1.1.0"
ORPHAN_REPORT_LIMIT: int = 20

# Resources that never belong in a manifest.
DEFAULT_RESOURCE_FILTERS: list[str] = [
    "!**/.DS_Store",  # mac metadata files
    "!sap-ui-version.json",  # version info is not part of the resources
]

# --- classification filters ---
DEFAULT_DEBUG_RESOURCES: list[str] = [
    "**/*-dbg.js",
    "**/*-dbg.controller.js",
    "**/*-dbg.designtime.js",
    "**/*-dbg.support.js",
    "**/*-dbg.view.js",
    "**/*-dbg.fragment.js",
    "**/*-dbg.css",
    "**/*.js.map",
]

DEFAULT_MERGED_RESOURCES: list[str] = [
    "**/Component-preload.js",
    "**/library-preload.js",
    "**/library-preload-dbg.js",
    "**/library-preload.json",
    "**/library-h2-preload.js",
    "**/designtime/library-preload.designtime.js",
    "**/library-preload.support.js",
    "**/library-all.js",
    "**/library-all-dbg.js",
]

DEFAULT_DESIGNTIME_RESOURCES: list[str] = [
    "**/designtime/*",
    "**/*.designtime.js",
    "**/*.control",
    "**/*.interface",
    "**/*.type",
    "**/themes/*/*.less",
    "**/library.templates.xml",
    "**/library.dependencies.xml",
    "**/library.dependencies.json",
]

DEFAULT_SUPPORT_RESOURCES: list[str] = [
    "**/*.support.js",
]
