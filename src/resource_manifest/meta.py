# src/resource_manifest/meta.py

"""Centralized program identity constants for Resource Manifest."""

from dataclasses import dataclass

_BASE = "resource-manifest"

# CLI script name (the console-script entrypoint)
PROGRAM_SCRIPT = _BASE

# Human-readable name for banners, help text, etc.
PROGRAM_DISPLAY = _BASE.replace("-", " ").title()

# Python package / import name
PROGRAM_PACKAGE = _BASE.replace("-", "_")

# Environment variable prefix (used for RESOURCE_MANIFEST_LOG_LEVEL, etc.)
PROGRAM_ENV = _BASE.replace("-", "_").upper()

# Short tagline or description for help screens and metadata
DESCRIPTION = (
    "Classifies built UI resources and writes per-component resources.json files."
)


@dataclass(frozen=True)
class Metadata:
    """Version and commit of the running tool."""

    version: str
    commit: str

    def __str__(self) -> str:
        return f"{self.version} ({self.commit})"
