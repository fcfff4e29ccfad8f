# src/resource_manifest/resource_info.py

"""Metadata for a single resource, as stored in a resources.json file."""

from __future__ import annotations

from dataclasses import dataclass, field

from .types import ResourceFormat, ResourceJSON


@dataclass(eq=False)
class ResourceInfo:
    """Mutable record describing one resource.

    ``required``, ``cond_required``: hard and conditional dependencies.
    ``included``: resources packaged inside this one (insertion-ordered).
    ``exposed_global_names``: globals leaked by the resource (insertion-ordered).

    Each record owns its containers; merging never shares them.
    """

    name: str
    size: int = -1
    format: ResourceFormat | None = None
    is_debug: bool = False
    i18n_name: str | None = None
    i18n_locale: str | None = None
    theme: str | None = None
    merged: bool = False
    designtime: bool = False
    support: bool = False
    module: str | None = None
    required: set[str] = field(default_factory=set)
    cond_required: set[str] = field(default_factory=set)
    # dicts used as insertion-ordered sets
    included: dict[str, None] = field(default_factory=dict)
    dyn_required: bool = False
    requires_top_level_scope: bool = False
    exposed_global_names: dict[str, None] = field(default_factory=dict)

    def add_included(self, *names: str) -> None:
        for n in names:
            self.included[n] = None
        if self.included:
            self.merged = True

    def add_exposed_global_names(self, *names: str) -> None:
        for n in names:
            self.exposed_global_names[n] = None

    @property
    def is_bundle(self) -> bool:
        return bool(self.included)

    def copy_from(self, orig: ResourceInfo) -> None:
        """Merge ``orig`` into this record.

        Classification flags are overwritten, dependency containers are
        unioned, sticky booleans are OR'ed, ``module`` is only taken when
        still unset, and an unknown size or format never erases a known one.
        """
        self.i18n_name = orig.i18n_name
        self.i18n_locale = orig.i18n_locale
        self.is_debug = orig.is_debug
        self.theme = orig.theme
        self.merged = orig.merged
        self.designtime = orig.designtime
        self.support = orig.support
        if self.module is None:
            self.module = orig.module

        self.required.update(orig.required)
        self.cond_required.update(orig.cond_required)
        self.add_included(*orig.included)
        self.add_exposed_global_names(*orig.exposed_global_names)

        self.dyn_required = self.dyn_required or orig.dyn_required
        self.requires_top_level_scope = (
            self.requires_top_level_scope or orig.requires_top_level_scope
        )

        if orig.size >= 0:
            self.size = orig.size
        if orig.format is not None:
            self.format = orig.format

    def to_json(self) -> ResourceJSON:
        """Serialize, emitting only fields that differ from their defaults."""
        result: ResourceJSON = {"name": self.name}
        if self.module is not None:
            result["module"] = self.module
        if self.size >= 0:
            result["size"] = self.size
        if self.format:
            result["format"] = self.format
        if self.is_debug:
            result["isDebug"] = True
        if self.merged:
            result["merged"] = True
        if self.designtime:
            result["designtime"] = True
        if self.support:
            result["support"] = True
        if self.i18n_locale is not None:
            # locale and raw always travel together; a bundle without a known
            # base name is its own raw bundle
            result["locale"] = self.i18n_locale
            result["raw"] = self.i18n_name if self.i18n_name is not None else self.name
        if self.theme is not None:
            result["theme"] = self.theme
        if self.required:
            result["required"] = sorted(self.required)
        if self.cond_required:
            result["condRequired"] = sorted(self.cond_required)
        if self.dyn_required:
            result["dynRequired"] = True
        if self.included:
            # load order, never sorted
            result["included"] = list(self.included)
        if self.requires_top_level_scope:
            result["requiresTopLevelScope"] = True
        if self.exposed_global_names:
            result["exposedGlobalNames"] = list(self.exposed_global_names)
        return result
