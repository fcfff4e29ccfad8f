# src/resource_manifest/collector.py

"""Collects resources, classifies them and groups them by component.

One collector serves exactly one run:

1. ``visit_resource`` every resource of the pool (registers components and
   theme packages on the way)
2. ``determine_resource_details`` (classification, dependency enrichment,
   debug reconciliation)
3. ``group_resources_by_components``

Whatever is left in ``resources`` afterwards is an orphan.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from concurrent.futures import Future, ThreadPoolExecutor

from .constants import DEFAULT_WORKERS, RESOURCES_ROOT
from .diagnostics import Diagnostics
from .filters import ResourceFilterList
from .module_info import ModuleInfoError, ModuleInfoProvider
from .pool import Resource
from .resource_info import ResourceInfo
from .resource_info_list import ResourceInfoList
from .utils import plural

LOCALE = re.compile(
    r"^((?:[^/]+/)*[^/]+?)_([A-Z]{2}(?:_[A-Z]{2}(?:_[A-Z0-9_]+)?)?)"
    r"(\.properties|\.hdbtextbundle)$",
    re.IGNORECASE,
)
THEME = re.compile(r"^((?:[^/]+/)*)themes/([^/]+)/")

# basename patterns of files that make their folder a component
COMPONENT_INDICATOR = re.compile(r"[^/]*\.library|Component\.js|manifest\.json")
# a .theming file within a theme folder indicates a theme package;
# .theming files are not always present, library.source.less is the fallback
THEME_PACKAGE_INDICATOR = re.compile(
    r"(?:[^/]+/)*themes/[^/]+/(?:\.theming|library\.source\.less)"
)

DEPENDENCY_ANALYSIS_TYPES = re.compile(
    r"(?:\.js|\.view\.xml|\.control\.xml|\.fragment\.xml)$"
)
MODULE_NAME_TYPES = re.compile(r"(?:\.properties|\.json)$")


class OrphanedResourcesError(RuntimeError):
    """Resources remained that belong to no component and no theme package."""

    def __init__(
        self,
        orphans: Sequence[str],
        manifests: Sequence[object] = (),
    ) -> None:
        self.orphans = list(orphans)
        self.manifests = list(manifests)
        super().__init__(
            "resources.json generation failed because of unassigned resources: "
            f"there {'is' if len(self.orphans) == 1 else 'are'} {len(self.orphans)} "
            f"resource{plural(self.orphans)} which could not be assigned to "
            f"components: {', '.join(self.orphans)}"
        )


def split_resource_name(name: str) -> tuple[str, str]:
    """Split ``a/b/c.js`` into the folder prefix ``a/b/`` and ``c.js``."""
    p = name.rfind("/")
    return name[: p + 1], name[p + 1 :]


def normalize_component_prefix(component: str) -> str:
    if component in ("", "/"):
        return ""
    return component if component.endswith("/") else component + "/"


def _flag_filter(patterns: Sequence[str] | None) -> ResourceFilterList:
    """Filter for one classification flag; an empty list flags nothing."""
    flt = ResourceFilterList(patterns)
    if not flt:
        flt.match_by_default = False
    return flt


class ResourceCollector:
    """Collects ResourceInfos and groups them by components and theme packages."""

    def __init__(
        self,
        pool: ModuleInfoProvider,
        resource_filter: ResourceFilterList | None = None,
        *,
        diagnostics: Diagnostics | None = None,
        workers: int = DEFAULT_WORKERS,
    ) -> None:
        self._pool = pool
        # global filter applied while visiting
        self._filter = (
            resource_filter if resource_filter is not None else ResourceFilterList()
        )
        self._diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self._workers = max(1, workers)

        # name → info, for everything not (yet) assigned
        self._resources: dict[str, ResourceInfo] = {}
        # prefix → list
        self._components: dict[str, ResourceInfoList] = {}
        self._theme_packages: dict[str, ResourceInfoList] = {}
        self._external_resources: Mapping[str, Sequence[str]] | None = None

    # ------------------------------------------------------------------ #
    # accessors
    # ------------------------------------------------------------------ #

    @property
    def diagnostics(self) -> Diagnostics:
        return self._diagnostics

    @property
    def resources(self) -> set[str]:
        """Names of the resources not assigned to any list."""
        return set(self._resources)

    @property
    def orphans(self) -> list[str]:
        return sorted(self._resources)

    @property
    def components(self) -> dict[str, ResourceInfoList]:
        return self._components

    @property
    def theme_packages(self) -> dict[str, ResourceInfoList]:
        return self._theme_packages

    def get_resource_info(self, name: str) -> ResourceInfo | None:
        return self._resources.get(name)

    def set_external_resources(
        self, external_resources: Mapping[str, Sequence[str]] | None
    ) -> None:
        """Configure which orphans a component adopts.

        Maps a component to filter patterns; matching resources from outside
        the component's namespace are added to it anyway. Patterns follow the
        ResourceFilterList rules (order significant, ``!``/``-`` excludes).
        """
        self._external_resources = external_resources

    # ------------------------------------------------------------------ #
    # stage 1: visit
    # ------------------------------------------------------------------ #

    def visit_resource(self, resource: Resource) -> ResourceInfo | None:
        path = resource.path
        if not path.startswith(RESOURCES_ROOT):
            self._diagnostics.warn("non-runtime resource %s ignored", path)
            return None

        name = path[len(RESOURCES_ROOT) :]
        if not self._filter.matches(name):
            self._diagnostics.verbose("  resource '%s' filtered out", name)
            return None

        info = ResourceInfo(name)
        info.size = resource.size
        self._resources[name] = info

        prefix, basename = split_resource_name(name)
        if COMPONENT_INDICATOR.fullmatch(basename) and prefix not in self._components:
            self._diagnostics.verbose("  found new component '%s'", prefix)
            self._components[prefix] = ResourceInfoList(prefix)

        if (
            THEME_PACKAGE_INDICATOR.fullmatch(name)
            and prefix not in self._theme_packages
        ):
            self._diagnostics.verbose("  found new theme package '%s'", prefix)
            self._theme_packages[prefix] = ResourceInfoList(prefix)

        return info

    def visit_resources(self, resources: Iterable[Resource]) -> None:
        for resource in resources:
            self.visit_resource(resource)
        self._diagnostics.verbose(
            "  found %d resource%s", len(self._resources), plural(self._resources)
        )

    # ------------------------------------------------------------------ #
    # stage 2: classify & enrich
    # ------------------------------------------------------------------ #

    def enrich_with_dependency_info(self, info: ResourceInfo) -> None:
        """Copy the provider's dependency information into ``info``.

        Lookup failures for the resource itself propagate; failures for its
        sub-modules only skip inheriting that sub-module's dependencies.
        """
        module_info = self._pool.get_module_info(info.name, info.module)
        if module_info.name and not info.module:
            info.module = module_info.name
        if module_info.dynamic_dependencies:
            info.dyn_required = True

        for dep in module_info.dependencies:
            if module_info.is_implicit_dependency(dep):
                continue
            if module_info.is_conditional_dependency(dep):
                info.cond_required.add(dep)
            else:
                info.required.add(dep)

        if module_info.sub_modules:
            info.add_included(*module_info.sub_modules)
            for sub_module in module_info.sub_modules:
                self._inherit_sub_module_dependencies(info, sub_module)

        if module_info.requires_top_level_scope:
            info.requires_top_level_scope = True
        if module_info.exposed_globals:
            info.add_exposed_global_names(*module_info.exposed_globals)
        if module_info.raw_module:
            info.format = "raw"

    def _inherit_sub_module_dependencies(
        self, info: ResourceInfo, sub_module: str
    ) -> None:
        try:
            sub_info = self._pool.get_module_info(sub_module)
        except ModuleInfoError as e:
            self._diagnostics.verbose(
                "  failed to get module info for sub-module '%s' of '%s': %s",
                sub_module,
                info.name,
                e,
            )
            return

        for dep in sub_info.dependencies:
            if dep in info.included:
                continue
            if sub_info.is_conditional_dependency(dep):
                # required always wins over conditional
                if dep not in info.required:
                    info.cond_required.add(dep)
            elif not sub_info.is_implicit_dependency(dep):
                info.cond_required.discard(dep)
                info.required.add(dep)

        if sub_info.dynamic_dependencies:
            info.dyn_required = True

    def _set_module_name(self, info: ResourceInfo) -> None:
        module_info = self._pool.get_module_info(info.name)
        if module_info.name:
            info.module = module_info.name

    def determine_resource_details(
        self,
        *,
        debug_resources: Sequence[str] | None = None,
        merged_resources: Sequence[str] | None = None,
        designtime_resources: Sequence[str] | None = None,
        support_resources: Sequence[str] | None = None,
    ) -> None:
        """Classify every collected resource and enrich it with dependency info.

        Each ``*_resources`` list sets one flag. Unlike a plain
        ResourceFilterList, a list that is None or empty flags nothing: pass
        ``["**/"]`` to flag every resource.
        """
        debug_filter = _flag_filter(debug_resources)
        merge_filter = _flag_filter(merged_resources)
        designtime_filter = _flag_filter(designtime_resources)
        support_filter = _flag_filter(support_resources)

        base_names: set[str] = set()
        debug_infos: list[ResourceInfo] = []

        with ThreadPoolExecutor(max_workers=self._workers) as executor:
            futures: list[Future[None]] = []

            for name, info in self._resources.items():
                if debug_filter.matches(name):
                    info.is_debug = True
                    self._diagnostics.verbose(
                        "  found potential debug resource '%s'", name
                    )

                m = LOCALE.match(name)
                if m:
                    base_name = m.group(1) + m.group(3)
                    self._diagnostics.verbose(
                        "  found potential i18n resource '%s', base name is '%s',"
                        " locale is %s",
                        name,
                        base_name,
                        m.group(2),
                    )
                    info.i18n_name = base_name
                    info.i18n_locale = m.group(2)
                    base_names.add(base_name)

                m = THEME.match(name)
                # only folders registered as theme packages count
                if m and m.group(0) in self._theme_packages:
                    info.theme = m.group(2)
                    self._diagnostics.verbose(
                        "  found potential theme resource '%s', theme %s",
                        name,
                        info.theme,
                    )

                if merge_filter.matches(name):
                    info.merged = True
                    self._diagnostics.verbose(
                        "  found potential merged resource '%s'", name
                    )

                if designtime_filter.matches(name):
                    info.designtime = True
                    self._diagnostics.verbose(
                        "  found potential designtime resource '%s'", name
                    )

                if support_filter.matches(name):
                    info.support = True
                    self._diagnostics.verbose(
                        "  found potential support resource '%s'", name
                    )

                if DEPENDENCY_ANALYSIS_TYPES.search(name):
                    if info.is_debug:
                        debug_infos.append(info)
                    else:
                        futures.append(
                            executor.submit(self.enrich_with_dependency_info, info)
                        )

                if MODULE_NAME_TYPES.search(name):
                    futures.append(executor.submit(self._set_module_name, info))

            for base_name in base_names:
                root_bundle = self._resources.get(base_name)
                if root_bundle is not None:
                    root_bundle.i18n_name = base_name
                    root_bundle.i18n_locale = ""

            for future in futures:
                future.result()

        self.reconcile_debug_resources(debug_infos)

    # ------------------------------------------------------------------ #
    # stage 3: debug reconciliation
    # ------------------------------------------------------------------ #

    def reuse_non_debug_analysis(
        self, debug_info: ResourceInfo, non_debug_info: ResourceInfo
    ) -> bool:
        """Whether a debug resource can take over its counterpart's analysis.

        Assumes a debug file depends on the same modules as its non-debug
        counterpart unless the counterpart is a bundle.
        """
        return not non_debug_info.is_bundle

    def _reconcile_debug_resource(
        self, debug_info: ResourceInfo
    ) -> ResourceInfo | None:
        non_debug_name = ResourceInfoList.get_non_debug_name(debug_info.name)
        non_debug_info = (
            self._resources.get(non_debug_name) if non_debug_name is not None else None
        )

        if non_debug_info is None or not self.reuse_non_debug_analysis(
            debug_info, non_debug_info
        ):
            if non_debug_info is not None:
                debug_info.module = non_debug_info.module
            self.enrich_with_dependency_info(debug_info)
            return None

        replacement = ResourceInfo(debug_info.name)
        # analysis of the non-debug resource first, then the debug specifics
        replacement.copy_from(non_debug_info)
        replacement.copy_from(debug_info)
        replacement.module = non_debug_info.module
        return replacement

    def reconcile_debug_resources(self, debug_infos: Sequence[ResourceInfo]) -> None:
        """Give deferred debug resources their dependency information."""
        if not debug_infos:
            return

        with ThreadPoolExecutor(max_workers=self._workers) as executor:
            futures = [
                executor.submit(self._reconcile_debug_resource, info)
                for info in debug_infos
            ]
            replacements = [f.result() for f in futures]

        for replacement in replacements:
            if replacement is not None:
                self._resources[replacement.name] = replacement

    # ------------------------------------------------------------------ #
    # stage 4: grouping
    # ------------------------------------------------------------------ #

    def create_orphan_filters(self) -> dict[str, ResourceFilterList]:
        self._diagnostics.verbose(
            "  configured external resources filters (resources outside the"
            " namespace): %s",
            "(none)" if self._external_resources is None else self._external_resources,
        )

        filters_by_component: dict[str, ResourceFilterList] = {}
        for component, patterns in (self._external_resources or {}).items():
            prefix = normalize_component_prefix(component)
            package_filters = ResourceFilterList(patterns)
            self._diagnostics.verbose(
                "  resulting filter list for '%s': '%s'", prefix, package_filters
            )
            if prefix not in self._components:
                self._diagnostics.warn(
                    "external resources configured for '%s', but no component"
                    " was found there",
                    prefix,
                )
            filters_by_component[prefix] = package_filters
        return filters_by_component

    def group_resources_by_components(self) -> None:
        orphan_filters = self.create_orphan_filters()

        assigned: list[str] = []
        for resource in self._resources.values():
            contained = False
            for prefix, component in self._components.items():
                if resource.name.startswith(prefix):
                    component.add(resource)
                    contained = True
                elif prefix in orphan_filters and orphan_filters[prefix].matches(
                    resource.name
                ):
                    component.add(resource)
                    contained = True

            if resource.theme:
                # theme resources additionally go to their theme packages
                for prefix, theme_package in self._theme_packages.items():
                    if resource.name.startswith(prefix):
                        theme_package.add(resource)
                        contained = True

            if contained:
                assigned.append(resource.name)

        for name in assigned:
            del self._resources[name]
