# src/resource_manifest/resource_list_creator.py

"""Creates the resources.json manifests for a set of resources."""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from .collector import OrphanedResourcesError, ResourceCollector
from .constants import (
    DEFAULT_DEBUG_RESOURCES,
    DEFAULT_DESIGNTIME_RESOURCES,
    DEFAULT_FAIL_ON_ORPHANS,
    DEFAULT_MERGED_RESOURCES,
    DEFAULT_RESOURCE_FILTERS,
    DEFAULT_SUPPORT_RESOURCES,
    DEFAULT_WORKERS,
    MANIFEST_NAME,
    ORPHAN_REPORT_LIMIT,
    RESOURCES_ROOT,
)
from .diagnostics import Diagnostics
from .filters import ResourceFilterList
from .module_info import ModuleInfoProvider
from .pool import Resource, ResourcePool
from .resource_info import ResourceInfo
from .resource_info_list import ResourceInfoList
from .types import CreatorOptions
from .utils import plural


@dataclass(frozen=True)
class Manifest:
    """A serialized resources.json, addressed like the resources it lists."""

    path: str  # e.g. /resources/my/lib/resources.json
    content: str

    @property
    def prefix(self) -> str:
        return self.path[len(RESOURCES_ROOT) : -len(MANIFEST_NAME)]

    def as_json(self) -> dict[str, Any]:
        return json.loads(self.content)


def default_options() -> CreatorOptions:
    return {
        "filter": list(DEFAULT_RESOURCE_FILTERS),
        "debug_resources": list(DEFAULT_DEBUG_RESOURCES),
        "merged_resources": list(DEFAULT_MERGED_RESOURCES),
        "designtime_resources": list(DEFAULT_DESIGNTIME_RESOURCES),
        "support_resources": list(DEFAULT_SUPPORT_RESOURCES),
        "external_resources": {},
        "fail_on_orphans": DEFAULT_FAIL_ON_ORPHANS,
        "workers": DEFAULT_WORKERS,
    }


def _dumps(resource_list: ResourceInfoList) -> str:
    return json.dumps(resource_list.to_json(), indent="\t", ensure_ascii=False)


def _byte_length(content: str) -> int:
    return len(content.encode("utf-8"))


def make_resources_json(resource_list: ResourceInfoList, prefix: str) -> str:
    """Add the manifest's own entry to the list and return the serialized list.

    The entry's size is the size of the file it is part of, so iterate until
    the number written equals the length of the text it is written into.
    """
    content = _dumps(resource_list)
    own_entry = ResourceInfo(prefix + MANIFEST_NAME)
    own_entry.size = _byte_length(content)
    resource_list.add(own_entry)

    content = _dumps(resource_list)
    new_length = _byte_length(content)

    # only the first insertion or a change in digit count moves the length
    while own_entry.size != new_length:
        own_entry.size = new_length
        resource_list.add(own_entry)
        content = _dumps(resource_list)
        new_length = _byte_length(content)
    return content


def report_orphans(orphans: Sequence[str], diagnostics: Diagnostics) -> None:
    if not orphans:
        return
    shown = ", ".join(orphans[:ORPHAN_REPORT_LIMIT])
    more = len(orphans) - ORPHAN_REPORT_LIMIT
    if more > 0:
        shown += f" (and {more} more)"
    diagnostics.warn(
        "%d resource%s could not be assigned to any component or theme package: %s",
        len(orphans),
        plural(orphans),
        shown,
    )


def create_resource_lists(
    resources: Sequence[Resource],
    *,
    pool: ModuleInfoProvider | None = None,
    dependency_resources: Iterable[Resource] = (),
    options: CreatorOptions | None = None,
    diagnostics: Diagnostics | None = None,
) -> list[Manifest]:
    """Classify ``resources`` and return one manifest per component/theme package.

    ``pool`` answers module info queries; without one, a ResourcePool over
    ``resources`` and ``dependency_resources`` is used (no dependencies known).

    Raises OrphanedResourcesError (carrying the manifests that were built)
    when ``fail_on_orphans`` is set and unassigned resources remain.
    """
    opts: CreatorOptions = {**default_options(), **(options or {})}
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    if pool is None:
        resource_pool = ResourcePool(resources)
        resource_pool.prepare(dependency_resources)
        pool = resource_pool

    collector = ResourceCollector(
        pool,
        ResourceFilterList(opts["filter"]),
        diagnostics=diagnostics,
        workers=opts["workers"],
    )
    collector.visit_resources(resources)

    if opts["external_resources"]:
        collector.set_external_resources(opts["external_resources"])

    collector.determine_resource_details(
        debug_resources=opts["debug_resources"],
        merged_resources=opts["merged_resources"],
        designtime_resources=opts["designtime_resources"],
        support_resources=opts["support_resources"],
    )
    collector.group_resources_by_components()

    manifests: list[Manifest] = []
    for lists in (collector.components, collector.theme_packages):
        for prefix, resource_list in lists.items():
            diagnostics.verbose("  writing '%s%s'", prefix, MANIFEST_NAME)
            manifests.append(
                Manifest(
                    path=f"{RESOURCES_ROOT}{prefix}{MANIFEST_NAME}",
                    content=make_resources_json(resource_list, prefix),
                )
            )

    orphans = collector.orphans
    report_orphans(orphans, diagnostics)
    if orphans and opts["fail_on_orphans"]:
        raise OrphanedResourcesError(orphans, manifests)

    return manifests
