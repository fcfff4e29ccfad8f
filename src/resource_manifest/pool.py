# src/resource_manifest/pool.py

"""Resource pool: the set of built resources plus their module info."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from .constants import RESOURCES_ROOT
from .module_info import ModuleInfo, ModuleInfoError
from .utils_logs import get_logger


@dataclass(frozen=True)
class Resource:
    """One file of the build output, addressed by a ``/``-rooted posix path."""

    path: str
    size: int = -1

    @property
    def name(self) -> str:
        """Path relative to the runtime resources root, if it lies below it."""
        if self.path.startswith(RESOURCES_ROOT):
            return self.path[len(RESOURCES_ROOT) :]
        return self.path.lstrip("/")


def scan_directory(root: Path | str) -> list[Resource]:
    """Return every file below ``root`` (directories are skipped), sorted by path."""
    logger = get_logger()
    root = Path(root).resolve()
    if not root.is_dir():
        xmsg = f"Resource root is not a directory: {root}"
        raise FileNotFoundError(xmsg)

    resources: list[Resource] = []
    for p in sorted(root.rglob("*")):
        if not p.is_file():
            continue
        rel = p.relative_to(root).as_posix()
        resources.append(Resource(path=f"/{rel}", size=p.stat().st_size))
        logger.trace("[SCAN] /%s (%d bytes)", rel, resources[-1].size)

    logger.debug("Scanned %d file(s) below %s", len(resources), root)
    return resources


class ResourcePool:
    """Known resources and pre-computed module info, queryable by name.

    Acts as the module-info provider for the collector. Resources without
    a module info entry resolve to a plain ModuleInfo (no dependencies);
    names the pool has never seen raise ModuleInfoError.
    """

    def __init__(
        self,
        resources: Iterable[Resource] = (),
        module_infos: Mapping[str, ModuleInfo] | None = None,
    ) -> None:
        self._resources: dict[str, Resource] = {}
        self._module_infos: dict[str, ModuleInfo] = dict(module_infos or {})
        self.prepare(resources)

    def prepare(self, resources: Iterable[Resource]) -> None:
        for resource in resources:
            self._resources[resource.name] = resource

    def add_module_infos(self, module_infos: Mapping[str, ModuleInfo]) -> None:
        self._module_infos.update(module_infos)

    @property
    def resources(self) -> list[Resource]:
        return list(self._resources.values())

    def __contains__(self, name: object) -> bool:
        return name in self._resources or name in self._module_infos

    def find_resource(self, name: str) -> Resource:
        try:
            return self._resources[name]
        except KeyError:
            raise ModuleInfoError(name, "resource not found in pool") from None

    def get_module_info(self, name: str, module_name: str | None = None) -> ModuleInfo:
        info = self._module_infos.get(name)
        if info is not None:
            return info
        if name not in self._resources:
            raise ModuleInfoError(name, "resource not found in pool")
        return ModuleInfo(module_name or name)
