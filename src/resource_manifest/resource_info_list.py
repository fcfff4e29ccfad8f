# src/resource_manifest/resource_info_list.py

"""Per-component list of ResourceInfo entries, keyed by prefix-relative name."""

from __future__ import annotations

import re

from .constants import MANIFEST_VERSION
from .resource_info import ResourceInfo
from .types import ManifestJSON

_SCRIPT_SUFFIXES = (
    r"(?:\.view|\.fragment|\.controller|\.designtime|\.support)?\.js|\.css"
)

DEBUG_RESOURCES_PATTERN = re.compile(rf"-dbg({_SCRIPT_SUFFIXES})$")
RESOURCES_PATTERN = re.compile(rf"({_SCRIPT_SUFFIXES})$")


class ResourceInfoList:
    """Ordered, deduplicated ResourceInfos owned by one component or theme.

    Entries are stored under names relative to ``prefix``; resources from
    outside the prefix get ``../`` paths.
    """

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix
        self.resources: list[ResourceInfo] = []
        self._resources_by_name: dict[str, ResourceInfo] = {}

    def __len__(self) -> int:
        return len(self.resources)

    def __contains__(self, relative_name: object) -> bool:
        return relative_name in self._resources_by_name

    def get(self, relative_name: str) -> ResourceInfo | None:
        return self._resources_by_name.get(relative_name)

    def add(self, info: ResourceInfo) -> ResourceInfo:
        """Merge ``info`` into the entry for its relative name and return it."""
        relative_name = self.make_path_relative_to(self.prefix, info.name)

        my_info = self._resources_by_name.get(relative_name)
        if my_info is None:
            my_info = ResourceInfo(relative_name)
            my_info.size = info.size
            # a debug variant shares the module of its non-debug counterpart
            my_info.module = self.get_non_debug_name(info.name)
            self.resources.append(my_info)
            self._resources_by_name[relative_name] = my_info

        my_info.copy_from(info)
        if info.i18n_name:
            my_info.i18n_name = self.make_path_relative_to(self.prefix, info.i18n_name)
        return my_info

    def to_json(self) -> ManifestJSON:
        self.resources.sort(key=lambda r: r.name)
        return {
            # must be 1.1.0 or higher to store dependencies
            "_version": MANIFEST_VERSION,
            "resources": [r.to_json() for r in self.resources],
        }

    @staticmethod
    def make_path_relative_to(prefix: str, name: str) -> str:
        """Return ``name`` relative to the folder ``prefix``.

        >>> ResourceInfoList.make_path_relative_to("am/bn/cf", "args/myfile.js")
        '../../../args/myfile.js'
        """
        back = ""
        while not name.startswith(prefix):
            p = prefix.rfind("/", 0, len(prefix) - 1)
            back += "../"
            if p >= 0:
                prefix = prefix[: p + 1]
            else:
                prefix = ""
                break
        return back + name[len(prefix) :]

    @staticmethod
    def get_non_debug_name(path: str) -> str | None:
        """Return the non-debug name for a ``-dbg`` resource, else None."""
        if DEBUG_RESOURCES_PATTERN.search(path):
            return DEBUG_RESOURCES_PATTERN.sub(r"\1", path)
        return None

    @staticmethod
    def get_debug_name(path: str) -> str | None:
        """Return the ``-dbg`` name for a non-debug resource, else None."""
        m = RESOURCES_PATTERN.search(path)
        if m and not path[: m.start()].endswith("-dbg"):
            return path[: m.start()] + "-dbg" + m.group(1)
        return None
