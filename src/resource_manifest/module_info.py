# src/resource_manifest/module_info.py

"""Dependency information for one module, as supplied by a module-info provider.

Analyzing module content is someone else's job; this module only defines
the result type the collector consumes, the provider protocol, and a loader
for pre-computed module info documents.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import IntEnum
from pathlib import Path
from typing import Any, Protocol

from .utils import load_jsonc


class ModuleInfoError(RuntimeError):
    """A module-info provider could not resolve a resource."""

    def __init__(self, name: str, reason: str = "not found") -> None:
        self.name = name
        super().__init__(f"No module info for '{name}': {reason}")


class DependencyKind(IntEnum):
    # lower value is stronger
    STRICT = 0
    IMPLICIT = 1
    CONDITIONAL = 2


class ModuleInfo:
    """Dependencies, sub-modules and flags of one module."""

    def __init__(self, name: str | None) -> None:
        self._name = name
        self.sub_modules: list[str] = []
        self._dependencies: dict[str, DependencyKind] = {}
        self.dynamic_dependencies = False
        self.raw_module = False
        self.requires_top_level_scope = False
        self.exposed_globals: list[str] | None = None
        self.format: str | None = None
        self.description: str | None = None

    @property
    def name(self) -> str | None:
        return self._name

    @name.setter
    def name(self, value: str | None) -> None:
        self._name = value
        if value is not None:
            self._dependencies.pop(value, None)
            if value in self.sub_modules:
                self.sub_modules.remove(value)

    def _add_dependency(self, dependency: str, kind: DependencyKind) -> None:
        # ignore self references and already-included modules;
        # a known dependency only ever gets stronger
        if (
            dependency
            and dependency != self.name
            and dependency not in self.sub_modules
            and kind < self._dependencies.get(dependency, len(DependencyKind))
        ):
            self._dependencies[dependency] = kind

    def add_dependency(self, dependency: str, *, conditional: bool = False) -> None:
        kind = DependencyKind.CONDITIONAL if conditional else DependencyKind.STRICT
        self._add_dependency(dependency, kind)

    def add_implicit_dependency(self, dependency: str) -> None:
        self._add_dependency(dependency, DependencyKind.IMPLICIT)

    def add_sub_module(self, name: str) -> None:
        if name not in self.sub_modules:
            self.sub_modules.append(name)
        # an included module no longer is a dependency
        self._dependencies.pop(name, None)

    @property
    def dependencies(self) -> list[str]:
        return list(self._dependencies)

    def is_conditional_dependency(self, dependency: str) -> bool:
        return self._dependencies.get(dependency) is DependencyKind.CONDITIONAL

    def is_implicit_dependency(self, dependency: str) -> bool:
        return self._dependencies.get(dependency) is DependencyKind.IMPLICIT

    def __repr__(self) -> str:
        return (
            f"ModuleInfo({self.name}, dependencies={self.dependencies},"
            f" includes={self.sub_modules})"
        )

    # ------------------------------------------------------------------ #
    # (de)serialization
    # ------------------------------------------------------------------ #

    @classmethod
    def from_dict(cls, resource_name: str, data: Mapping[str, Any]) -> ModuleInfo:
        """Build a ModuleInfo from one entry of a module info document."""
        if not isinstance(data, Mapping):
            xmsg = (
                f"Module info for '{resource_name}' must be an object,"
                f" not {type(data).__name__}"
            )
            raise TypeError(xmsg)

        info = cls(data.get("name", resource_name))
        for sub in _str_list(data, "subModules", resource_name):
            info.add_sub_module(sub)
        for dep in _str_list(data, "dependencies", resource_name):
            info.add_dependency(dep)
        for dep in _str_list(data, "implicitDependencies", resource_name):
            info.add_implicit_dependency(dep)
        for dep in _str_list(data, "conditionalDependencies", resource_name):
            info.add_dependency(dep, conditional=True)

        info.dynamic_dependencies = bool(data.get("dynamicDependencies", False))
        info.raw_module = bool(data.get("rawModule", False))
        info.requires_top_level_scope = bool(data.get("requiresTopLevelScope", False))
        exposed = _str_list(data, "exposedGlobals", resource_name)
        info.exposed_globals = exposed or None
        info.format = data.get("format")
        info.description = data.get("description")
        return info


def _str_list(data: Mapping[str, Any], key: str, resource_name: str) -> list[str]:
    value = data.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        xmsg = (
            f"Module info key `{key}` for '{resource_name}'"
            " must be a list of strings"
        )
        raise TypeError(xmsg)
    return value


class ModuleInfoProvider(Protocol):
    """Anything that can resolve dependency information by resource name.

    Implementations must tolerate concurrent, repeated queries.
    """

    def get_module_info(
        self, name: str, module_name: str | None = None
    ) -> ModuleInfo: ...


def parse_module_infos(raw: Any) -> dict[str, ModuleInfo]:
    """Parse a ``{resourceName: {...}}`` module info document."""
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        xmsg = f"Module info document must be an object, not {type(raw).__name__}"
        raise TypeError(xmsg)
    return {name: ModuleInfo.from_dict(name, data) for name, data in raw.items()}


def load_module_infos(path: Path) -> dict[str, ModuleInfo]:
    """Load a module info document (JSON or JSONC)."""
    return parse_module_infos(load_jsonc(path))

