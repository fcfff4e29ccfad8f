# tests/utils/__init__.py

from .buildconfig import (
    make_build_cfg,
    make_build_input,
    make_meta,
    make_resolved,
)
from .resources import (
    FakeProvider,
    make_module_info,
    make_resources,
    write_resource_tree,
)
from .trace import TRACE, make_trace

__all__ = [
    "TRACE",
    "FakeProvider",
    "make_build_cfg",
    "make_build_input",
    "make_meta",
    "make_module_info",
    "make_resolved",
    "make_resources",
    "make_trace",
    "write_resource_tree",
]
