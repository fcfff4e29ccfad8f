# tests/40-collector-tests/test_collector_debug.py
"""Stage 3: debug resources and their non-debug counterparts."""

from collections.abc import Sequence

import resource_manifest.collector as mod_collector
from resource_manifest.constants import DEFAULT_DEBUG_RESOURCES
from resource_manifest.diagnostics import Diagnostics
from resource_manifest.resource_info import ResourceInfo
from tests.utils import FakeProvider, make_module_info, make_resources


class AlwaysAnalyzeCollector(mod_collector.ResourceCollector):
    def reuse_non_debug_analysis(
        self, debug_info: ResourceInfo, non_debug_info: ResourceInfo
    ) -> bool:
        return False


def _run(
    names: Sequence[str],
    provider: FakeProvider,
    cls: type[mod_collector.ResourceCollector] = mod_collector.ResourceCollector,
) -> mod_collector.ResourceCollector:
    collector = cls(provider, diagnostics=Diagnostics(forward=False), workers=2)
    collector.visit_resources(make_resources(*names))
    collector.determine_resource_details(debug_resources=DEFAULT_DEBUG_RESOURCES)
    return collector


def _info(collector: mod_collector.ResourceCollector, name: str) -> ResourceInfo:
    info = collector.get_resource_info(name)
    assert info is not None
    return info


def test_debug_resource_reuses_counterpart_analysis() -> None:
    # --- setup ---
    provider = FakeProvider(
        {
            "mylib/a.js": make_module_info(
                "mylib/a.js", dependencies=["x.js"], conditional=["c.js"]
            )
        }
    )

    # --- execute ---
    collector = _run(["mylib/a.js", "mylib/a-dbg.js"], provider)

    # --- verify ---
    debug = _info(collector, "mylib/a-dbg.js")
    assert "mylib/a-dbg.js" not in provider.queries
    assert debug.is_debug is True
    assert debug.module == "mylib/a.js"
    assert debug.required == {"x.js"}
    assert debug.cond_required == {"c.js"}

    # the counterpart keeps its own identity
    plain = _info(collector, "mylib/a.js")
    assert plain.is_debug is False
    assert plain.required is not debug.required


def test_bundle_counterpart_forces_direct_analysis() -> None:
    # --- setup ---
    provider = FakeProvider(
        {
            "mylib/lib.js": make_module_info(
                "mylib/lib.js", sub_modules=["mylib/m.js"]
            ),
            "mylib/lib-dbg.js": make_module_info(
                "mylib/lib-dbg.js", dependencies=["y.js"]
            ),
        }
    )

    # --- execute ---
    collector = _run(["mylib/lib.js", "mylib/lib-dbg.js"], provider)

    # --- verify ---
    debug = _info(collector, "mylib/lib-dbg.js")
    assert "mylib/lib-dbg.js" in provider.queries
    # module adopted from the counterpart before analysis
    assert debug.module == "mylib/lib.js"
    assert debug.required == {"y.js"}
    assert debug.included == {}
    assert debug.is_debug is True


def test_debug_resource_without_counterpart_is_analyzed() -> None:
    # --- setup ---
    provider = FakeProvider(
        {"mylib/only-dbg.js": make_module_info("mylib/only.js", dependencies=["z.js"])}
    )

    # --- execute ---
    collector = _run(["mylib/only-dbg.js"], provider)

    # --- verify ---
    debug = _info(collector, "mylib/only-dbg.js")
    assert provider.queries == ["mylib/only-dbg.js"]
    assert debug.module == "mylib/only.js"
    assert debug.required == {"z.js"}


def test_reuse_policy_can_be_overridden() -> None:
    # --- setup ---
    provider = FakeProvider(
        {
            "mylib/a.js": make_module_info("mylib/a.js", dependencies=["x.js"]),
            "mylib/a-dbg.js": make_module_info(
                "mylib/a-dbg.js", dependencies=["x.js", "debug-helper.js"]
            ),
        }
    )

    # --- execute ---
    collector = _run(["mylib/a.js", "mylib/a-dbg.js"], provider, AlwaysAnalyzeCollector)

    # --- verify ---
    debug = _info(collector, "mylib/a-dbg.js")
    assert "mylib/a-dbg.js" in provider.queries
    assert debug.module == "mylib/a.js"
    assert debug.required == {"x.js", "debug-helper.js"}


def test_non_script_debug_resources_are_left_alone() -> None:
    # --- setup ---
    provider = FakeProvider()

    # --- execute ---
    collector = _run(["mylib/a.css", "mylib/a-dbg.css"], provider)

    # --- verify ---
    assert provider.queries == []
    debug = _info(collector, "mylib/a-dbg.css")
    assert debug.is_debug is True
    assert debug.module is None
