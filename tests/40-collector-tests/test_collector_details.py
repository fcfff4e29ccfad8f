# tests/40-collector-tests/test_collector_details.py
"""Stage 2: classification and dependency enrichment."""

from collections.abc import Sequence
from typing import Any

import pytest

import resource_manifest.collector as mod_collector
from resource_manifest.constants import (
    DEFAULT_DEBUG_RESOURCES,
    DEFAULT_DESIGNTIME_RESOURCES,
    DEFAULT_MERGED_RESOURCES,
    DEFAULT_SUPPORT_RESOURCES,
)
from resource_manifest.diagnostics import Diagnostics
from resource_manifest.module_info import ModuleInfoError
from resource_manifest.resource_info import ResourceInfo
from tests.utils import FakeProvider, make_module_info, make_resources


def _run(
    names: Sequence[str],
    provider: FakeProvider | None = None,
    **details: Any,
) -> mod_collector.ResourceCollector:
    collector = mod_collector.ResourceCollector(
        provider if provider is not None else FakeProvider(),
        diagnostics=Diagnostics(forward=False),
        workers=2,
    )
    collector.visit_resources(make_resources(*names))
    collector.determine_resource_details(**details)
    return collector


def _info(collector: mod_collector.ResourceCollector, name: str) -> ResourceInfo:
    info = collector.get_resource_info(name)
    assert info is not None
    return info


# ---------------------------------------------------------------------------
# classification
# ---------------------------------------------------------------------------


def test_locale_bundles_and_root_bundle() -> None:
    # --- execute ---
    collector = _run(
        [
            "mylib/i18n/i18n.properties",
            "mylib/i18n/i18n_de.properties",
            "mylib/i18n/i18n_en_US.properties",
            "mylib/texts_fr.hdbtextbundle",
        ]
    )

    # --- verify ---
    de = _info(collector, "mylib/i18n/i18n_de.properties")
    assert (de.i18n_name, de.i18n_locale) == ("mylib/i18n/i18n.properties", "de")

    en_us = _info(collector, "mylib/i18n/i18n_en_US.properties")
    assert en_us.i18n_locale == "en_US"

    root = _info(collector, "mylib/i18n/i18n.properties")
    assert (root.i18n_name, root.i18n_locale) == ("mylib/i18n/i18n.properties", "")

    assert _info(collector, "mylib/texts_fr.hdbtextbundle").i18n_locale == "fr"


def test_properties_and_json_get_a_module_name() -> None:
    # --- setup ---
    provider = FakeProvider()

    # --- execute ---
    collector = _run(["mylib/i18n.properties", "mylib/manifest.json"], provider)

    # --- verify ---
    assert _info(collector, "mylib/i18n.properties").module == "mylib/i18n.properties"
    assert _info(collector, "mylib/manifest.json").module == "mylib/manifest.json"
    assert sorted(provider.queries) == ["mylib/i18n.properties", "mylib/manifest.json"]


def test_theme_only_for_registered_theme_packages() -> None:
    # --- execute ---
    collector = _run(
        [
            "mylib/themes/base/.theming",
            "mylib/themes/base/library.css",
            "mylib/themes/loose/library.css",
        ]
    )

    # --- verify ---
    assert _info(collector, "mylib/themes/base/library.css").theme == "base"
    assert _info(collector, "mylib/themes/loose/library.css").theme is None


def test_classification_flags_from_filters() -> None:
    # --- execute ---
    collector = _run(
        [
            "mylib/a-dbg.js",
            "mylib/library-preload.js",
            "mylib/designtime/Button.create.fragment.xml",
            "mylib/Button.support.js",
            "mylib/plain.txt",
        ],
        debug_resources=DEFAULT_DEBUG_RESOURCES,
        merged_resources=DEFAULT_MERGED_RESOURCES,
        designtime_resources=DEFAULT_DESIGNTIME_RESOURCES,
        support_resources=DEFAULT_SUPPORT_RESOURCES,
    )

    # --- verify ---
    assert _info(collector, "mylib/a-dbg.js").is_debug is True
    assert _info(collector, "mylib/library-preload.js").merged is True
    assert _info(collector, "mylib/designtime/Button.create.fragment.xml").designtime
    assert _info(collector, "mylib/Button.support.js").support is True

    plain = _info(collector, "mylib/plain.txt")
    assert not (plain.is_debug or plain.merged or plain.designtime or plain.support)


def test_unconfigured_flag_filters_flag_nothing() -> None:
    # --- execute ---
    collector = _run(["mylib/a-dbg.js", "mylib/library-preload.js"])

    # --- verify ---
    for name in ("mylib/a-dbg.js", "mylib/library-preload.js"):
        info = _info(collector, name)
        assert not (info.is_debug or info.merged or info.designtime or info.support)


def test_empty_flag_list_flags_nothing_and_any_folder_flags_all() -> None:
    # --- execute ---
    empty = _run(["mylib/a.js"], designtime_resources=[], support_resources=[])
    everything = _run(["mylib/a.js"], designtime_resources=["**/"])

    # --- verify ---
    assert _info(empty, "mylib/a.js").designtime is False
    assert _info(empty, "mylib/a.js").support is False
    assert _info(everything, "mylib/a.js").designtime is True


# ---------------------------------------------------------------------------
# enrichment
# ---------------------------------------------------------------------------


def test_dependencies_are_partitioned() -> None:
    # --- setup ---
    provider = FakeProvider(
        {
            "mylib/a.js": make_module_info(
                "mylib/a.js",
                dependencies=["x.js"],
                conditional=["c.js"],
                implicit=["i.js"],
            )
        }
    )

    # --- execute ---
    collector = _run(["mylib/a.js"], provider)

    # --- verify ---
    info = _info(collector, "mylib/a.js")
    assert info.required == {"x.js"}
    assert info.cond_required == {"c.js"}
    assert info.module == "mylib/a.js"
    assert not info.is_bundle


def test_provider_module_name_is_adopted() -> None:
    # --- setup ---
    provider = FakeProvider({"mylib/a.js": make_module_info("other/name.js")})

    # --- execute ---
    collector = _run(["mylib/a.js"], provider)

    # --- verify ---
    assert _info(collector, "mylib/a.js").module == "other/name.js"


def test_sub_module_dependencies_are_inherited() -> None:
    # --- setup ---
    provider = FakeProvider(
        {
            "mylib/bundle.js": make_module_info(
                "mylib/bundle.js",
                dependencies=["ext.js"],
                sub_modules=["mylib/m1.js", "mylib/m2.js"],
            ),
            "mylib/m1.js": make_module_info(
                "mylib/m1.js",
                dependencies=["mylib/m2.js", "dep1.js"],
                conditional=["cond.js", "dep2.js"],
                implicit=["hidden.js"],
            ),
            "mylib/m2.js": make_module_info(
                "mylib/m2.js",
                dependencies=["dep2.js"],
                conditional=["ext.js"],
                dynamic=True,
            ),
        }
    )

    # --- execute ---
    collector = _run(["mylib/bundle.js"], provider)

    # --- verify ---
    info = _info(collector, "mylib/bundle.js")
    assert list(info.included) == ["mylib/m1.js", "mylib/m2.js"]
    assert info.merged is True
    # m2 is part of the bundle, dep2 got promoted, ext stays required
    assert info.required == {"ext.js", "dep1.js", "dep2.js"}
    assert info.cond_required == {"cond.js"}
    assert info.dyn_required is True


def test_sub_module_lookup_failure_is_skipped() -> None:
    # --- setup ---
    provider = FakeProvider(
        {
            "mylib/bundle.js": make_module_info(
                "mylib/bundle.js", sub_modules=["mylib/gone.js"]
            )
        },
        missing=["mylib/gone.js"],
    )

    # --- execute ---
    collector = _run(["mylib/bundle.js"], provider)

    # --- verify ---
    info = _info(collector, "mylib/bundle.js")
    assert list(info.included) == ["mylib/gone.js"]
    assert info.required == set()
    assert any(
        "failed to get module info for sub-module 'mylib/gone.js'" in m
        for m in collector.diagnostics.messages("verbose")
    )


def test_primary_lookup_failure_propagates() -> None:
    # --- setup ---
    provider = FakeProvider(missing=["mylib/a.js"])

    # --- execute and verify ---
    with pytest.raises(ModuleInfoError, match="mylib/a.js"):
        _run(["mylib/a.js"], provider)


def test_flags_copied_from_module_info() -> None:
    # --- setup ---
    module_info = make_module_info("mylib/legacy.js", dynamic=True, raw=True)
    module_info.requires_top_level_scope = True
    module_info.exposed_globals = ["Foo", "Bar"]
    provider = FakeProvider({"mylib/legacy.js": module_info})

    # --- execute ---
    collector = _run(["mylib/legacy.js"], provider)

    # --- verify ---
    info = _info(collector, "mylib/legacy.js")
    assert info.dyn_required is True
    assert info.format == "raw"
    assert info.requires_top_level_scope is True
    assert list(info.exposed_global_names) == ["Foo", "Bar"]


def test_non_script_resources_are_not_analyzed() -> None:
    # --- setup ---
    provider = FakeProvider()

    # --- execute ---
    _run(["mylib/img/logo.png", "mylib/view/Main.view.xml"], provider)

    # --- verify ---
    assert provider.queries == ["mylib/view/Main.view.xml"]
