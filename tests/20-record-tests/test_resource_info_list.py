# tests/20-record-tests/test_resource_info_list.py
"""Tests for resource_manifest.resource_info_list."""

import posixpath

import pytest

import resource_manifest.resource_info as mod_info
import resource_manifest.resource_info_list as mod_list

RIL = mod_list.ResourceInfoList


# ---------------------------------------------------------------------------
# make_path_relative_to
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("prefix", "name", "expected"),
    [
        ("am/bn/cf", "args/myfile.js", "../../../args/myfile.js"),
        ("sap/m/", "sap/m/Button.js", "Button.js"),
        ("sap/m/", "sap/m/sub/Item.js", "sub/Item.js"),
        ("sap/ui/core/", "sap/m/Button.js", "../../m/Button.js"),
        ("sap/ui/core/", "other/x.js", "../../../other/x.js"),
        ("", "a/b.js", "a/b.js"),
    ],
)
def test_make_path_relative_to(prefix: str, name: str, expected: str) -> None:
    # --- execute and verify ---
    assert RIL.make_path_relative_to(prefix, name) == expected


@pytest.mark.parametrize(
    ("prefix", "name"),
    [
        ("am/bn/cf", "args/myfile.js"),
        ("sap/m/", "sap/m/sub/Item.js"),
        ("sap/ui/core/", "sap/m/Button.js"),
        ("a/b/c/", "x/y/z.js"),
    ],
)
def test_relativize_round_trip(prefix: str, name: str) -> None:
    # --- execute ---
    rel = RIL.make_path_relative_to(prefix, name)

    # --- verify ---
    assert posixpath.normpath(posixpath.join(prefix, rel)) == name


# ---------------------------------------------------------------------------
# debug names
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("debug", "non_debug"),
    [
        ("a-dbg.js", "a.js"),
        ("x/a-dbg.view.js", "x/a.view.js"),
        ("x/a-dbg.fragment.js", "x/a.fragment.js"),
        ("x/a-dbg.controller.js", "x/a.controller.js"),
        ("x/a-dbg.designtime.js", "x/a.designtime.js"),
        ("x/a-dbg.support.js", "x/a.support.js"),
        ("themes/base/library-dbg.css", "themes/base/library.css"),
    ],
)
def test_debug_name_conversions(debug: str, non_debug: str) -> None:
    # --- execute and verify ---
    assert RIL.get_non_debug_name(debug) == non_debug
    assert RIL.get_debug_name(non_debug) == debug


@pytest.mark.parametrize("name", ["a.js", "a.properties", "a-dbg.xml", "dbg.js"])
def test_get_non_debug_name_no_match(name: str) -> None:
    # --- execute and verify ---
    assert RIL.get_non_debug_name(name) is None


@pytest.mark.parametrize("name", ["a-dbg.js", "a.properties", "a.xml"])
def test_get_debug_name_no_match(name: str) -> None:
    # --- execute and verify ---
    assert RIL.get_debug_name(name) is None


# ---------------------------------------------------------------------------
# add
# ---------------------------------------------------------------------------


def test_add_stores_relative_names_and_size() -> None:
    # --- setup ---
    resources = RIL("my/lib/")

    # --- execute ---
    entry = resources.add(mod_info.ResourceInfo("my/lib/a.js", size=42))

    # --- verify ---
    assert entry.name == "a.js"
    assert entry.size == 42
    assert "a.js" in resources
    assert resources.get("a.js") is entry
    assert len(resources) == 1


def test_add_twice_coalesces() -> None:
    # --- setup ---
    resources = RIL("my/lib/")
    first = mod_info.ResourceInfo("my/lib/a.js", size=1)
    first.required.add("x.js")
    second = mod_info.ResourceInfo("my/lib/a.js")
    second.required.add("y.js")

    # --- execute ---
    resources.add(first)
    entry = resources.add(second)

    # --- verify ---
    assert len(resources) == 1
    assert entry.required == {"x.js", "y.js"}
    assert entry.size == 1


def test_add_relativizes_i18n_name() -> None:
    # --- setup ---
    resources = RIL("my/lib/")
    info = mod_info.ResourceInfo("my/lib/i18n/text_de.properties")
    info.i18n_name = "my/lib/i18n/text.properties"
    info.i18n_locale = "de"

    # --- execute ---
    entry = resources.add(info)

    # --- verify ---
    assert entry.i18n_name == "i18n/text.properties"
    assert entry.to_json()["raw"] == "i18n/text.properties"


def test_add_outside_prefix_climbs() -> None:
    # --- setup ---
    resources = RIL("my/lib/")

    # --- execute ---
    entry = resources.add(mod_info.ResourceInfo("other/x.js"))

    # --- verify ---
    assert entry.name == "../../other/x.js"


def _debug_pair_json(*, debug_first: bool) -> object:
    resources = RIL("")
    non_debug = mod_info.ResourceInfo("myfile.js", module="myfile.js")
    debug = mod_info.ResourceInfo("myfile-dbg.js")
    for info in (debug, non_debug) if debug_first else (non_debug, debug):
        resources.add(info)
    return resources.to_json()


@pytest.mark.parametrize("debug_first", [False, True])
def test_debug_and_non_debug_share_module(debug_first: bool) -> None:
    # --- setup ---
    resources = RIL("")
    non_debug = mod_info.ResourceInfo("myfile.js", module="myfile.js")
    debug = mod_info.ResourceInfo("myfile-dbg.js")
    order = (debug, non_debug) if debug_first else (non_debug, debug)

    # --- execute ---
    for info in order:
        resources.add(info)

    # --- verify ---
    assert resources.get("myfile.js").module == "myfile.js"  # type: ignore[union-attr]
    assert resources.get("myfile-dbg.js").module == "myfile.js"  # type: ignore[union-attr]


def test_debug_pair_independent_of_insertion_order() -> None:
    # --- execute and verify ---
    assert _debug_pair_json(debug_first=True) == _debug_pair_json(debug_first=False)


def test_to_json_sorts_by_name_and_tags_version() -> None:
    # --- setup ---
    resources = RIL("p/")
    for name in ("p/c.js", "p/a.js", "p/b/x.js"):
        resources.add(mod_info.ResourceInfo(name))

    # --- execute ---
    data = resources.to_json()

    # --- verify ---
    assert data["_version"] == "1.1.0"
    assert [r["name"] for r in data["resources"]] == ["a.js", "b/x.js", "c.js"]
