# tests/90-integration-tests/test_full_tree.py
"""
Run the CLI over a complete built library: a config file, pre-computed
module info, themes, i18n bundles, a preload bundle, debug variants,
external resources and one stray file.
"""

import json
from pathlib import Path

import pytest
from pytest import MonkeyPatch

import resource_manifest.cli as mod_cli
from resource_manifest.constants import MANIFEST_NAME, MANIFEST_VERSION
from tests.utils import write_resource_tree

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

TREE = {
    "dist/resources/sap-ui-version.json": "{}",
    "dist/resources/mylib/.library": "<library><name>mylib</name></library>",
    "dist/resources/mylib/library.js": "// library\n",
    "dist/resources/mylib/library-dbg.js": "// library, readable\n",
    "dist/resources/mylib/library-preload.js": "// bundle\n",
    "dist/resources/mylib/Button.js": "// button\n",
    "dist/resources/mylib/Button.control": "<control/>",
    "dist/resources/mylib/messagebundle.properties": "ok=OK\n",
    "dist/resources/mylib/messagebundle_de.properties": "ok=Gut\n",
    "dist/resources/mylib/messagebundle_en_US.properties": "ok=Okay\n",
    "dist/resources/mylib/themes/base/.theming": "{}",
    "dist/resources/mylib/themes/base/library.source.less": "@a: 1;\n",
    "dist/resources/mylib/themes/base/library.css": ".a{}\n",
    "dist/resources/shared/util.js": "// shared\n",
    "dist/resources/stray/lost.js": "// nobody's\n",
}

MODULE_INFO = {
    "mylib/library.js": {
        "dependencies": ["sap/ui/core/library.js"],
        "conditionalDependencies": ["mylib/opt.js"],
    },
    "mylib/Button.js": {
        "dependencies": ["mylib/library.js", "sap/m/Label.js"],
        "exposedGlobals": ["mylib"],
    },
    "mylib/library-preload.js": {
        "subModules": ["mylib/library.js", "mylib/Button.js"],
    },
}

CONFIG = """
// built by the ui5 build
{
    "root": "dist",
    "module_info": "module-info.json",
    "external_resources": {"mylib": ["shared/"]},
}
"""


@pytest.fixture
def project(tmp_path: Path, monkeypatch: MonkeyPatch) -> Path:
    write_resource_tree(
        tmp_path,
        {
            **TREE,
            "module-info.json": json.dumps(MODULE_INFO),
            ".resource-manifest.jsonc": CONFIG,
        },
    )
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _load(path: Path) -> tuple[dict[str, object], dict[str, dict[str, object]]]:
    data = json.loads(path.read_text(encoding="utf-8"))
    return data, {r["name"]: r for r in data["resources"]}


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


def test_full_tree_produces_component_and_theme_manifests(
    project: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    # --- execute ---
    code = mod_cli.main(["--workers", "4"])

    # --- verify ---
    assert code == 0
    err = capsys.readouterr().err
    assert "1 resource could not be assigned" in err
    assert "stray/lost.js" in err

    lib_path = project / "dist/resources/mylib" / MANIFEST_NAME
    theme_path = project / "dist/resources/mylib/themes/base" / MANIFEST_NAME
    assert not (project / "dist/resources/stray" / MANIFEST_NAME).exists()

    # - component manifest -
    data, lib = _load(lib_path)
    assert data["_version"] == MANIFEST_VERSION
    assert set(lib) == {
        ".library",
        "library.js",
        "library-dbg.js",
        "library-preload.js",
        "Button.js",
        "Button.control",
        "messagebundle.properties",
        "messagebundle_de.properties",
        "messagebundle_en_US.properties",
        "themes/base/.theming",
        "themes/base/library.source.less",
        "themes/base/library.css",
        "../shared/util.js",
        MANIFEST_NAME,
    }
    assert [r["name"] for r in data["resources"]] == sorted(lib)  # type: ignore[union-attr]

    assert lib["library.js"] == {
        "name": "library.js",
        "module": "mylib/library.js",
        "size": len("// library\n"),
        "required": ["sap/ui/core/library.js"],
        "condRequired": ["mylib/opt.js"],
    }
    assert lib["library-dbg.js"]["isDebug"] is True
    assert lib["library-dbg.js"]["module"] == "mylib/library.js"
    assert lib["library-dbg.js"]["required"] == ["sap/ui/core/library.js"]

    preload = lib["library-preload.js"]
    assert preload["merged"] is True
    assert preload["included"] == ["mylib/library.js", "mylib/Button.js"]
    assert preload["required"] == ["sap/m/Label.js", "sap/ui/core/library.js"]
    assert preload["condRequired"] == ["mylib/opt.js"]

    assert lib["Button.js"]["exposedGlobalNames"] == ["mylib"]
    assert lib["Button.control"]["designtime"] is True

    assert lib["messagebundle.properties"]["locale"] == ""
    assert lib["messagebundle_de.properties"]["locale"] == "de"
    assert lib["messagebundle_de.properties"]["raw"] == "messagebundle.properties"
    assert lib["messagebundle_en_US.properties"]["locale"] == "en_US"

    assert lib["themes/base/library.css"]["theme"] == "base"
    assert lib["themes/base/library.source.less"]["designtime"] is True
    assert "../shared/util.js" in lib
    assert lib[MANIFEST_NAME]["size"] == lib_path.stat().st_size

    # - theme package manifest -
    _, theme = _load(theme_path)
    assert set(theme) == {".theming", "library.source.less", "library.css", MANIFEST_NAME}
    assert theme["library.css"]["theme"] == "base"
    assert theme[MANIFEST_NAME]["size"] == theme_path.stat().st_size

    # - manifests are tab indented -
    assert lib_path.read_text(encoding="utf-8").startswith('{\n\t"_version"')


def test_full_tree_fails_on_orphans_but_writes_manifests(
    project: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    # --- execute ---
    code = mod_cli.main(["--fail-on-orphans"])

    # --- verify ---
    assert code == 1
    assert "stray/lost.js" in capsys.readouterr().err
    assert (project / "dist/resources/mylib" / MANIFEST_NAME).is_file()
    assert (project / "dist/resources/mylib/themes/base" / MANIFEST_NAME).is_file()
