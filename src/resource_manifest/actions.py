# src/resource_manifest/actions.py
import json
import re
import shutil
import subprocess
import tempfile
from contextlib import suppress
from pathlib import Path

from .build import run_build
from .config_resolve import make_pathresolved
from .constants import (
    DEFAULT_DEBUG_RESOURCES,
    DEFAULT_DESIGNTIME_RESOURCES,
    DEFAULT_MERGED_RESOURCES,
    DEFAULT_RESOURCE_FILTERS,
    DEFAULT_SUPPORT_RESOURCES,
    MANIFEST_NAME,
)
from .meta import PROGRAM_DISPLAY, PROGRAM_SCRIPT, Metadata
from .types import BuildConfig
from .utils_logs import get_logger

# tiny library used by the self-test: name → file content
_SELFTEST_FILES: dict[str, str] = {
    "resources/selftest/lib/.library": "<library><name>selftest.lib</name></library>\n",
    "resources/selftest/lib/library.js": "// library\n",
    "resources/selftest/lib/library-dbg.js": "// library (debug)\n",
    "resources/selftest/lib/messagebundle.properties": "greeting=Hello\n",
    "resources/selftest/lib/messagebundle_de.properties": "greeting=Hallo\n",
}


_VERSION_RE = re.compile(r'(?m)^\s*version\s*=\s*["\']([^"\']+)["\']')


def _version_from_pyproject(repo_root: Path) -> str | None:
    pyproject = repo_root / "pyproject.toml"
    if not pyproject.is_file():
        return None
    match = _VERSION_RE.search(pyproject.read_text(encoding="utf-8"))
    return match.group(1) if match else None


def _git_commit(repo_root: Path) -> str | None:
    with suppress(OSError, subprocess.CalledProcessError):
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],  # noqa: S607
            cwd=repo_root,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip() or None
    return None


def get_metadata() -> Metadata:
    """Version from the source checkout's pyproject.toml, commit from git.

    Either part is "unknown" when the package is not run from a checkout.
    """
    repo_root = Path(__file__).resolve().parents[2]
    meta = Metadata(
        _version_from_pyproject(repo_root) or "unknown",
        _git_commit(repo_root) or "unknown",
    )
    get_logger().trace("[META] %s resolved from %s", meta, repo_root)
    return meta


def _check_selftest_manifest(manifest_path: Path) -> bool:
    logger = get_logger()
    if not manifest_path.exists():
        logger.error("Self-test failed: %s was not written.", manifest_path)
        return False

    data = json.loads(manifest_path.read_text(encoding="utf-8"))
    entries = {r["name"]: r for r in data.get("resources", [])}
    expected = {
        ".library",
        "library.js",
        "library-dbg.js",
        "messagebundle.properties",
        "messagebundle_de.properties",
        MANIFEST_NAME,
    }
    if set(entries) != expected:
        logger.error(
            "Self-test failed: unexpected entries %s", sorted(set(entries) ^ expected)
        )
        return False

    checks = [
        entries["library-dbg.js"].get("isDebug") is True,
        entries["library-dbg.js"].get("module") == "selftest/lib/library.js",
        entries["messagebundle_de.properties"].get("locale") == "de",
        entries[MANIFEST_NAME].get("size") == manifest_path.stat().st_size,
    ]
    if not all(checks):
        logger.error("Self-test failed: manifest content is not as expected.")
        return False
    return True


def run_selftest() -> bool:
    """Run a lightweight functional test of the tool itself."""
    logger = get_logger()
    logger.info("🧪 Running self-test...")

    tmp_dir: Path | None = None
    try:
        tmp_dir = Path(tempfile.mkdtemp(prefix=f"{PROGRAM_SCRIPT}-selftest-"))
        src = tmp_dir / "src"
        out = tmp_dir / "out"

        for name, content in _SELFTEST_FILES.items():
            path = src / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")

        build_cfg: BuildConfig = {
            "root": make_pathresolved(src, tmp_dir, "code"),
            "out": make_pathresolved(out, tmp_dir, "code"),
            "filter": list(DEFAULT_RESOURCE_FILTERS),
            "debug_resources": list(DEFAULT_DEBUG_RESOURCES),
            "merged_resources": list(DEFAULT_MERGED_RESOURCES),
            "designtime_resources": list(DEFAULT_DESIGNTIME_RESOURCES),
            "support_resources": list(DEFAULT_SUPPORT_RESOURCES),
            "external_resources": {},
            "fail_on_orphans": True,
            "log_level": "info",
            "dry_run": False,
            "__meta__": {"cli_base": tmp_dir, "config_base": tmp_dir},
        }

        logger.debug("[SELFTEST] using temp dir: %s", tmp_dir)

        # dry run first, then for real
        for dry_run in (True, False):
            build_cfg["dry_run"] = dry_run
            run_build(build_cfg, workers=2)

        if _check_selftest_manifest(
            out / "resources" / "selftest" / "lib" / MANIFEST_NAME
        ):
            logger.info(
                "✅ Self-test passed: %s is working correctly.", PROGRAM_DISPLAY
            )
            return True
        return False

    except PermissionError:
        logger.error("Self-test failed: insufficient permissions.")  # noqa: TRY400
        return False
    except FileNotFoundError:
        logger.error("Self-test failed: missing file or directory.")  # noqa: TRY400
        return False
    except Exception:
        # anything else is a bug in the tool itself
        logger.exception(
            "Unexpected self-test failure. "
            "Please report this issue with the following traceback:"
        )
        return False

    finally:
        if tmp_dir and tmp_dir.exists():
            shutil.rmtree(tmp_dir, ignore_errors=True)
