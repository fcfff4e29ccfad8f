# tests/conftest.py
"""
Shared test setup for project.

- Tests marked ``debug`` are skipped unless selected with ``-k debug``.
- The process-wide runtime (log level, color) is restored after every test.
- Environment overrides for log level and workers never leak into tests.
"""

from collections.abc import Iterator

import pytest
from pytest import Config, Item as PytestItem

import resource_manifest.constants as mod_const
import resource_manifest.meta as mod_meta
import resource_manifest.runtime as mod_runtime
from tests.utils import make_trace

TRACE = make_trace("⚡️")


def pytest_report_header(config: Config) -> str:
    return f"Package under test: {mod_meta.PROGRAM_PACKAGE}"


@pytest.fixture(autouse=True)
def restore_runtime() -> Iterator[None]:
    """Undo log level / color changes made by the code under test."""
    saved = dict(mod_runtime.current_runtime)
    yield
    mod_runtime.current_runtime.update(saved)  # type: ignore[typeddict-item]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (mod_const.DEFAULT_ENV_LOG_LEVEL, mod_const.DEFAULT_ENV_WORKERS):
        monkeypatch.delenv(key, raising=False)
        monkeypatch.delenv(f"{mod_meta.PROGRAM_ENV}_{key}", raising=False)


def pytest_collection_modifyitems(
    config: Config,
    items: list[PytestItem],
) -> None:
    """Automatically skip debug tests unless asked for."""

    # --- debug filtering ---
    # detect if the user is filtering for debug tests
    keywords = config.getoption("-k") or ""
    running_debug = "debug" in keywords.lower()

    if running_debug:
        return  # user explicitly requested them, don't skip

    for item in items:
        if "debug" in item.keywords:
            TRACE("skipping debug test", item.nodeid)
            item.add_marker(
                pytest.mark.skip(reason="Skipped debug test (use -k debug to run)")
            )
