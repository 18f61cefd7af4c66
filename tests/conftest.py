from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

TESTS_DIR = Path(__file__).resolve().parent
ROOT = TESTS_DIR.parent
for extra in (TESTS_DIR, ROOT / "src"):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from fixtures import FakeDependencies, ProjectBuilder  # noqa: E402
from snipweave.core import workspace  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep log files and SNIPWEAVE_* settings local to each test."""

    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(tmp_path / "data-home"))
    for name in ("SNIPWEAVE_RELEASE", "SNIPWEAVE_LOG_LEVEL", "SNIPWEAVE_HTTP_TOKEN"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def project(tmp_path: Path) -> ProjectBuilder:
    """Provide a project directory bound to pytest's per-test tmp directory."""

    root = tmp_path / "project"
    root.mkdir()
    return ProjectBuilder(root)


@pytest.fixture
def fake_deps() -> FakeDependencies:
    return FakeDependencies()


@pytest.fixture(name="logger")
def _logger_fixture() -> logging.Logger:
    logger = logging.getLogger("snipweave.tests")
    logger.handlers.clear()
    logger.propagate = False
    logger.addHandler(logging.NullHandler())
    return logger
