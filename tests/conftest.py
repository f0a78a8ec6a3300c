"""Shared test fixtures for plandoc.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner, Result

from plandoc.cli.main import cli


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "plandoc"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def project(tmp_path: Path) -> Path:
    """Return a project root holding an empty ``.planning`` directory."""
    (tmp_path / ".planning").mkdir()
    return tmp_path


@pytest.fixture()
def write_planning(project: Path) -> Callable[[str, str], Path]:
    """Return a helper writing ``.planning/<name>`` and returning its path."""

    def _write(name: str, content: str) -> Path:
        path = project / ".planning" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def invoke(project: Path) -> Callable[..., Result]:
    """Return a helper running the CLI with ``--cwd`` set to ``project``."""
    runner = CliRunner()

    def _invoke(*args: str) -> Result:
        return runner.invoke(cli, ["--cwd", str(project), *args])

    return _invoke


@pytest.fixture()
def invoke_json(invoke: Callable[..., Result]) -> Callable[..., Any]:
    """Return a helper running the CLI and decoding its JSON output."""

    def _invoke_json(*args: str) -> Any:
        result = invoke(*args)
        assert result.exit_code == 0, result.output
        return json.loads(result.stdout)

    return _invoke_json
