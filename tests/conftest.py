"""Shared pytest fixtures and configuration for the task-tracker test suite.

Guidelines
----------
* No real toggl-track, zendesk-cli or clipboard invocation in any test.
* Subprocesses are mocked at the infra boundary.
* Core tests must be pure — no side effects.
* Tests must not depend on the user's config files or PATH.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from task_tracker.cli.console import console


@pytest.fixture(autouse=True)
def _isolated_environment(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> Iterator[Path]:
    """Run every test from an empty directory with a throwaway HOME."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.delenv("TASK_TRACKER_DEBUG", raising=False)
    monkeypatch.chdir(work)
    yield work
    console.debug_enabled = False


@pytest.fixture()
def work_dir(_isolated_environment: Path) -> Path:
    return _isolated_environment


@pytest.fixture()
def home_dir(tmp_path: Path) -> Path:
    return tmp_path / "home"
