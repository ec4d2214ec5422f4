"""Candidate locations of the task-tracker config file.

The caller passes in the working directory, the home directory and the
XDG config home so that nothing here reads ambient state.
"""

from __future__ import annotations

from pathlib import Path

APP_NAME: str = "task-tracker"
RC_FILENAME: str = ".tasktrackerrc"
XDG_FILENAME: str = "config"


def xdg_config_file(home: Path, xdg_config_home: str | None = None) -> Path:
    """Return ``$XDG_CONFIG_HOME/task-tracker/config`` (``~/.config`` fallback)."""
    base = Path(xdg_config_home) if xdg_config_home else home / ".config"
    return base / APP_NAME / XDG_FILENAME


def default_config_paths(
    cwd: Path,
    home: Path,
    xdg_config_home: str | None = None,
) -> list[Path]:
    """Return config candidates in search order; the first found wins."""
    return [
        cwd / RC_FILENAME,
        home / RC_FILENAME,
        xdg_config_file(home, xdg_config_home),
    ]
