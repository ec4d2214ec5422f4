"""Infrastructure: detection of the wrapped command-line tools.

This module is responsible for locating the external executables
task-tracker drives (``toggl-track``, ``zendesk-cli``) on the system
PATH and providing installation guidance when one is missing.

Rules
-----
* Detection via :func:`shutil.which` only — no subprocess.
* Nothing is cached: PATH may change between invocations.
* No automatic installation.
* No ``print()`` — callers handle user-facing output.
"""

from __future__ import annotations

import shutil
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from task_tracker.exceptions import MissingDependencyError

TIME_TRACKER: str = "toggl-track"
TICKET_CLIENT: str = "zendesk-cli"

_INSTALL_COMMANDS: dict[str, str] = {
    TIME_TRACKER: (
        "curl -fsSL https://raw.githubusercontent.com/jeromecoloma/"
        "toggl-track/main/install.sh | bash"
    ),
    TICKET_CLIENT: (
        "curl -fsSL https://raw.githubusercontent.com/jeromecoloma/"
        "zendesk-cli/main/install.sh | bash"
    ),
}


# ---------------------------------------------------------------------------
# Detection result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class DependencyStatus:
    """Result of probing PATH for one executable.

    Attributes
    ----------
    name : str
        Executable name that was looked up.
    found : bool
        Whether the executable was located on PATH.
    path : Path | None
        Absolute path to the executable, or ``None``.
    install_command : str | None
        Suggested shell command for installing it, when one is known.
    """

    name: str
    found: bool
    path: Path | None
    install_command: str | None


# ---------------------------------------------------------------------------
# Detection logic
# ---------------------------------------------------------------------------

def detect_executable(name: str) -> DependencyStatus:
    """Probe PATH for *name*.

    Returns a :class:`DependencyStatus` regardless of whether the
    executable is present — the caller decides whether to abort or
    merely warn.
    """
    result = shutil.which(name)
    return DependencyStatus(
        name=name,
        found=result is not None,
        path=Path(result).resolve() if result is not None else None,
        install_command=_INSTALL_COMMANDS.get(name),
    )


def install_hint(name: str) -> str:
    """Return remediation text for a missing executable."""
    command = _INSTALL_COMMANDS.get(name)
    if command is None:
        return f"Install {name} and make sure it is on your PATH."
    return f"Install {name} with:\n  {command}"


def ensure_dependencies(names: Iterable[str]) -> dict[str, Path]:
    """Locate every executable in *names* or raise for the first missing one.

    Names are checked in sorted order so the reported dependency is
    deterministic.

    Raises
    ------
    MissingDependencyError
        Naming the missing executable, with an install hint.
    """
    located: dict[str, Path] = {}
    for name in sorted(set(names)):
        status = detect_executable(name)
        if not status.found or status.path is None:
            raise MissingDependencyError(name, hint=install_hint(name))
        located[name] = status.path
    return located
