"""Infrastructure: best-effort clipboard writes via OS utilities.

Every clipboard utility installed for the current platform is tried in
order until one succeeds; ``wl-copy`` may be present on an X11 session
where only ``xclip`` works.  A missing utility or a copy that fails
everywhere raises :class:`~task_tracker.exceptions.ClipboardError`,
which the CLI reports as a warning only.
"""

from __future__ import annotations

import platform
import shutil
import subprocess

from task_tracker.exceptions import ClipboardError


# ---------------------------------------------------------------------------
# Platform-specific utilities
# ---------------------------------------------------------------------------

def _platform_clipboard_commands() -> tuple[tuple[str, ...], ...]:
    """Return candidate clipboard commands for the current OS, best first."""
    system = platform.system().lower()
    if system == "darwin":
        return (("pbcopy",),)
    if system == "windows":
        return (("clip",),)
    return (
        ("wl-copy",),
        ("xclip", "-selection", "clipboard"),
        ("xsel", "--clipboard", "--input"),
    )


def installed_clipboard_commands() -> list[tuple[str, ...]]:
    """Return the candidate commands whose executable is on PATH."""
    return [
        command
        for command in _platform_clipboard_commands()
        if shutil.which(command[0]) is not None
    ]


def detect_clipboard_command() -> tuple[str, ...] | None:
    """Return the first installed clipboard command, or ``None``."""
    installed = installed_clipboard_commands()
    return installed[0] if installed else None


def _run_clipboard_command(command: tuple[str, ...], text: str) -> None:
    try:
        subprocess.run(
            list(command),
            input=text,
            text=True,
            check=True,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        raise ClipboardError(f"{command[0]} failed: {exc}") from exc


def copy_to_clipboard(text: str) -> tuple[str, ...]:
    """Write *text* to the system clipboard.

    Returns the command that was used.

    Raises
    ------
    ClipboardError
        When no utility is installed or every installed utility fails.
    """
    installed = installed_clipboard_commands()
    if not installed:
        names = ", ".join(cmd[0] for cmd in _platform_clipboard_commands())
        raise ClipboardError(
            "No clipboard utility found.",
            hint=f"Install one of: {names}",
        )

    failures: list[str] = []
    for command in installed:
        try:
            _run_clipboard_command(command, text)
        except ClipboardError as exc:
            failures.append(str(exc))
            continue
        return command
    raise ClipboardError("; ".join(failures))
