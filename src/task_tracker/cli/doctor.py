"""``task-tracker doctor`` — environment diagnostics command.

Gathers system information and renders a Rich table summarising
whether the runtime environment satisfies task-tracker's requirements.

This module lives in the CLI layer — it may import from ``infra``
and ``core``, and it renders via Rich.  No business logic resides
here; it purely collects and displays diagnostic data.
"""

from __future__ import annotations

import platform
import sys

from task_tracker.cli import exit_codes
from task_tracker.cli.console import console
from task_tracker.core.models import ConfigResolution
from task_tracker.infra.clipboard import detect_clipboard_command
from task_tracker.infra.dependency_gate import (
    TICKET_CLIENT,
    TIME_TRACKER,
    DependencyStatus,
    detect_executable,
)
from task_tracker.version import __version__


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _executable_check(status_obj: DependencyStatus, *, required: bool) -> tuple[str, str, str]:
    """Return (label, value, status) for an external tool row."""
    if status_obj.found:
        path_str = str(status_obj.path) if status_obj.path else "found"
        return status_obj.name, path_str, "[green]OK[/green]"
    if required:
        return status_obj.name, "not found", "[red]FAIL[/red]"
    return status_obj.name, "not found", "[yellow]WARN[/yellow]"


def _clipboard_check() -> tuple[str, str, str]:
    command = detect_clipboard_command()
    if command is None:
        return "clipboard", "no utility found", "[yellow]WARN[/yellow]"
    return "clipboard", " ".join(command), "[green]OK[/green]"


def _config_check(resolution: ConfigResolution) -> tuple[str, str, str]:
    if resolution.source is None:
        return "config", "defaults (run 'task-tracker init')", "[yellow]WARN[/yellow]"
    return "config", str(resolution.source), "[green]OK[/green]"


def _os_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the OS row."""
    system_raw = platform.system()
    system_display = {
        "Windows": "Windows",
        "Linux": "Linux",
        "Darwin": "macOS",
    }.get(system_raw, system_raw)
    value = f"{system_display} {platform.release()} ({platform.machine()})"
    return "OS", value, "[green]OK[/green]"


def _task_tracker_version_check() -> tuple[str, str, str]:
    return "task-tracker", __version__, "[green]OK[/green]"


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    if "FAIL" in status:
        return "FAIL"
    if "WARN" in status:
        return "WARN"
    if "OK" in status:
        return "OK"
    return status


def _print_plain_doctor_table(checks: list[tuple[str, str, str]]) -> None:
    """Render doctor output without Rich."""
    print("\ntask-tracker doctor", file=sys.stderr)
    print("=" * 64, file=sys.stderr)
    print(f"{'Component':<14} {'Value':<40} {'Status':<8}", file=sys.stderr)
    print("-" * 64, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<14} {value:<40} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(resolution: ConfigResolution) -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all critical checks pass,
        :data:`exit_codes.GENERAL_ERROR` if a critical check fails.
    """
    tracker = detect_executable(TIME_TRACKER)
    ticket_client = detect_executable(TICKET_CLIENT)
    checks = [
        _task_tracker_version_check(),
        _python_version_check(),
        _executable_check(tracker, required=True),
        _executable_check(ticket_client, required=False),
        _clipboard_check(),
        _config_check(resolution),
        _os_check(),
    ]
    has_failure = any("FAIL" in status for _, _, status in checks)

    rich_available = True
    try:
        from rich.table import Table
    except ModuleNotFoundError:
        rich_available = False

    if rich_available:
        table = Table(
            title="task-tracker doctor",
            show_header=True,
            header_style="bold cyan",
            border_style="dim",
        )
        table.add_column("Component", style="bold", min_width=12)
        table.add_column("Value", min_width=20)
        table.add_column("Status", justify="center", min_width=8)
        for label, value, status in checks:
            table.add_row(label, value, status)
        console.print()
        console.print(table)
        console.print()
    else:
        _print_plain_doctor_table(checks)

    for status_obj in (tracker, ticket_client):
        if not status_obj.found and status_obj.install_command:
            console.info(f"Install {status_obj.name} with:")
            console.print(f"  {status_obj.install_command}")

    if has_failure:
        console.error("Some checks failed.")
        return exit_codes.GENERAL_ERROR
    console.success("All required checks passed.")
    return exit_codes.SUCCESS
