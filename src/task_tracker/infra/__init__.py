"""Infrastructure layer — external system integration.

This layer wraps all interaction with toggl-track, zendesk-cli, the
clipboard utilities and the operating system.  Every raw OS or
subprocess exception must be caught here and re-raised as a
:class:`~task_tracker.exceptions.TaskTrackerError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the CLI layer.
"""

from task_tracker.infra.clipboard import (
    copy_to_clipboard,
    detect_clipboard_command,
    installed_clipboard_commands,
)
from task_tracker.infra.config_paths import default_config_paths, xdg_config_file
from task_tracker.infra.dependency_gate import (
    DependencyStatus,
    detect_executable,
    ensure_dependencies,
)
from task_tracker.infra.process import CommandResult, SubprocessRunner
from task_tracker.infra.ticket_client import ValidationResult, ZendeskTicketClient
from task_tracker.infra.time_tracker import TogglTrackClient

__all__: list[str] = [
    "CommandResult",
    "DependencyStatus",
    "SubprocessRunner",
    "TogglTrackClient",
    "ValidationResult",
    "ZendeskTicketClient",
    "copy_to_clipboard",
    "default_config_paths",
    "detect_clipboard_command",
    "detect_executable",
    "ensure_dependencies",
    "installed_clipboard_commands",
    "xdg_config_file",
]
