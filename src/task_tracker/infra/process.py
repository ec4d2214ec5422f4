"""Subprocess execution for the wrapped command-line tools.

Two modes are offered: *forwarded*, where the child inherits the
terminal and only its exit code comes back, and *captured*, where
stdout is collected for parsing while stderr still reaches the user.

Ctrl+C propagates to the child: :func:`subprocess.run` kills it before
re-raising ``KeyboardInterrupt``.
"""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from task_tracker.exceptions import MissingDependencyError
from task_tracker.infra.dependency_gate import install_hint

CommandTrace = Callable[[Sequence[str]], None]


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Exit code and captured stdout of a finished child process."""

    returncode: int
    stdout: str


def _launch_error(command: Sequence[str], exc: OSError) -> MissingDependencyError:
    """Map a failure to start *command* onto the domain error."""
    name = command[0]
    if isinstance(exc, FileNotFoundError):
        return MissingDependencyError(name, hint=install_hint(name))
    return MissingDependencyError(
        name,
        message=f"{name} could not be started: {exc.strerror or exc}",
        hint=f"Check that {name} is executable. {install_hint(name)}",
    )


class SubprocessRunner:
    """Run external commands, optionally reporting each argv to *trace*.

    Parameters
    ----------
    trace:
        Callback invoked with the argument vector right before each
        command is started.  Used by the CLI for debug output.
    """

    def __init__(self, trace: CommandTrace | None = None) -> None:
        self._trace: CommandTrace | None = trace

    def _announce(self, command: Sequence[str]) -> None:
        if self._trace is not None:
            self._trace(command)

    def run_forwarded(self, command: Sequence[str]) -> int:
        """Run *command* attached to the terminal and return its exit code."""
        self._announce(command)
        try:
            completed = subprocess.run(list(command), check=False)
        except OSError as exc:
            raise _launch_error(command, exc) from exc
        return completed.returncode

    def run_captured(self, command: Sequence[str]) -> CommandResult:
        """Run *command* collecting stdout as text."""
        self._announce(command)
        try:
            completed = subprocess.run(
                list(command),
                check=False,
                stdout=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as exc:
            raise _launch_error(command, exc) from exc
        return CommandResult(returncode=completed.returncode, stdout=completed.stdout or "")
