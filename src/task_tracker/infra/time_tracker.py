"""toggl-track backed session invoker.

This module is the **only** place that knows the command line of the
time-tracking client.  Argument vectors are built deterministically so
that they can be asserted on in tests.
"""

from __future__ import annotations

from collections.abc import Sequence

from task_tracker.infra.dependency_gate import TIME_TRACKER
from task_tracker.infra.process import CommandResult, SubprocessRunner


class TogglTrackClient:
    """Start, stop and forward commands to ``toggl-track``.

    Usage::

        client = TogglTrackClient(SubprocessRunner())
        code = client.start("[#12345] Fix login bug", tags="support")
    """

    def __init__(
        self,
        runner: SubprocessRunner,
        executable: str = TIME_TRACKER,
    ) -> None:
        self._runner: SubprocessRunner = runner
        self._executable: str = executable

    # ------------------------------------------------------------------
    # Command construction (pure)
    # ------------------------------------------------------------------

    def build_start_command(
        self,
        description: str,
        tags: str | None = None,
        project: str | None = None,
    ) -> list[str]:
        """Description first, then ``--tags`` and ``--project`` if given."""
        command = [self._executable, "start", description]
        if tags:
            command.extend(["--tags", tags])
        if project:
            command.extend(["--project", project])
        return command

    def build_command(self, subcommand: str, args: Sequence[str] = ()) -> list[str]:
        return [self._executable, subcommand, *args]

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def start(
        self,
        description: str,
        tags: str | None = None,
        project: str | None = None,
    ) -> int:
        return self._runner.run_forwarded(
            self.build_start_command(description, tags, project),
        )

    def stop(self, args: Sequence[str] = ()) -> CommandResult:
        """Stop the running entry, capturing the report for the summary."""
        return self._runner.run_captured(self.build_command("stop", args))

    def passthrough(self, subcommand: str, args: Sequence[str] = ()) -> int:
        """Forward *subcommand* verbatim; streams and exit code untouched."""
        return self._runner.run_forwarded(self.build_command(subcommand, args))
