"""Time-entry commands: ``start``, ``stop`` and forwarded verbs.

Each function wires the infra clients to the core services for one
command and reports progress on the console.  Dependencies are checked
right before the tool that needs them is used, so ``start
--no-validate`` never requires zendesk-cli.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence

from task_tracker.cli import exit_codes
from task_tracker.cli.console import console
from task_tracker.core.models import Configuration, PartialSummary, StartCommand, StopCommand, Summary
from task_tracker.core.summary_service import SummaryService
from task_tracker.core.ticket_format import format_description
from task_tracker.exceptions import (
    ClipboardError,
    ForwardedFailureError,
    MissingDependencyError,
    TicketNotFoundError,
    ValidatorUnavailableError,
)
from task_tracker.infra.clipboard import copy_to_clipboard
from task_tracker.infra.dependency_gate import TICKET_CLIENT, TIME_TRACKER, ensure_dependencies
from task_tracker.infra.process import SubprocessRunner
from task_tracker.infra.ticket_client import ValidationResult, ZendeskTicketClient
from task_tracker.infra.time_tracker import TogglTrackClient

_SKIP_HINT = "Use --no-validate to start the entry without checking the ticket."


# ---------------------------------------------------------------------------
# start
# ---------------------------------------------------------------------------

def validate_ticket(ticket_id: str, runner: SubprocessRunner) -> None:
    """Confirm *ticket_id* exists in Zendesk.

    Raises
    ------
    ValidatorUnavailableError
        When zendesk-cli is missing or cannot be executed.
    TicketNotFoundError
        When zendesk-cli does not know the ticket.
    """
    try:
        ensure_dependencies({TICKET_CLIENT})
    except MissingDependencyError as exc:
        raise ValidatorUnavailableError(
            f"Cannot validate ticket {ticket_id}: {exc}",
            hint=f"{exc.hint}\n{_SKIP_HINT}",
        ) from exc

    result = ZendeskTicketClient(runner).validate(ticket_id)
    if result is ValidationResult.UNAVAILABLE:
        raise ValidatorUnavailableError(
            f"Cannot validate ticket {ticket_id}: {TICKET_CLIENT} could not be run.",
            hint=_SKIP_HINT,
        )
    if result is ValidationResult.NOT_FOUND:
        raise TicketNotFoundError(
            f"Ticket {ticket_id} was not found in Zendesk.",
            hint=f"Check the ticket ID. {_SKIP_HINT}",
        )
    console.debug(f"ticket {ticket_id} exists")


def start_session(
    command: StartCommand,
    config: Configuration,
    runner: SubprocessRunner,
) -> int:
    if command.validate:
        validate_ticket(command.ticket_id, runner)
    else:
        console.debug("ticket validation skipped (--no-validate)")

    description = format_description(command.ticket_id, command.subject, config)
    console.debug(f"description: {description}")

    ensure_dependencies({TIME_TRACKER})
    code = TogglTrackClient(runner).start(
        description,
        tags=command.tags,
        project=command.project,
    )
    if code != exit_codes.SUCCESS:
        raise ForwardedFailureError(f"{TIME_TRACKER} start failed (exit code {code}).", code)
    console.success(f"Started: {description}")
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# stop
# ---------------------------------------------------------------------------

def stop_session(command: StopCommand, runner: SubprocessRunner) -> str:
    """Stop the running entry and return toggl-track's report text.

    The report is echoed to stdout unchanged before it is parsed.
    """
    ensure_dependencies({TIME_TRACKER})
    result = TogglTrackClient(runner).stop(command.args)
    if result.stdout:
        sys.stdout.write(result.stdout)
        if not result.stdout.endswith("\n"):
            sys.stdout.write("\n")
    if result.returncode != exit_codes.SUCCESS:
        raise ForwardedFailureError(
            f"{TIME_TRACKER} stop failed (exit code {result.returncode}).",
            result.returncode,
        )
    return result.stdout


def print_summary(report: str, config: Configuration) -> Summary | PartialSummary:
    """Synthesize the summary of *report* and print it on stdout.

    A partial summary is printed too, after its warnings; the entry has
    already been stopped so this is never an error.
    """
    summary = SummaryService().synthesize(report, config)
    if isinstance(summary, PartialSummary):
        for warning in summary.warnings:
            console.warn(warning)
        console.warn("Could not build a complete summary; showing what was recovered.")
    print(summary.render())
    return summary


def copy_summary(summary: Summary) -> None:
    try:
        command = copy_to_clipboard(summary.render())
    except ClipboardError as exc:
        console.warn(f"Summary not copied: {exc}")
        if exc.hint:
            console.hint(exc.hint)
        return
    console.debug(f"copied with {command[0]}")
    console.success("Summary copied to clipboard.")


# ---------------------------------------------------------------------------
# Forwarded verbs
# ---------------------------------------------------------------------------

def forward_command(subcommand: str, args: Sequence[str], runner: SubprocessRunner) -> int:
    ensure_dependencies({TIME_TRACKER})
    return TogglTrackClient(runner).passthrough(subcommand, args)
