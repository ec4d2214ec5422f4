"""Command-line classification and validation.

The first token decides the variant: global flags short-circuit,
known subcommands are validated with their own :mod:`argparse` parser,
and anything else becomes an
:class:`~task_tracker.core.models.OpaqueCommand` forwarded verbatim to
toggl-track.  Parsing never exits the process; every problem surfaces
as a :class:`~task_tracker.exceptions.ParseError`.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from task_tracker.core.models import (
    DoctorCommand,
    HelpRequest,
    InitCommand,
    Invocation,
    OpaqueCommand,
    StartCommand,
    StatusCommand,
    StopCommand,
    VersionRequest,
)
from task_tracker.core.ticket_format import is_ticket_id
from task_tracker.exceptions import (
    MissingTicketIdError,
    ParseError,
    TicketIdNotNumericError,
)

PROG = "task-tracker"

HELP_FLAGS: frozenset[str] = frozenset({"-h", "--help"})
VERSION_FLAGS: frozenset[str] = frozenset({"-v", "--version"})

TOP_LEVEL_HELP = f"""\
usage: {PROG} <command> [arguments]

Ticket-aware wrapper around toggl-track and zendesk-cli.

commands:
  init                 create a configuration file interactively
  start <ticket> [subject] [--no-validate] [--tags CSV] [--project ID]
                       start tracking time against a Zendesk ticket
  stop                 stop the running entry and print its summary
  status               show the running entry (forwarded to toggl-track)
  doctor               check that the required tools are installed
  <other>              any other command is forwarded to toggl-track

options:
  -h, --help           show this help message and exit
  -v, --version        show version information and exit

Run '{PROG} <command> --help' for help on a command.
Set TASK_TRACKER_DEBUG=1 to trace config and command construction.
"""


class _RaisingArgumentParser(argparse.ArgumentParser):
    """``ArgumentParser`` that raises :class:`ParseError` instead of exiting."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise ParseError(message, usage=self.format_help())


# ---------------------------------------------------------------------------
# Per-subcommand parsers
# ---------------------------------------------------------------------------

def _build_start_parser() -> _RaisingArgumentParser:
    parser = _RaisingArgumentParser(
        prog=f"{PROG} start",
        description="Start a toggl-track entry labelled with a Zendesk ticket.",
        add_help=False,
    )
    parser.add_argument("ticket_id", nargs="?", help="numeric Zendesk ticket ID")
    parser.add_argument(
        "subject",
        nargs="?",
        help="entry subject (defaults to DEFAULT_SUBJECT)",
    )
    parser.add_argument(
        "--no-validate",
        action="store_true",
        help="skip the zendesk-cli ticket lookup",
    )
    parser.add_argument("--tags", metavar="CSV", help="comma-separated toggl tags")
    parser.add_argument("--project", metavar="ID", help="toggl project ID")
    return parser


def _build_init_parser() -> _RaisingArgumentParser:
    parser = _RaisingArgumentParser(
        prog=f"{PROG} init",
        description="Create a configuration file by answering a few questions.",
        add_help=False,
    )
    parser.add_argument(
        "--global",
        dest="global_scope",
        action="store_true",
        help="write the per-user XDG config instead of ./.tasktrackerrc",
    )
    return parser


def _build_forwarding_parser(name: str, description: str) -> _RaisingArgumentParser:
    """Help-only parser for subcommands whose arguments pass through."""
    parser = _RaisingArgumentParser(
        prog=f"{PROG} {name}",
        description=description,
        add_help=False,
    )
    parser.add_argument(
        "args",
        nargs=argparse.REMAINDER,
        help="extra arguments forwarded to toggl-track",
    )
    return parser


def _build_doctor_parser() -> _RaisingArgumentParser:
    return _RaisingArgumentParser(
        prog=f"{PROG} doctor",
        description="Check toggl-track, zendesk-cli, clipboard and config.",
        add_help=False,
    )


_PARSER_FACTORIES = {
    "init": _build_init_parser,
    "start": _build_start_parser,
    "stop": lambda: _build_forwarding_parser(
        "stop",
        "Stop the running entry and print a summary (copied to the clipboard "
        "when COPY_TO_CLIPBOARD is enabled).",
    ),
    "status": lambda: _build_forwarding_parser(
        "status", "Show the running toggl-track entry.",
    ),
    "doctor": _build_doctor_parser,
}

KNOWN_SUBCOMMANDS: frozenset[str] = frozenset(_PARSER_FACTORIES)


def usage_for(topic: str | None) -> str:
    """Return the help text for *topic*, or the global help."""
    if topic is None or topic not in _PARSER_FACTORIES:
        return TOP_LEVEL_HELP
    return _PARSER_FACTORIES[topic]().format_help()


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def _parse_start(rest: Sequence[str]) -> StartCommand:
    parser = _build_start_parser()
    args = parser.parse_intermixed_args(list(rest))
    usage = parser.format_help()

    if args.ticket_id is None:
        raise MissingTicketIdError(
            "A ticket ID is required.",
            hint=f"Usage: {PROG} start <ticketId> [subject]",
            usage=usage,
        )
    if not is_ticket_id(args.ticket_id):
        raise TicketIdNotNumericError(
            f"Ticket ID must be numeric, got {args.ticket_id!r}.",
            usage=usage,
        )
    if args.subject is not None and args.subject.startswith("-"):
        raise ParseError(f"unrecognized arguments: {args.subject}", usage=usage)

    return StartCommand(
        ticket_id=args.ticket_id,
        subject=args.subject,
        validate=not args.no_validate,
        tags=args.tags,
        project=args.project,
    )


def parse_arguments(argv: Sequence[str]) -> Invocation:
    """Classify *argv* (without the program name) into an invocation.

    Raises
    ------
    ParseError
        For malformed arguments to a known subcommand; the more specific
        :class:`MissingTicketIdError` and :class:`TicketIdNotNumericError`
        for ``start``.
    """
    if not argv:
        return HelpRequest()

    head, rest = argv[0], tuple(argv[1:])
    if head in HELP_FLAGS:
        return HelpRequest()
    if head in VERSION_FLAGS:
        return VersionRequest()
    if head.startswith("-"):
        raise ParseError(f"Unknown option: {head}", usage=TOP_LEVEL_HELP)

    if head not in KNOWN_SUBCOMMANDS:
        return OpaqueCommand(subcommand=head, args=rest)

    if any(token in HELP_FLAGS for token in rest):
        return HelpRequest(topic=head)

    if head == "start":
        return _parse_start(rest)
    if head == "init":
        args = _build_init_parser().parse_args(list(rest))
        return InitCommand(global_scope=args.global_scope)
    if head == "doctor":
        _build_doctor_parser().parse_args(list(rest))
        return DoctorCommand()
    if head == "stop":
        return StopCommand(args=rest)
    return StatusCommand(args=rest)
