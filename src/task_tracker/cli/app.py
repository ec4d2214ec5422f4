"""CLI application entry point and command routing for task-tracker.

This module is the **sole error boundary** for the entire application.
It catches :class:`~task_tracker.exceptions.TaskTrackerError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the core/service
  and infrastructure layers.
* This is the only module that reads the process environment and the
  working directory; both are injected into the layers below.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import os
import shlex
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path

from task_tracker.cli import exit_codes
from task_tracker.cli.arguments import PROG, parse_arguments, usage_for
from task_tracker.cli.console import console
from task_tracker.core.config import LazyConfig
from task_tracker.core.models import (
    TRUTHY_VALUES,
    Configuration,
    DoctorCommand,
    HelpRequest,
    InitCommand,
    Invocation,
    OpaqueCommand,
    StartCommand,
    StatusCommand,
    StopCommand,
    Summary,
    VersionRequest,
)
from task_tracker.exceptions import (
    ForwardedFailureError,
    ParseError,
    TaskTrackerError,
)
from task_tracker.infra.config_paths import RC_FILENAME, default_config_paths, xdg_config_file
from task_tracker.infra.process import SubprocessRunner
from task_tracker.version import __version__

DEBUG_ENV_VAR = "TASK_TRACKER_DEBUG"


# ---------------------------------------------------------------------------
# Environment (read here only)
# ---------------------------------------------------------------------------

def _debug_enabled(environ: Mapping[str, str]) -> bool:
    return environ.get(DEBUG_ENV_VAR, "").strip().lower() in TRUTHY_VALUES


def _config_candidates(environ: Mapping[str, str]) -> list[Path]:
    return default_config_paths(Path.cwd(), Path.home(), environ.get("XDG_CONFIG_HOME"))


def _trace_command(command: Sequence[str]) -> None:
    console.debug(f"running: {shlex.join(command)}")


def _load_config(lazy: LazyConfig) -> Configuration:
    """Resolve configuration once, reporting where it came from.

    A missing config file is only an advisory; defaults are used.
    """
    first_load = not lazy.loaded
    resolution = lazy.get()
    if first_load:
        for warning in resolution.warnings:
            console.warn(warning)
        if resolution.source is None:
            searched = ", ".join(str(path) for path in lazy.candidates)
            console.debug(f"no config file found (searched {searched})")
            console.warn(
                f"No configuration file found; using defaults. "
                f"Run '{PROG} init' to create one."
            )
        else:
            console.debug(f"using config file {resolution.source}")
    return resolution.config


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_help(request: HelpRequest) -> int:
    print(usage_for(request.topic), end="")
    return exit_codes.SUCCESS


def _handle_version() -> int:
    print(PROG)
    print(f"Version: {__version__}")
    return exit_codes.SUCCESS


def _handle_init(command: InitCommand, lazy: LazyConfig) -> int:
    """Dispatch the interactive ``init`` flow."""
    from task_tracker.cli.init_wizard import run_init

    if command.global_scope:
        target = xdg_config_file(Path.home(), os.environ.get("XDG_CONFIG_HOME"))
    else:
        target = Path.cwd() / RC_FILENAME
    run_init(target, lazy.get().config)
    return exit_codes.SUCCESS


def _handle_start(command: StartCommand, lazy: LazyConfig, runner: SubprocessRunner) -> int:
    """Validate the ticket, then start a labelled toggl-track entry.

    Flow:
    1. Look the ticket up with zendesk-cli unless ``--no-validate``.
    2. Compose the ``[PREFIX<id>SUFFIX] subject`` description.
    3. Make sure toggl-track is installed and start the entry.
    """
    from task_tracker.cli.session import start_session

    config = _load_config(lazy)
    return start_session(command, config, runner)


def _handle_stop(command: StopCommand, lazy: LazyConfig, runner: SubprocessRunner) -> int:
    """Stop the running entry and print (and maybe copy) its summary."""
    from task_tracker.cli.session import print_summary, stop_session

    report = stop_session(command, runner)
    config = _load_config(lazy)
    summary = print_summary(report, config)
    if isinstance(summary, Summary) and config.clipboard_enabled:
        from task_tracker.cli.session import copy_summary

        copy_summary(summary)
    return exit_codes.SUCCESS


def _handle_forward(subcommand: str, args: Sequence[str], runner: SubprocessRunner) -> int:
    """Forward a command verbatim; toggl-track's exit code is returned as is."""
    from task_tracker.cli.session import forward_command

    return forward_command(subcommand, args, runner)


def _handle_doctor(lazy: LazyConfig) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from task_tracker.cli.doctor import run_doctor

    return run_doctor(lazy.get())


def _dispatch(invocation: Invocation, lazy: LazyConfig, runner: SubprocessRunner) -> int:
    if isinstance(invocation, HelpRequest):
        return _handle_help(invocation)
    if isinstance(invocation, VersionRequest):
        return _handle_version()
    if isinstance(invocation, InitCommand):
        return _handle_init(invocation, lazy)
    if isinstance(invocation, StartCommand):
        return _handle_start(invocation, lazy, runner)
    if isinstance(invocation, StopCommand):
        return _handle_stop(invocation, lazy, runner)
    if isinstance(invocation, StatusCommand):
        return _handle_forward("status", invocation.args, runner)
    if isinstance(invocation, DoctorCommand):
        return _handle_doctor(lazy)
    if isinstance(invocation, OpaqueCommand):
        return _handle_forward(invocation.subcommand, invocation.args, runner)
    raise TypeError(f"Unhandled invocation: {invocation!r}")


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the task-tracker CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    args = sys.argv[1:] if argv is None else argv
    console.debug_enabled = _debug_enabled(os.environ)

    invocation = parse_arguments(args)
    console.debug(f"invocation: {invocation!r}")

    lazy = LazyConfig(_config_candidates(os.environ))
    runner = SubprocessRunner(trace=_trace_command)
    return _dispatch(invocation, lazy, runner)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli(argv: list[str] | None = None) -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main(argv)
        sys.exit(code)
    except ForwardedFailureError as exc:
        console.error(str(exc))
        if exc.hint:
            console.hint(exc.hint)
        sys.exit(exc.exit_code)
    except ParseError as exc:
        console.error(str(exc))
        if exc.hint:
            console.hint(exc.hint)
        if exc.usage:
            print(exc.usage, file=sys.stderr, end="")
        sys.exit(exit_codes.GENERAL_ERROR)
    except TaskTrackerError as exc:
        console.error(str(exc))
        if exc.hint:
            console.hint(exc.hint)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.error(
            "Unexpected error. Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
