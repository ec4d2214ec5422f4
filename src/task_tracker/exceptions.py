"""Custom exception hierarchy for task-tracker.

All exceptions that cross layer boundaries must inherit from
:class:`TaskTrackerError`.  Raw subprocess or OS exceptions must NEVER
propagate beyond the infrastructure layer — they must be caught and
re-raised as a typed subclass defined here.

Hierarchy
---------
TaskTrackerError
├── ParseError
│   ├── MissingTicketIdError
│   └── TicketIdNotNumericError
├── MissingDependencyError
├── ValidatorUnavailableError
├── TicketNotFoundError
├── ForwardedFailureError
├── UnparseableDescriptionError
├── ClipboardError
├── InitCancelledError
└── EnvironmentError
"""

from __future__ import annotations


class TaskTrackerError(Exception):
    """Base exception for all task-tracker errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Argument parsing ------------------------------------------------------

class ParseError(TaskTrackerError):
    """Raised when the command line is malformed.

    ``usage`` holds the help text of the offending subcommand so the
    error boundary can print it below the message.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        usage: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.usage: str | None = usage


class MissingTicketIdError(ParseError):
    """Raised when ``start`` is invoked without a ticket ID."""


class TicketIdNotNumericError(ParseError):
    """Raised when the ticket ID given to ``start`` is not purely numeric."""


# --- Environment / tooling -------------------------------------------------

class MissingDependencyError(TaskTrackerError):
    """Raised when a required external executable is missing or cannot run."""

    def __init__(
        self,
        name: str,
        *,
        hint: str | None = None,
        message: str | None = None,
    ) -> None:
        super().__init__(message or f"{name} is not installed or not on PATH.", hint=hint)
        self.name: str = name


class EnvironmentError(TaskTrackerError):
    """Raised when an optional Python UI dependency is not available."""


# --- Ticket validation -----------------------------------------------------

class ValidatorUnavailableError(TaskTrackerError):
    """Raised when the ticket-system client cannot be executed."""


class TicketNotFoundError(TaskTrackerError):
    """Raised when the ticket-system client reports no such ticket."""


# --- Time tracking ---------------------------------------------------------

class ForwardedFailureError(TaskTrackerError):
    """Raised when the wrapped tool exits non-zero.

    The CLI exits with :attr:`exit_code` unchanged.
    """

    def __init__(
        self,
        message: str,
        exit_code: int,
        *,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.exit_code: int = exit_code


class UnparseableDescriptionError(TaskTrackerError):
    """Raised when no ticket ID can be recovered from an entry description."""


class ClipboardError(TaskTrackerError):
    """Raised when the summary cannot be copied to the clipboard."""


# --- Interactive setup -----------------------------------------------------

class InitCancelledError(TaskTrackerError):
    """Raised when the user aborts the ``init`` prompts."""
