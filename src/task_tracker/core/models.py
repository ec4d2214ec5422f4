"""Domain models for task-tracker.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access and trivial derived properties.  They
carry zero I/O, zero dependencies on external packages, and must remain
pure across the entire lifecycle.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Union


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

TRUTHY_VALUES: frozenset[str] = frozenset({"1", "true", "yes", "y", "on"})


@dataclass(frozen=True, slots=True)
class Configuration:
    """Resolved user configuration.

    Field names mirror the ``KEY=value`` names of the config file in
    lower case.  Every field has a built-in default so that a missing
    config file never blocks execution.
    """

    ticket_prefix: str = "#"
    ticket_suffix: str = ""
    default_subject: str = "Ticket Update"
    support_name: str = "Support"
    zendesk_base_url: str = "https://your-company.zendesk.com"
    timezone: str = "UTC"
    copy_to_clipboard: str = "true"
    """Boolean-like string; see :attr:`clipboard_enabled`."""

    @property
    def clipboard_enabled(self) -> bool:
        return self.copy_to_clipboard.strip().lower() in TRUTHY_VALUES


CONFIG_KEYS: tuple[str, ...] = (
    "TICKET_PREFIX",
    "TICKET_SUFFIX",
    "DEFAULT_SUBJECT",
    "SUPPORT_NAME",
    "ZENDESK_BASE_URL",
    "TIMEZONE",
    "COPY_TO_CLIPBOARD",
)
"""Recognised config-file keys, in the order ``init`` writes them."""


@dataclass(frozen=True, slots=True)
class ConfigResolution:
    """Outcome of searching the config candidates."""

    config: Configuration
    source: Path | None
    """File the values came from, or ``None`` when defaults were used."""

    warnings: tuple[str, ...] = ()
    """Non-fatal problems met while searching (e.g. unreadable files)."""


# ---------------------------------------------------------------------------
# Parsed command line
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class HelpRequest:
    topic: str | None = None
    """Subcommand whose usage was requested; ``None`` for global help."""


@dataclass(frozen=True, slots=True)
class VersionRequest:
    pass


@dataclass(frozen=True, slots=True)
class InitCommand:
    global_scope: bool = False
    """Write the XDG config file instead of ``./.tasktrackerrc``."""


@dataclass(frozen=True, slots=True)
class StartCommand:
    ticket_id: str
    subject: str | None = None
    validate: bool = True
    tags: str | None = None
    project: str | None = None


@dataclass(frozen=True, slots=True)
class StopCommand:
    args: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class StatusCommand:
    args: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class DoctorCommand:
    pass


@dataclass(frozen=True, slots=True)
class OpaqueCommand:
    """A subcommand task-tracker does not interpret.

    It is forwarded to the time-tracking client verbatim.
    """

    subcommand: str
    args: tuple[str, ...] = ()


Invocation = Union[
    HelpRequest,
    VersionRequest,
    InitCommand,
    StartCommand,
    StopCommand,
    StatusCommand,
    DoctorCommand,
    OpaqueCommand,
]


# ---------------------------------------------------------------------------
# Stopped time entry
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class EntryReport:
    """Fields scraped from the time-tracking client's stop report.

    Any field may be ``None`` when the report did not contain it in a
    recognisable form.
    """

    description: str | None = None
    start: datetime | None = None
    stop: datetime | None = None
    duration_minutes: int | None = None


@dataclass(frozen=True, slots=True)
class Summary:
    """Complete summary of a stopped time entry."""

    duration: str
    """Rendered as ``"{H}h {M}m"``."""

    timestamp: str
    """Entry end time in the configured timezone, ``YYYY-MM-DD HH:MM:SS``."""

    support_name: str
    ticket_url: str
    subject: str

    def render(self) -> str:
        return (
            f"[{self.duration} - {self.timestamp}, {self.support_name}]"
            f" - {self.ticket_url} - {self.subject}"
        )


@dataclass(frozen=True, slots=True)
class PartialSummary:
    """Whatever could be recovered from an unparseable stop report."""

    support_name: str
    duration: str | None = None
    timestamp: str | None = None
    ticket_url: str | None = None
    subject: str | None = None
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def render(self) -> str:
        """Render like :meth:`Summary.render`, with ``?`` for gaps."""
        return (
            f"[{self.duration or '?'} - {self.timestamp or '?'}, {self.support_name}]"
            f" - {self.ticket_url or '?'} - {self.subject or '?'}"
        )
