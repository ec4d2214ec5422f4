"""Core / service layer — pure business logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No subprocesses and no network I/O; reading config candidates is
  the only filesystem access.
* No imports from ``cli`` or ``infra``.
* All functions must be fully typed and deterministic.
"""

from task_tracker.core.config import LazyConfig, parse_config_text, resolve_config
from task_tracker.core.models import (
    ConfigResolution,
    Configuration,
    EntryReport,
    Invocation,
    PartialSummary,
    Summary,
)
from task_tracker.core.protocols import EntryReportParser
from task_tracker.core.report_parsers import JsonReportParser, TextReportParser
from task_tracker.core.summary_service import SummaryService
from task_tracker.core.ticket_format import (
    build_ticket_url,
    format_description,
    parse_description,
)

__all__: list[str] = [
    "ConfigResolution",
    "Configuration",
    "EntryReport",
    "EntryReportParser",
    "Invocation",
    "JsonReportParser",
    "LazyConfig",
    "PartialSummary",
    "Summary",
    "SummaryService",
    "TextReportParser",
    "build_ticket_url",
    "format_description",
    "parse_config_text",
    "parse_description",
    "resolve_config",
]
