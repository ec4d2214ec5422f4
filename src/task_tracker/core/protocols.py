"""Protocols (interfaces) consumed by the core layer.

These define the contracts that parsers and infrastructure adapters
must satisfy.  Core code depends ONLY on these protocols — never on
concrete implementations — preserving the dependency inversion
principle.
"""

from __future__ import annotations

from typing import Protocol

from task_tracker.core.models import EntryReport


class EntryReportParser(Protocol):
    """Contract for scraping a stopped time entry out of tool output.

    One implementation exists per known output format of the
    time-tracking client, so a change in that format only touches its
    parser.
    """

    def parse(self, text: str) -> EntryReport:
        """Extract whatever fields *text* contains.

        Implementations must never raise on unexpected input; fields
        that cannot be recognised are left as ``None``.
        """
        ...  # pragma: no cover
