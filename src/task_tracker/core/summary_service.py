"""Core summary service — turn a stop report into a pasteable line.

Given the raw output of the time-tracking client's stop operation, the
service extracts the entry via an
:class:`~task_tracker.core.protocols.EntryReportParser`, computes the
duration and end time, localises the timestamp and rebuilds the ticket
URL from the description.

Guarantees
----------
* Pure orchestration — no I/O, no ``print()``.
* Never raises on a bad report: the time entry is already closed, so
  missing fields degrade to a :class:`PartialSummary` with warnings.
"""

from __future__ import annotations

from datetime import datetime, timedelta, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from task_tracker.core.models import Configuration, EntryReport, PartialSummary, Summary
from task_tracker.core.protocols import EntryReportParser
from task_tracker.core.report_parsers import detect_report_parser, format_duration
from task_tracker.core.ticket_format import build_ticket_url, parse_description
from task_tracker.exceptions import UnparseableDescriptionError

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def load_timezone(name: str) -> tzinfo | None:
    """Return the zone called *name*, or ``None`` if it is unknown."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return None


def localize(moment: datetime, zone: tzinfo) -> datetime:
    """Express *moment* in *zone*.

    Naive timestamps are taken to be wall-clock time in *zone* already;
    aware ones are converted.
    """
    if moment.tzinfo is None:
        return moment.replace(tzinfo=zone)
    return moment.astimezone(zone)


class SummaryService:
    """Stateless service that synthesizes the stop summary.

    Parameters
    ----------
    parser:
        Parser for the report format.  When ``None`` the parser is
        chosen from the shape of each report.
    """

    def __init__(self, parser: EntryReportParser | None = None) -> None:
        self._parser: EntryReportParser | None = parser

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def synthesize(
        self,
        report_text: str,
        config: Configuration,
    ) -> Summary | PartialSummary:
        parser = self._parser or detect_report_parser(report_text)
        report = parser.parse(report_text)
        warnings: list[str] = []

        minutes = self._duration_minutes(report)
        duration = format_duration(minutes) if minutes is not None else None
        if duration is None:
            warnings.append("Could not determine the entry duration.")

        timestamp = self._end_timestamp(report, minutes, config, warnings)

        ticket_url: str | None = None
        subject: str | None = None
        if report.description is None:
            warnings.append("Could not find the entry description.")
        else:
            try:
                ticket_id, subject = parse_description(report.description, config)
            except UnparseableDescriptionError as exc:
                warnings.append(str(exc))
                subject = report.description
            else:
                ticket_url = build_ticket_url(config.zendesk_base_url, ticket_id)

        if duration and timestamp and ticket_url and subject is not None:
            return Summary(
                duration=duration,
                timestamp=timestamp,
                support_name=config.support_name,
                ticket_url=ticket_url,
                subject=subject,
            )
        return PartialSummary(
            support_name=config.support_name,
            duration=duration,
            timestamp=timestamp,
            ticket_url=ticket_url,
            subject=subject,
            warnings=tuple(warnings),
        )

    # ------------------------------------------------------------------
    # Derived fields (pure)
    # ------------------------------------------------------------------

    @staticmethod
    def _duration_minutes(report: EntryReport) -> int | None:
        if report.duration_minutes is not None:
            return max(report.duration_minutes, 0)
        if report.start is None or report.stop is None:
            return None
        try:
            elapsed = report.stop - report.start
        except TypeError:
            # One side naive, the other aware.
            return None
        return max(int(elapsed.total_seconds() // 60), 0)

    @staticmethod
    def _end_timestamp(
        report: EntryReport,
        minutes: int | None,
        config: Configuration,
        warnings: list[str],
    ) -> str | None:
        end = report.stop
        if end is None and report.start is not None and minutes is not None:
            end = report.start + timedelta(minutes=minutes)
        if end is None:
            warnings.append("Could not determine when the entry ended.")
            return None

        zone = load_timezone(config.timezone)
        if zone is None:
            warnings.append(f"Unknown timezone {config.timezone!r}.")
            return None
        return localize(end, zone).strftime(TIMESTAMP_FORMAT)
