"""Entry-report parsers — scrape a stopped entry out of toggl-track output.

The stop report of the time-tracking client is meant for humans and is
not guaranteed to be byte-stable, so every parser here is tolerant: a
field that cannot be recognised is left as ``None`` instead of raising.
Each known output format gets its own parser; the summary service only
depends on the :class:`~task_tracker.core.protocols.EntryReportParser`
protocol.

Recognised shapes
-----------------
* Text, one labelled field per line, optionally decorated with emoji
  or ANSI colours::

      ⏹️  Stopped: [#12345] Fix login bug
      Start: 2024-01-15T12:00:00Z
      Duration: 2h 30m

* JSON, a Toggl API time-entry object (optionally wrapped in ``data``)
  with ``description``, ``start``, ``stop`` and ``duration`` in seconds.
"""

from __future__ import annotations

import json
import re
from datetime import datetime
from typing import Any

from task_tracker.core.models import EntryReport
from task_tracker.core.protocols import EntryReportParser


# ---------------------------------------------------------------------------
# Field parsers (pure)
# ---------------------------------------------------------------------------

_TIMESTAMP = re.compile(
    r"(?P<date>\d{4}-\d{2}-\d{2})[T ](?P<time>\d{2}:\d{2}(?::\d{2})?)"
    r"(?:\.\d+)?\s*(?P<tz>Z|[+-]\d{2}:?\d{2})?",
)

_CLOCK = re.compile(r"^(?P<h>\d+):(?P<m>\d{2})(?::(?P<s>\d{2}))?$")

_UNIT_TOKEN = re.compile(
    r"(?P<amount>\d+(?:\.\d+)?)\s*"
    r"(?P<unit>hours?|hrs?|h|minutes?|mins?|m|seconds?|secs?|s)(?![a-z])",
    re.IGNORECASE,
)

_UNIT_SECONDS: dict[str, int] = {"h": 3600, "m": 60, "s": 1}


def parse_timestamp(value: str) -> datetime | None:
    """Return the first ISO-8601-like timestamp found in *value*.

    ``Z`` and ``+HHMM`` offsets are accepted; fractional seconds are
    dropped.  Timestamps without an offset come back naive.
    """
    match = _TIMESTAMP.search(value)
    if match is None:
        return None
    text = f"{match.group('date')}T{match.group('time')}"
    tz = match.group("tz")
    if tz == "Z":
        text += "+00:00"
    elif tz:
        text += tz if ":" in tz else f"{tz[:3]}:{tz[3:]}"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def parse_duration_minutes(value: str) -> int | None:
    """Convert a duration string to whole minutes.

    Accepts ``2h 30m``, ``2h 30m 15s``, ``150 minutes``, ``02:30:00`` and
    ``2:30``.  A bare number is ambiguous and yields ``None``.
    """
    text = value.strip()
    clock = _CLOCK.match(text)
    if clock is not None:
        return int(clock.group("h")) * 60 + int(clock.group("m"))

    seconds = 0.0
    found = False
    for token in _UNIT_TOKEN.finditer(text):
        found = True
        unit = token.group("unit").lower()[0]
        seconds += float(token.group("amount")) * _UNIT_SECONDS[unit]
    if not found:
        return None
    return int(seconds // 60)


def format_duration(minutes: int) -> str:
    """Render *minutes* as ``"{H}h {M}m"``; negative spans count as zero."""
    hours, mins = divmod(max(minutes, 0), 60)
    return f"{hours}h {mins}m"


# ---------------------------------------------------------------------------
# Text report
# ---------------------------------------------------------------------------

_LABELLED = re.compile(
    r"^[^\w\[]*(?P<label>description|entry|task|stopped|stop(?:ped)?\s+at|"
    r"end(?:ed)?(?:\s+at)?|stop|start(?:ed)?(?:\s+at)?|duration|elapsed|total)"
    r"\s*[:=]\s*(?P<value>.+?)\s*$",
    re.IGNORECASE,
)

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")

_TAGGED_LINE = re.compile(r"\[[^\]]*\d[^\]]*\]\s*\S.*$")

_DURATION_ANYWHERE = re.compile(
    r"\b\d+\s*h(?:ours?|rs?)?\s*\d+\s*m(?:in(?:utes?|s)?)?(?![a-z])",
    re.IGNORECASE,
)


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    return value


class TextReportParser:
    """Parser for toggl-track's human-oriented stop output."""

    def parse(self, text: str) -> EntryReport:
        text = _ANSI_ESCAPE.sub("", text)
        description: str | None = None
        start: datetime | None = None
        stop: datetime | None = None
        duration: int | None = None

        for line in text.splitlines():
            match = _LABELLED.match(line)
            if match is None:
                continue
            label = " ".join(match.group("label").lower().split())
            value = match.group("value")

            if label in {"description", "entry", "task"}:
                description = description or _unquote(value)
            elif label.startswith("start"):
                start = start or parse_timestamp(value)
            elif label in {"duration", "elapsed", "total"}:
                if duration is None:
                    duration = parse_duration_minutes(value)
            else:
                # "Stopped: <description>" or "Stopped at: <timestamp>".
                stamp = parse_timestamp(value)
                if stamp is not None:
                    stop = stop or stamp
                elif label == "stopped":
                    description = description or _unquote(value)

        if description is None:
            description = self._find_tagged_line(text)
        if start is None and stop is None:
            start = parse_timestamp(text)
        if duration is None:
            loose = _DURATION_ANYWHERE.search(text)
            if loose is not None:
                duration = parse_duration_minutes(loose.group(0))

        return EntryReport(
            description=description,
            start=start,
            stop=stop,
            duration_minutes=duration,
        )

    @staticmethod
    def _find_tagged_line(text: str) -> str | None:
        for line in text.splitlines():
            match = _TAGGED_LINE.search(line)
            if match is not None:
                return _unquote(match.group(0))
        return None


# ---------------------------------------------------------------------------
# JSON report
# ---------------------------------------------------------------------------

class JsonReportParser:
    """Parser for a Toggl API time-entry object printed as JSON."""

    def parse(self, text: str) -> EntryReport:
        try:
            payload: Any = json.loads(text)
        except ValueError:
            return EntryReport()
        if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
            payload = payload["data"]
        if not isinstance(payload, dict):
            return EntryReport()

        description = payload.get("description")
        raw_duration = payload.get("duration")
        duration: int | None = None
        # Running entries report a negative duration.
        if isinstance(raw_duration, (int, float)) and raw_duration >= 0:
            duration = int(raw_duration // 60)

        return EntryReport(
            description=description if isinstance(description, str) else None,
            start=self._stamp(payload.get("start")),
            stop=self._stamp(payload.get("stop")),
            duration_minutes=duration,
        )

    @staticmethod
    def _stamp(value: object) -> datetime | None:
        return parse_timestamp(value) if isinstance(value, str) else None


def detect_report_parser(text: str) -> EntryReportParser:
    """Pick the parser matching the shape of *text*."""
    if text.lstrip().startswith("{"):
        return JsonReportParser()
    return TextReportParser()
