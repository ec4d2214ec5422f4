"""Ticket-aware description formatting and its inverse.

A time-entry description has the shape ``[PREFIX<id>SUFFIX] <subject>``.
It is written when an entry starts and parsed back when the entry is
stopped, so :func:`parse_description` must recover exactly what
:func:`format_description` put in.

Guarantees
----------
* Pure functions — no I/O.
* Only :class:`~task_tracker.exceptions.TaskTrackerError` subclasses escape.
"""

from __future__ import annotations

import re

from task_tracker.core.models import Configuration
from task_tracker.exceptions import UnparseableDescriptionError

TICKET_ID_PATTERN = re.compile(r"^[0-9]+$")

# A bracketed tag holding exactly one digit run, e.g. ``[ZD-555]`` but not ``[12:00]``.
_FOREIGN_TAG = re.compile(r"\[[^\]0-9]*(?P<id>[0-9]+)[^\]0-9]*\]")
_DIGITS = re.compile(r"[0-9]+")


def is_ticket_id(value: str) -> bool:
    return TICKET_ID_PATTERN.fullmatch(value) is not None


def format_description(
    ticket_id: str,
    subject: str | None,
    config: Configuration,
) -> str:
    """Compose ``[PREFIX<id>SUFFIX] <subject>``.

    A missing or blank *subject* is replaced by ``DEFAULT_SUBJECT``.
    """
    if subject is None or not subject.strip():
        subject = config.default_subject
    return f"[{config.ticket_prefix}{ticket_id}{config.ticket_suffix}] {subject}"


def _configured_tag(config: Configuration) -> re.Pattern[str]:
    return re.compile(
        r"\[" + re.escape(config.ticket_prefix)
        + r"(?P<id>[0-9]+)"
        + re.escape(config.ticket_suffix) + r"\]",
    )


def _subject_after(description: str, end: int) -> str:
    """Text following the tag, minus the single separating space."""
    rest = description[end:]
    return rest[1:] if rest.startswith(" ") else rest


def parse_description(description: str, config: Configuration) -> tuple[str, str]:
    """Recover ``(ticket_id, subject)`` from a time-entry description.

    The tag written with the configured prefix and suffix wins wherever
    it appears.  Tags written under another configuration are accepted
    next, and a bare digit run anywhere in the text is the last resort.

    Raises
    ------
    UnparseableDescriptionError
        When the description carries no digit run at all.
    """
    for pattern in (_configured_tag(config), _FOREIGN_TAG):
        tag = pattern.search(description)
        if tag is not None:
            return tag.group("id"), _subject_after(description, tag.end())

    match = _DIGITS.search(description)
    if match is None:
        raise UnparseableDescriptionError(
            f"No ticket ID found in entry description: {description!r}",
            hint="Entries started outside task-tracker have no ticket tag.",
        )
    return match.group(0), description.strip()


def build_ticket_url(base_url: str, ticket_id: str) -> str:
    """Return the Zendesk agent URL for *ticket_id*."""
    return f"{base_url.rstrip('/')}/agent/tickets/{ticket_id}"
