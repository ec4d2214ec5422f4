"""zendesk-cli backed ticket validation.

A ticket is looked up with the client's read-only ``show`` command.
Only the exit code and whether anything was printed matter; the
ticket contents are discarded.
"""

from __future__ import annotations

import enum

from task_tracker.exceptions import MissingDependencyError
from task_tracker.infra.dependency_gate import TICKET_CLIENT
from task_tracker.infra.process import SubprocessRunner


class ValidationResult(enum.Enum):
    EXISTS = "exists"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"


class ZendeskTicketClient:
    """Check ticket existence through ``zendesk-cli``."""

    def __init__(
        self,
        runner: SubprocessRunner,
        executable: str = TICKET_CLIENT,
    ) -> None:
        self._runner: SubprocessRunner = runner
        self._executable: str = executable

    def build_lookup_command(self, ticket_id: str) -> list[str]:
        return [self._executable, "show", ticket_id]

    def validate(self, ticket_id: str) -> ValidationResult:
        """Return whether *ticket_id* exists.

        A non-zero exit or empty output means the ticket was not found;
        a client that cannot be executed is reported as unavailable.
        """
        try:
            result = self._runner.run_captured(self.build_lookup_command(ticket_id))
        except MissingDependencyError:
            return ValidationResult.UNAVAILABLE
        if result.returncode != 0 or not result.stdout.strip():
            return ValidationResult.NOT_FOUND
        return ValidationResult.EXISTS
