"""task-tracker — ticket-aware wrapper around toggl-track and zendesk-cli.

Starts and stops Toggl time entries labelled with Zendesk ticket IDs
and turns each stopped entry into a pasteable summary line.
"""

from task_tracker.version import __version__

__all__: list[str] = ["__version__"]
