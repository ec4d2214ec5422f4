"""Allow ``python -m task_tracker`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m task_tracker`` behaves identically to the
``task-tracker`` console script.
"""

from __future__ import annotations

from task_tracker.cli.app import cli

if __name__ == "__main__":
    cli()
