"""Interactive ``task-tracker init`` flow.

This module is responsible for:

* Asking the user for every configuration value via questionary.
* Rendering the answers with :func:`render_config_file`.
* Writing the file, confirming before an existing one is replaced.

Prompts are the only user interaction here; the file format lives in
the core layer.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from task_tracker.cli.console import console
from task_tracker.core.config import render_config_file
from task_tracker.core.models import Configuration
from task_tracker.core.summary_service import load_timezone
from task_tracker.exceptions import EnvironmentError, InitCancelledError


def _import_questionary() -> Any:
    """Import questionary lazily for interactive prompts."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


# ---------------------------------------------------------------------------
# Answer validators (return True or an error message, as questionary expects)
# ---------------------------------------------------------------------------

def _validate_timezone(value: str) -> bool | str:
    if load_timezone(value.strip()) is None:
        return f"Unknown timezone: {value!r} (e.g. Asia/Manila, UTC)"
    return True


def _validate_url(value: str) -> bool | str:
    if not value.strip().startswith(("http://", "https://")):
        return "URL must start with http:// or https://"
    return True


def _answer(value: Any) -> Any:
    """questionary returns ``None`` when the prompt was aborted."""
    if value is None:
        raise InitCancelledError("Setup cancelled; no configuration written.")
    return value


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def prompt_configuration(defaults: Configuration) -> Configuration:
    """Ask for each configuration value, pre-filled from *defaults*."""
    questionary = _import_questionary()

    prefix = ""
    suffix = ""
    use_tag = _answer(
        questionary.confirm(
            "Decorate ticket IDs with a prefix/suffix?",
            default=bool(defaults.ticket_prefix or defaults.ticket_suffix),
        ).ask()
    )
    if use_tag:
        prefix = _answer(
            questionary.text("Ticket prefix:", default=defaults.ticket_prefix).ask()
        )
        suffix = _answer(
            questionary.text("Ticket suffix:", default=defaults.ticket_suffix).ask()
        )

    default_subject = _answer(
        questionary.text(
            "Default subject when none is given:",
            default=defaults.default_subject,
        ).ask()
    )
    support_name = _answer(
        questionary.text("Your name (shown in summaries):", default=defaults.support_name).ask()
    )
    base_url = _answer(
        questionary.text(
            "Zendesk base URL:",
            default=defaults.zendesk_base_url,
            validate=_validate_url,
        ).ask()
    )
    timezone = _answer(
        questionary.text(
            "Timezone for summaries:",
            default=defaults.timezone,
            validate=_validate_timezone,
        ).ask()
    )
    clipboard = _answer(
        questionary.confirm(
            "Copy summaries to the clipboard?",
            default=defaults.clipboard_enabled,
        ).ask()
    )

    return Configuration(
        ticket_prefix=prefix,
        ticket_suffix=suffix,
        default_subject=default_subject.strip() or defaults.default_subject,
        support_name=support_name.strip() or defaults.support_name,
        zendesk_base_url=base_url.strip().rstrip("/"),
        timezone=timezone.strip(),
        copy_to_clipboard="true" if clipboard else "false",
    )


def run_init(target: Path, defaults: Configuration) -> Path:
    """Prompt for configuration and write it to *target*.

    Returns the path that was written.

    Raises
    ------
    InitCancelledError
        If the user declines to overwrite or aborts a prompt.
    """
    questionary = _import_questionary()

    if target.exists():
        overwrite = _answer(
            questionary.confirm(f"{target} already exists. Overwrite?", default=False).ask()
        )
        if not overwrite:
            raise InitCancelledError(f"Kept existing configuration at {target}.")

    config = prompt_configuration(defaults)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(render_config_file(config), encoding="utf-8")
    console.success(f"Configuration written to {target}")
    return target
