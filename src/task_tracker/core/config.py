"""Configuration resolution — ``KEY=value`` files with built-in defaults.

The candidate paths are always injected by the caller; nothing in this
module looks at the environment or the working directory.  Reading a
candidate file is the only I/O performed here, and no failure to read
one is ever fatal.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import fields, replace
from pathlib import Path

from task_tracker.core.models import CONFIG_KEYS, ConfigResolution, Configuration


# ---------------------------------------------------------------------------
# Parsing (pure)
# ---------------------------------------------------------------------------

def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    return value


def parse_config_text(text: str) -> dict[str, str]:
    """Parse ``KEY=value`` lines into a dict of recognised keys.

    Blank lines and ``#`` comments are skipped, a leading ``export`` is
    tolerated so shell-sourced files keep working, and one layer of
    matching quotes is removed from values.  There is no inline comment
    syntax: ``TICKET_PREFIX=#`` means a literal ``#``.
    """
    values: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if key not in CONFIG_KEYS:
            continue
        values[key] = _strip_quotes(value.strip())
    return values


def config_from_mapping(values: Mapping[str, str]) -> Configuration:
    """Overlay *values* (upper-case keys) onto the built-in defaults."""
    overrides = {
        f.name: values[f.name.upper()]
        for f in fields(Configuration)
        if f.name.upper() in values
    }
    return replace(Configuration(), **overrides)


def render_config_file(config: Configuration) -> str:
    """Serialise *config* in the format :func:`parse_config_text` reads."""
    lines = [
        "# task-tracker configuration",
        "# Generated by `task-tracker init`; edit freely.",
        "",
    ]
    for key in CONFIG_KEYS:
        value = getattr(config, key.lower())
        lines.append(f'{key}="{value}"')
    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def resolve_config(candidates: Iterable[Path]) -> ConfigResolution:
    """Load the first readable file among *candidates*.

    Unreadable candidates are recorded as warnings and skipped.  When no
    candidate can be used the built-in defaults are returned with
    ``source=None``.
    """
    warnings: list[str] = []
    for path in candidates:
        if not path.is_file():
            continue
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            warnings.append(f"Could not read config file {path}: {exc}")
            continue
        return ConfigResolution(
            config=config_from_mapping(parse_config_text(text)),
            source=path,
            warnings=tuple(warnings),
        )
    return ConfigResolution(
        config=Configuration(),
        source=None,
        warnings=tuple(warnings),
    )


class LazyConfig:
    """Resolve configuration on first use and cache it for the invocation.

    Commands such as ``--version`` or passthrough verbs never touch the
    config file at all.
    """

    def __init__(self, candidates: Sequence[Path]) -> None:
        self._candidates: tuple[Path, ...] = tuple(candidates)
        self._resolution: ConfigResolution | None = None

    @property
    def candidates(self) -> tuple[Path, ...]:
        return self._candidates

    @property
    def loaded(self) -> bool:
        return self._resolution is not None

    def get(self) -> ConfigResolution:
        if self._resolution is None:
            self._resolution = resolve_config(self._candidates)
        return self._resolution
