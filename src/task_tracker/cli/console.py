"""CLI console helpers with optional Rich support.

This module intentionally avoids module-level imports of optional UI
dependencies so bootstrap paths (``--help``, ``--version``) remain
functional even when Rich is not installed.

Every diagnostic line goes to stderr so that stdout carries only
program output (help, the summary line, forwarded tool output).
"""

from __future__ import annotations

import re
import sys
from typing import Any

from task_tracker.exceptions import EnvironmentError

_MARKUP_TAG = re.compile(r"\[/?[a-z][a-z ]*\]")


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise EnvironmentError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console() -> Any:
	"""Create a Rich console instance targeting stderr."""
	console_class = _load_rich_console_class()
	return console_class(stderr=True)


def strip_markup(text: str) -> str:
	"""Remove simple Rich style tags such as ``[bold red]`` from *text*."""
	return _MARKUP_TAG.sub("", text)


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with Rich fallback."""

	def __init__(self) -> None:
		self.debug_enabled: bool = False

	def print(self, *objects: object) -> None:
		"""Render with Rich when available, else plain stderr print."""
		try:
			rich_console = get_rich_console()
		except EnvironmentError:
			print(*(strip_markup(str(obj)) for obj in objects), file=sys.stderr)
			return
		rich_console.print(*objects)

	def _emit(self, marker: str, style: str, message: str) -> None:
		"""Print a severity marker followed by *message* taken literally.

		Messages routinely contain ticket tags like ``[#12345]`` which
		Rich would otherwise try to read as markup.
		"""
		try:
			rich_console = get_rich_console()
		except EnvironmentError:
			print(f"{marker} {message}", file=sys.stderr)
			return
		from rich.text import Text

		line = Text(f"{marker} ", style=style)
		line.append(message)
		rich_console.print(line, soft_wrap=True)

	def error(self, message: str) -> None:
		self._emit("Error:", "bold red", message)

	def hint(self, message: str) -> None:
		self._emit("Hint:", "yellow", message)

	def warn(self, message: str) -> None:
		self._emit("Warning:", "bold yellow", message)

	def info(self, message: str) -> None:
		self._emit("Info:", "blue", message)

	def success(self, message: str) -> None:
		self._emit("OK:", "bold green", message)

	def debug(self, message: str) -> None:
		"""Trace *message* only when debug output was switched on."""
		if self.debug_enabled:
			self._emit("debug:", "dim", message)


console = _ConsoleProxy()
