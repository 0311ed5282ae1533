"""CLI console helpers with optional Rich support.

Diagnostics and tables go to stderr through :data:`console`; machine
readable output (``--json``) goes to stdout through :data:`out`.

This module intentionally avoids module-level imports of optional UI
dependencies so bootstrap paths (``--help``, ``--version``) remain
functional even when Rich is not installed.
"""

from __future__ import annotations

import re
import sys
from typing import Any, TextIO

from depotscan.exceptions import EnvironmentError

# Rich markup tags such as ``[bold red]`` or ``[/dim]``.
_MARKUP_RE = re.compile(r"\[/?[a-z][a-z0-9 _#.-]*\]")


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise EnvironmentError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console(*, stderr: bool = True) -> Any:
	"""Create a Rich console instance targeting stderr (or stdout)."""
	console_class = _load_rich_console_class()
	return console_class(stderr=stderr)


def rich_available() -> bool:
	"""Return ``True`` when Rich can be imported."""
	try:
		_load_rich_console_class()
	except EnvironmentError:
		return False
	return True


def strip_markup(text: str) -> str:
	"""Remove Rich markup tags for plain-text rendering."""
	return _MARKUP_RE.sub("", text)


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with Rich fallback."""

	def __init__(self, *, stderr: bool = True) -> None:
		self._stderr = stderr

	def _plain_stream(self) -> TextIO:
		return sys.stderr if self._stderr else sys.stdout

	def print(self, *objects: object) -> None:
		"""Render with Rich when available, else plain print without markup."""
		try:
			rich_console = get_rich_console(stderr=self._stderr)
		except EnvironmentError:
			plain = [strip_markup(obj) if isinstance(obj, str) else obj for obj in objects]
			print(*plain, file=self._plain_stream())
			return
		rich_console.print(*objects)

	def print_labelled(self, label: str, text: str) -> None:
		"""Print a markup *label* followed by *text* rendered literally."""
		try:
			rich_console = get_rich_console(stderr=self._stderr)
		except EnvironmentError:
			print(strip_markup(label), text, file=self._plain_stream())
			return
		from rich.text import Text

		rich_console.print(label, Text(text))

	def write_raw(self, text: str) -> None:
		"""Write *text* verbatim, bypassing Rich markup and highlighting."""
		stream = self._plain_stream()
		stream.write(text)
		stream.flush()


console = _ConsoleProxy(stderr=True)
out = _ConsoleProxy(stderr=False)
