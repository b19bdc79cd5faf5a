"""CLI console and logging helpers with optional Rich support.

This module intentionally avoids module-level imports of optional UI
dependencies so bootstrap paths (``--help``, ``--version``) remain
functional even when Rich is not installed.
"""

from __future__ import annotations

import logging
import re
import sys
from typing import Any

from expokit.exceptions import EnvironmentError


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


_MARKUP_TAG = re.compile(r"\[/?[a-z][a-z ]*\]")


def strip_markup(text: str) -> str:
	"""Remove the Rich style tags expokit uses, e.g. ``[bold red]``."""
	return _MARKUP_TAG.sub("", text)


class _ConsoleProxy:
	"""stderr console: Rich when installed, plain text without markup otherwise."""

	def print(self, *objects: object) -> None:
		try:
			rich_console = get_rich_console()
		except EnvironmentError:
			print(*(strip_markup(str(obj)) for obj in objects), file=sys.stderr)
			return
		rich_console.print(*objects)

	def warn(self, message: str) -> None:
		self.print(f"[yellow]{message}[/yellow]")

	def error(self, message: str, hint: str | None = None) -> None:
		self.print(f"[bold red]Error:[/bold red] {message}")
		if hint:
			self.print(f"[yellow]Hint:[/yellow] {hint}")


console = _ConsoleProxy()


def configure_logging(debug: bool = False) -> None:
	"""Route ``expokit`` loggers to stderr, through Rich when available.

	Only ``DEBUG`` output is interesting to users; by default only
	warnings and above are emitted.
	"""
	level = logging.DEBUG if debug else logging.WARNING
	try:
		from rich.logging import RichHandler
	except ModuleNotFoundError:
		handler: logging.Handler = logging.StreamHandler(sys.stderr)
		handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
	else:
		handler = RichHandler(
			console=get_rich_console(),
			show_time=False,
			show_path=debug,
			markup=False,
		)

	root = logging.getLogger("expokit")
	for existing in list(root.handlers):
		root.removeHandler(existing)
	root.addHandler(handler)
	root.setLevel(level)
	root.propagate = False
