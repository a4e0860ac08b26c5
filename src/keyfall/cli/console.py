"""CLI console helpers with optional Rich support.

Rich is resolved on first use, not at import, so ``--help``,
``--version`` and silent ``resolve`` keep working when it is missing.
Without Rich, markup tags are stripped and text goes to plain stderr.
"""

from __future__ import annotations

import re
import sys
from typing import Any

from keyfall.exceptions import EnvironmentError
from keyfall.infra.sinks import get_rich_console

_MARKUP_TAG = re.compile(r"\[/?[a-z][a-z ]*\]")


def strip_markup(text: str) -> str:
	"""Remove Rich style tags such as ``[bold red]`` and ``[/yellow]``."""
	return _MARKUP_TAG.sub("", text)


class _ConsoleProxy:
	"""``print``-compatible stderr console; Rich when importable."""

	def __init__(self) -> None:
		self._rich: Any | None = None

	def _console(self) -> Any | None:
		if self._rich is None:
			try:
				self._rich = get_rich_console()
			except EnvironmentError:
				return None
		return self._rich

	def print(self, *objects: object, markup: bool = True, end: str = "\n") -> None:
		rich_console = self._console()
		if rich_console is None:
			texts = (str(obj) for obj in objects)
			if markup:
				texts = (strip_markup(text) for text in texts)
			print(*texts, file=sys.stderr, end=end)
			return
		rich_console.print(*objects, markup=markup, end=end)

	def labelled(self, label: str, text: object) -> None:
		"""Print a styled *label* followed by *text* rendered verbatim.

		*text* usually carries user input (keys, paths, messages), so it
		is never parsed as markup.
		"""
		self.print(label, end=" ")
		self.print(str(text), markup=False)


console = _ConsoleProxy()
