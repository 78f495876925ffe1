#!/usr/bin/env python3
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Sequence

from rich.console import Console
from rich.text import Text

from configs.config import Config
from utils.commit_projector import Marker, Style

logger = logging.getLogger(__name__)

KeyMap = Dict[str, Callable[[], None]]

MARKER_STYLES = {
	Marker.HEADER: "bold",
	Marker.DESCRIPTION: "italic",
	Marker.HUNK_HEADER: "cyan",
	Marker.DIFF_ADD: "green",
	Marker.DIFF_DELETE: "red",
}

MARKER_SIGNS = {
	Marker.HEADER: "#",
	Marker.DESCRIPTION: "|",
	Marker.HUNK_HEADER: "@",
	Marker.DIFF_ADD: "+",
	Marker.DIFF_DELETE: "-",
}

HIGHLIGHT_STYLES = {
	Style.FILE_PATH: "bold blue",
	Style.NUMBER: "magenta",
	Style.DIFF_ADD: "green",
	Style.DIFF_DELETE: "red",
}


class HostError(Exception):
	def __init__(self, message: str, code: str = "CLOSED") -> None:
		super().__init__(message)
		self.code = code


class DisplayHost(ABC):
	"""Surface a view renders into."""

	@abstractmethod
	def create(self, content: Sequence[str], mappings: KeyMap) -> None:
		...

	@abstractmethod
	def replace_content(self, lines: Sequence[str]) -> None:
		...

	@abstractmethod
	def place_marker(self, line: int, name: str) -> None:
		...

	@abstractmethod
	def add_highlight(self, line: int, start: int, end: int, name: str) -> None:
		...

	@abstractmethod
	def close(self) -> None:
		...


class ConsoleHost(DisplayHost):
	"""Renders decorated lines to a terminal with rich.

	Decorations are buffered on ``rich.text.Text`` lines and written by
	``flush``. Keys are dispatched through ``press``.
	"""

	def __init__(self, console: Optional[Console] = None, gutter: Optional[bool] = None) -> None:
		self.console = console or Console(highlight=False)
		self.gutter = Config.GUTTER_ENABLED if gutter is None else gutter
		self.mappings: KeyMap = {}
		self._lines: Optional[List[Text]] = None
		self._signs: Dict[int, str] = {}
		self._closed = False

	@property
	def is_open(self) -> bool:
		return self._lines is not None and not self._closed

	def _require_open(self) -> List[Text]:
		if self._closed:
			raise HostError("Console host already closed")
		if self._lines is None:
			raise HostError("Console host used before create()", code="NOT_CREATED")
		return self._lines

	def _line(self, line: int) -> Text:
		lines = self._require_open()
		if not 0 <= line < len(lines):
			raise HostError(f"Line {line} outside {len(lines)} lines", code="OUT_OF_RANGE")
		return lines[line]

	def create(self, content: Sequence[str], mappings: KeyMap) -> None:
		if self._closed or self._lines is not None:
			raise HostError("Console host can only be created once", code="ALREADY_CREATED")
		self.mappings = dict(mappings)
		self._lines = [Text(line) for line in content]
		logger.debug(f"Console host created with {len(content)} lines, keys={sorted(self.mappings)}")

	def replace_content(self, lines: Sequence[str]) -> None:
		self._require_open()
		self._lines = [Text(line) for line in lines]
		self._signs.clear()

	def place_marker(self, line: int, name: str) -> None:
		text = self._line(line)
		self._signs[line] = name
		style = MARKER_STYLES.get(name)
		if style:
			text.stylize(style)
		else:
			logger.debug(f"No style for marker {name}")

	def add_highlight(self, line: int, start: int, end: int, name: str) -> None:
		text = self._line(line)
		style = HIGHLIGHT_STYLES.get(name)
		if style:
			text.stylize(style, start, end)
		else:
			logger.debug(f"No style for highlight {name}")

	def render_lines(self) -> List[Text]:
		"""Return the decorated lines, with a one-character gutter when enabled."""
		lines = self._require_open()
		if not self.gutter:
			return [line.copy() for line in lines]
		out: List[Text] = []
		for idx, line in enumerate(lines):
			name = self._signs.get(idx)
			sign = MARKER_SIGNS.get(name, " ") if name else " "
			out.append(Text.assemble((sign, MARKER_STYLES.get(name, "") if name else ""), " ", line))
		return out

	def flush(self) -> None:
		for line in self.render_lines():
			self.console.print(line, soft_wrap=True)

	def press(self, key: str) -> bool:
		"""Run the action mapped to ``key``; returns False when nothing is mapped."""
		self._require_open()
		action = self.mappings.get(key)
		if action is None:
			return False
		action()
		return True

	def close(self) -> None:
		self._closed = True
		self.mappings = {}
		logger.debug("Console host closed")
