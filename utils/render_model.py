#!/usr/bin/env python3
"""Render model handed to a display host, and the builder that assembles it.

Every decoration is recorded against the index returned by
``RenderBuilder.append_line`` so marker and highlight positions cannot drift
from the text they decorate.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class ProjectionError(Exception):
    def __init__(self, message: str, code: str = "UNKNOWN"):
        super().__init__(message)
        self.code = code


class Highlight(BaseModel):
    line: int = Field(..., ge=0)
    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)
    name: str


class RenderModel(BaseModel):
    lines: List[str] = Field(default_factory=list)
    markers: Dict[int, str] = Field(default_factory=dict)
    highlights: List[Highlight] = Field(default_factory=list)

    def validate_indices(self) -> None:
        """Raise ProjectionError if a decoration points outside ``lines`` or its text."""
        n = len(self.lines)
        for line in self.markers:
            if not 0 <= line < n:
                raise ProjectionError(f"Marker at line {line} outside {n} lines", code="INDEX_DESYNC")
        for hl in self.highlights:
            if not 0 <= hl.line < n:
                raise ProjectionError(f"Highlight at line {hl.line} outside {n} lines", code="INDEX_DESYNC")
            if hl.start > hl.end or hl.end > len(self.lines[hl.line]):
                raise ProjectionError(
                    f"Highlight {hl.name} [{hl.start}, {hl.end}) does not fit line {hl.line}",
                    code="INDEX_DESYNC",
                )


class RenderBuilder:
    """Append-only assembler for a RenderModel."""

    def __init__(self) -> None:
        self._lines: List[str] = []
        self._markers: Dict[int, str] = {}
        self._highlights: List[Highlight] = []

    def __len__(self) -> int:
        return len(self._lines)

    def append_line(self, text: str) -> int:
        self._lines.append(text)
        return len(self._lines) - 1

    def add_marker(self, line: int, name: str) -> None:
        if not 0 <= line < len(self._lines):
            raise ProjectionError(f"Cannot mark line {line}: only {len(self._lines)} lines emitted", code="INDEX_DESYNC")
        previous = self._markers.get(line)
        if previous is not None and previous != name:
            logger.debug(f"Marker {previous} on line {line} replaced by {name}")
        self._markers[line] = name

    def add_highlight(self, line: int, start: int, end: int, name: str) -> None:
        if not 0 <= line < len(self._lines):
            raise ProjectionError(
                f"Cannot highlight line {line}: only {len(self._lines)} lines emitted", code="INDEX_DESYNC"
            )
        self._highlights.append(Highlight(line=line, start=start, end=end, name=name))

    def append_marked(self, text: str, name: str) -> int:
        idx = self.append_line(text)
        self.add_marker(idx, name)
        return idx

    def build(self) -> RenderModel:
        model = RenderModel(
            lines=list(self._lines),
            markers=dict(self._markers),
            highlights=list(self._highlights),
        )
        model.validate_indices()
        return model
