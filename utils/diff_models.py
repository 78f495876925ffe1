#!/usr/bin/env python3
"""Pydantic models for parsed unified diffs and parse diagnostics."""

from typing import Optional, List, Literal
from pydantic import BaseModel, Field

DiagnosticCode = Literal["MALFORMED_FIELD", "ORPHAN_LINES"]

LineKind = Literal["addition", "deletion", "context"]


class CommitParseError(Exception):
    """Fatal parse failure: required lines are missing from the input."""

    def __init__(
        self,
        message: str,
        code: str = "STRUCTURAL_SHORTAGE",
        *,
        expected: Optional[int] = None,
        available: Optional[int] = None,
    ):
        super().__init__(message)
        self.code = code
        self.expected = expected
        self.available = available


class ParseDiagnostic(BaseModel):
    """A field or row that did not match its expected shape."""

    code: DiagnosticCode = "MALFORMED_FIELD"
    field: str
    line_index: int
    line: str = ""
    message: str = ""

    model_config = {"extra": "ignore"}


class DiffHunk(BaseModel):
    """Index range of one hunk inside ``Diff.lines`` (bounds inclusive)."""

    header_line_index: int
    start_index: int
    end_index: int


class Diff(BaseModel):
    kind: str = ""
    file: str = ""
    lines: List[str] = Field(default_factory=list)
    hunks: List[DiffHunk] = Field(default_factory=list)
    diagnostics: List[ParseDiagnostic] = Field(default_factory=list)

    def header_line(self, hunk: DiffHunk) -> str:
        return self.lines[hunk.header_line_index]

    def body_lines(self, hunk: DiffHunk) -> List[str]:
        return self.lines[hunk.header_line_index + 1 : hunk.end_index + 1]
